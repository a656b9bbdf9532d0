"""Распределенное key-value хранилище TiKV (raw API)"""

import asyncio
import threading
from typing import Callable, List, Optional

from .base import BackendAdapter
from .logging_config import get_logger
from .workloads import Item, BackendType

logger = get_logger(__name__)


def parse_pd_endpoints(target: str) -> List[str]:
    """'host1:2379,host2:2379' -> список адресов PD"""
    endpoints = [part.strip() for part in target.split(",") if part.strip()]
    if not endpoints:
        raise ValueError(f"No PD endpoints in {target!r}")
    return endpoints


async def _connect_raw_client(pd_endpoints: List[str]):
    from tikv_client.asynchronous import RawClient
    return await RawClient.connect(pd_endpoints)


async def _await(fn, *args):
    return await fn(*args)


class TiKVStore(BackendAdapter):
    """
    Хранилище на TiKV.

    Асинхронный клиент живет в отдельном потоке с циклом событий; рабочие
    потоки батча отправляют в него put/get и ждут результата.
    """

    name = BackendType.TIKV

    def __init__(self, target: str, connect: Optional[Callable] = None,
                 timeout: Optional[float] = None):
        self.pd_endpoints = parse_pd_endpoints(target)
        self._connect = connect or _connect_raw_client
        self.timeout = timeout
        self._loop = None
        self._thread = None
        self.client = None

    def open(self):
        """Запуск цикла событий и подключение к PD"""
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._loop.run_forever, name="tikv-loop", daemon=True
        )
        self._thread.start()
        try:
            self.client = self._call(self._connect(self.pd_endpoints))
        except Exception:
            self._stop_loop()
            raise
        logger.debug("Connected to TiKV PD %s", ",".join(self.pd_endpoints))

    def _call(self, coro):
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result(self.timeout)

    def write(self, item: Item) -> int:
        data = item.read_payload()
        self._call(_await(self.client.put, item.key_bytes, data))
        return len(data)

    def read(self, item: Item) -> int:
        value = self._call(_await(self.client.get, item.key_bytes))
        if value is None:
            return 0
        return len(value)

    def get(self, key: str):
        """Значение по ключу (для проверки)"""
        return self._call(_await(self.client.get, key.encode("utf-8")))

    def _stop_loop(self):
        if self._loop is None:
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join()
        self._loop.close()
        self._loop = None
        self._thread = None

    def close(self):
        self.client = None
        self._stop_loop()
