"""Тесты хранилища TiKV с поддельным асинхронным клиентом"""

import asyncio
import threading

import pytest

from blobbench.executor import BatchedParallelExecutor
from blobbench.tikv_store import TiKVStore, parse_pd_endpoints
from blobbench.workloads import Item


class FakeRawClient:
    """Асинхронный raw-клиент в памяти"""

    def __init__(self, endpoints):
        self.endpoints = endpoints
        self.data = {}
        self.loop_threads = set()

    async def put(self, key, value):
        self.loop_threads.add(threading.current_thread().name)
        await asyncio.sleep(0)
        self.data[key] = value

    async def get(self, key):
        self.loop_threads.add(threading.current_thread().name)
        await asyncio.sleep(0)
        return self.data.get(key)


async def fake_connect(endpoints):
    return FakeRawClient(endpoints)


@pytest.fixture
def store():
    with TiKVStore("127.0.0.1:2379, 10.0.0.2:2379", connect=fake_connect) as s:
        yield s


def test_parse_pd_endpoints():
    assert parse_pd_endpoints("a:1,b:2 , c:3") == ["a:1", "b:2", "c:3"]
    with pytest.raises(ValueError):
        parse_pd_endpoints(" , ")


def test_connects_with_all_endpoints(store):
    assert store.client.endpoints == ["127.0.0.1:2379", "10.0.0.2:2379"]


def test_round_trip(store, make_items):
    item = make_items(1, size=77)[0]

    assert store.write(item) == 77
    assert store.read(item) == 77
    assert store.get(item.key) == item.read_payload()
    assert store.client.data[item.key_bytes] == item.read_payload()


def test_read_missing_is_zero(store, tmp_path):
    assert store.read(Item(key="absent.png", path=tmp_path / "absent.png")) == 0


def test_requests_run_on_loop_thread(store, make_items):
    items = make_items(12)
    executor = BatchedParallelExecutor(batch_size=5, concurrency=4)

    write = executor.run(items, store.write, "write")
    read = executor.run(items, store.read, "read")

    assert write.bytes_processed == read.bytes_processed == sum(i.size() for i in items)
    assert store.client.loop_threads == {"tikv-loop"}


def test_close_stops_loop():
    s = TiKVStore("127.0.0.1:2379", connect=fake_connect)
    s.open()
    thread = s._thread
    s.close()

    assert not thread.is_alive()
    assert s.client is None


def test_connect_failure_stops_loop():
    async def broken(endpoints):
        raise ConnectionError("pd unreachable")

    s = TiKVStore("127.0.0.1:2379", connect=broken)
    with pytest.raises(ConnectionError):
        s.open()
    assert s._loop is None
