"""Встроенное key-value хранилище LMDB"""

from pathlib import Path

import lmdb

from .base import BackendAdapter
from .workloads import Item, WorkloadConfig, BackendType


class LMDBStore(BackendAdapter):
    """Хранилище на LMDB: ключ - имя файла, значение - сырые байты"""

    name = BackendType.LMDB
    DB_NAME = b"images"

    def __init__(self, path: str, map_size: int = WorkloadConfig.LMDB_MAP_SIZE):
        self.path = Path(path)
        self.map_size = map_size
        self.env = None
        self.db = None

    def open(self):
        """Создание каталога и открытие окружения"""
        self.path.mkdir(parents=True, exist_ok=True)
        self.env = lmdb.open(
            str(self.path),
            map_size=self.map_size,
            max_dbs=1
        )
        self.db = self.env.open_db(self.DB_NAME, create=True)

    def write(self, item: Item) -> int:
        data = item.read_payload()
        # отдельная транзакция записи на каждый элемент
        with self.env.begin(write=True, db=self.db) as txn:
            txn.put(item.key_bytes, data)
        return len(data)

    def read(self, item: Item) -> int:
        with self.env.begin(db=self.db) as txn:
            value = txn.get(item.key_bytes)
        if value is None:
            return 0
        return len(value)

    def get(self, key: str):
        """Значение по ключу (для проверки)"""
        with self.env.begin(db=self.db) as txn:
            return txn.get(key.encode("utf-8"))

    def close(self):
        if self.env is not None:
            self.env.close()
            self.env = None
            self.db = None
