"""Реляционное хранилище PostgreSQL через SQLAlchemy"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url

from .base import BackendAdapter
from .workloads import Item, BackendType

CREATE_TABLE = text("CREATE TABLE IF NOT EXISTS images (id TEXT PRIMARY KEY, data BYTEA)")
UPSERT = text(
    "INSERT INTO images (id, data) VALUES (:id, :data) "
    "ON CONFLICT (id) DO UPDATE SET data = EXCLUDED.data"
)
SELECT = text("SELECT data FROM images WHERE id = :id")

MIN_POOL_SIZE = 8


class PostgresStore(BackendAdapter):
    """Таблица images(id TEXT PRIMARY KEY, data BYTEA), запись через upsert"""

    name = BackendType.POSTGRES

    def __init__(self, url: str, threads: int = 1, **engine_options):
        self.url = url
        self.threads = threads
        self.engine_options = engine_options
        self.engine = None

    def _engine_kwargs(self) -> dict:
        kwargs = dict(self.engine_options)
        if make_url(self.url).get_backend_name() != "sqlite":
            # в пуле не меньше соединений, чем потоков в батче
            kwargs.setdefault("pool_size", max(self.threads, MIN_POOL_SIZE))
            kwargs.setdefault("max_overflow", 0)
        return kwargs

    def open(self):
        """Создание пула и таблицы"""
        self.engine = create_engine(self.url, **self._engine_kwargs())
        with self.engine.begin() as conn:
            conn.execute(CREATE_TABLE)

    def write(self, item: Item) -> int:
        data = item.read_payload()
        # соединение из пула и транзакция на один элемент
        with self.engine.begin() as conn:
            conn.execute(UPSERT, {"id": item.key, "data": data})
        return len(data)

    def read(self, item: Item) -> int:
        with self.engine.connect() as conn:
            row = conn.execute(SELECT, {"id": item.key}).first()
        if row is None or row[0] is None:
            return 0
        return len(row[0])

    def get(self, key: str):
        """Значение по ключу (для проверки)"""
        with self.engine.connect() as conn:
            row = conn.execute(SELECT, {"id": key}).first()
        if row is None:
            return None
        return bytes(row[0])

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
