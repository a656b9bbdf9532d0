"""Запись статистики батчей и итогов в реляционную таблицу bench_stats"""

from sqlalchemy import (
    BigInteger, Column, DateTime, Integer, MetaData, Table, Text,
    create_engine, func, insert,
)

from .logging_config import get_logger

logger = get_logger(__name__)

metadata = MetaData()

bench_stats = Table(
    "bench_stats",
    metadata,
    Column("id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True),
    Column("ts", DateTime(timezone=True), server_default=func.now()),
    Column("backend", Text, nullable=False),
    Column("op", Text, nullable=False),
    Column("batch_no", Integer),
    Column("items", BigInteger),
    Column("bytes", BigInteger),
    Column("millis", BigInteger),
    Column("threads", Integer),
    Column("batch_size", Integer),
    Column("cpu_cores", Integer),
    Column("heap_mb", BigInteger),
    Column("note", Text),
)


class StatsSink:
    """
    Телеметрия по принципу best effort: ошибки вставки не влияют на
    результат бенчмарка.
    """

    def __init__(self, url: str, pool_size: int = 4, **engine_options):
        if not url.startswith("sqlite"):
            engine_options.setdefault("pool_size", pool_size)
        self.engine = create_engine(url, **engine_options)
        metadata.create_all(self.engine, tables=[bench_stats])

    def record_batch(self, backend: str, op: str, batch_no: int, items: int,
                     bytes_: int, millis: int, threads: int, batch_size: int,
                     cpu_cores: int, heap_mb: int, note: str = "") -> bool:
        """Одна строка на батч; возвращает False, если запись не удалась"""
        row = dict(
            backend=backend, op=op, batch_no=batch_no, items=items,
            bytes=bytes_, millis=int(millis), threads=threads,
            batch_size=batch_size, cpu_cores=cpu_cores, heap_mb=heap_mb,
            note=note,
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(bench_stats), row)
        except Exception as e:
            logger.debug("bench_stats insert failed: %s", e)
            return False
        return True

    def record_total(self, backend: str, op: str, items: int, bytes_: int,
                     millis: int, threads: int, batch_size: int,
                     cpu_cores: int, heap_mb: int, note: str = "") -> bool:
        """Итог прохода записывается с batch_no = 0"""
        return self.record_batch(backend, op, 0, items, bytes_, millis, threads,
                                 batch_size, cpu_cores, heap_mb, note)

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
