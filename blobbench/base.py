"""Базовые классы: метрики, итоги прогона и контракт хранилища"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Callable

from .workloads import Item, WorkloadType


MB = 1024 * 1024


@dataclass
class Rates:
    """Производные скорости"""
    mb_per_sec: float
    items_per_sec: float
    avg_ms_per_item: float

    def to_dict(self):
        return asdict(self)


def compute_rates(bytes_processed: int, items: int, elapsed_ms: float) -> Rates:
    """Скорости по сырым счетчикам; при нулевом времени все равно 0"""
    seconds = elapsed_ms / 1000.0
    if seconds <= 0:
        return Rates(mb_per_sec=0.0, items_per_sec=0.0, avg_ms_per_item=0.0)

    return Rates(
        mb_per_sec=(bytes_processed / MB) / seconds,
        items_per_sec=items / seconds,
        avg_ms_per_item=elapsed_ms / items if items else 0.0,
    )


@dataclass
class BatchMetrics:
    """Метрики одного батча"""
    op: str
    index: int
    items: int
    started_at: float
    finished_at: float
    elapsed_ms: float
    bytes: int

    @property
    def rates(self) -> Rates:
        return compute_rates(self.bytes, self.items, self.elapsed_ms)

    def to_dict(self):
        return asdict(self)


@dataclass
class ResultSummary:
    """Итог полного прохода (все записи или все чтения)"""
    bytes_processed: int = 0
    items_processed: int = 0
    elapsed_ms: float = 0.0
    batches: int = 0

    @property
    def megabytes(self) -> float:
        return self.bytes_processed / MB

    @property
    def rates(self) -> Rates:
        return compute_rates(self.bytes_processed, self.items_processed, self.elapsed_ms)

    def to_dict(self):
        return asdict(self)


class BackendAdapter(ABC):
    """Базовый класс для всех хранилищ.

    Один вызов write/read обрабатывает ровно один элемент и сам захватывает
    свой дескриптор (транзакцию, соединение из пула, запрос), поэтому
    экземпляр можно вызывать из нескольких потоков одного батча.
    """

    name = "backend"

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @abstractmethod
    def open(self):
        """Подключение и подготовка схемы"""
        pass

    @abstractmethod
    def write(self, item: Item) -> int:
        """
        Upsert полезной нагрузки под ключом элемента.
        Возвращает количество записанных байт.
        """
        pass

    @abstractmethod
    def read(self, item: Item) -> int:
        """
        Чтение по ключу элемента.
        Возвращает количество прочитанных байт, 0 если ключа нет.
        """
        pass

    @abstractmethod
    def close(self):
        """Освобождение ресурсов"""
        pass

    def operation(self, op: str) -> Callable[[Item], int]:
        """Операция над одним элементом по имени"""
        if op == WorkloadType.WRITE:
            return self.write
        if op == WorkloadType.READ:
            return self.read
        raise ValueError(f"Unknown operation: {op}")
