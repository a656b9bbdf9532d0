"""Последовательные батчи с параллельной обработкой элементов внутри батча"""

import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Protocol, Sequence, TypeVar

from .base import BatchMetrics, ResultSummary
from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BatchSink(Protocol):
    """Получатель метрик батча"""

    def batch_finished(self, metrics: BatchMetrics) -> None:
        ...


class BatchExecutionError(RuntimeError):
    """Сбой элемента; прогон прерван.

    partial содержит только полностью завершенные батчи, байты
    упавшего батча отброшены.
    """

    def __init__(self, op: str, batch_index: int, item, partial: ResultSummary):
        self.op = op
        self.batch_index = batch_index
        self.item = item
        self.partial = partial
        key = getattr(item, "key", item)
        super().__init__(f"{op} failed in batch #{batch_index} on item {key!r}")


class _JobFailed(Exception):
    def __init__(self, item, error: BaseException):
        super().__init__(item)
        self.item = item
        self.error = error


def partition(items: Sequence[T], batch_size: int) -> List[List[T]]:
    """Разбиение на последовательные батчи; batch_size <= 0 означает один батч"""
    items = list(items)
    if not items:
        return []
    if batch_size <= 0:
        return [items]
    return [items[i:i + batch_size] for i in range(0, len(items), batch_size)]


class BatchedParallelExecutor:
    """Исполнитель: батчи строго по очереди, элементы батча параллельно.

    Для каждого батча создается свой пул потоков, который закрывается до
    начала следующего батча. Так число одновременно открытых дескрипторов
    хранилища не превышает min(batch_size, concurrency).
    """

    def __init__(self, batch_size: int, concurrency: int,
                 sink: Optional[BatchSink] = None):
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.batch_size = batch_size if batch_size > 0 else 0
        self.concurrency = concurrency
        self.sink = sink

    def partition(self, items: Sequence[T]) -> List[List[T]]:
        return partition(items, self.batch_size)

    def run(self, items: Sequence[T], job: Callable[[T], int], op: str) -> ResultSummary:
        """Выполнение job над всеми элементами"""
        batches = self.partition(items)
        if not batches:
            return ResultSummary()

        total_bytes = 0
        total_items = 0
        global_start = time.perf_counter()

        for index, batch in enumerate(batches, start=1):
            try:
                metrics = self._run_batch(index, batch, job, op)
            except _JobFailed as failed:
                partial = ResultSummary(
                    bytes_processed=total_bytes,
                    items_processed=total_items,
                    elapsed_ms=(time.perf_counter() - global_start) * 1000,
                    batches=index - 1
                )
                raise BatchExecutionError(op, index, failed.item, partial) from failed.error

            total_bytes += metrics.bytes
            total_items += metrics.items
            if self.sink is not None:
                self.sink.batch_finished(metrics)

        elapsed_ms = (time.perf_counter() - global_start) * 1000
        return ResultSummary(
            bytes_processed=total_bytes,
            items_processed=total_items,
            elapsed_ms=elapsed_ms,
            batches=len(batches)
        )

    def _run_batch(self, index: int, batch: List[T], job: Callable[[T], int],
                   op: str) -> BatchMetrics:
        workers = min(self.concurrency, len(batch))
        started_at = time.time()
        start = time.perf_counter()
        failure = None

        with ThreadPoolExecutor(max_workers=workers,
                                thread_name_prefix=f"{op}-b{index}") as pool:
            futures = {pool.submit(job, item): item for item in batch}
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)

            for future in done:
                if future.exception() is not None:
                    failure = future
                    break

            if failure is not None:
                # незапущенные задачи снимаем, запущенные дорабатывают при выходе из with
                for future in pending:
                    future.cancel()

        if failure is not None:
            item = futures[failure]
            logger.debug("%s batch #%d aborted on item %r: %s",
                         op, index, getattr(item, "key", item), failure.exception())
            raise _JobFailed(item, failure.exception())

        batch_bytes = sum(future.result() for future in futures)
        elapsed_ms = (time.perf_counter() - start) * 1000

        return BatchMetrics(
            op=op,
            index=index,
            items=len(batch),
            started_at=started_at,
            finished_at=time.time(),
            elapsed_ms=elapsed_ms,
            bytes=batch_bytes
        )
