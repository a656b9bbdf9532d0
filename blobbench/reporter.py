"""Вывод результатов батчей и проходов"""

import os
import threading
from dataclasses import dataclass
from typing import Optional, TextIO

import psutil

from .base import BatchMetrics, Rates, ResultSummary
from .metrics import MetricsCollector, PassRecord
from .stats import StatsSink


def process_memory_mb() -> int:
    """Резидентная память процесса, МБ"""
    return psutil.Process().memory_info().rss // (1024 * 1024)


def cpu_cores() -> int:
    return os.cpu_count() or 1


@dataclass
class RunContext:
    """Параметры запуска, сопровождающие каждую запись статистики"""
    backend: str
    threads: int
    batch_size: int
    cpu_cores: int
    note: str = ""


class ConsoleReporter:
    """
    Печать метрик по одному писателю за раз.

    Метрики дополнительно передаются в MetricsCollector и StatsSink,
    если они заданы.
    """

    def __init__(self, context: RunContext, stream: Optional[TextIO] = None,
                 collector: Optional[MetricsCollector] = None,
                 stats: Optional[StatsSink] = None):
        self.context = context
        self.stream = stream
        self.collector = collector
        self.stats = stats
        self._lock = threading.Lock()

    def _print(self, line: str):
        with self._lock:
            print(line, file=self.stream, flush=True)

    def batch_finished(self, metrics: BatchMetrics):
        thread = threading.current_thread().name
        self._print(
            f"{metrics.op} batch #{metrics.index} finished by {thread}: "
            f"items={metrics.items}, start={int(metrics.started_at * 1000)}, "
            f"end={int(metrics.finished_at * 1000)}, time={metrics.elapsed_ms:.0f} ms"
        )

        if self.collector is not None:
            self.collector.add_batch(metrics)

        if self.stats is not None:
            ctx = self.context
            self.stats.record_batch(
                ctx.backend, metrics.op, metrics.index, metrics.items,
                metrics.bytes, int(metrics.elapsed_ms), ctx.threads,
                ctx.batch_size, ctx.cpu_cores, process_memory_mb(), ctx.note
            )

    def summary(self, op: str, summary: ResultSummary) -> Rates:
        """Итоговая строка прохода"""
        rates = summary.rates
        self._print(
            f"{op.capitalize()}: items={summary.items_processed}, "
            f"size={summary.megabytes:.2f} MB, time={summary.elapsed_ms:.0f} ms, "
            f"MB/s={rates.mb_per_sec:.2f}, items/s={rates.items_per_sec:.2f}, "
            f"avg={rates.avg_ms_per_item:.2f} ms/item, threads={self.context.threads}"
        )

        ctx = self.context
        if self.collector is not None:
            self.collector.add_pass(PassRecord(
                backend=ctx.backend,
                op=op,
                threads=ctx.threads,
                batch_size=ctx.batch_size,
                summary=summary
            ))

        if self.stats is not None:
            self.stats.record_total(
                ctx.backend, op, summary.items_processed, summary.bytes_processed,
                int(summary.elapsed_ms), ctx.threads, ctx.batch_size,
                ctx.cpu_cores, process_memory_mb(), ctx.note
            )

        return rates
