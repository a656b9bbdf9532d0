"""Blob Storage Benchmark Framework"""

from .base import BackendAdapter, BatchMetrics, Rates, ResultSummary, compute_rates
from .executor import BatchedParallelExecutor, BatchExecutionError, partition
from .metrics import MetricsCollector, PassRecord
from .reporter import ConsoleReporter, RunContext
from .stats import StatsSink
from .workloads import BenchConfig, Item, WorkloadConfig, WorkloadType, list_items

__all__ = [
    'BackendAdapter',
    'BatchMetrics',
    'Rates',
    'ResultSummary',
    'compute_rates',
    'BatchedParallelExecutor',
    'BatchExecutionError',
    'partition',
    'MetricsCollector',
    'PassRecord',
    'ConsoleReporter',
    'RunContext',
    'StatsSink',
    'BenchConfig',
    'Item',
    'WorkloadConfig',
    'WorkloadType',
    'list_items',
]
