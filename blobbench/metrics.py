"""Сбор и обработка метрик"""

import json
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, List

import numpy as np

from .base import BatchMetrics, ResultSummary


@dataclass
class PassRecord:
    """Итог одного прохода на одном хранилище"""
    backend: str
    op: str
    threads: int
    batch_size: int
    summary: ResultSummary

    def to_dict(self):
        data = asdict(self)
        data["rates"] = self.summary.rates.to_dict()
        return data


class MetricsCollector:
    """Сборщик метрик батчей и итогов проходов"""

    def __init__(self):
        self.passes: List[PassRecord] = []
        self.batches: List[BatchMetrics] = []
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    def add_batch(self, metrics: BatchMetrics):
        self.batches.append(metrics)

    def add_pass(self, record: PassRecord):
        self.passes.append(record)

    def get_batches(self, op: str) -> List[BatchMetrics]:
        """Батчи конкретной операции в порядке завершения"""
        return [b for b in self.batches if b.op == op]

    def get_passes_by_backend(self, backend: str) -> List[PassRecord]:
        return [p for p in self.passes if p.backend == backend]

    def save_raw_data(self, output_dir: Path) -> Path:
        """Сохранить сырые данные в JSON"""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        data = {
            'timestamp': self.timestamp,
            'passes': [p.to_dict() for p in self.passes],
            'batches': [b.to_dict() for b in self.batches]
        }

        output_file = output_dir / f"blobbench_raw_{self.timestamp}.json"
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        print(f"\n✅ Raw data saved: {output_file}")
        return output_file

    def batch_time_stats(self, op: str) -> Dict[str, float]:
        """Среднее, p95 и максимум времени батча, мс"""
        times = np.array([b.elapsed_ms for b in self.get_batches(op)])
        if times.size == 0:
            return {'mean': 0.0, 'p95': 0.0, 'max': 0.0}
        return {
            'mean': float(np.mean(times)),
            'p95': float(np.percentile(times, 95)),
            'max': float(np.max(times)),
        }

    def generate_report(self, output_dir: Path) -> str:
        """Генерация текстового отчета"""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        report_lines = []
        report_lines.append("=" * 80)
        report_lines.append("BLOB STORAGE BENCHMARK REPORT")
        report_lines.append("=" * 80)
        report_lines.append(f"Timestamp: {self.timestamp}")

        for record in self.passes:
            summary = record.summary
            rates = summary.rates
            batch_stats = self.batch_time_stats(record.op)

            report_lines.append(f"\n{'=' * 80}")
            report_lines.append(f"{record.backend.upper()} / {record.op.upper()}")
            report_lines.append('=' * 80)
            report_lines.append(f"    Items:           {summary.items_processed:>10}")
            report_lines.append(f"    Size:            {summary.megabytes:>10.2f} MB")
            report_lines.append(f"    Total time:      {summary.elapsed_ms:>10.0f} ms")
            report_lines.append(f"    Throughput:      {rates.mb_per_sec:>10.2f} MB/s")
            report_lines.append(f"    Items/s:         {rates.items_per_sec:>10.2f}")
            report_lines.append(f"    Avg per item:    {rates.avg_ms_per_item:>10.2f} ms")
            report_lines.append(f"    Batches:         {summary.batches:>10}")
            report_lines.append(f"    Batch (avg):     {batch_stats['mean']:>10.2f} ms")
            report_lines.append(f"    Batch (p95):     {batch_stats['p95']:>10.2f} ms")
            report_lines.append(f"    Batch (max):     {batch_stats['max']:>10.2f} ms")
            report_lines.append(f"    Threads:         {record.threads:>10}")
            report_lines.append(f"    Batch size:      {record.batch_size:>10}")

        # Сравнение записи и чтения
        ops = {p.op: p for p in self.passes}
        if 'write' in ops and 'read' in ops:
            write_rate = ops['write'].summary.rates.mb_per_sec
            read_rate = ops['read'].summary.rates.mb_per_sec
            report_lines.append(f"\n  Comparison (Throughput):")
            report_lines.append(f"  {'─' * 70}")
            report_lines.append(f"    {'write':15} {write_rate:8.2f} MB/s")
            report_lines.append(f"    {'read':15} {read_rate:8.2f} MB/s")
            if write_rate > 0:
                report_lines.append(f"    read/write ratio: {read_rate / write_rate:.2f}x")

        report_lines.append("\n" + "=" * 80)

        report_text = "\n".join(report_lines)

        report_file = output_dir / f"blobbench_report_{self.timestamp}.txt"
        with open(report_file, 'w', encoding='utf-8') as f:
            f.write(report_text)

        print(f"✅ Report saved: {report_file}")
        print("\n" + report_text)

        return report_text
