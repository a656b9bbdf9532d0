"""Тесты сборщика метрик, отчета и графиков"""

import json

from blobbench.base import MB, BatchMetrics, ResultSummary
from blobbench.metrics import MetricsCollector, PassRecord
from blobbench.visualize import generate_all_plots


def _collector():
    collector = MetricsCollector()
    for op in ("write", "read"):
        for i in range(1, 4):
            collector.add_batch(BatchMetrics(op=op, index=i, items=10, started_at=0.0,
                                             finished_at=0.1, elapsed_ms=100.0 * i, bytes=MB))
        collector.add_pass(PassRecord(backend="lmdb", op=op, threads=4, batch_size=10,
                                      summary=ResultSummary(3 * MB, 30, 600.0, 3)))
    return collector


def test_batch_time_stats():
    stats = _collector().batch_time_stats("write")
    assert stats["mean"] == 200.0
    assert stats["max"] == 300.0
    assert 200.0 < stats["p95"] <= 300.0


def test_batch_time_stats_empty():
    assert MetricsCollector().batch_time_stats("read") == {'mean': 0.0, 'p95': 0.0, 'max': 0.0}


def test_save_raw_data(tmp_path):
    path = _collector().save_raw_data(tmp_path)
    data = json.loads(path.read_text(encoding="utf-8"))

    assert len(data["passes"]) == 2
    assert len(data["batches"]) == 6
    assert data["passes"][0]["summary"]["items_processed"] == 30
    assert data["passes"][0]["rates"]["items_per_sec"] == 50.0


def test_generate_report(tmp_path):
    text = _collector().generate_report(tmp_path)

    assert "LMDB / WRITE" in text
    assert "LMDB / READ" in text
    assert "read/write ratio: 1.00x" in text
    assert len(list(tmp_path.glob("blobbench_report_*.txt"))) == 1


def test_generate_all_plots(tmp_path):
    paths = generate_all_plots(_collector(), tmp_path / "plots")

    assert [p.name for p in paths] == ["01_batch_times.png", "02_throughput_comparison.png"]
    assert all(p.stat().st_size > 0 for p in paths)
