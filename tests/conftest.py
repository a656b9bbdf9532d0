"""Общие фикстуры тестов blobbench"""

import matplotlib

matplotlib.use("Agg")

import pytest

from blobbench.workloads import Item


def payload(index: int, size: int) -> bytes:
    return bytes((index + j) % 256 for j in range(size))


@pytest.fixture
def make_items(tmp_path):
    """Фабрика файлов-элементов с предсказуемым содержимым"""
    def _make(count, size=64, directory=None):
        directory = directory or tmp_path / "blobs"
        directory.mkdir(parents=True, exist_ok=True)
        items = []
        for i in range(count):
            path = directory / f"img_{i:06d}.png"
            path.write_bytes(payload(i, size + i))
            items.append(Item(key=path.name, path=path))
        return items
    return _make


class RecordingSink:
    """Запоминает метрики батчей в порядке получения"""

    def __init__(self):
        self.batches = []

    def batch_finished(self, metrics):
        self.batches.append(metrics)


@pytest.fixture
def sink():
    return RecordingSink()
