"""Генерация синтетических PNG изображений для бенчмарка"""

import time
from pathlib import Path

import numpy as np
from matplotlib import image as mpimg

from .workloads import WorkloadConfig

RECTANGLES_PER_IMAGE = 10


def image_name(index: int) -> str:
    return f"img_{index:06d}.png"


def render_image(rng: np.random.Generator, pixels_per_side: int) -> np.ndarray:
    """Случайный фон и несколько прямоугольников, чтобы PNG плохо сжимался"""
    n = pixels_per_side
    pixels = np.empty((n, n, 3), dtype=np.uint8)
    pixels[:, :] = rng.integers(0, 256, size=3)

    for _ in range(RECTANGLES_PER_IMAGE):
        color = rng.integers(0, 256, size=3)
        w = 10 + int(rng.integers(max(1, n - 10)))
        h = 10 + int(rng.integers(max(1, n - 10)))
        x = int(rng.integers(max(1, n - w)))
        y = int(rng.integers(max(1, n - h)))
        pixels[y:y + h, x:x + w] = color

    return pixels


def generate_images(count: int, pixels_per_side: int, output_dir,
                    seed: int = WorkloadConfig.IMAGE_SEED,
                    progress_every: int = 0) -> int:
    """
    Детерминированная генерация count изображений img_NNNNNN.png.
    При progress_every > 0 печатает прогресс каждые progress_every файлов.
    Возвращает количество записанных файлов.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    rng = np.random.default_rng(seed)
    batch_start = time.perf_counter()
    in_batch = 0

    for i in range(count):
        pixels = render_image(rng, pixels_per_side)
        mpimg.imsave(output_dir / image_name(i), pixels, format="png")

        in_batch += 1
        generated = i + 1
        if progress_every > 0 and (generated % progress_every == 0 or generated == count):
            now = time.perf_counter()
            ms = (now - batch_start) * 1000
            items_per_sec = in_batch / (ms / 1000) if ms > 0 else 0.0
            print(f"Gen batch: items={in_batch}, time={ms:.0f} ms, "
                  f"items/s={items_per_sec:.2f}, total={generated}/{count}")
            batch_start = now
            in_batch = 0

    return count


def ensure_images(count: int, pixels_per_side: int, output_dir,
                  progress_every: int = 0) -> bool:
    """Генерирует изображения, если каталога нет или файлов меньше count"""
    output_dir = Path(output_dir)
    if output_dir.is_dir():
        existing = sum(1 for p in output_dir.iterdir()
                       if p.is_file() and p.name.endswith(WorkloadConfig.IMAGE_SUFFIX))
        if existing >= count:
            return False

    print(f"Generating images to {output_dir.absolute()}")
    generate_images(count, pixels_per_side, output_dir, progress_every=progress_every)
    return True
