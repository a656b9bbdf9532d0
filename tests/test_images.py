"""Тесты генератора изображений"""

import numpy as np
import pytest
from matplotlib import image as mpimg

from blobbench.images import ensure_images, generate_images, image_name, render_image


def test_generate_writes_named_pngs(tmp_path):
    out = tmp_path / "images"
    assert generate_images(3, 16, out) == 3

    names = sorted(p.name for p in out.iterdir())
    assert names == ["img_000000.png", "img_000001.png", "img_000002.png"]
    assert mpimg.imread(out / image_name(0)).shape[:2] == (16, 16)


def test_generate_is_deterministic(tmp_path):
    generate_images(2, 24, tmp_path / "a")
    generate_images(2, 24, tmp_path / "b")

    for i in range(2):
        a = mpimg.imread(tmp_path / "a" / image_name(i))
        b = mpimg.imread(tmp_path / "b" / image_name(i))
        assert np.array_equal(a, b)


def test_render_image_shape_and_dtype():
    pixels = render_image(np.random.default_rng(1), 32)
    assert pixels.shape == (32, 32, 3)
    assert pixels.dtype == np.uint8


def test_generate_progress_lines(tmp_path, capsys):
    generate_images(5, 12, tmp_path / "p", progress_every=2)
    lines = [l for l in capsys.readouterr().out.splitlines() if l.startswith("Gen batch")]

    assert len(lines) == 3
    assert "total=5/5" in lines[-1]
    assert "items=1" in lines[-1]


def test_ensure_images_skips_when_enough(tmp_path):
    out = tmp_path / "images"
    assert ensure_images(2, 12, out) is True
    assert ensure_images(2, 12, out) is False
    assert ensure_images(3, 12, out) is True
    assert len(list(out.iterdir())) == 3


def test_generate_into_file_path_fails(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x")
    with pytest.raises(OSError):
        generate_images(1, 12, blocker)
