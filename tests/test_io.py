"""Tests for image export helpers."""

import os
import tempfile

import numpy as np
import pytest
from PIL import Image

from star_system.io.image_exporter import (
    EXPORT_PRESETS,
    export_file_name,
    resolve_resolution,
    save_png,
    save_svg,
)


def test_presets():
    """Export presets match the documented resolutions."""
    assert EXPORT_PRESETS == {
        "720p": (1280, 720),
        "1080p": (1920, 1080),
        "2k": (2048, 1080),
        "1440p": (2560, 1440),
        "4k": (3840, 2160),
    }
    assert resolve_resolution("4K") == (3840, 2160)
    with pytest.raises(ValueError):
        resolve_resolution("8k")


def test_file_names():
    """File names encode seed, planet count and optional size."""
    assert export_file_name(42, 6, "png") == "star-system_42_6.png"
    assert export_file_name(42, 6, ".json") == "star-system_42_6.json"
    assert export_file_name(7, 0, "png", (1920, 1080)) == "star-system_7_0_1920x1080.png"


def test_save_png():
    """PNG export writes the pixel array unchanged."""
    image = np.zeros((20, 30, 4), dtype=np.uint8)
    image[..., 0] = 200
    image[..., 3] = 255

    with tempfile.NamedTemporaryFile(suffix='.png', delete=False) as f:
        temp_path = f.name

    try:
        save_png(temp_path, image)
        with Image.open(temp_path) as img:
            assert img.size == (30, 20)
            loaded = np.asarray(img.convert("RGBA"))
        assert np.array_equal(loaded, image)
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)


def test_save_png_float_input():
    """Float images in [0, 1] are converted to uint8."""
    image = np.ones((4, 4, 3))

    with tempfile.NamedTemporaryFile(suffix='.png', delete=False) as f:
        temp_path = f.name

    try:
        save_png(temp_path, image)
        with Image.open(temp_path) as img:
            assert np.asarray(img.convert("RGB")).min() == 255
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)


def test_save_svg():
    """SVG documents are written as UTF-8 text."""
    document = '<?xml version="1.0" encoding="UTF-8"?>\n<svg><text>Ωmega</text></svg>'

    with tempfile.NamedTemporaryFile(suffix='.svg', delete=False) as f:
        temp_path = f.name

    try:
        save_svg(temp_path, document)
        with open(temp_path, encoding="utf-8") as f:
            assert f.read() == document
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)
