"""PNG and SVG file export."""

from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np

EXPORT_PRESETS: Dict[str, Tuple[int, int]] = {
    "720p": (1280, 720),
    "1080p": (1920, 1080),
    "2k": (2048, 1080),
    "1440p": (2560, 1440),
    "4k": (3840, 2160),
}


def resolve_resolution(name: str) -> Tuple[int, int]:
    """Look up an export preset by name (case-insensitive)."""
    try:
        return EXPORT_PRESETS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown resolution preset: {name}. Choose from {', '.join(EXPORT_PRESETS)}"
        )


def export_file_name(seed: int, num_planets: int, extension: str,
                     size: Optional[Tuple[int, int]] = None) -> str:
    """Default export file name, e.g. ``star-system_42_6_1920x1080.png``."""
    stem = f"star-system_{seed}_{num_planets}"
    if size is not None:
        stem += f"_{size[0]}x{size[1]}"
    return f"{stem}.{extension.lstrip('.')}"


def save_png(output_path: str, image: np.ndarray):
    """Write an RGBA/RGB pixel array as PNG.

    Args:
        output_path: Output file path (.png)
        image: Image array (H, W, 4) or (H, W, 3)
    """
    if image.dtype != np.uint8:
        # Normalize to 0-255
        image = (np.clip(image, 0.0, 1.0) * 255).astype(np.uint8)

    try:
        import imageio.v3 as iio
    except ImportError:
        raise ImportError(
            "PNG export requires imageio. Install with: pip install imageio"
        )

    iio.imwrite(Path(output_path), image, extension=".png")


def save_svg(output_path: str, document: str):
    """Write an SVG document as UTF-8 text."""
    Path(output_path).write_text(document, encoding="utf-8")
