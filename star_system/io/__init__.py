"""Input/output modules."""

from star_system.io.image_exporter import (
    EXPORT_PRESETS,
    export_file_name,
    resolve_resolution,
    save_png,
    save_svg,
)
from star_system.io.snapshot import decode_snapshot, encode_snapshot, load_snapshot, save_snapshot

__all__ = [
    "EXPORT_PRESETS",
    "export_file_name",
    "resolve_resolution",
    "save_png",
    "save_svg",
    "decode_snapshot",
    "encode_snapshot",
    "load_snapshot",
    "save_snapshot",
]
