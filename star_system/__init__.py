"""
Star System Generator - seeded, editable star system maps.

Features:
- Deterministic generation from one integer seed
- Per-planet overrides that never disturb other planets
- Raster (matplotlib) and vector (SVG) rendering of the same scene
- PNG export at preset resolutions, SVG export
- JSON snapshots that reproduce a scene exactly
"""

__version__ = "0.1.0"

from star_system.scene.builder import SceneBuilder, build_scene
from star_system.utils.config import SystemConfig

__all__ = [
    "SceneBuilder",
    "build_scene",
    "SystemConfig",
]
