"""Scene model and deterministic scene builder."""

from star_system.scene.models import (
    Scene, Star, Planet, Moon, Ring, Belt, Station,
    StarType, StationIcon, BeltType, LabelAnchor,
)
from star_system.scene.builder import SceneBuilder, build_scene

__all__ = [
    "Scene", "Star", "Planet", "Moon", "Ring", "Belt", "Station",
    "StarType", "StationIcon", "BeltType", "LabelAnchor",
    "SceneBuilder", "build_scene",
]
