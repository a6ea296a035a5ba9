"""Scene data model: the immutable, render-ready description of a system."""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from star_system.enums import BeltType, LabelAnchor, StarType, StationIcon


def polar_to_cartesian(radius: float, angle: float) -> Tuple[float, float]:
    """Origin-relative (radius, angle) to (x, y) with y pointing down."""
    return math.cos(angle) * radius, math.sin(angle) * radius


@dataclass(frozen=True)
class Star:
    type: StarType
    x: float  # Offset from system origin (px)
    y: float


@dataclass(frozen=True)
class Ring:
    gap: float  # Distance from planet surface to inner edge (px)
    width: float  # Ring thickness (stroke width, px)
    color: str
    opacity: float  # 0..1
    flatten: float  # 0.2..1, vertical scale faking inclination
    angle_deg: float  # Rotation of the ellipse

    def mid_radius(self, planet_size: float) -> float:
        return planet_size + self.gap + self.width / 2


@dataclass(frozen=True)
class Moon:
    angle: float  # Radians around parent
    orbit: float  # Distance from parent surface (px)
    size: float  # Radius (px)
    x: float  # Absolute offset from system origin
    y: float


@dataclass(frozen=True)
class Planet:
    index: int
    orbit_radius: float
    angle: float
    size: float
    color: str
    name: str
    moon_count: int
    ring: Optional[Ring]
    show_label: bool
    moons: Tuple[Moon, ...]

    @property
    def position(self) -> Tuple[float, float]:
        return polar_to_cartesian(self.orbit_radius, self.angle)


@dataclass(frozen=True)
class Belt:
    index: int
    type: BeltType
    inner: float
    outer: float
    density: float
    particles: Tuple[Tuple[float, float, float], ...]  # (x, y, size) per particle

    @property
    def center_radius(self) -> float:
        return (self.inner + self.outer) / 2


@dataclass(frozen=True)
class Station:
    id: str
    name: str
    radius: float
    angle: float
    icon: StationIcon
    color: str
    size: float
    show_label: bool
    custom_icon_data: Optional[str] = None

    @property
    def position(self) -> Tuple[float, float]:
        return polar_to_cartesian(self.radius, self.angle)

    @property
    def label_text(self) -> str:
        return self.name or "Station"


@dataclass(frozen=True)
class LabelStyleSpec:
    size: float
    color: str
    anchor: LabelAnchor
    background: bool


@dataclass(frozen=True)
class Scene:
    """Fully resolved scene; coordinates are relative to the system origin."""

    seed: int
    stars: Tuple[Star, ...]
    planets: Tuple[Planet, ...]
    belts: Tuple[Belt, ...]
    stations: Tuple[Station, ...]
    labels: LabelStyleSpec
    show_hud: bool = True

    @property
    def num_planets(self) -> int:
        return len(self.planets)
