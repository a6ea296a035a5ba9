"""Configuration management.

Every value that reaches the scene builder passes through these dataclasses,
which clamp out-of-range input in ``__post_init__``.
"""

import copy
import json
import math
import uuid
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from matplotlib.colors import is_color_like

from star_system.enums import BeltType, LabelAnchor, StarType, StationIcon

MAX_PLANETS = 20
MAX_STARS = 3


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _enum_value(enum_cls, value: Any, default):
    try:
        return enum_cls(value).value
    except ValueError:
        return default.value


def _color(value: Any, default: Optional[str]) -> Optional[str]:
    """Keep ``value`` if it parses as a colour, else ``default``."""
    if isinstance(value, str) and is_color_like(value):
        return value
    return default


def _finite_int(value: Any) -> Optional[int]:
    if value is None or (isinstance(value, float) and not math.isfinite(value)):
        return None
    return int(value)


@dataclass
class RingConfig:
    """Ring override. ``enabled=False`` removes a generated ring."""
    enabled: bool = True
    gap: float = 2.0
    width: float = 10.0
    color: str = "#c9b18b"
    opacity: float = 0.55
    flatten: float = 0.6
    angle_deg: float = 45.0

    def __post_init__(self):
        self.gap = clamp(float(self.gap), 0.0, 100.0)
        self.width = clamp(float(self.width), 1.0, 80.0)
        self.opacity = clamp(float(self.opacity), 0.0, 1.0)
        self.flatten = clamp(float(self.flatten), 0.2, 1.0)
        self.angle_deg = float(self.angle_deg)
        self.color = _color(self.color, "#c9b18b")


@dataclass
class PlanetOverride:
    """Per-planet user overrides. ``None`` means keep the generated value."""
    name: Optional[str] = None
    size: Optional[float] = None
    color: Optional[str] = None
    moons: Optional[int] = None
    rings: Optional[RingConfig] = None
    show_label: Optional[bool] = None

    def __post_init__(self):
        if self.size is not None:
            self.size = clamp(float(self.size), 2.0, 24.0)
        self.color = _color(self.color, None)
        self.moons = _finite_int(self.moons)
        if self.moons is not None:
            self.moons = int(clamp(self.moons, 0, 10))
        if isinstance(self.rings, dict):
            self.rings = RingConfig(**self.rings)

    def is_empty(self) -> bool:
        return all(v is None for v in asdict(self).values())


@dataclass
class BeltConfig:
    type: str = BeltType.FREE.value
    width: float = 80.0
    density: float = 0.5
    gap_index: Optional[int] = None  # Only used by anchored belts

    def __post_init__(self):
        self.type = _enum_value(BeltType, self.type, BeltType.FREE)
        self.width = clamp(float(self.width), 10.0, 200.0)
        self.density = clamp(float(self.density), 0.0, 1.0)
        self.gap_index = _finite_int(self.gap_index)


@dataclass
class StationConfig:
    id: str = ""
    name: str = ""
    radius: float = 140.0  # Polar coordinates relative to the system origin
    angle: float = 0.0
    icon_type: str = StationIcon.DIAMOND.value
    color: str = "#FFD54F"
    size: float = 8.0
    custom_icon_data: Optional[str] = None  # data: URL of an embedded image
    show_label: bool = True

    def __post_init__(self):
        if not self.id:
            self.id = f"station_{uuid.uuid4().hex[:10]}"
        self.icon_type = _enum_value(StationIcon, self.icon_type, StationIcon.DIAMOND)
        self.radius = max(0.0, float(self.radius))
        self.angle = float(self.angle)
        self.size = clamp(float(self.size), 4.0, 24.0)
        self.color = _color(self.color, "#FFD54F")

    @classmethod
    def default(cls, i: int = 0) -> "StationConfig":
        """New station slightly outside the first orbit, offset by its index."""
        return cls(radius=140.0 + i * 10.0)


@dataclass
class LabelStyle:
    size: float = 12.0
    color: str = "#ffffff"
    position: str = LabelAnchor.TOP_LEFT.value
    background: bool = False

    def __post_init__(self):
        self.size = clamp(float(self.size), 6.0, 48.0)
        self.color = _color(self.color, "#ffffff")
        self.position = _enum_value(LabelAnchor, self.position, LabelAnchor.TOP_LEFT)


@dataclass
class MoonSettings:
    show: bool = True
    min_size: float = 1.0
    max_size: float = 3.0
    orbit_min: float = 10.0
    orbit_max: float = 22.0

    def __post_init__(self):
        self.min_size = max(0.0, float(self.min_size))
        self.max_size = max(0.0, float(self.max_size))
        self.orbit_min = max(0.0, float(self.orbit_min))
        self.orbit_max = max(0.0, float(self.orbit_max))


@dataclass
class SystemConfig:
    """Everything the scene builder needs: seed, counts, overrides and style."""
    seed: int = 123456789
    num_planets: int = 6
    stars: List[str] = None
    moons: MoonSettings = field(default_factory=MoonSettings)
    labels: LabelStyle = field(default_factory=LabelStyle)
    belts: List[BeltConfig] = field(default_factory=list)
    stations: List[StationConfig] = field(default_factory=list)
    planet_overrides: Dict[int, PlanetOverride] = field(default_factory=dict)
    show_hud: bool = True

    def __post_init__(self):
        self.seed = int(self.seed)
        self.num_planets = int(clamp(int(self.num_planets), 0, MAX_PLANETS))
        if not self.stars:
            self.stars = [StarType.YELLOW.value]
        self.stars = [_enum_value(StarType, s, StarType.YELLOW) for s in self.stars[:MAX_STARS]]
        if isinstance(self.moons, dict):
            self.moons = MoonSettings(**self.moons)
        if isinstance(self.labels, dict):
            self.labels = LabelStyle(**self.labels)
        self.belts = [BeltConfig(**b) if isinstance(b, dict) else b for b in self.belts]
        self.stations = [StationConfig(**s) if isinstance(s, dict) else s for s in self.stations]
        overrides = {}
        for key, value in self.planet_overrides.items():
            if isinstance(value, dict):
                value = PlanetOverride(**value)
            overrides[int(key)] = value
        self.planet_overrides = overrides

    def override_for(self, index: int) -> PlanetOverride:
        return self.planet_overrides.get(index) or PlanetOverride()

    def with_override(self, index: int, **updates) -> "SystemConfig":
        """Return a copy with ``updates`` merged into planet ``index``'s override."""
        new = copy.deepcopy(self)
        current = asdict(new.override_for(index))
        current.update(updates)
        new.planet_overrides[index] = PlanetOverride(**current)
        return new

    def with_station_at(self, index: int, radius: float, angle: float) -> "SystemConfig":
        """Return a copy with station ``index`` moved to polar (radius, angle)."""
        if not 0 <= index < len(self.stations):
            raise IndexError(f"No station at index {index}")
        new = copy.deepcopy(self)
        station = new.stations[index]
        station.radius = max(0.0, float(radius))
        station.angle = float(angle)
        return new

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["planet_overrides"] = {
            str(k): v for k, v in data["planet_overrides"].items()
        }
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SystemConfig":
        return cls(**data)


def load_config(config_path: str) -> SystemConfig:
    """Load configuration from file.

    Args:
        config_path: Path to config file (.json or .yaml)

    Returns:
        SystemConfig object
    """
    config_path = Path(config_path)

    with open(config_path, 'r') as f:
        if config_path.suffix in ('.yaml', '.yml'):
            try:
                import yaml
            except ImportError:
                raise ImportError("YAML support requires PyYAML. Install with: pip install pyyaml")
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    return SystemConfig.from_dict(data or {})


def save_config(config: SystemConfig, output_path: str):
    """Save configuration to file.

    Args:
        config: SystemConfig object
        output_path: Output file path (.json or .yaml)
    """
    output_path = Path(output_path)
    data = config.to_dict()

    with open(output_path, 'w') as f:
        if output_path.suffix in ('.yaml', '.yml'):
            try:
                import yaml
            except ImportError:
                raise ImportError("YAML support requires PyYAML. Install with: pip install pyyaml")
            yaml.safe_dump(data, f, default_flow_style=False)
        else:
            json.dump(data, f, indent=2)
