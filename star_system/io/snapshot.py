"""Snapshot export/import.

A snapshot stores the seed, global settings and per-planet resolved values.
Importing one restores the seed, overrides and settings; geometry is then
regenerated by the scene builder, so any snapshot written by this module
reproduces its scene exactly.
"""

import copy
import json
import math
from pathlib import Path
from typing import Any, Dict, Optional

from star_system.errors import SnapshotError
from star_system.scene.builder import build_scene
from star_system.scene.models import Scene
from star_system.utils.config import (
    BeltConfig,
    LabelStyle,
    MoonSettings,
    PlanetOverride,
    RingConfig,
    StationConfig,
    SystemConfig,
)

RING_DEFAULTS = {
    "gap": 2.0,
    "width": 10.0,
    "color": "#c9b18b",
    "opacity": 0.55,
    "flatten": 0.6,
    "angleDeg": 45.0,
}


def _xy(x: float, y: float) -> Dict[str, float]:
    return {"x": x, "y": y}


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _ring_to_dict(ring, enabled: bool = True) -> Dict[str, Any]:
    return {
        "enabled": enabled,
        "gap": ring.gap,
        "width": ring.width,
        "color": ring.color,
        "opacity": ring.opacity,
        "flatten": ring.flatten,
        "angleDeg": ring.angle_deg,
    }


def _station_to_dict(station: StationConfig) -> Dict[str, Any]:
    data = {
        "id": station.id,
        "name": station.name,
        "radius": station.radius,
        "angle": station.angle,
        "iconType": station.icon_type,
        "color": station.color,
        "size": station.size,
        "showLabel": station.show_label,
    }
    if station.custom_icon_data:
        data["customIconData"] = station.custom_icon_data
    return data


def _belt_to_dict(belt: BeltConfig) -> Dict[str, Any]:
    data = {"type": belt.type, "width": belt.width, "density": belt.density}
    if belt.gap_index is not None:
        data["gapIndex"] = belt.gap_index
    return data


def encode_snapshot(config: SystemConfig, scene: Optional[Scene] = None) -> Dict[str, Any]:
    """Encode a configuration and its resolved scene as a snapshot document.

    Args:
        config: System configuration
        scene: Scene built from ``config`` (built here if omitted)

    Returns:
        JSON-serialisable dictionary
    """
    if scene is None:
        scene = build_scene(config)

    planets = []
    for planet in scene.planets:
        x, y = planet.position
        entry = {
            "orbitRadius": planet.orbit_radius,
            "size": planet.size,
            "angle": planet.angle,
            "color": planet.color,
            "name": planet.name,
            "moonsCount": planet.moon_count,
            "position": _xy(x, y),
            "showLabel": planet.show_label,
            "moons": [
                {"angle": m.angle, "orbit": m.orbit, "size": m.size, "position": _xy(m.x, m.y)}
                for m in planet.moons
            ],
        }
        override_rings = config.override_for(planet.index).rings
        if planet.ring is not None:
            entry["rings"] = _ring_to_dict(planet.ring)
        elif override_rings is not None:
            # Keep an explicitly removed ring removed after import
            entry["rings"] = _ring_to_dict(override_rings, enabled=False)
        planets.append(entry)

    labels = config.labels
    moons = config.moons
    return {
        "seed": config.seed,
        "settings": {
            "showMoons": moons.show,
            "moonMinSize": moons.min_size,
            "moonMaxSize": moons.max_size,
            "moonOrbitMin": moons.orbit_min,
            "moonOrbitMax": moons.orbit_max,
            "labelSize": labels.size,
            "labelColor": labels.color,
            "showLabelBackground": labels.background,
            "labelPosition": labels.position,
            "showHud": config.show_hud,
            "stars": list(config.stars),
            "belts": [_belt_to_dict(b) for b in config.belts],
            "stations": [_station_to_dict(s) for s in config.stations],
        },
        "planets": planets,
    }


def _decode_ring(data: Any) -> Optional[RingConfig]:
    if not data:
        return None
    if not isinstance(data, dict):
        raise SnapshotError("Planet 'rings' must be an object")
    values = {}
    for key, default in RING_DEFAULTS.items():
        value = data.get(key)
        if value is None or (isinstance(value, float) and not math.isfinite(value)):
            value = default
        values[key] = value
    try:
        return RingConfig(
            enabled=bool(data.get("enabled", False)),
            gap=float(values["gap"]),
            width=float(values["width"]),
            color=str(values["color"]),
            opacity=float(values["opacity"]),
            flatten=float(values["flatten"]),
            angle_deg=float(values["angleDeg"]),
        )
    except (TypeError, ValueError) as exc:
        raise SnapshotError(f"Invalid ring values: {exc}") from exc


def _decode_planet(data: Any, index: int) -> PlanetOverride:
    if not isinstance(data, dict):
        raise SnapshotError(f"Planet {index} must be an object")
    size = _number(data.get("size"))
    moons = _number(data.get("moonsCount"))
    color = data.get("color")
    name = data.get("name")
    return PlanetOverride(
        name=str(name) if name else None,
        size=size,
        color=color if isinstance(color, str) else None,
        moons=int(moons) if moons is not None else None,
        rings=_decode_ring(data.get("rings")),
        show_label=None if "showLabel" not in data else data["showLabel"] is not False,
    )


def _decode_station(data: Any) -> StationConfig:
    if not isinstance(data, dict):
        raise SnapshotError("Station entries must be objects")
    fields = {
        "id": data.get("id"),
        "name": data.get("name"),
        "radius": _number(data.get("radius")),
        "angle": _number(data.get("angle")),
        "icon_type": data.get("iconType"),
        "color": data.get("color"),
        "size": _number(data.get("size")),
        "custom_icon_data": data.get("customIconData") or data.get("customIconDataUrl"),
    }
    station = StationConfig(**{k: v for k, v in fields.items() if v is not None})
    station.show_label = data.get("showLabel") is not False
    return station


def _decode_belt(data: Any) -> BeltConfig:
    if not isinstance(data, dict):
        raise SnapshotError("Belt entries must be objects")
    fields = {
        "type": data.get("type"),
        "width": _number(data.get("width")),
        "density": _number(data.get("density")),
        "gap_index": _number(data.get("gapIndex")),
    }
    return BeltConfig(**{k: v for k, v in fields.items() if v is not None})


def _pick_number(settings: Dict[str, Any], key: str, current: float) -> float:
    value = _number(settings.get(key))
    return current if value is None else value


def _pick(settings: Dict[str, Any], key: str, kind: type, current):
    value = settings.get(key)
    return value if isinstance(value, kind) else current


def _apply_settings(config: SystemConfig, settings: Dict[str, Any]):
    moons = config.moons
    config.moons = MoonSettings(
        show=_pick(settings, "showMoons", bool, moons.show),
        min_size=_pick_number(settings, "moonMinSize", moons.min_size),
        max_size=_pick_number(settings, "moonMaxSize", moons.max_size),
        orbit_min=_pick_number(settings, "moonOrbitMin", moons.orbit_min),
        orbit_max=_pick_number(settings, "moonOrbitMax", moons.orbit_max),
    )

    labels = config.labels
    config.labels = LabelStyle(
        size=_pick_number(settings, "labelSize", labels.size),
        color=_pick(settings, "labelColor", str, labels.color),
        position=_pick(settings, "labelPosition", str, labels.position),
        background=_pick(settings, "showLabelBackground", bool, labels.background),
    )

    config.show_hud = _pick(settings, "showHud", bool, config.show_hud)
    if isinstance(settings.get("stars"), list):
        config.stars = [str(s) for s in settings["stars"]]
    if isinstance(settings.get("belts"), list):
        config.belts = [_decode_belt(b) for b in settings["belts"]]
    if isinstance(settings.get("stations"), list):
        config.stations = [_decode_station(s) for s in settings["stations"]]


def decode_snapshot(doc: Any, base: Optional[SystemConfig] = None) -> SystemConfig:
    """Decode a snapshot document into a new configuration.

    Values missing from the document keep their value from ``base``. When the
    document lists planets, the planet count and all overrides are replaced
    by the document's.

    Args:
        doc: Parsed snapshot document
        base: Configuration to start from (never modified)

    Returns:
        New SystemConfig

    Raises:
        SnapshotError: If the document is malformed
    """
    if not isinstance(doc, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    seed = doc.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise SnapshotError(f"Snapshot seed must be an integer, got {seed!r}")
    planets = doc.get("planets")
    if planets is not None and not isinstance(planets, list):
        raise SnapshotError("Snapshot 'planets' must be a list")
    settings = doc.get("settings")
    if settings is not None and not isinstance(settings, dict):
        raise SnapshotError("Snapshot 'settings' must be an object")

    config = copy.deepcopy(base) if base is not None else SystemConfig()
    try:
        if seed is not None:
            config.seed = seed
        if planets is not None:
            config.num_planets = len(planets)
            overrides = {}
            for i, entry in enumerate(planets):
                override = _decode_planet(entry, i)
                if not override.is_empty():
                    overrides[i] = override
            config.planet_overrides = overrides
        if settings is not None:
            _apply_settings(config, settings)
        # Re-run validation and clamping on the assembled config
        return SystemConfig.from_dict(config.to_dict())
    except SnapshotError:
        raise
    except (TypeError, ValueError, OverflowError) as exc:
        raise SnapshotError(f"Invalid snapshot: {exc}") from exc


def save_snapshot(config: SystemConfig, output_path: str, scene: Optional[Scene] = None):
    """Save a snapshot to a JSON file.

    Args:
        config: System configuration
        output_path: Output file path (.json)
        scene: Scene built from ``config`` (built here if omitted)
    """
    output_path = Path(output_path)
    if output_path.suffix != '.json':
        raise ValueError(f"Unsupported file format: {output_path.suffix}. Use .json")
    with open(output_path, 'w') as f:
        json.dump(encode_snapshot(config, scene), f, indent=2)


def load_snapshot(input_path: str, base: Optional[SystemConfig] = None) -> SystemConfig:
    """Load a snapshot file.

    Args:
        input_path: Input file path
        base: Configuration supplying values the snapshot omits

    Returns:
        New SystemConfig

    Raises:
        SnapshotError: If the file is not valid JSON or not a valid snapshot
    """
    with open(input_path, 'r') as f:
        try:
            doc = json.load(f)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Invalid JSON in {input_path}: {exc}") from exc
    return decode_snapshot(doc, base)
