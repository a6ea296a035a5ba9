"""Deterministic scene builder.

Every feature axis (orbits, moon counts, rings, names, belts, moon placement,
star layout) draws from its own seeded stream, so overriding one planet never
shifts the generated values of another.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from star_system.scene.models import (
    Belt,
    BeltType,
    LabelAnchor,
    LabelStyleSpec,
    Moon,
    Planet,
    Ring,
    Scene,
    Star,
    StarType,
    Station,
    StationIcon,
    polar_to_cartesian,
)
from star_system.scene.names import default_names
from star_system.utils.config import BeltConfig, MoonSettings, SystemConfig
from star_system.utils.reproducibility import (
    BELT_SALT,
    MOON_PLACEMENT_SALT,
    MOONS_SALT,
    RINGS_SALT,
    STAR_AXIS_SALT,
    SeededStream,
)

logger = logging.getLogger(__name__)

MIN_ORBIT = 40.0
ORBIT_GAP_MIN = 35.0
ORBIT_GAP_MAX = 70.0
PLANET_PALETTE = [
    "#8AB4F8",  # light blue
    "#F28B82",  # warm red
    "#FDD663",  # yellow
    "#81C995",  # green
    "#CF9FFF",  # purple
    "#F6AEA9",  # salmon
    "#B4C7E7",  # steel
    "#D7CCC8",  # taupe
]
RING_COLORS = ["#c9b18b", "#a0a0a0", "#b68d5a"]
RING_PROBABILITY = 0.25
MAX_GENERATED_MOONS = 4

BELT_MIN_INNER = 50.0
FREE_BELT_MIN_RADIUS = 80.0
FREE_BELT_DEFAULT_LAST_ORBIT = 300.0
BELT_MAX_PARTICLES = 900

STAR_SEPARATION = 60.0


@dataclass(frozen=True)
class GeneratedPlanet:
    """Planet values before overrides are applied."""
    orbit_radius: float
    angle: float
    size: float
    color: str
    moon_count: int
    ring: Optional[Ring]


def generate_moon_count(seed: int, index: int) -> int:
    return SeededStream(seed, MOONS_SALT, index).randint_below(MAX_GENERATED_MOONS)


def generate_ring(seed: int, index: int) -> Optional[Ring]:
    """Roll ring presence and parameters for planet ``index``.

    Draw order is fixed: presence, gap, width, color, opacity, flatten, angle.
    """
    stream = SeededStream(seed, RINGS_SALT, index)
    if stream.random() >= RING_PROBABILITY:
        return None
    gap = float(math.floor(1 + stream.random() * 4))
    width = float(math.floor(6 + stream.random() * 16))
    color = stream.choice(RING_COLORS)
    opacity = 0.4 + stream.random() * 0.3
    flatten = 0.5 + stream.random() * 0.4
    angle_deg = float(math.floor(30 + stream.random() * 60))
    return Ring(gap=gap, width=width, color=color, opacity=opacity,
                flatten=flatten, angle_deg=angle_deg)


def generate_planets(seed: int, count: int) -> List[GeneratedPlanet]:
    """Generate orbit, size, angle and color from the seed-only orbit stream."""
    orbit_stream = SeededStream(seed)
    planets = []
    current_orbit = MIN_ORBIT
    for i in range(count):
        current_orbit += orbit_stream.uniform(ORBIT_GAP_MIN, ORBIT_GAP_MAX)
        size = float(4 + orbit_stream.randint_below(10))
        angle = orbit_stream.angle()
        color = orbit_stream.choice(PLANET_PALETTE)
        planets.append(GeneratedPlanet(
            orbit_radius=current_orbit,
            angle=angle,
            size=size,
            color=color,
            moon_count=generate_moon_count(seed, i),
            ring=generate_ring(seed, i),
        ))
    return planets


def place_moons(
    seed: int,
    index: int,
    planet_xy: Tuple[float, float],
    planet_size: float,
    count: int,
    settings: MoonSettings,
) -> Tuple[Moon, ...]:
    """Resolve moon angle/orbit/size/position for planet ``index``.

    Args:
        seed: System seed
        index: Planet index
        planet_xy: Planet centre relative to the system origin
        planet_size: Resolved planet radius
        count: Number of moons to place
        settings: Global moon size/orbit ranges

    Returns:
        Tuple of moons (empty when moons are hidden or ranges are inverted)
    """
    if count <= 0 or not settings.show or settings.max_size < settings.min_size:
        return ()
    stream = SeededStream(seed, MOON_PLACEMENT_SALT, index + 1)
    px, py = planet_xy
    orbit_span = max(0.0, settings.orbit_max - settings.orbit_min)
    moons = []
    for _ in range(count):
        angle = stream.angle()
        orbit = settings.orbit_min + stream.random() * orbit_span
        distance = planet_size + orbit
        x = px + math.cos(angle) * distance
        y = py + math.sin(angle) * distance
        size = stream.uniform(settings.min_size, settings.max_size)
        moons.append(Moon(angle=angle, orbit=orbit, size=size, x=x, y=y))
    return tuple(moons)


def belt_bounds(
    seed: int,
    belt_index: int,
    belt: BeltConfig,
    orbit_radii: Sequence[float],
) -> Optional[Tuple[float, float]]:
    """Inner/outer radius of a belt, or ``None`` if its anchor gap is gone."""
    if belt.type == BeltType.ANCHORED.value and belt.gap_index is not None:
        gap = belt.gap_index
        if gap < 0 or gap + 1 >= len(orbit_radii):
            return None
        center = (orbit_radii[gap] + orbit_radii[gap + 1]) / 2
    else:
        last_orbit = orbit_radii[-1] if orbit_radii else FREE_BELT_DEFAULT_LAST_ORBIT
        max_radius = max(FREE_BELT_MIN_RADIUS + 60, last_orbit + 120)
        stream = SeededStream(seed, BELT_SALT, belt_index * 293)
        center = stream.uniform(FREE_BELT_MIN_RADIUS, max_radius)
    inner = max(BELT_MIN_INNER, center - belt.width / 2)
    return inner, inner + belt.width


def scatter_belt(seed: int, belt_index: int, inner: float, outer: float, density: float):
    """Particle (x, y, size) triples for one belt."""
    count = int(math.floor(BELT_MAX_PARTICLES * min(1.0, max(0.0, density))))
    stream = SeededStream(seed, BELT_SALT, belt_index * 97 + 777)
    particles = []
    for _ in range(count):
        angle = stream.angle()
        r = stream.uniform(inner, outer)
        size = 0.5 + stream.random() * 1.2
        particles.append((math.cos(angle) * r, math.sin(angle) * r, size))
    return tuple(particles)


def place_stars(seed: int, types: Sequence[str]) -> Tuple[Star, ...]:
    """Lay out 1-3 stars around the barycentre."""
    count = min(3, max(1, len(types)))
    types = list(types) + [StarType.YELLOW.value] * (count - len(types))
    base_angle = SeededStream(seed, STAR_AXIS_SALT).angle()
    if count == 1:
        offsets = [(0.0, 0.0)]
    elif count == 2:
        x, y = polar_to_cartesian(STAR_SEPARATION, base_angle)
        offsets = [(x, y), (-x, -y)]
    else:
        offsets = [
            polar_to_cartesian(STAR_SEPARATION, base_angle + i * math.pi * 2 / 3)
            for i in range(3)
        ]
    return tuple(Star(StarType(t), x, y) for t, (x, y) in zip(types, offsets))


class SceneBuilder:
    """Builds an immutable :class:`Scene` from a :class:`SystemConfig`."""

    def __init__(self, config: SystemConfig):
        self.config = config

    def build(self) -> Scene:
        cfg = self.config
        generated = generate_planets(cfg.seed, cfg.num_planets)
        names = default_names(cfg.seed, cfg.num_planets)

        planets = []
        for i, gen in enumerate(generated):
            planets.append(self._resolve_planet(i, gen, names[i]))

        orbit_radii = [p.orbit_radius for p in generated]
        belts = []
        for bi, belt_cfg in enumerate(cfg.belts):
            bounds = belt_bounds(cfg.seed, bi, belt_cfg, orbit_radii)
            if bounds is None:
                logger.debug("Skipping belt %d: gap %s has no planet pair", bi, belt_cfg.gap_index)
                continue
            inner, outer = bounds
            belts.append(Belt(
                index=bi,
                type=BeltType(belt_cfg.type),
                inner=inner,
                outer=outer,
                density=belt_cfg.density,
                particles=scatter_belt(cfg.seed, bi, inner, outer, belt_cfg.density),
            ))

        stations = tuple(self._resolve_station(s) for s in cfg.stations)
        labels = LabelStyleSpec(
            size=cfg.labels.size,
            color=cfg.labels.color,
            anchor=LabelAnchor(cfg.labels.position),
            background=cfg.labels.background,
        )
        return Scene(
            seed=cfg.seed,
            stars=place_stars(cfg.seed, cfg.stars),
            planets=tuple(planets),
            belts=tuple(belts),
            stations=stations,
            labels=labels,
            show_hud=cfg.show_hud,
        )

    def _resolve_planet(self, index: int, gen: GeneratedPlanet, default_name: str) -> Planet:
        override = self.config.override_for(index)
        size = override.size if override.size is not None else gen.size
        ring = gen.ring
        if override.rings is not None:
            r = override.rings
            ring = Ring(r.gap, r.width, r.color, r.opacity, r.flatten, r.angle_deg) if r.enabled else None
        moon_count = override.moons if override.moons is not None else gen.moon_count
        xy = polar_to_cartesian(gen.orbit_radius, gen.angle)
        return Planet(
            index=index,
            orbit_radius=gen.orbit_radius,
            angle=gen.angle,
            size=size,
            color=override.color if override.color is not None else gen.color,
            name=override.name if override.name is not None else default_name,
            moon_count=moon_count,
            ring=ring,
            show_label=override.show_label if override.show_label is not None else True,
            moons=place_moons(self.config.seed, index, xy, size, moon_count, self.config.moons),
        )

    @staticmethod
    def _resolve_station(cfg) -> Station:
        icon = StationIcon(cfg.icon_type)
        if cfg.custom_icon_data:
            icon = StationIcon.CUSTOM
        return Station(
            id=cfg.id,
            name=cfg.name,
            radius=cfg.radius,
            angle=cfg.angle,
            icon=icon,
            color=cfg.color,
            size=cfg.size,
            show_label=cfg.show_label,
            custom_icon_data=cfg.custom_icon_data,
        )


def build_scene(config: SystemConfig) -> Scene:
    """Build a scene from ``config``; a pure function of its input."""
    return SceneBuilder(config).build()
