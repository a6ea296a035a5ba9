"""Tests for deterministic scene generation."""

import math

import pytest

from star_system.scene.builder import (
    BELT_MAX_PARTICLES,
    belt_bounds,
    build_scene,
    generate_planets,
    place_stars,
)
from star_system.scene.models import BeltType, StarType, StationIcon
from star_system.scene.names import default_names
from star_system.utils.config import BeltConfig, MoonSettings, StationConfig, SystemConfig


def test_determinism():
    """Building twice from the same config gives identical scenes."""
    config = SystemConfig(
        seed=31337,
        num_planets=9,
        stars=["yellow", "red-dwarf"],
        belts=[BeltConfig(density=0.2), BeltConfig(type="anchored", gap_index=2, density=0.1)],
    )
    assert build_scene(config) == build_scene(config)


def test_different_seeds_differ():
    """Different seeds give different layouts."""
    a = build_scene(SystemConfig(seed=1))
    b = build_scene(SystemConfig(seed=2))
    assert [p.orbit_radius for p in a.planets] != [p.orbit_radius for p in b.planets]


def test_default_system_orbits():
    """Seed 123456789 with six planets: first orbit in [75, 110], all increasing."""
    scene = build_scene(SystemConfig(seed=123456789, num_planets=6))
    radii = [p.orbit_radius for p in scene.planets]
    assert len(radii) == 6
    assert 75.0 <= radii[0] <= 110.0
    assert all(b > a for a, b in zip(radii, radii[1:]))


@pytest.mark.parametrize("seed", [0, 1, 42, 2 ** 31, 999999999])
def test_orbit_gaps_in_range(seed):
    """Consecutive orbits are 35-70 px apart and planet sizes are 4-13."""
    planets = generate_planets(seed, 20)
    previous = 40.0
    for planet in planets:
        assert 35.0 <= planet.orbit_radius - previous < 70.0
        assert 4 <= planet.size <= 13
        assert 0 <= planet.moon_count <= 3
        previous = planet.orbit_radius


def test_override_isolation():
    """Overriding one planet leaves every other planet unchanged."""
    base = SystemConfig(seed=7, num_planets=8)
    changed = base.with_override(3, size=20, moons=7, color="#123456",
                                 name="Changed", rings={"enabled": False})
    before = build_scene(base).planets
    after = build_scene(changed).planets

    for i in range(8):
        if i == 3:
            continue
        assert before[i] == after[i]

    planet = after[3]
    assert planet.size == 20.0
    assert planet.moon_count == 7
    assert len(planet.moons) == 7
    assert planet.color == "#123456"
    assert planet.name == "Changed"
    assert planet.ring is None
    # Orbit and angle never depend on overrides
    assert planet.orbit_radius == before[3].orbit_radius
    assert planet.angle == before[3].angle


def test_planet_count_change_keeps_existing_planets():
    """Adding planets does not move the existing ones."""
    small = build_scene(SystemConfig(seed=11, num_planets=4))
    large = build_scene(SystemConfig(seed=11, num_planets=6))
    for a, b in zip(small.planets, large.planets):
        assert (a.orbit_radius, a.angle, a.size, a.color, a.ring, a.moons) == \
            (b.orbit_radius, b.angle, b.size, b.color, b.ring, b.moons)


def test_ring_override_added():
    """A ring override replaces the generated ring with its exact values."""
    config = SystemConfig(seed=3, num_planets=2).with_override(
        0, rings={"gap": 5, "width": 20, "color": "#abcdef", "opacity": 0.5,
                  "flatten": 0.3, "angle_deg": 10})
    ring = build_scene(config).planets[0].ring
    assert ring is not None
    assert (ring.gap, ring.width, ring.color, ring.opacity, ring.flatten, ring.angle_deg) == \
        (5.0, 20.0, "#abcdef", 0.5, 0.3, 10.0)
    assert ring.mid_radius(10) == 10 + 5 + 10


def test_moons_follow_settings():
    """Moons sit at planet size + orbit from the planet, within the configured ranges."""
    moons = MoonSettings(min_size=2, max_size=4, orbit_min=12, orbit_max=20)
    config = SystemConfig(seed=5, num_planets=5, moons=moons).with_override(1, moons=5)
    planet = build_scene(config).planets[1]
    px, py = planet.position
    assert len(planet.moons) == 5
    for moon in planet.moons:
        assert 2 <= moon.size <= 4
        assert 12 <= moon.orbit <= 20
        distance = math.hypot(moon.x - px, moon.y - py)
        assert distance == pytest.approx(planet.size + moon.orbit)


def test_moons_hidden():
    """Hidden moons or an inverted size range place no moons but keep the count."""
    hidden = SystemConfig(seed=5, moons=MoonSettings(show=False)).with_override(0, moons=3)
    planet = build_scene(hidden).planets[0]
    assert planet.moon_count == 3
    assert planet.moons == ()

    inverted = SystemConfig(seed=5, moons=MoonSettings(min_size=5, max_size=1)).with_override(0, moons=3)
    assert build_scene(inverted).planets[0].moons == ()


def test_anchored_belt_bounds():
    """Anchored belt between orbits 100 and 160 with width 40 spans 110..150."""
    belt = BeltConfig(type="anchored", gap_index=1, width=40)
    assert belt_bounds(0, 0, belt, [60.0, 100.0, 160.0]) == (110.0, 150.0)


def test_anchored_belt_inner_clamp():
    """Belt inner radius never drops below 50."""
    belt = BeltConfig(type="anchored", gap_index=0, width=100)
    inner, outer = belt_bounds(0, 0, belt, [40.0, 80.0])
    assert inner == 50.0
    assert outer == 150.0


def test_anchored_belt_missing_gap_skipped():
    """A belt anchored past the last planet pair is skipped, not an error."""
    config = SystemConfig(seed=9, num_planets=3, belts=[
        BeltConfig(type="anchored", gap_index=5, width=40),
        BeltConfig(type="anchored", gap_index=1, width=40, density=0.1),
    ])
    scene = build_scene(config)
    assert len(scene.belts) == 1
    belt = scene.belts[0]
    assert belt.index == 1
    assert belt.type == BeltType.ANCHORED
    radii = [p.orbit_radius for p in scene.planets]
    assert belt.center_radius == pytest.approx((radii[1] + radii[2]) / 2)


def test_belt_particles():
    """Particle count follows density and particles stay inside the annulus."""
    config = SystemConfig(seed=21, num_planets=5, belts=[BeltConfig(width=60, density=0.25)])
    belt = build_scene(config).belts[0]
    assert len(belt.particles) == int(BELT_MAX_PARTICLES * 0.25)
    for x, y, size in belt.particles:
        assert belt.inner - 1e-9 <= math.hypot(x, y) <= belt.outer + 1e-9
        assert 0.5 <= size <= 1.7


def test_free_belt_without_planets():
    """Free belts still get a radius when there are no planets."""
    config = SystemConfig(seed=4, num_planets=0, belts=[BeltConfig(width=30, density=0.05)])
    scene = build_scene(config)
    assert len(scene.belts) == 1
    assert 80.0 - 15.0 <= scene.belts[0].center_radius <= 420.0 + 15.0


def test_star_layout():
    """One star sits at the origin; two and three stars are spread 60 px out."""
    single = place_stars(1, ["yellow"])
    assert len(single) == 1
    assert (single[0].x, single[0].y) == (0.0, 0.0)

    pair = place_stars(1, ["yellow", "red-dwarf"])
    assert pair[0].x == pytest.approx(-pair[1].x)
    assert pair[0].y == pytest.approx(-pair[1].y)
    assert math.hypot(pair[0].x, pair[0].y) == pytest.approx(60.0)

    triple = place_stars(1, ["yellow", "blue-giant", "black-hole"])
    assert [s.type for s in triple] == [StarType.YELLOW, StarType.BLUE_GIANT, StarType.BLACK_HOLE]
    for star in triple:
        assert math.hypot(star.x, star.y) == pytest.approx(60.0)


def test_default_names():
    """Names are deterministic and one per planet."""
    names = default_names(42, 10)
    assert len(names) == 10
    assert names == default_names(42, 10)
    assert default_names(42, 4) == names[:4]
    assert all(name and name[0].isupper() for name in names)


def test_stations():
    """Stations resolve to polar positions; custom image data selects the custom icon."""
    config = SystemConfig(stations=[
        StationConfig(name="Relay", radius=150, angle=0, icon_type="satellite"),
        StationConfig(radius=200, angle=math.pi / 2, icon_type="square",
                      custom_icon_data="data:image/png;base64,AAAA"),
    ])
    relay, custom = build_scene(config).stations
    assert relay.icon == StationIcon.SATELLITE
    assert relay.position == pytest.approx((150.0, 0.0))
    assert relay.label_text == "Relay"
    assert custom.icon == StationIcon.CUSTOM
    assert custom.position == pytest.approx((0.0, 200.0))
    assert custom.label_text == "Station"


def test_zero_planets():
    """An empty system still builds."""
    scene = build_scene(SystemConfig(num_planets=0))
    assert scene.planets == ()
    assert scene.num_planets == 0
    assert len(scene.stars) == 1
