"""Tests for snapshot export/import."""

import json
import math
import os
import tempfile

import pytest

from star_system.errors import SnapshotError
from star_system.io.snapshot import decode_snapshot, encode_snapshot, load_snapshot, save_snapshot
from star_system.render.instructions import build_instructions
from star_system.render.manager import RenderManager
from star_system.scene.builder import build_scene
from star_system.scene.models import StationIcon
from star_system.utils.config import (
    BeltConfig,
    LabelStyle,
    MoonSettings,
    StationConfig,
    SystemConfig,
)


def _edited_config() -> SystemConfig:
    config = SystemConfig(
        seed=8675309,
        num_planets=7,
        stars=["red-dwarf", "neutron"],
        moons=MoonSettings(min_size=1.5, max_size=2.5, orbit_min=8, orbit_max=18),
        labels=LabelStyle(size=14, color="#ffcc00", position="bottom-right", background=True),
        belts=[BeltConfig(density=0.1), BeltConfig(type="anchored", gap_index=2, width=30, density=0.2)],
        stations=[StationConfig(name="Gate", radius=260, angle=1.2, icon_type="cross", color="#00ffaa")],
    )
    config = config.with_override(0, name="Home", size=11, moons=4)
    config = config.with_override(2, rings={"gap": 3, "width": 16, "color": "#a0a0a0",
                                            "opacity": 0.5, "flatten": 0.4, "angle_deg": 60})
    config = config.with_override(4, color="#336699", show_label=False)
    return config


def test_encode_contents():
    """Snapshots carry resolved planet values and global settings."""
    config = _edited_config()
    scene = build_scene(config)
    doc = encode_snapshot(config, scene)

    assert doc["seed"] == 8675309
    assert len(doc["planets"]) == 7
    home = doc["planets"][0]
    assert home["name"] == "Home"
    assert home["size"] == 11.0
    assert home["moonsCount"] == 4
    assert len(home["moons"]) == 4
    x, y = scene.planets[0].position
    assert home["position"] == {"x": x, "y": y}
    assert doc["planets"][2]["rings"]["enabled"] is True
    assert doc["planets"][2]["rings"]["angleDeg"] == 60.0
    assert doc["planets"][4]["showLabel"] is False

    settings = doc["settings"]
    assert settings["labelPosition"] == "bottom-right"
    assert settings["stars"] == ["red-dwarf", "neutron"]
    assert settings["belts"][1] == {"type": "anchored", "width": 30.0, "density": 0.2, "gapIndex": 2}
    assert settings["stations"][0]["iconType"] == "cross"
    # Must survive a JSON round trip
    json.dumps(doc)


def test_round_trip_reproduces_scene():
    """Export then import rebuilds exactly the same scene."""
    config = _edited_config()
    doc = json.loads(json.dumps(encode_snapshot(config)))
    restored = decode_snapshot(doc)
    assert build_scene(restored) == build_scene(config)


def test_round_trip_file():
    """save_snapshot/load_snapshot round trip through a JSON file."""
    config = _edited_config()

    with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
        temp_path = f.name

    try:
        save_snapshot(config, temp_path)
        restored = load_snapshot(temp_path)
        assert build_scene(restored) == build_scene(config)
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)


def test_removed_ring_stays_removed():
    """A planet whose ring was turned off has no ring after import."""
    config = SystemConfig(seed=12, num_planets=3).with_override(1, rings={"enabled": False})
    doc = encode_snapshot(config)
    assert doc["planets"][1]["rings"]["enabled"] is False
    assert build_scene(decode_snapshot(doc)).planets[1].ring is None


def test_import_empty_planet_list():
    """Importing seed 42 with no planets resets the count and clears overrides."""
    base = _edited_config()
    restored = decode_snapshot({"seed": 42, "planets": []}, base)
    assert restored.seed == 42
    assert restored.num_planets == 0
    assert restored.planet_overrides == {}
    assert build_scene(restored).planets == ()
    # The base config is untouched
    assert base.num_planets == 7
    assert 0 in base.planet_overrides


def test_placed_station_survives_round_trip():
    """A station placed by pointer renders at the same spot after export/import."""
    width, height = 800, 600
    config = SystemConfig(seed=5, num_planets=3,
                          stations=[StationConfig(icon_type="triangle", color="#ff00ff")])
    manager = RenderManager()
    try:
        config = manager.place_station(config, 0, width / 2 + 150, height / 2, width, height)
    finally:
        manager.close()
    station = config.stations[0]
    assert station.radius == pytest.approx(150)
    assert station.angle == pytest.approx(0)

    restored = decode_snapshot(json.loads(json.dumps(encode_snapshot(config))))
    before = build_scene(config)
    after = build_scene(restored)
    assert after.stations == before.stations
    placed = after.stations[0]
    assert placed.position == pytest.approx((150.0, 0.0))
    assert placed.icon == StationIcon.TRIANGLE
    assert placed.color == "#ff00ff"
    assert build_instructions(after, width, height) == build_instructions(before, width, height)


def test_partial_document_keeps_base_values():
    """Fields the document omits keep the base config's values."""
    base = _edited_config()
    restored = decode_snapshot({"settings": {"labelSize": 20}}, base)
    assert restored.seed == base.seed
    assert restored.num_planets == base.num_planets
    assert restored.planet_overrides == base.planet_overrides
    assert restored.labels.size == 20.0
    assert restored.labels.color == "#ffcc00"
    assert restored.stations == base.stations


def test_ring_field_defaults():
    """Ring fields missing from the document use the documented defaults."""
    config = decode_snapshot({"seed": 1, "planets": [{"rings": {"enabled": True}}]})
    ring = config.planet_overrides[0].rings
    assert (ring.gap, ring.width, ring.color, ring.opacity, ring.flatten, ring.angle_deg) == \
        (2.0, 10.0, "#c9b18b", 0.55, 0.6, 45.0)


def test_legacy_station_icon_key():
    """Station image payloads under the older key are accepted."""
    doc = {"seed": 1, "settings": {"stations": [
        {"name": "Old", "radius": 100, "angle": 0, "iconType": "custom",
         "customIconDataUrl": "data:image/png;base64,AAAA"},
    ]}}
    station = decode_snapshot(doc).stations[0]
    assert station.custom_icon_data == "data:image/png;base64,AAAA"
    assert station.show_label is True


@pytest.mark.parametrize("doc", [
    [],
    "seed",
    None,
    {"seed": "42"},
    {"seed": 4.2},
    {"seed": True},
    {"planets": {"0": {}}},
    {"settings": []},
    {"planets": ["not a planet"]},
    {"planets": [{"rings": "wide"}]},
    {"settings": {"belts": [3]}},
    {"settings": {"stations": ["x"]}},
])
def test_malformed_documents(doc):
    """Malformed documents raise SnapshotError and leave the base untouched."""
    base = _edited_config()
    snapshot = base.to_dict()
    with pytest.raises(SnapshotError):
        decode_snapshot(doc, base)
    assert base.to_dict() == snapshot


def test_snapshot_error_is_value_error():
    """SnapshotError can be caught as ValueError."""
    with pytest.raises(ValueError):
        decode_snapshot({"seed": "nope"})


def test_load_invalid_json():
    """Unparseable files raise SnapshotError."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
        f.write("{not json")
        temp_path = f.name

    try:
        with pytest.raises(SnapshotError):
            load_snapshot(temp_path)
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)


def test_save_rejects_other_formats():
    """Snapshots are JSON only."""
    with pytest.raises(ValueError):
        save_snapshot(SystemConfig(), "system.npz")


def test_moon_positions_exported():
    """Exported moon positions sit planet size + orbit away from the planet."""
    config = SystemConfig(seed=77, num_planets=2).with_override(1, moons=3)
    planet = encode_snapshot(config)["planets"][1]
    px, py = planet["position"]["x"], planet["position"]["y"]
    for moon in planet["moons"]:
        mx, my = moon["position"]["x"], moon["position"]["y"]
        assert math.hypot(mx - px, my - py) == pytest.approx(planet["size"] + moon["orbit"])


def test_invalid_colors_fall_back_and_render():
    """Unparseable colours are replaced, so an imported snapshot always renders."""
    doc = {"seed": 1, "planets": [
        {"color": "not-a-color", "rings": {"enabled": True, "color": "plaid"}},
        {"color": 12},
    ], "settings": {
        "labelColor": "loud",
        "stations": [{"name": "S", "radius": 90, "angle": 0, "color": "#zzzzzz"}],
    }}
    config = decode_snapshot(doc)
    assert config.planet_overrides[0].color is None
    assert config.planet_overrides[0].rings.color == "#c9b18b"
    assert 1 not in config.planet_overrides
    assert config.labels.color == "#ffffff"
    assert config.stations[0].color == "#FFD54F"

    scene = build_scene(config)
    assert scene.planets[0].color == build_scene(SystemConfig(seed=1, num_planets=2)).planets[0].color
    manager = RenderManager()
    try:
        assert manager.render(scene, 200, 200).shape == (200, 200, 4)
        manager.set_mode("vector")
        assert "plaid" not in manager.render(scene, 200, 200)
    finally:
        manager.close()


def test_non_finite_numbers_use_defaults():
    """Infinity and NaN in numeric fields fall back instead of failing."""
    doc = json.loads(
        '{"seed": 1, "planets": [{"moonsCount": Infinity, "size": NaN,'
        ' "rings": {"enabled": true, "angleDeg": -Infinity}}],'
        ' "settings": {"labelSize": Infinity,'
        ' "belts": [{"type": "anchored", "gapIndex": Infinity, "width": NaN}],'
        ' "stations": [{"radius": Infinity, "angle": NaN}]}}'
    )
    config = decode_snapshot(doc)
    override = config.planet_overrides[0]
    assert override.moons is None
    assert override.size is None
    assert override.rings.angle_deg == 45.0
    assert config.labels.size == 12.0
    assert config.belts[0].gap_index is None
    assert config.belts[0].width == 80.0
    assert config.stations[0].radius == 140.0
    assert config.stations[0].angle == 0.0
    assert len(build_scene(config).planets) == 1


def test_oversized_integer_is_snapshot_error():
    """Numbers too large to convert are reported as malformed."""
    with pytest.raises(SnapshotError):
        decode_snapshot({"seed": 1, "planets": [{"size": 10 ** 400}]})


def test_planet_without_fields_has_no_override():
    """Planet entries carrying no values do not create overrides."""
    config = decode_snapshot({"seed": 3, "planets": [{}, {"showLabel": False}, {"position": {"x": 1, "y": 2}}]})
    assert config.num_planets == 3
    assert list(config.planet_overrides) == [1]
    assert config.planet_overrides[1].show_label is False
    planets = build_scene(config).planets
    assert [p.show_label for p in planets] == [True, False, True]
