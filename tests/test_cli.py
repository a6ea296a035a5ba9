"""Tests for the command-line interface."""

import json
import sys

import pytest

from star_system.cli.main import main


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["star-system", *argv])
    main()


def test_export_json_and_svg(monkeypatch, tmp_path, capsys):
    """The CLI writes snapshot and SVG files under the given base name."""
    base = str(tmp_path / "system")
    _run(monkeypatch, "--seed", "42", "--planets", "4", "--stars", "yellow", "red-dwarf",
         "--width", "400", "--height", "300", "--export-json", "--export-svg", "--output", base)

    with open(base + ".json") as f:
        doc = json.load(f)
    assert doc["seed"] == 42
    assert len(doc["planets"]) == 4
    assert doc["settings"]["stars"] == ["yellow", "red-dwarf"]

    with open(base + ".svg", encoding="utf-8") as f:
        assert f.read().startswith('<?xml version="1.0" encoding="UTF-8"?>')

    out = capsys.readouterr().out
    assert "Seed 42: 4 planets" in out


def test_import_and_place_station(monkeypatch, tmp_path):
    """Importing a snapshot and placing a station keeps the imported seed."""
    source = tmp_path / "in.json"
    source.write_text(json.dumps({"seed": 99, "planets": []}))
    base = str(tmp_path / "out")
    _run(monkeypatch, "--import", str(source), "--place-station", "1", "350", "150",
         "--width", "400", "--height", "300", "--export-json", "--output", base)

    with open(base + ".json") as f:
        doc = json.load(f)
    assert doc["seed"] == 99
    assert doc["planets"] == []
    stations = doc["settings"]["stations"]
    assert len(stations) == 2
    assert stations[1]["radius"] == pytest.approx(150)
    assert stations[1]["angle"] == pytest.approx(0)


def test_bad_import_exits(monkeypatch, tmp_path, capsys):
    """A malformed snapshot is reported and exits non-zero."""
    source = tmp_path / "bad.json"
    source.write_text(json.dumps({"seed": "nope"}))
    with pytest.raises(SystemExit) as excinfo:
        _run(monkeypatch, "--import", str(source))
    assert excinfo.value.code == 1
    assert "Error" in capsys.readouterr().out
