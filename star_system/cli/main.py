"""CLI main entry point."""

import argparse
import logging
import sys

from star_system.errors import StarSystemError
from star_system.io.image_exporter import (
    EXPORT_PRESETS,
    export_file_name,
    resolve_resolution,
    save_svg,
)
from star_system.io.snapshot import load_snapshot, save_snapshot
from star_system.render.manager import RenderManager
from star_system.render.raster import show_pixels
from star_system.render.vector import VectorRenderer
from star_system.scene.builder import build_scene
from star_system.scene.models import StarType
from star_system.utils.config import StationConfig, SystemConfig, load_config
from star_system.utils.reproducibility import random_seed


def build_config(args) -> SystemConfig:
    """Assemble the configuration from --config, --import and flag overrides."""
    config = load_config(args.config) if args.config else SystemConfig()
    if args.import_path:
        config = load_snapshot(args.import_path, base=config)
        print(f"Imported snapshot {args.import_path}")

    updates = {}
    if args.random_seed:
        updates['seed'] = random_seed()
    elif args.seed is not None:
        updates['seed'] = args.seed
    if args.planets is not None:
        updates['num_planets'] = args.planets
    if args.stars:
        updates['stars'] = args.stars
    if args.no_hud:
        updates['show_hud'] = False
    if updates:
        data = config.to_dict()
        data.update(updates)
        config = SystemConfig.from_dict(data)
    return config


def place_station(config: SystemConfig, manager: RenderManager, index: int,
                  x: float, y: float, width: int, height: int) -> SystemConfig:
    """Place station ``index`` at a surface pixel, adding stations as needed."""
    if index < 0:
        raise ValueError(f"Station index must be >= 0, got {index}")
    if index >= len(config.stations):
        data = config.to_dict()
        config = SystemConfig.from_dict(data)
        for i in range(len(config.stations), index + 1):
            config.stations.append(StationConfig.default(i))
    return manager.place_station(config, index, x, y, width, height)


def run(args):
    """Generate, render and export a star system."""
    config = build_config(args)
    manager = RenderManager(mode=args.mode)
    try:
        if args.place_station:
            index, x, y = args.place_station
            config = place_station(config, manager, int(index), x, y, args.width, args.height)
            station = config.stations[int(index)]
            print(f"Station {int(index)} placed at radius {station.radius:.1f}, angle {station.angle:.3f} rad")

        scene = build_scene(config)
        print(f"Seed {config.seed}: {scene.num_planets} planets, {len(scene.stars)} star(s), "
              f"{len(scene.belts)} belt(s), {len(scene.stations)} station(s)")
        for planet in scene.planets:
            ring = " ringed" if planet.ring is not None else ""
            print(f"  {planet.index + 1}. {planet.name}: orbit {planet.orbit_radius:.1f}, "
                  f"size {planet.size:g}, {planet.moon_count} moon(s){ring}")

        if args.resolution:
            out_size = resolve_resolution(args.resolution)
            suffix_size = out_size
        else:
            out_size = (args.width, args.height)
            suffix_size = None

        if args.export_png:
            path = (args.output + ".png") if args.output else export_file_name(
                config.seed, scene.num_planets, "png", suffix_size)
            future = manager.export_png(scene, out_size[0], out_size[1],
                                        source_size=(args.width, args.height), output_path=path)
            if future is not None:
                future.result()
                print(f"Exported PNG: {path} ({out_size[0]}x{out_size[1]})")

        if args.export_svg:
            path = (args.output + ".svg") if args.output else export_file_name(
                config.seed, scene.num_planets, "svg")
            save_svg(path, manager.export_svg(scene, args.width, args.height))
            print(f"Exported SVG: {path}")

        if args.export_json:
            path = (args.output + ".json") if args.output else export_file_name(
                config.seed, scene.num_planets, "json")
            save_snapshot(config, path, scene)
            print(f"Exported snapshot: {path}")

        if args.show:
            if args.mode == "vector":
                vector = VectorRenderer()
                document = manager.render(scene, args.width, args.height)
                show_pixels(vector.export_raster(document, args.width, args.height))
            else:
                show_pixels(manager.render(scene, args.width, args.height))
    finally:
        manager.close()


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Star System Generator - seeded star system maps")

    # Generation
    parser.add_argument('--seed', type=int, default=None,
                       help='System seed (default: from config, else 123456789)')
    parser.add_argument('--random-seed', action='store_true',
                       help='Pick a fresh random seed')
    parser.add_argument('--planets', type=int, default=None,
                       help='Number of planets (0-20)')
    parser.add_argument('--stars', type=str, nargs='+', default=None,
                       choices=[t.value for t in StarType],
                       help='Star types, up to three')
    parser.add_argument('--config', type=str, default=None,
                       help='JSON/YAML configuration file')
    parser.add_argument('--import', dest='import_path', type=str, default=None,
                       help='Snapshot (.json) to import')
    parser.add_argument('--place-station', nargs=3, type=float, default=None,
                       metavar=('INDEX', 'X', 'Y'),
                       help='Place station INDEX at surface pixel (X, Y)')

    # Rendering
    parser.add_argument('--mode', type=str, choices=['raster', 'vector'], default='raster',
                       help='Renderer (default: raster)')
    parser.add_argument('--width', type=int, default=1200,
                       help='Surface width in pixels')
    parser.add_argument('--height', type=int, default=800,
                       help='Surface height in pixels')
    parser.add_argument('--no-hud', action='store_true',
                       help='Hide the planets/seed caption')
    parser.add_argument('--show', action='store_true',
                       help='Show the rendered system in a window')

    # Export
    parser.add_argument('--resolution', type=str, default=None, choices=list(EXPORT_PRESETS),
                       help='PNG export preset (default: surface size)')
    parser.add_argument('--export-png', action='store_true',
                       help='Export PNG image')
    parser.add_argument('--export-svg', action='store_true',
                       help='Export SVG document')
    parser.add_argument('--export-json', action='store_true',
                       help='Export JSON snapshot')
    parser.add_argument('--output', type=str, default=None,
                       help='Output base name (default: star-system_<seed>_<planets>)')
    parser.add_argument('--verbose', action='store_true',
                       help='Log progress details')

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        run(args)
    except (StarSystemError, ValueError, OverflowError, IndexError, OSError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
