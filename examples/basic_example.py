"""Basic example of generating and exporting a star system."""

from star_system import SystemConfig, build_scene
from star_system.io import export_file_name, save_png, save_snapshot
from star_system.render import RasterRenderer

def main():
    """Generate a six-planet system, tweak one planet and export it."""
    config = SystemConfig(seed=42, num_planets=6, stars=["yellow", "red-dwarf"])

    # Rename the third planet and give it a wide ring; the others are untouched
    config = config.with_override(2, name="Kepler", moons=3, rings={"width": 18, "angle_deg": 30})

    scene = build_scene(config)
    for planet in scene.planets:
        print(f"{planet.name}: orbit {planet.orbit_radius:.1f}, {planet.moon_count} moon(s)")

    pixels = RasterRenderer().render(scene, 1200, 800)
    png_path = export_file_name(config.seed, scene.num_planets, "png")
    save_png(png_path, pixels)
    print(f"Saved {png_path}")

    json_path = export_file_name(config.seed, scene.num_planets, "json")
    save_snapshot(config, json_path, scene)
    print(f"Saved {json_path}")

if __name__ == "__main__":
    main()
