"""Example rendering the same scene in both media."""

from star_system import SystemConfig, build_scene
from star_system.io import EXPORT_PRESETS, save_svg
from star_system.render.manager import RenderManager
from star_system.utils.config import BeltConfig, StationConfig

def main():
    """Render a busy system as SVG and export a 1080p PNG from the vector path."""
    config = SystemConfig(
        seed=2024,
        num_planets=7,
        stars=["blue-giant"],
        belts=[BeltConfig(type="anchored", gap_index=3, width=40, density=0.4)],
        stations=[
            StationConfig(name="Relay", radius=180, angle=0.8, icon_type="satellite"),
            StationConfig(name="Outpost", radius=320, angle=3.5, icon_type="triangle"),
        ],
    )
    config.labels.background = True
    scene = build_scene(config)

    manager = RenderManager(mode="vector")
    try:
        save_svg("render_example.svg", manager.export_svg(scene, 1200, 800))
        print("Saved render_example.svg")

        width, height = EXPORT_PRESETS["1080p"]
        future = manager.export_png(scene, width, height, source_size=(1200, 800),
                                    output_path="render_example_1080p.png")
        if future is not None:
            future.result()
            print("Saved render_example_1080p.png")
    finally:
        manager.close()

if __name__ == "__main__":
    main()
