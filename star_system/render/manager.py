"""Render manager for switching between raster and vector modes."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Literal, Optional, Tuple, Union

import numpy as np

from star_system.io.image_exporter import save_png
from star_system.render.base import Renderer
from star_system.render.raster import RasterRenderer, pointer_to_polar
from star_system.render.resources import IconLoader
from star_system.render.vector import VectorRenderer
from star_system.scene.models import Scene
from star_system.utils.config import SystemConfig

logger = logging.getLogger(__name__)

Mode = Literal["raster", "vector"]


class RenderManager:
    """Owns the active renderer, the icon cache and the export worker."""

    def __init__(self, mode: Mode = "raster", icon_loader: Optional[IconLoader] = None):
        """Initialize render manager.

        Args:
            mode: Rendering mode ('raster' or 'vector')
            icon_loader: Shared icon cache; a private one is created if omitted
        """
        self.mode = mode
        self.renderer: Optional[Renderer] = None
        self.icons = icon_loader or IconLoader()
        self._owns_icons = icon_loader is None
        self._export_lock = threading.Lock()
        self._exporting = False
        self._export_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="export")
        self._create_renderer()

    def _create_renderer(self):
        """Create appropriate renderer based on mode."""
        if self.renderer is not None:
            self.renderer.close()

        if self.mode == "raster":
            self.renderer = RasterRenderer()
        elif self.mode == "vector":
            self.renderer = VectorRenderer()
        else:
            raise ValueError(f"Unknown mode: {self.mode}")

    def set_mode(self, mode: Mode):
        """Switch rendering mode.

        Args:
            mode: New mode ('raster' or 'vector')
        """
        if mode != self.mode:
            self.mode = mode
            self._create_renderer()

    def resolve_icons(self, scene: Scene) -> Dict[str, np.ndarray]:
        """Decode every custom station icon before drawing starts."""
        return self.icons.resolve(s.custom_icon_data for s in scene.stations if s.custom_icon_data)

    def render(self, scene: Scene, width: int, height: int) -> Union[np.ndarray, str]:
        """Render with the active renderer (pixels or SVG markup)."""
        if self.renderer is None:
            raise RuntimeError("Renderer not initialized")
        return self.renderer.render(scene, width, height, self.resolve_icons(scene))

    def export_svg(self, scene: Scene, width: int, height: int) -> str:
        """SVG document with XML prolog, regardless of the active mode."""
        return VectorRenderer().export(scene, width, height, self.resolve_icons(scene))

    @property
    def exporting(self) -> bool:
        return self._exporting

    def export_png(self, scene: Scene, width: int, height: int,
                   source_size: Optional[Tuple[int, int]] = None,
                   output_path: Optional[str] = None) -> Optional[Future]:
        """Start a PNG export on the export worker.

        In raster mode the scene is drawn directly at the target size. In
        vector mode it is written as SVG at ``source_size`` (default: the
        target size) and that document is rasterised, so the drawing is
        scaled to fit.

        Args:
            scene: Scene to export
            width: Output width in pixels
            height: Output height in pixels
            source_size: Size of the on-screen surface (vector mode only)
            output_path: Optional .png path to write

        Returns:
            Future resolving to the (height, width, 4) pixels, or ``None``
            if another export is still running.
        """
        with self._export_lock:
            if self._exporting:
                logger.warning("Export already in progress; ignoring request")
                return None
            self._exporting = True
        try:
            return self._export_executor.submit(
                self._export_job, scene, width, height, source_size, output_path, self.mode)
        except RuntimeError:
            self._finish_export()
            raise

    def _export_job(self, scene, width, height, source_size, output_path, mode) -> np.ndarray:
        try:
            icons = self.resolve_icons(scene)
            if mode == "vector":
                src_w, src_h = source_size or (width, height)
                vector = VectorRenderer()
                document = vector.render(scene, src_w, src_h, icons)
                pixels = vector.export_raster(document, width, height)
            else:
                pixels = RasterRenderer().render(scene, width, height, icons)
            if output_path is not None:
                save_png(output_path, pixels)
                logger.info("Exported %dx%d PNG to %s", width, height, output_path)
            return pixels
        finally:
            self._finish_export()

    def _finish_export(self):
        with self._export_lock:
            self._exporting = False

    @staticmethod
    def pointer_to_polar(x: float, y: float, width: int, height: int) -> Tuple[float, float]:
        return pointer_to_polar(x, y, width, height)

    def place_station(self, config: SystemConfig, index: int, x: float, y: float,
                      width: int, height: int) -> SystemConfig:
        """Move station ``index`` to the surface point (x, y).

        Returns:
            New config; ``config`` itself is unchanged
        """
        radius, angle = pointer_to_polar(x, y, width, height)
        return config.with_station_at(index, radius, angle)

    def close(self):
        """Close renderer and worker threads."""
        self._export_executor.shutdown(wait=True)
        if self._owns_icons:
            self.icons.close()
        if self.renderer is not None:
            self.renderer.close()
            self.renderer = None
