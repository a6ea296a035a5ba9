"""Raster renderer using matplotlib's Agg canvas."""

import logging
import math
from typing import Mapping, Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.colors import to_rgba
from matplotlib.figure import Figure
from matplotlib.lines import Line2D
from matplotlib import patches

from star_system.render.base import Renderer, check_surface
from star_system.render.instructions import (
    Circle,
    Ellipse,
    GradientStop,
    ImageRef,
    Line,
    Polygon,
    RadialGradientCircle,
    Rect,
    Text,
    build_instructions,
)
from star_system.scene.models import Scene

logger = logging.getLogger(__name__)

# Power of two so width / DPI * DPI is exact and the canvas is pixel-exact
DPI = 64
PX_TO_PT = 72.0 / DPI
RASTER_FONT = "sans-serif"


def _rgba(color: Optional[str], opacity: float = 1.0):
    if color is None:
        return "none"
    return to_rgba(color, max(0.0, min(1.0, opacity)))


def pointer_to_polar(x: float, y: float, width: int, height: int) -> Tuple[float, float]:
    """Map a surface pixel to (radius, angle) around the surface centre.

    Inverse of the renderer's origin translation; used to place stations.
    """
    dx = x - width / 2
    dy = y - height / 2
    return math.hypot(dx, dy), math.atan2(dy, dx)


def show_pixels(pixels: np.ndarray, title: str = "Star System"):
    """Show an (H, W, 4) pixel array 1:1 in a pyplot window."""
    height, width = pixels.shape[:2]
    fig = plt.figure(figsize=(width / DPI, height / DPI), dpi=DPI)
    if fig.canvas.manager is not None:
        fig.canvas.manager.set_window_title(title)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.imshow(pixels, interpolation="nearest")
    ax.set_axis_off()
    plt.show()


def gradient_pixels(grad: RadialGradientCircle, width: int, height: int):
    """Rasterise a gradient disc.

    Returns:
        (extent, rgba) with rgba a float (h, w, 4) array covering the disc's
        clipped bounding box, or ``None`` when the disc is off-surface.
    """
    x0 = max(0, int(math.floor(grad.cx - grad.r)))
    x1 = min(width, int(math.ceil(grad.cx + grad.r)))
    y0 = max(0, int(math.floor(grad.cy - grad.r)))
    y1 = min(height, int(math.ceil(grad.cy + grad.r)))
    if x1 <= x0 or y1 <= y0 or grad.r <= 0:
        return None

    xs = np.arange(x0, x1) + 0.5
    ys = np.arange(y0, y1) + 0.5
    px, py = np.meshgrid(xs, ys)
    fx, fy = grad.focus

    ex, ey = grad.cx - fx, grad.cy - fy
    a = ex * ex + ey * ey - grad.r * grad.r
    dx, dy = px - fx, py - fy
    if abs(a) < 1e-9 or (ex == 0 and ey == 0):
        t = np.hypot(dx, dy) / grad.r
    else:
        # Smallest circle of the focal->edge family passing through each pixel
        de = dx * ex + dy * ey
        dd = dx * dx + dy * dy
        t = (de - np.sqrt(np.maximum(de * de - a * dd, 0.0))) / a
    t = np.clip(t, 0.0, 1.0)

    stops: Sequence[GradientStop] = grad.stops
    offsets = [s.offset for s in stops]
    colors = np.array([to_rgba(s.color, s.opacity) for s in stops])
    rgba = np.empty(t.shape + (4,))
    for channel in range(4):
        rgba[..., channel] = np.interp(t, offsets, colors[:, channel])

    inside = np.hypot(px - grad.cx, py - grad.cy) <= grad.r
    rgba[..., 3] = np.where(inside, rgba[..., 3], 0.0)
    return (x0, x1, y1, y0), rgba


class RasterRenderer(Renderer):
    """Draws scenes to an RGBA pixel array."""

    def __init__(self, font_family: str = RASTER_FONT):
        """Initialize raster renderer.

        Args:
            font_family: matplotlib font family for labels and the HUD
        """
        self.font_family = font_family
        self._images: Mapping[str, np.ndarray] = {}
        self._size = (0, 0)

    def _new_axes(self, width: int, height: int):
        fig = Figure(figsize=(width / DPI, height / DPI), dpi=DPI)
        canvas = FigureCanvasAgg(fig)
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_autoscale_on(False)
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)  # y grows downwards, as on screen
        ax.set_axis_off()
        return fig, canvas, ax

    def render(self, scene: Scene, width: int, height: int,
               images: Optional[Mapping[str, np.ndarray]] = None) -> np.ndarray:
        """Render a scene to pixels.

        Args:
            scene: Scene to draw
            width: Surface width in pixels
            height: Surface height in pixels
            images: Decoded custom station icons keyed by data URL

        Returns:
            Image array (height, width, 4) uint8
        """
        check_surface(width, height)
        fig, canvas, ax = self._new_axes(width, height)
        self._images = images or {}
        self._size = (width, height)
        for zorder, instruction in enumerate(build_instructions(scene, width, height)):
            self.dispatch(instruction, ax, zorder)
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        canvas.draw()
        return np.asarray(canvas.buffer_rgba()).copy()

    def pointer_to_polar(self, x: float, y: float, width: int, height: int) -> Tuple[float, float]:
        return pointer_to_polar(x, y, width, height)

    def show(self, scene: Scene, width: int, height: int,
             images: Optional[Mapping[str, np.ndarray]] = None):
        """Display a rendered scene in a pyplot window (blocking)."""
        show_pixels(self.render(scene, width, height, images))

    def _draw_rect(self, r: Rect, ax, zorder: int):
        face = _rgba(r.fill, r.fill_opacity)
        edge = _rgba(r.stroke)
        lw = r.stroke_width * PX_TO_PT if r.stroke else 0.0
        if r.corner_radius > 0:
            patch = patches.FancyBboxPatch(
                (r.x, r.y), r.w, r.h,
                boxstyle=f"round,pad=0,rounding_size={r.corner_radius}",
                facecolor=face, edgecolor=edge, linewidth=lw,
            )
        else:
            patch = patches.Rectangle(
                (r.x, r.y), r.w, r.h, angle=r.rotation, rotation_point="center",
                facecolor=face, edgecolor=edge, linewidth=lw,
            )
        patch.set_zorder(zorder)
        ax.add_patch(patch)

    def _draw_circle(self, c: Circle, ax, zorder: int):
        patch = patches.Circle(
            (c.cx, c.cy), c.r,
            facecolor=_rgba(c.fill, c.fill_opacity),
            edgecolor=_rgba(c.stroke, c.stroke_opacity),
            linewidth=c.stroke_width * PX_TO_PT if c.stroke else 0.0,
            zorder=zorder,
        )
        ax.add_patch(patch)

    def _draw_ellipse(self, e: Ellipse, ax, zorder: int):
        # Positive angles turn clockwise on screen because the y axis is inverted
        patch = patches.Ellipse(
            (e.cx, e.cy), e.rx * 2, e.ry * 2, angle=e.angle_deg,
            facecolor="none", edgecolor=_rgba(e.stroke, e.opacity),
            linewidth=e.stroke_width * PX_TO_PT, zorder=zorder,
        )
        ax.add_patch(patch)

    def _draw_polygon(self, p: Polygon, ax, zorder: int):
        patch = patches.Polygon(
            p.points, closed=True,
            facecolor=_rgba(p.fill), edgecolor=_rgba(p.stroke),
            linewidth=p.stroke_width * PX_TO_PT, zorder=zorder,
        )
        ax.add_patch(patch)

    def _draw_line(self, line: Line, ax, zorder: int):
        ax.add_line(Line2D(
            [line.x1, line.x2], [line.y1, line.y2],
            color=_rgba(line.stroke, line.stroke_opacity),
            linewidth=line.stroke_width * PX_TO_PT,
            solid_capstyle="butt",
            zorder=zorder,
        ))

    def _draw_gradient(self, g: RadialGradientCircle, ax, zorder: int):
        result = gradient_pixels(g, *self._size)
        if result is None:
            return
        extent, rgba = result
        ax.imshow(rgba, extent=extent, origin="upper", interpolation="nearest",
                  aspect="auto", zorder=zorder)

    def _draw_image(self, img: ImageRef, ax, zorder: int):
        pixels = self._images.get(img.data)
        if pixels is None:
            logger.warning("Custom station icon not resolved; skipping it")
            return
        ax.imshow(pixels, extent=(img.x, img.x + img.w, img.y + img.h, img.y),
                  origin="upper", interpolation="bilinear", aspect="auto", zorder=zorder)

    def _draw_text(self, t: Text, ax, zorder: int):
        ax.text(t.x, t.y, t.text, fontsize=t.size * PX_TO_PT, family=self.font_family,
                color=_rgba(t.color, t.opacity), ha="left", va="center", zorder=zorder)

    handlers = {
        Rect: _draw_rect,
        Circle: _draw_circle,
        Ellipse: _draw_ellipse,
        Polygon: _draw_polygon,
        Line: _draw_line,
        RadialGradientCircle: _draw_gradient,
        ImageRef: _draw_image,
        Text: _draw_text,
    }
