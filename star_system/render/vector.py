"""Vector (SVG) renderer and SVG rasterisation."""

import io
import logging
import re
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Mapping, Optional
from xml.sax.saxutils import escape

import numpy as np
from PIL import Image

from star_system.errors import ExportError
from star_system.render.base import Renderer, check_surface
from star_system.render.instructions import (
    BACKGROUND,
    Circle,
    Ellipse,
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

XML_PROLOG = '<?xml version="1.0" encoding="UTF-8"?>'
SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

_SVG_OPEN = re.compile(r"<svg\b[^>]*>", re.S)
_ATTR = r'\s{name}="[^"]*"'


def _num(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _attr(value: str) -> str:
    return escape(str(value), {'"': "&quot;"})


def _paint(kind: str, color: Optional[str], opacity: float = 1.0) -> str:
    if color is None:
        return f' {kind}="none"'
    out = f' {kind}="{_attr(color)}"'
    if opacity < 1.0:
        out += f' {kind}-opacity="{_num(max(0.0, opacity))}"'
    return out


class _Document:
    """Element and gradient buffers for one SVG document."""

    def __init__(self):
        self.defs: List[str] = []
        self.body: List[str] = []

    def gradient_id(self) -> str:
        return f"grad{len(self.defs)}"


class VectorRenderer(Renderer):
    """Renders scenes to SVG markup."""

    def __init__(self):
        self._images: Optional[Mapping[str, np.ndarray]] = None
        self._executor: Optional[ThreadPoolExecutor] = None

    def render(self, scene: Scene, width: int, height: int,
               images: Optional[Mapping[str, np.ndarray]] = None) -> str:
        """Render a scene as SVG markup without an XML prolog.

        Args:
            scene: Scene to draw
            width: Surface width in pixels (also the viewBox width)
            height: Surface height in pixels
            images: When given, custom icons missing from it are left out

        Returns:
            SVG document string
        """
        check_surface(width, height)
        self._images = images
        doc = _Document()
        for zorder, instruction in enumerate(build_instructions(scene, width, height)):
            self.dispatch(instruction, doc, zorder)

        parts = [
            f'<svg xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}" width="{width}" height="{height}" '
            f'viewBox="0 0 {width} {height}">'
        ]
        if doc.defs:
            parts.append("<defs>")
            parts.extend(doc.defs)
            parts.append("</defs>")
        parts.extend(doc.body)
        parts.append("</svg>")
        return "\n".join(parts)

    def export(self, scene: Scene, width: int, height: int,
               images: Optional[Mapping[str, np.ndarray]] = None) -> str:
        """Render a standalone SVG file body, XML prolog included."""
        return XML_PROLOG + "\n" + self.render(scene, width, height, images)

    def export_raster(self, document: str, width: int, height: int) -> np.ndarray:
        """Rasterise an SVG document to (height, width, 4) uint8 pixels.

        The document keeps its viewBox, so a target of another size scales
        the drawing uniformly and centres it; uncovered margins get the
        background colour.

        Raises:
            RenderTargetError: Invalid target size
            ExportError: The document could not be rasterised
        """
        check_surface(width, height)
        resized = self._resize_document(document, width, height)
        try:
            import cairosvg
        except ImportError:
            raise ImportError("PNG export of SVG requires cairosvg. Install with: pip install cairosvg")
        except OSError as exc:
            # cairosvg imports fine but the native cairo library is missing
            raise ExportError(f"Cairo library unavailable: {exc}") from exc

        try:
            png = cairosvg.svg2png(bytestring=resized.encode("utf-8"),
                                   output_width=width, output_height=height)
            with Image.open(io.BytesIO(png)) as drawn:
                layer = drawn.convert("RGBA")
        except Exception as exc:
            raise ExportError(f"SVG rasterisation failed: {exc}") from exc

        if layer.size != (width, height):
            layer = layer.resize((width, height))
        canvas = Image.new("RGBA", (width, height), BACKGROUND)
        canvas.alpha_composite(layer)
        return np.asarray(canvas).copy()

    def export_raster_async(self, document: str, width: int, height: int) -> Future:
        """Run :meth:`export_raster` on a worker thread."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="svg-raster")
        return self._executor.submit(self.export_raster, document, width, height)

    @staticmethod
    def _resize_document(document: str, width: int, height: int) -> str:
        match = _SVG_OPEN.search(document)
        if match is None:
            raise ExportError("Document has no <svg> element")
        tag = match.group(0)
        for name, value in (("width", width), ("height", height), ("preserveAspectRatio", "xMidYMid meet")):
            pattern = re.compile(_ATTR.format(name=name))
            if pattern.search(tag):
                tag = pattern.sub(f' {name}="{value}"', tag, count=1)
            else:
                tag = tag[:-1].rstrip("/") + f' {name}="{value}">'
        return document[:match.start()] + tag + document[match.end():]

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _svg_rect(self, r: Rect, doc: _Document, zorder: int):
        out = f'<rect x="{_num(r.x)}" y="{_num(r.y)}" width="{_num(r.w)}" height="{_num(r.h)}"'
        if r.corner_radius > 0:
            out += f' rx="{_num(r.corner_radius)}"'
        out += _paint("fill", r.fill, r.fill_opacity)
        if r.stroke:
            out += _paint("stroke", r.stroke) + f' stroke-width="{_num(r.stroke_width)}"'
        if r.rotation:
            out += (f' transform="rotate({_num(r.rotation)} {_num(r.x + r.w / 2)} '
                    f'{_num(r.y + r.h / 2)})"')
        doc.body.append(out + "/>")

    def _svg_circle(self, c: Circle, doc: _Document, zorder: int):
        out = f'<circle cx="{_num(c.cx)}" cy="{_num(c.cy)}" r="{_num(c.r)}"'
        out += _paint("fill", c.fill, c.fill_opacity)
        if c.stroke:
            out += _paint("stroke", c.stroke, c.stroke_opacity) + f' stroke-width="{_num(c.stroke_width)}"'
        doc.body.append(out + "/>")

    def _svg_ellipse(self, e: Ellipse, doc: _Document, zorder: int):
        doc.body.append(
            f'<ellipse cx="{_num(e.cx)}" cy="{_num(e.cy)}" rx="{_num(e.rx)}" ry="{_num(e.ry)}" '
            f'fill="none" stroke="{_attr(e.stroke)}" stroke-width="{_num(e.stroke_width)}" '
            f'opacity="{_num(e.opacity)}" '
            f'transform="rotate({_num(e.angle_deg)} {_num(e.cx)} {_num(e.cy)})"/>'
        )

    def _svg_polygon(self, p: Polygon, doc: _Document, zorder: int):
        points = " ".join(f"{_num(x)},{_num(y)}" for x, y in p.points)
        doc.body.append(
            f'<polygon points="{points}"' + _paint("fill", p.fill)
            + _paint("stroke", p.stroke) + f' stroke-width="{_num(p.stroke_width)}"/>'
        )

    def _svg_line(self, line: Line, doc: _Document, zorder: int):
        doc.body.append(
            f'<line x1="{_num(line.x1)}" y1="{_num(line.y1)}" x2="{_num(line.x2)}" y2="{_num(line.y2)}"'
            + _paint("stroke", line.stroke, line.stroke_opacity) + f' stroke-width="{_num(line.stroke_width)}"/>'
        )

    def _svg_gradient(self, g: RadialGradientCircle, doc: _Document, zorder: int):
        grad_id = doc.gradient_id()
        fx, fy = g.focus
        stops = "".join(
            f'<stop offset="{_num(s.offset)}" stop-color="{_attr(s.color)}" '
            f'stop-opacity="{_num(s.opacity)}"/>'
            for s in g.stops
        )
        doc.defs.append(
            f'<radialGradient id="{grad_id}" gradientUnits="userSpaceOnUse" cx="{_num(g.cx)}" '
            f'cy="{_num(g.cy)}" r="{_num(g.r)}" fx="{_num(fx)}" fy="{_num(fy)}">{stops}</radialGradient>'
        )
        doc.body.append(f'<circle cx="{_num(g.cx)}" cy="{_num(g.cy)}" r="{_num(g.r)}" fill="url(#{grad_id})"/>')

    def _svg_image(self, img: ImageRef, doc: _Document, zorder: int):
        if self._images is not None and img.data not in self._images:
            logger.warning("Custom station icon not resolved; leaving it out of the SVG")
            return
        doc.body.append(
            f'<image x="{_num(img.x)}" y="{_num(img.y)}" width="{_num(img.w)}" height="{_num(img.h)}" '
            f'preserveAspectRatio="none" xlink:href="{_attr(img.data)}"/>'
        )

    def _svg_text(self, t: Text, doc: _Document, zorder: int):
        doc.body.append(
            f'<text x="{_num(t.x)}" y="{_num(t.y)}" font-size="{_num(t.size)}" '
            f'font-family="{_attr(t.family)}" dominant-baseline="middle"'
            + _paint("fill", t.color, t.opacity) + f">{escape(t.text)}</text>"
        )

    handlers = {
        Rect: _svg_rect,
        Circle: _svg_circle,
        Ellipse: _svg_ellipse,
        Polygon: _svg_polygon,
        Line: _svg_line,
        RadialGradientCircle: _svg_gradient,
        ImageRef: _svg_image,
        Text: _svg_text,
    }
