"""Renderer-agnostic draw instructions.

A Scene is turned into one flat, back-to-front list of primitive shapes in
surface pixel coordinates. The raster and vector backends both interpret the
same list, so their geometry cannot drift apart.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union

from star_system.scene.models import (
    LabelAnchor,
    Planet,
    Scene,
    StarType,
    Station,
    StationIcon,
)
from star_system.utils.reproducibility import STARFIELD_SALT, SeededStream

BACKGROUND = "#0b1020"
STARFIELD_COUNT = 300
FONT_FAMILY = "ui-sans-serif,system-ui,-apple-system,Segoe UI,Roboto,sans-serif"
CHAR_WIDTH_FACTOR = 0.6  # Estimated glyph advance as a fraction of font size
LABEL_CLEARANCE = 10.0
HUD_FONT_SIZE = 12.0
STATION_STROKE = 1.5


@dataclass(frozen=True)
class GradientStop:
    offset: float  # 0..1 along the gradient radius
    color: str
    opacity: float


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float
    fill: Optional[str] = None
    fill_opacity: float = 1.0
    stroke: Optional[str] = None
    stroke_width: float = 1.0
    corner_radius: float = 0.0
    rotation: float = 0.0  # Degrees, about the rectangle centre


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: Optional[str] = None
    fill_opacity: float = 1.0
    stroke: Optional[str] = None
    stroke_opacity: float = 1.0
    stroke_width: float = 1.0


@dataclass(frozen=True)
class Ellipse:
    """Stroked ellipse rotated about its centre (planet rings)."""
    cx: float
    cy: float
    rx: float
    ry: float
    angle_deg: float
    stroke: str
    stroke_width: float
    opacity: float = 1.0


@dataclass(frozen=True)
class Polygon:
    points: Tuple[Tuple[float, float], ...]
    stroke: str
    stroke_width: float = 1.0
    fill: Optional[str] = None


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    stroke_opacity: float = 1.0
    stroke_width: float = 1.0


@dataclass(frozen=True)
class RadialGradientCircle:
    """Disc filled with a radial gradient.

    The gradient runs from the focal point (fx, fy) at offset 0 to the circle
    edge at offset 1, matching a two-circle canvas gradient with zero inner
    radius.
    """
    cx: float
    cy: float
    r: float
    stops: Tuple[GradientStop, ...]
    fx: Optional[float] = None
    fy: Optional[float] = None

    @property
    def focus(self) -> Tuple[float, float]:
        return (self.cx if self.fx is None else self.fx,
                self.cy if self.fy is None else self.fy)


@dataclass(frozen=True)
class ImageRef:
    x: float
    y: float
    w: float
    h: float
    data: str  # data: URL payload


@dataclass(frozen=True)
class Text:
    x: float  # Left edge
    y: float  # Vertical middle
    text: str
    size: float
    color: str
    opacity: float = 1.0
    family: str = FONT_FAMILY


Instruction = Union[Rect, Circle, Ellipse, Polygon, Line, RadialGradientCircle, ImageRef, Text]


def _glow(x, y, r, stops) -> RadialGradientCircle:
    return RadialGradientCircle(x, y, r, tuple(GradientStop(*s) for s in stops))


def _yellow(x, y):
    return [
        _glow(x, y, 120, [(0, "#FFEBAA", 0.95), (0.3, "#FFC850", 0.5), (1, "#FFC850", 0)]),
        Circle(x, y, 16, fill="#FFE082"),
    ]


def _red_dwarf(x, y):
    return [
        _glow(x, y, 90, [(0, "#FFB478", 0.95), (0.4, "#FF643C", 0.5), (1, "#FF5028", 0)]),
        Circle(x, y, 12, fill="#FF9966"),
    ]


def _blue_giant(x, y):
    return [
        _glow(x, y, 160, [(0, "#C8E6FF", 0.95), (0.3, "#78BEFF", 0.5), (1, "#78BEFF", 0)]),
        Circle(x, y, 20, fill="#80BFFF"),
    ]


def _neutron(x, y):
    return [
        _glow(x, y, 70, [(0, "#E6F5FF", 1.0), (0.4, "#B4DCFF", 0.5), (1, "#B4DCFF", 0)]),
        Circle(x, y, 6, fill="#EAF5FF"),
        Circle(x, y, 12, stroke="#DCF0FF", stroke_opacity=0.9, stroke_width=1),
    ]


def _black_hole(x, y):
    return [
        Circle(x, y, 28, stroke="#FFB450", stroke_opacity=0.6, stroke_width=12),  # accretion disk
        Circle(x, y, 36, stroke="#B478FF", stroke_opacity=0.4, stroke_width=6),
        Circle(x, y, 14, fill="#000000"),  # event horizon
    ]


STAR_RECIPES: Dict[StarType, Callable[[float, float], List[Instruction]]] = {
    StarType.YELLOW: _yellow,
    StarType.RED_DWARF: _red_dwarf,
    StarType.BLUE_GIANT: _blue_giant,
    StarType.NEUTRON: _neutron,
    StarType.BLACK_HOLE: _black_hole,
}


def _diamond(s: Station, x: float, y: float) -> List[Instruction]:
    half = s.size / 1.2
    return [Rect(x - half, y - half, half * 2, half * 2, stroke=s.color,
                 stroke_width=STATION_STROKE, rotation=45.0)]


def _triangle(s: Station, x: float, y: float) -> List[Instruction]:
    size = s.size
    points = ((x, y - size), (x + size, y + size), (x - size, y + size))
    return [Polygon(points, stroke=s.color, stroke_width=STATION_STROKE)]


def _square(s: Station, x: float, y: float) -> List[Instruction]:
    size = s.size
    return [Rect(x - size, y - size, size * 2, size * 2, stroke=s.color,
                 stroke_width=STATION_STROKE)]


def _cross(s: Station, x: float, y: float) -> List[Instruction]:
    size = s.size
    return [
        Line(x - size, y, x + size, y, stroke=s.color, stroke_width=STATION_STROKE),
        Line(x, y - size, x, y + size, stroke=s.color, stroke_width=STATION_STROKE),
    ]


def _satellite(s: Station, x: float, y: float) -> List[Instruction]:
    size = s.size
    panel = size * 0.8
    return [
        Circle(x, y, size * 0.5, fill=s.color),
        Rect(x + size * 0.7, y - size * 0.4, panel, panel, stroke=s.color, stroke_width=STATION_STROKE),
        Rect(x - size * 1.5, y - size * 0.4, panel, panel, stroke=s.color, stroke_width=STATION_STROKE),
    ]


def _custom(s: Station, x: float, y: float) -> List[Instruction]:
    if not s.custom_icon_data:
        return []
    return [ImageRef(x - s.size, y - s.size, s.size * 2, s.size * 2, s.custom_icon_data)]


STATION_SHAPES: Dict[StationIcon, Callable[[Station, float, float], List[Instruction]]] = {
    StationIcon.DIAMOND: _diamond,
    StationIcon.TRIANGLE: _triangle,
    StationIcon.SQUARE: _square,
    StationIcon.CROSS: _cross,
    StationIcon.SATELLITE: _satellite,
    StationIcon.CUSTOM: _custom,
}


def estimate_text_width(text: str, size: float) -> float:
    return len(text) * size * CHAR_WIDTH_FACTOR


@dataclass(frozen=True)
class LabelPlacement:
    anchor_x: float  # Object centre
    anchor_y: float
    x: float  # Text left edge
    y: float  # Text vertical middle
    width: float
    height: float
    text: str
    is_left: bool

    @property
    def leader_end(self) -> Tuple[float, float]:
        """Label edge nearest the object."""
        return (self.x + self.width if self.is_left else self.x, self.y)


def place_label(px: float, py: float, text: str, object_size: float,
                font_size: float, anchor: LabelAnchor) -> LabelPlacement:
    """Position a label at one corner of an object, clear of its body."""
    w = estimate_text_width(text, font_size)
    offset = object_size + LABEL_CLEARANCE
    ly = py - offset if anchor.is_top else py + offset
    lx = px - offset - w if anchor.is_left else px + offset
    return LabelPlacement(px, py, lx, ly, w, font_size, text, anchor.is_left)


def _label_instructions(p: LabelPlacement, scene: Scene) -> List[Instruction]:
    style = scene.labels
    out: List[Instruction] = []
    if style.background:
        out.append(Rect(p.x - 2, p.y - p.height / 2 - 2, p.width + 4, p.height + 4,
                        fill="#000000", fill_opacity=0.45, corner_radius=4))
    ex, ey = p.leader_end
    out.append(Line(p.anchor_x, p.anchor_y, ex, ey, stroke="#FFFFFF", stroke_opacity=0.3, stroke_width=1))
    out.append(Text(p.x, p.y, p.text, style.size, style.color))
    return out


def _planet_instructions(planet: Planet, cx: float, cy: float) -> List[Instruction]:
    px, py = planet.position
    x, y = cx + px, cy + py
    out: List[Instruction] = []
    ring = planet.ring
    if ring is not None:
        mid = ring.mid_radius(planet.size)
        flatten = min(1.0, max(0.2, ring.flatten))
        out.append(Ellipse(x, y, mid, mid * flatten, ring.angle_deg, stroke=ring.color,
                           stroke_width=ring.width, opacity=min(1.0, max(0.0, ring.opacity))))
    out.append(Circle(x, y, planet.size + 1.5, fill="#000000", fill_opacity=0.3))
    out.append(Circle(x, y, planet.size, fill=planet.color))
    out.append(RadialGradientCircle(
        x, y, planet.size,
        (GradientStop(0, "#FFFFFF", 0.5), GradientStop(1, "#FFFFFF", 0)),
        fx=x - planet.size / 3, fy=y - planet.size / 3,
    ))
    for moon in planet.moons:
        out.append(Circle(x, y, planet.size + moon.orbit, stroke="#FFFFFF",
                          stroke_opacity=0.12, stroke_width=0.8))
        out.append(Circle(cx + moon.x, cy + moon.y, moon.size, fill="#CFCFCF"))
    return out


def build_instructions(scene: Scene, width: int, height: int) -> List[Instruction]:
    """Flatten a scene into back-to-front draw instructions for a surface.

    The scene origin maps to the surface centre; coordinates are not scaled,
    so a larger surface shows more margin around the same composition.

    Args:
        scene: Built scene
        width: Surface width in pixels
        height: Surface height in pixels

    Returns:
        Ordered list of primitives
    """
    cx, cy = width / 2, height / 2
    out: List[Instruction] = [Rect(0, 0, width, height, fill=BACKGROUND)]

    # Starfield
    stream = SeededStream(scene.seed, STARFIELD_SALT)
    for _ in range(STARFIELD_COUNT):
        sx = stream.random() * width
        sy = stream.random() * height
        ss = stream.random() * 1.5
        alpha = 0.3 + stream.random() * 0.7
        out.append(Rect(sx, sy, ss, ss, fill="#FFFFFF", fill_opacity=alpha))

    for star in scene.stars:
        out.extend(STAR_RECIPES[star.type](cx + star.x, cy + star.y))

    for belt in scene.belts:
        for bx, by, s in belt.particles:
            out.append(Rect(cx + bx, cy + by, s, s, fill="#C8C8C8", fill_opacity=0.35))

    for planet in scene.planets:
        out.append(Circle(cx, cy, planet.orbit_radius, stroke="#FFFFFF",
                          stroke_opacity=0.15, stroke_width=1))

    for planet in scene.planets:
        out.extend(_planet_instructions(planet, cx, cy))

    for station in scene.stations:
        sx, sy = station.position
        out.extend(STATION_SHAPES[station.icon](station, cx + sx, cy + sy))

    style = scene.labels
    for planet in scene.planets:
        if not planet.show_label:
            continue
        px, py = planet.position
        placement = place_label(cx + px, cy + py, planet.name, planet.size, style.size, style.anchor)
        out.extend(_label_instructions(placement, scene))
    for station in scene.stations:
        if not station.show_label:
            continue
        sx, sy = station.position
        placement = place_label(cx + sx, cy + sy, station.label_text, station.size,
                                style.size, style.anchor)
        out.extend(_label_instructions(placement, scene))

    if scene.show_hud:
        out.append(Text(12, height - 12, f"Planets: {scene.num_planets}  |  Seed: {scene.seed}",
                        HUD_FONT_SIZE, "#FFFFFF", opacity=0.7))
    return out
