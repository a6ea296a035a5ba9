"""Closed value sets shared by configuration, scene and renderers."""

from enum import Enum


class StarType(str, Enum):
    YELLOW = "yellow"
    RED_DWARF = "red-dwarf"
    BLUE_GIANT = "blue-giant"
    NEUTRON = "neutron"
    BLACK_HOLE = "black-hole"


class StationIcon(str, Enum):
    """Station icon shapes. CUSTOM means an embedded image payload."""

    DIAMOND = "diamond"
    TRIANGLE = "triangle"
    SQUARE = "square"
    CROSS = "cross"
    SATELLITE = "satellite"
    CUSTOM = "custom"


class BeltType(str, Enum):
    FREE = "free"
    ANCHORED = "anchored"


class LabelAnchor(str, Enum):
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"

    @property
    def is_left(self) -> bool:
        return self.value.endswith("left")

    @property
    def is_top(self) -> bool:
        return self.value.startswith("top")
