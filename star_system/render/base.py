"""Base renderer interface."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional

import numpy as np

from star_system.errors import RenderTargetError
from star_system.scene.models import Scene

MAX_SURFACE = 65536


def check_surface(width: int, height: int):
    """Raise ``RenderTargetError`` unless ``width`` x ``height`` is drawable."""
    for name, value in (("width", width), ("height", height)):
        if not isinstance(value, (int, np.integer)) or isinstance(value, bool):
            raise RenderTargetError(f"Surface {name} must be an integer, got {value!r}")
        if value < 1 or value >= MAX_SURFACE:
            raise RenderTargetError(f"Surface {name} {value} outside 1..{MAX_SURFACE - 1}")


class Renderer(ABC):
    """Abstract base class for renderers.

    Subclasses register one handler per draw instruction type in
    ``handlers``; an instruction without a handler is a programming error.
    """

    handlers: Dict[type, Callable] = {}

    def dispatch(self, instruction, target: Any, zorder: int):
        handler = self.handlers.get(type(instruction))
        if handler is None:
            raise TypeError(f"{type(self).__name__} cannot draw {type(instruction).__name__}")
        handler(self, instruction, target, zorder)

    @abstractmethod
    def render(self, scene: Scene, width: int, height: int,
               images: Optional[Mapping[str, np.ndarray]] = None):
        """Render a scene onto a surface of the given pixel size.

        Args:
            scene: Scene to draw (never modified)
            width: Surface width in pixels
            height: Surface height in pixels
            images: Decoded custom station icons keyed by their data URL
        """
        pass

    def close(self):
        """Release renderer resources."""
        pass
