"""Rendering modules."""

from star_system.render.base import Renderer, check_surface
from star_system.render.instructions import build_instructions
from star_system.render.manager import RenderManager
from star_system.render.raster import RasterRenderer, pointer_to_polar
from star_system.render.resources import IconLoader, decode_data_url
from star_system.render.vector import VectorRenderer

__all__ = [
    "Renderer",
    "check_surface",
    "build_instructions",
    "RenderManager",
    "RasterRenderer",
    "pointer_to_polar",
    "IconLoader",
    "decode_data_url",
    "VectorRenderer",
]
