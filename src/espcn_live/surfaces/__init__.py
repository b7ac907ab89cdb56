"""Output surfaces that rendered RGBA frames are drawn onto."""

from espcn_live.surfaces.base import Surface
from espcn_live.surfaces.array import ArraySurface
from espcn_live.surfaces.window import WindowSurface
from espcn_live.surfaces.files import VideoWriterSurface, ImageFileSurface

__all__ = [
    "Surface",
    "ArraySurface",
    "WindowSurface",
    "VideoWriterSurface",
    "ImageFileSurface",
]
