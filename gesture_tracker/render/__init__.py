"""Landmark and gesture visualization module."""

from .animation import AnimationClock
from .surface import RenderSurface
from .renderer import FrameRenderer

__all__ = [
    "AnimationClock",
    "RenderSurface",
    "FrameRenderer",
]
