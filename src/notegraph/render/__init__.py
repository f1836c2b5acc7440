"""Rendering: drawing surfaces and the per-frame render pipeline."""

from .pipeline import Highlight, RenderPipeline
from .surface import DrawCommand, DrawingSurface, RecordingSurface
from .svg import SvgSurface
from .theme import DARK_THEME, LIGHT_THEME, THEMES, Theme

__all__ = [
    "DARK_THEME",
    "DrawCommand",
    "DrawingSurface",
    "Highlight",
    "LIGHT_THEME",
    "RecordingSurface",
    "RenderPipeline",
    "SvgSurface",
    "THEMES",
    "Theme",
]
