"""Colour themes for the render pipeline."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    background: str
    foreground: str
    muted: str
    primary: str
    primary_soft: str
    font_family: str = "-apple-system, BlinkMacSystemFont, sans-serif"


LIGHT_THEME = Theme(
    background="#ffffff",
    foreground="#1f2328",
    muted="#8c959f",
    primary="#7c3aed",
    primary_soft="rgba(124, 58, 237, 0.8)",
)

DARK_THEME = Theme(
    background="#1e1e1e",
    foreground="#dcddde",
    muted="#6e7681",
    primary="#a78bfa",
    primary_soft="rgba(167, 139, 250, 0.8)",
)

THEMES = {"light": LIGHT_THEME, "dark": DARK_THEME}
