"""SVG backend: serialises one rendered frame to an SVG document."""

from __future__ import annotations

import math
from pathlib import Path
from xml.sax.saxutils import escape, quoteattr

from ..core.exceptions import RenderError
from .surface import BaseSurface, PathSegment

_TEXT_ANCHORS = {
    "start": "start",
    "left": "start",
    "center": "middle",
    "end": "end",
    "right": "end",
}


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _arc_to_svg(segment: PathSegment, has_current: bool) -> str:
    _, cx, cy, r, start, end = segment
    sweep = end - start
    lead = "L" if has_current else "M"

    if abs(sweep) >= 2 * math.pi - 1e-9:
        # Full circle: two half arcs from the start angle
        x0 = cx + r * math.cos(start)
        y0 = cy + r * math.sin(start)
        x1 = cx - r * math.cos(start)
        y1 = cy - r * math.sin(start)
        rs = _fmt(r)
        return (
            f"{lead}{_fmt(x0)} {_fmt(y0)} "
            f"A{rs} {rs} 0 1 1 {_fmt(x1)} {_fmt(y1)} "
            f"A{rs} {rs} 0 1 1 {_fmt(x0)} {_fmt(y0)}"
        )

    x0 = cx + r * math.cos(start)
    y0 = cy + r * math.sin(start)
    x1 = cx + r * math.cos(end)
    y1 = cy + r * math.sin(end)
    large = 1 if (sweep % (2 * math.pi)) > math.pi else 0
    rs = _fmt(r)
    return f"{lead}{_fmt(x0)} {_fmt(y0)} A{rs} {rs} 0 {large} 1 {_fmt(x1)} {_fmt(y1)}"


def path_data(path: tuple[PathSegment, ...]) -> str:
    """Convert device-space path segments into an SVG ``d`` attribute."""
    parts: list[str] = []
    has_current = False
    for segment in path:
        op = segment[0]
        if op == "M":
            parts.append(f"M{_fmt(segment[1])} {_fmt(segment[2])}")
            has_current = True
        elif op == "L":
            parts.append(f"L{_fmt(segment[1])} {_fmt(segment[2])}")
            has_current = True
        elif op == "A":
            parts.append(_arc_to_svg(segment, has_current))
            has_current = True
        elif op == "Z":
            parts.append("Z")
    return " ".join(parts)


class SvgSurface(BaseSurface):
    """Drawing surface producing SVG markup.

    Only full-canvas clears are supported, which is all a frame needs.
    """

    def __init__(self, background: str | None = None) -> None:
        self.background = background
        self.elements: list[str] = []
        super().__init__()

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        x0, y0 = self.transform_point(x, y)
        x1, y1 = self.transform_point(x + width, y + height)
        tolerance = 0.5
        if (
            x0 > tolerance
            or y0 > tolerance
            or x1 < self.pixel_width - tolerance
            or y1 < self.pixel_height - tolerance
        ):
            raise RenderError(
                "SvgSurface only supports clearing the whole canvas",
                context={"rect": (x, y, width, height)},
            )
        self.elements = []

    def fill(self) -> None:
        if not self._path:
            return
        self.elements.append(
            f'<path d="{path_data(self.path)}" fill={quoteattr(self.fill_style)}'
            f"{self._opacity_attr()} />"
        )

    def stroke(self) -> None:
        if not self._path:
            return
        width = self.line_width * self.scale_factor
        self.elements.append(
            f'<path d="{path_data(self.path)}" fill="none" '
            f"stroke={quoteattr(self.stroke_style)} "
            f'stroke-width="{_fmt(width)}" stroke-linecap="round"'
            f"{self._opacity_attr()} />"
        )

    def fill_text(self, text: str, x: float, y: float) -> None:
        a, b, c, d, e, f = self.matrix
        anchor = _TEXT_ANCHORS.get(self.text_align, "start")
        self.elements.append(
            f'<text x="{_fmt(x)}" y="{_fmt(y)}" '
            f'transform="matrix({_fmt(a)} {_fmt(b)} {_fmt(c)} {_fmt(d)} {_fmt(e)} {_fmt(f)})" '
            f"style={quoteattr('font: ' + self.font)} "
            f'text-anchor="{anchor}" fill={quoteattr(self.fill_style)}'
            f"{self._opacity_attr()}>{escape(text)}</text>"
        )

    def _opacity_attr(self) -> str:
        if self.global_alpha >= 1:
            return ""
        return f' opacity="{_fmt(self.global_alpha)}"'

    def to_svg(self) -> str:
        """Return the current frame as a standalone SVG document."""
        header = (
            '<svg xmlns="http://www.w3.org/2000/svg" '
            f'width="{_fmt(self.css_width)}" height="{_fmt(self.css_height)}" '
            f'viewBox="0 0 {self.pixel_width} {self.pixel_height}">'
        )
        body = list(self.elements)
        if self.background:
            body.insert(
                0,
                f'<rect x="0" y="0" width="{self.pixel_width}" '
                f'height="{self.pixel_height}" fill={quoteattr(self.background)} />',
            )
        return "\n".join([header, *body, "</svg>"]) + "\n"

    def write(self, path: Path) -> None:
        path.write_text(self.to_svg(), encoding="utf-8")
