"""Drawing surfaces.

``DrawingSurface`` is the subset of a 2-D canvas context the render pipeline
needs.  ``BaseSurface`` implements the bookkeeping every backend shares
(transform stack, style state, path building); backends only decide what
to do with a finished fill, stroke or text operation.

Paths are transformed into device pixels as they are built, matching
canvas semantics.  Transforms are assumed to scale uniformly, which is
all the pipeline ever applies.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Protocol

Matrix = tuple[float, float, float, float, float, float]
IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

# ("M", x, y) | ("L", x, y) | ("A", cx, cy, r, start, end) | ("Z",)
PathSegment = tuple


class DrawingSurface(Protocol):
    """Canvas-like drawing target."""

    fill_style: str
    stroke_style: str
    line_width: float
    global_alpha: float
    font: str
    text_align: str

    def resize(self, pixel_width: int, pixel_height: int, css_width: float, css_height: float) -> None: ...
    def save(self) -> None: ...
    def restore(self) -> None: ...
    def translate(self, x: float, y: float) -> None: ...
    def scale(self, sx: float, sy: float) -> None: ...
    def clear_rect(self, x: float, y: float, width: float, height: float) -> None: ...
    def begin_path(self) -> None: ...
    def move_to(self, x: float, y: float) -> None: ...
    def line_to(self, x: float, y: float) -> None: ...
    def arc(self, x: float, y: float, radius: float, start: float, end: float) -> None: ...
    def close_path(self) -> None: ...
    def fill(self) -> None: ...
    def stroke(self) -> None: ...
    def fill_text(self, text: str, x: float, y: float) -> None: ...


@dataclass(frozen=True)
class SurfaceStyle:
    fill_style: str = "#000000"
    stroke_style: str = "#000000"
    line_width: float = 1.0
    global_alpha: float = 1.0
    font: str = "10px sans-serif"
    text_align: str = "start"


class BaseSurface:
    """Shared state handling for surface backends."""

    def __init__(self) -> None:
        self.pixel_width = 0
        self.pixel_height = 0
        self.css_width = 0.0
        self.css_height = 0.0
        self._reset_state()

    def _reset_state(self) -> None:
        self.matrix: Matrix = IDENTITY
        self._apply_style(SurfaceStyle())
        self._stack: list[tuple[Matrix, SurfaceStyle]] = []
        self._path: list[PathSegment] = []

    def _apply_style(self, style: SurfaceStyle) -> None:
        self.fill_style = style.fill_style
        self.stroke_style = style.stroke_style
        self.line_width = style.line_width
        self.global_alpha = style.global_alpha
        self.font = style.font
        self.text_align = style.text_align

    @property
    def style(self) -> SurfaceStyle:
        return SurfaceStyle(
            fill_style=self.fill_style,
            stroke_style=self.stroke_style,
            line_width=self.line_width,
            global_alpha=self.global_alpha,
            font=self.font,
            text_align=self.text_align,
        )

    @property
    def scale_factor(self) -> float:
        a, b, c, d, _, _ = self.matrix
        return math.sqrt(abs(a * d - b * c))

    def transform_point(self, x: float, y: float) -> tuple[float, float]:
        a, b, c, d, e, f = self.matrix
        return a * x + c * y + e, b * x + d * y + f

    # ── state ────────────────────────────────────────────────────────────

    def resize(
        self, pixel_width: int, pixel_height: int, css_width: float, css_height: float
    ) -> None:
        """Set backing size; like a canvas, this resets transform and style."""
        self.pixel_width = pixel_width
        self.pixel_height = pixel_height
        self.css_width = css_width
        self.css_height = css_height
        self._reset_state()

    def save(self) -> None:
        self._stack.append((self.matrix, self.style))

    def restore(self) -> None:
        if not self._stack:
            return
        self.matrix, style = self._stack.pop()
        self._apply_style(style)

    def translate(self, x: float, y: float) -> None:
        a, b, c, d, e, f = self.matrix
        self.matrix = (a, b, c, d, e + a * x + c * y, f + b * x + d * y)

    def scale(self, sx: float, sy: float) -> None:
        a, b, c, d, e, f = self.matrix
        self.matrix = (a * sx, b * sx, c * sy, d * sy, e, f)

    # ── paths ────────────────────────────────────────────────────────────

    def begin_path(self) -> None:
        self._path = []

    def move_to(self, x: float, y: float) -> None:
        self._path.append(("M", *self.transform_point(x, y)))

    def line_to(self, x: float, y: float) -> None:
        self._path.append(("L", *self.transform_point(x, y)))

    def arc(self, x: float, y: float, radius: float, start: float, end: float) -> None:
        cx, cy = self.transform_point(x, y)
        self._path.append(("A", cx, cy, radius * self.scale_factor, start, end))

    def close_path(self) -> None:
        self._path.append(("Z",))

    @property
    def path(self) -> tuple[PathSegment, ...]:
        return tuple(self._path)


@dataclass(frozen=True)
class DrawCommand:
    """One recorded drawing operation."""

    op: str  # clear | fill | stroke | text
    path: tuple[PathSegment, ...] = ()
    style: SurfaceStyle = field(default_factory=SurfaceStyle)
    matrix: Matrix = IDENTITY
    text: str = ""
    position: tuple[float, float] = (0.0, 0.0)

    @property
    def circle(self) -> tuple[float, float, float] | None:
        """(cx, cy, r) in device pixels if this path is a single arc."""
        arcs = [seg for seg in self.path if seg[0] == "A"]
        if len(arcs) != 1:
            return None
        _, cx, cy, r, _, _ = arcs[0]
        return cx, cy, r


class RecordingSurface(BaseSurface):
    """Keeps a display list of the last frame."""

    def __init__(self) -> None:
        self.commands: list[DrawCommand] = []
        super().__init__()

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.commands = [DrawCommand(op="clear", matrix=self.matrix)]

    def fill(self) -> None:
        self._record("fill")

    def stroke(self) -> None:
        self._record("stroke")

    def fill_text(self, text: str, x: float, y: float) -> None:
        self.commands.append(
            DrawCommand(
                op="text",
                style=self.style,
                matrix=self.matrix,
                text=text,
                position=self.transform_point(x, y),
            )
        )

    def _record(self, op: str) -> None:
        self.commands.append(
            DrawCommand(op=op, path=self.path, style=self.style, matrix=self.matrix)
        )

    def of(self, op: str) -> list[DrawCommand]:
        return [cmd for cmd in self.commands if cmd.op == op]

    def texts(self) -> list[str]:
        return [cmd.text for cmd in self.of("text")]
