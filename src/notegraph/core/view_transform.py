"""Pan/zoom mapping between screen and world coordinates."""

from __future__ import annotations

from dataclasses import dataclass

from ..config.defaults import (
    BUTTON_ZOOM_IN,
    BUTTON_ZOOM_OUT,
    MAX_ZOOM,
    MIN_ZOOM,
    WHEEL_ZOOM_IN,
    WHEEL_ZOOM_OUT,
)


def clamp_zoom(zoom: float) -> float:
    return min(max(zoom, MIN_ZOOM), MAX_ZOOM)


@dataclass
class ViewTransform:
    """Viewport size plus pan offset and zoom factor.

    Zoom scales around the viewport centre:

        screen = (world - centre) * zoom + centre + pan
        world  = (screen - centre - pan) / zoom + centre
    """

    width: float = 400.0
    height: float = 400.0
    pan_x: float = 0.0
    pan_y: float = 0.0
    zoom: float = 1.0

    def __post_init__(self) -> None:
        self.zoom = clamp_zoom(self.zoom)

    @property
    def center(self) -> tuple[float, float]:
        return self.width / 2, self.height / 2

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        cx, cy = self.center
        return (
            (sx - cx - self.pan_x) / self.zoom + cx,
            (sy - cy - self.pan_y) / self.zoom + cy,
        )

    def world_to_screen(self, wx: float, wy: float) -> tuple[float, float]:
        cx, cy = self.center
        return (
            (wx - cx) * self.zoom + cx + self.pan_x,
            (wy - cy) * self.zoom + cy + self.pan_y,
        )

    def set_zoom(self, zoom: float) -> float:
        self.zoom = clamp_zoom(zoom)
        return self.zoom

    def apply_wheel(self, delta_y: float) -> float:
        """Zoom by one wheel notch; positive delta scrolls down (zoom out)."""
        factor = WHEEL_ZOOM_OUT if delta_y > 0 else WHEEL_ZOOM_IN
        return self.set_zoom(self.zoom * factor)

    def zoom_in(self) -> float:
        return self.set_zoom(self.zoom * BUTTON_ZOOM_IN)

    def zoom_out(self) -> float:
        return self.set_zoom(self.zoom * BUTTON_ZOOM_OUT)

    def pan_by(self, dx: float, dy: float) -> None:
        self.pan_x += dx
        self.pan_y += dy

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def reset(self) -> None:
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.zoom = 1.0
