"""Per-frame drawing of the knowledge graph.

The pipeline draws into any ``DrawingSurface``:

    1. Resize the backing store to viewport × devicePixelRatio and scale by
       the ratio so world units stay crisp on dense displays.
    2. Apply the view transform (translate to centre + pan, zoom, translate
       back).
    3. Edges, then nodes, then labels.

Highlighting: when a node is hovered or selected, its edges and neighbours
are emphasised and everything else is dimmed.  The currently open
document is always drawn in the primary colour.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..config.defaults import LABEL_ZOOM_THRESHOLD
from ..config.settings import DisplayOptions
from ..core.geometry import node_radius
from ..core.models import EdgeType, GraphEdge, GraphNode, GraphSnapshot
from ..core.view_transform import ViewTransform
from .surface import DrawingSurface
from .theme import LIGHT_THEME, Theme

FOLDER_SPIKES = 8


@dataclass(frozen=True)
class Highlight:
    """Highlight inputs for one frame."""

    hover_id: str | None = None
    selected_id: str | None = None
    current_path: str | None = None

    @property
    def active(self) -> bool:
        return self.hover_id is not None or self.selected_id is not None

    @property
    def focus_id(self) -> str | None:
        return self.hover_id or self.selected_id

    def touches(self, edge: GraphEdge) -> bool:
        return any(
            node_id is not None and edge.touches(node_id)
            for node_id in (self.hover_id, self.selected_id)
        )


class RenderPipeline:
    """Draws graph snapshots onto drawing surfaces."""

    def __init__(self, theme: Theme = LIGHT_THEME) -> None:
        self.theme = theme

    def draw(
        self,
        surface: DrawingSurface,
        snapshot: GraphSnapshot,
        view: ViewTransform,
        display: DisplayOptions,
        highlight: Highlight | None = None,
    ) -> None:
        highlight = highlight or Highlight()
        width, height = view.width, view.height
        dpr = display.device_pixel_ratio

        surface.resize(round(width * dpr), round(height * dpr), width, height)
        surface.scale(dpr, dpr)
        surface.clear_rect(0, 0, width, height)

        surface.save()
        cx, cy = view.center
        surface.translate(cx + view.pan_x, cy + view.pan_y)
        surface.scale(view.zoom, view.zoom)
        surface.translate(-cx, -cy)

        for edge in snapshot.edges:
            u = snapshot.get(edge.source)
            v = snapshot.get(edge.target)
            if u is None or v is None:
                continue
            self._draw_edge(surface, edge, u, v, view.zoom, highlight)

        focus = highlight.focus_id
        neighbor_ids = snapshot.neighbor_ids(focus) if focus else set()
        for node in snapshot.nodes:
            self._draw_node(
                surface, node, view.zoom, display, highlight, node.id in neighbor_ids
            )

        surface.restore()

    # ── edges ────────────────────────────────────────────────────────────

    def _draw_edge(
        self,
        surface: DrawingSurface,
        edge: GraphEdge,
        u: GraphNode,
        v: GraphNode,
        zoom: float,
        highlight: Highlight,
    ) -> None:
        theme = self.theme
        is_hierarchy = edge.type == EdgeType.HIERARCHY

        surface.begin_path()
        surface.move_to(u.x, u.y)
        surface.line_to(v.x, v.y)

        if highlight.active:
            if highlight.touches(edge):
                surface.stroke_style = (u.color or theme.primary) if is_hierarchy else theme.primary
                surface.global_alpha = 0.8
                surface.line_width = (2.5 if is_hierarchy else 2.0) / zoom
            else:
                surface.stroke_style = theme.muted
                surface.global_alpha = 0.1
                surface.line_width = 1.0 / zoom
        elif is_hierarchy:
            surface.stroke_style = u.color or theme.muted
            surface.global_alpha = 0.5
            surface.line_width = 1.5 / zoom
        else:
            surface.stroke_style = theme.muted
            surface.global_alpha = 0.4
            surface.line_width = 1.0 / zoom
        surface.stroke()

        if is_hierarchy:
            self._draw_arrow_head(surface, u, v, zoom)

    def _draw_arrow_head(
        self, surface: DrawingSurface, u: GraphNode, v: GraphNode, zoom: float
    ) -> None:
        angle = math.atan2(v.y - u.y, v.x - u.x)
        length = 8 / zoom
        target_radius = 12 if v.is_folder else 8
        tip_x = v.x - math.cos(angle) * (target_radius + 2)
        tip_y = v.y - math.sin(angle) * (target_radius + 2)

        surface.begin_path()
        for side in (-1, 1):
            surface.move_to(tip_x, tip_y)
            surface.line_to(
                tip_x - length * math.cos(angle + side * math.pi / 6),
                tip_y - length * math.sin(angle + side * math.pi / 6),
            )
        surface.stroke()

    # ── nodes ────────────────────────────────────────────────────────────

    def _draw_node(
        self,
        surface: DrawingSurface,
        node: GraphNode,
        zoom: float,
        display: DisplayOptions,
        highlight: Highlight,
        is_neighbor: bool,
    ) -> None:
        theme = self.theme
        is_current = (
            not node.is_folder
            and highlight.current_path is not None
            and node.path == highlight.current_path
        )
        is_highlighted = (
            node.id == highlight.hover_id
            or node.id == highlight.selected_id
            or is_neighbor
            or is_current
        )

        surface.global_alpha = 0.15 if highlight.active and not is_highlighted else 1.0
        radius = node_radius(node, display.node_size)

        color = node.color or theme.muted
        if is_current:
            color = theme.primary
        elif is_highlighted and not node.is_folder:
            color = node.color or theme.primary_soft

        if node.is_folder:
            self._draw_folder(surface, node, radius, color, zoom, is_highlighted)
        else:
            surface.begin_path()
            surface.arc(node.x, node.y, radius, 0, 2 * math.pi)
            surface.fill_style = color
            surface.fill()
            if is_highlighted:
                surface.stroke_style = theme.foreground
                surface.line_width = 2 / zoom
                surface.stroke()

        if display.show_labels and (is_highlighted or zoom > LABEL_ZOOM_THRESHOLD):
            if is_highlighted:
                surface.global_alpha = 1.0
            else:
                surface.global_alpha = 0.15 if highlight.active else 0.7
            surface.fill_style = theme.foreground
            if node.is_folder:
                font_size = max(11, 13 / zoom)
                weight = "bold "
            else:
                font_size = max(10, 12 / zoom)
                weight = ""
            surface.font = f"{weight}{font_size:g}px {theme.font_family}"
            surface.text_align = "center"
            surface.fill_text(node.label, node.x, node.y + radius + 14 / zoom)

    def _draw_folder(
        self,
        surface: DrawingSurface,
        node: GraphNode,
        radius: float,
        color: str,
        zoom: float,
        is_highlighted: bool,
    ) -> None:
        inner = radius * 0.6
        surface.begin_path()
        for i in range(FOLDER_SPIKES * 2):
            r = radius if i % 2 == 0 else inner
            angle = (i * math.pi) / FOLDER_SPIKES - math.pi / 2
            x = node.x + math.cos(angle) * r
            y = node.y + math.sin(angle) * r
            if i == 0:
                surface.move_to(x, y)
            else:
                surface.line_to(x, y)
        surface.close_path()
        surface.fill_style = color
        surface.fill()

        surface.stroke_style = self.theme.foreground if is_highlighted else color
        surface.line_width = (2.5 if is_highlighted else 1.5) / zoom
        surface.stroke()

        surface.begin_path()
        surface.arc(node.x, node.y, inner * 0.5, 0, 2 * math.pi)
        surface.fill_style = self.theme.background
        surface.fill()
