"""Pointer interaction state machine.

States::

    idle ──press on node──▶ dragging-node ──release──▶ idle
    idle ──press on empty─▶ panning       ──release──▶ idle

A press followed by a release counts as a click only if the pointer never
moved more than ``DRAG_THRESHOLD_PX`` along either axis from where it went
down.  Any larger movement turns the gesture into a drag and suppresses the
click, even when the pointer is released back over the same node.

Hit-testing walks nodes in array order and returns the first match, so
overlapping nodes resolve deterministically to the one listed first.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import StrEnum

from loguru import logger

from ..config.defaults import (
    DRAG_THRESHOLD_PX,
    HOVER_HIT_SLOP,
    PRESS_HIT_SLOP,
    SECONDARY_BUTTON,
)
from ..config.settings import DisplayOptions
from .geometry import contains_point
from .models import GraphNode
from .view_transform import ViewTransform

NodeClickHandler = Callable[[str], None]
SelectionHandler = Callable[[str | None], None]
ContextMenuHandler = Callable[[GraphNode], None]


class InteractionState(StrEnum):
    IDLE = "idle"
    PANNING = "panning"
    DRAGGING_NODE = "dragging-node"


class InteractionController:
    """Routes pointer events to node drags, viewport pans and clicks.

    Args:
        view: View transform to pan/zoom and to map pointer positions
        nodes: Callable returning the nodes currently on screen; called on
            every event so a graph swapped in by a rebuild is picked up
        display: Display options (node size drives hit radii)
        on_node_click: Receives the document path of a clicked node
        on_selection_change: Receives the selected node id, or None
        on_context_menu: Receives the node under a context-menu request
    """

    def __init__(
        self,
        view: ViewTransform,
        nodes: Callable[[], Sequence[GraphNode]],
        display: DisplayOptions | None = None,
        on_node_click: NodeClickHandler | None = None,
        on_selection_change: SelectionHandler | None = None,
        on_context_menu: ContextMenuHandler | None = None,
    ) -> None:
        self.view = view
        self._nodes = nodes
        self.display = display or DisplayOptions()
        self.on_node_click = on_node_click
        self.on_selection_change = on_selection_change
        self.on_context_menu = on_context_menu

        self.state = InteractionState.IDLE
        self.hover_node_id: str | None = None
        self.selected_node_id: str | None = None
        self._pressed: GraphNode | None = None
        self._press_origin = (0.0, 0.0)
        self._last_pointer = (0.0, 0.0)
        self._has_dragged = False

    # ── queries ──────────────────────────────────────────────────────────

    @property
    def dragged_node_id(self) -> str | None:
        if self.state == InteractionState.DRAGGING_NODE and self._pressed:
            return self._pressed.id
        return None

    @property
    def has_dragged(self) -> bool:
        return self._has_dragged

    @property
    def cursor(self) -> str:
        if self.state == InteractionState.PANNING:
            return "move"
        return "pointer" if self.hover_node_id else "crosshair"

    def hit_test(
        self, sx: float, sy: float, slop: float = PRESS_HIT_SLOP
    ) -> GraphNode | None:
        """First node (array order) whose hit circle contains screen point."""
        wx, wy = self.view.screen_to_world(sx, sy)
        for node in self._nodes():
            if contains_point(node, wx, wy, self.display.node_size, slop):
                return node
        return None

    # ── pointer events ───────────────────────────────────────────────────

    def pointer_down(self, x: float, y: float, button: int = 0) -> None:
        if button == SECONDARY_BUTTON:
            return
        if self.state != InteractionState.IDLE:
            self._release()

        self._press_origin = (x, y)
        self._last_pointer = (x, y)
        self._has_dragged = False

        node = self.hit_test(x, y)
        if node is not None:
            node.is_dragging = True
            self._pressed = node
            self.state = InteractionState.DRAGGING_NODE
            self.set_selection(node.id)
        else:
            self._pressed = None
            self.state = InteractionState.PANNING
            self.set_selection(None)

    def pointer_move(self, x: float, y: float) -> None:
        if self.state == InteractionState.IDLE:
            hovered = self.hit_test(x, y, HOVER_HIT_SLOP)
            self.hover_node_id = hovered.id if hovered else None
            return

        self._track_threshold(x, y)

        if self.state == InteractionState.DRAGGING_NODE:
            node = self._live_pressed_node()
            if node is None:
                return
            node.x, node.y = self.view.screen_to_world(x, y)
            node.vx = 0.0
            node.vy = 0.0
        elif self.state == InteractionState.PANNING:
            last_x, last_y = self._last_pointer
            self.view.pan_by(x - last_x, y - last_y)

        self._last_pointer = (x, y)

    def pointer_up(self) -> None:
        if self.state == InteractionState.IDLE:
            return

        pressed = self._pressed
        clicked = pressed is not None and not self._has_dragged
        self._release()

        if clicked and pressed is not None and not pressed.is_folder:
            logger.debug(f"Node click: {pressed.id}")
            if self.on_node_click:
                self.on_node_click(pressed.path)

    def pointer_leave(self) -> None:
        self.pointer_up()
        self.hover_node_id = None

    def wheel(self, delta_y: float) -> float:
        return self.view.apply_wheel(delta_y)

    def double_click(self) -> None:
        """Open the selected document, if any."""
        node = self._find(self.selected_node_id)
        if node is not None and not node.is_folder and self.on_node_click:
            self.on_node_click(node.path)

    def context_menu(self, x: float, y: float) -> GraphNode | None:
        node = self.hit_test(x, y)
        if node is not None and self.on_context_menu:
            self.on_context_menu(node)
        return node

    # ── selection / housekeeping ─────────────────────────────────────────

    def set_selection(self, node_id: str | None) -> None:
        if node_id == self.selected_node_id:
            return
        self.selected_node_id = node_id
        if self.on_selection_change:
            self.on_selection_change(node_id)

    def forget_missing(self) -> None:
        """Drop ids that no longer exist after a graph swap.

        A drag whose node vanished ends without a click; one whose node
        survived re-attaches to the node with the same id.
        """
        if self._find(self.hover_node_id) is None:
            self.hover_node_id = None
        if self.selected_node_id and self._find(self.selected_node_id) is None:
            self.set_selection(None)
        if self.state == InteractionState.DRAGGING_NODE:
            node = self._live_pressed_node()
            if node is None:
                logger.debug(f"Dragged node {self._pressed.id} removed; ending drag")
                self._release()
            elif node is not self._pressed:
                node.is_dragging = True
                self._pressed = node

    def _track_threshold(self, x: float, y: float) -> None:
        ox, oy = self._press_origin
        if abs(x - ox) > DRAG_THRESHOLD_PX or abs(y - oy) > DRAG_THRESHOLD_PX:
            self._has_dragged = True

    def _live_pressed_node(self) -> GraphNode | None:
        if self._pressed is None:
            return None
        return self._find(self._pressed.id)

    def _find(self, node_id: str | None) -> GraphNode | None:
        if node_id is None:
            return None
        for node in self._nodes():
            if node.id == node_id:
                return node
        return None

    def _release(self) -> None:
        if self._pressed is not None:
            self._pressed.is_dragging = False
            live = self._live_pressed_node()
            if live is not None:
                live.is_dragging = False
        self._pressed = None
        self.state = InteractionState.IDLE
