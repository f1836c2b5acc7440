"""Live graph scene: the state an animation loop reads every frame.

The scene owns the current snapshot, the view transform, the pointer
controller and the tunable settings.  Rebuilds construct a complete new
snapshot off to the side and replace the reference in one assignment, so
a frame never sees a half-built graph.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from loguru import logger

from ..config.settings import DisplayOptions, GraphSettings, PhysicsParams
from ..render.pipeline import Highlight
from .graph_builder import (
    GraphCache,
    GraphModelBuilder,
    LinkReader,
    compute_tree_hash,
    seed_positions,
)
from .interaction import (
    ContextMenuHandler,
    InteractionController,
    NodeClickHandler,
    SelectionHandler,
)
from .models import DocumentEntry, GraphNode, GraphSnapshot
from .view_transform import ViewTransform


def carry_over_state(old: GraphSnapshot, new: GraphSnapshot) -> int:
    """Copy position and velocity onto nodes whose id survived a rebuild.

    Returns:
        Number of nodes that kept their state
    """
    kept = 0
    for node in new.nodes:
        previous = old.get(node.id)
        if previous is None:
            continue
        node.x, node.y = previous.x, previous.y
        node.vx, node.vy = previous.vx, previous.vy
        kept += 1
    return kept


class GraphScene:
    """Holds everything one graph view needs between frames.

    Args:
        settings: Engine settings (physics, display, boundary, overlay)
        width: Initial viewport width
        height: Initial viewport height
        builder: Graph builder (defaults to one that tracks
            ``settings.include_hierarchy`` on every build)
        on_node_click: Called with a document path when a node is clicked
        on_selection_change: Called with the selected node id (or None)
        on_context_menu: Called with the node under a context-menu request
            (defaults to showing that note in isolation)
    """

    def __init__(
        self,
        settings: GraphSettings | None = None,
        width: float = 400.0,
        height: float = 400.0,
        builder: GraphModelBuilder | None = None,
        on_node_click: NodeClickHandler | None = None,
        on_selection_change: SelectionHandler | None = None,
        on_context_menu: ContextMenuHandler | None = None,
    ) -> None:
        self.settings = settings or GraphSettings()
        self._follows_settings = builder is None
        self.builder = builder or GraphModelBuilder(
            include_hierarchy=self.settings.include_hierarchy
        )
        self.view = ViewTransform(width=width, height=height)
        self.cache = GraphCache()
        self.focus_id: str | None = None
        self.current_path: str | None = None

        self._model = GraphSnapshot()
        self._snapshot = GraphSnapshot()
        self._generation = 0

        self.interaction = InteractionController(
            self.view,
            lambda: self._snapshot.nodes,
            self.settings.display,
            on_node_click=on_node_click,
            on_selection_change=on_selection_change,
            on_context_menu=on_context_menu or self._isolate_from_menu,
        )

    # ── state read by the frame loop ─────────────────────────────────────

    @property
    def snapshot(self) -> GraphSnapshot:
        return self._snapshot

    @property
    def params(self) -> PhysicsParams:
        return self.settings.physics

    @property
    def display(self) -> DisplayOptions:
        return self.settings.display

    @property
    def highlight(self) -> Highlight:
        return Highlight(
            hover_id=self.interaction.hover_node_id,
            selected_id=self.interaction.selected_node_id,
            current_path=self.current_path,
        )

    # ── building ─────────────────────────────────────────────────────────

    def load(
        self,
        tree: Sequence[DocumentEntry],
        link_reader: LinkReader,
        use_cache: bool = True,
    ) -> GraphSnapshot:
        """Build (or reuse) the graph for ``tree`` and show it."""
        self._generation += 1
        self._sync_builder()
        model, fresh = self._build_model(tree, link_reader, use_cache)
        if fresh:
            self.cache.put(model)
        return self.show(model)

    async def refresh(
        self,
        tree: Sequence[DocumentEntry],
        link_reader: LinkReader,
        use_cache: bool = False,
    ) -> GraphSnapshot:
        """Rebuild in a worker thread, then swap the result in.

        If another refresh (or a teardown) happens while this one is
        building, the result is discarded without touching the cache.
        """
        self._generation += 1
        generation = self._generation
        self._sync_builder()
        model, fresh = await asyncio.to_thread(
            self._build_model, tree, link_reader, use_cache
        )
        if generation != self._generation:
            logger.debug("Discarding superseded graph rebuild")
            return self._snapshot
        if fresh:
            self.cache.put(model)
        return self.show(model)

    def _sync_builder(self) -> None:
        if not self._follows_settings:
            return
        wanted = self.settings.include_hierarchy
        if self.builder.include_hierarchy != wanted:
            self.builder.include_hierarchy = wanted
            # Cached models were built with the other overlay setting
            self.cache.invalidate()

    def _build_model(
        self,
        tree: Sequence[DocumentEntry],
        link_reader: LinkReader,
        use_cache: bool,
    ) -> tuple[GraphSnapshot, bool]:
        """Return the model for ``tree`` and whether it was freshly built."""
        if use_cache:
            cached = self.cache.get(compute_tree_hash(tree))
            if cached is not None:
                logger.debug("Using cached graph model")
                return cached, False

        return self.builder.build_model(tree, link_reader), True

    def show(self, model: GraphSnapshot) -> GraphSnapshot:
        """Make ``model`` the displayed graph (respecting the focus node)."""
        self._model = model
        self._swap(self._display_snapshot())
        return self._snapshot

    def _display_snapshot(self) -> GraphSnapshot:
        if self.focus_id is not None:
            snapshot = self._model.isolate(self.focus_id)
        else:
            snapshot = self._model.copy()
        seed_positions(snapshot.nodes, self.view.width, self.view.height, self.builder.rng)
        if self.settings.preserve_positions:
            kept = carry_over_state(self._snapshot, snapshot)
            logger.debug(f"Carried over state for {kept}/{len(snapshot)} nodes")
        return snapshot

    def _swap(self, snapshot: GraphSnapshot) -> None:
        self._snapshot = snapshot
        self.interaction.forget_missing()

    # ── view operations ──────────────────────────────────────────────────

    def focus(self, node_id: str | None) -> GraphSnapshot:
        """Show only ``node_id`` and its direct neighbours (None shows all)."""
        self.focus_id = node_id
        self._swap(self._display_snapshot())
        return self._snapshot

    def _isolate_from_menu(self, node: GraphNode) -> None:
        if not node.is_folder:
            self.focus(node.id)

    def open_document(self, path: str | None) -> None:
        """Record the document currently open in the host."""
        self.current_path = path

    def resize(self, width: float, height: float) -> None:
        self.view.resize(width, height)

    def connected_nodes(self, node_id: str | None = None) -> list[GraphNode]:
        """Neighbours of ``node_id`` (default: the selected node)."""
        node_id = node_id or self.interaction.selected_node_id
        if node_id is None:
            return []
        return self._snapshot.neighbors(node_id)

    def teardown(self) -> None:
        """Drop all graph state."""
        self._generation += 1
        self._model = GraphSnapshot()
        self._snapshot = GraphSnapshot()
        self.cache.invalidate()
        self.interaction.forget_missing()
