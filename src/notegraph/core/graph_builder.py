"""Graph model construction from a document tree.

This module turns the document tree plus per-document link names into a
deduplicated node/edge snapshot, optionally overlaid with the folder
hierarchy, and seeds initial positions for the simulation.
"""

from __future__ import annotations

import hashlib
import math
import random
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from loguru import logger

from ..config.defaults import (
    FOLDER_COLORS,
    FOLDER_ID_PREFIX,
    SEED_JITTER,
    SEED_RADIUS,
)
from .exceptions import DocumentReadError
from .models import (
    DocumentEntry,
    DocumentNode,
    EdgeType,
    FolderNode,
    GraphEdge,
    GraphNode,
    GraphSnapshot,
    HierarchyInfo,
)
from .vault import document_title

LinkReader = Callable[[DocumentEntry], Iterable[str]]


def folder_id(path: str) -> str:
    return f"{FOLDER_ID_PREFIX}{path}"


def get_folder_color(index: int) -> str:
    """Palette colour for the ``index``-th folder in walk order."""
    return FOLDER_COLORS[index % len(FOLDER_COLORS)]


def compute_tree_hash(tree: Sequence[DocumentEntry]) -> str:
    """Stable hash of the document identifiers in a tree."""
    digest = hashlib.sha1()

    def visit(entries: Sequence[DocumentEntry]) -> None:
        for entry in entries:
            digest.update(b"d" if entry.is_container else b"f")
            digest.update(entry.id.encode("utf-8"))
            digest.update(b"\0")
            if entry.children:
                visit(entry.children)

    visit(tree)
    return digest.hexdigest()


def seed_positions(
    nodes: Sequence[GraphNode],
    width: float,
    height: float,
    rng: random.Random | None = None,
) -> None:
    """Place nodes on a jittered circle around the viewport centre.

    Velocities are zeroed.  The jitter keeps nodes from starting on top of
    each other, where repulsion would be at its largest.
    """
    rng = rng or random.Random()
    count = len(nodes)
    cx = width / 2
    cy = height / 2
    for i, node in enumerate(nodes):
        angle = (i / count) * math.pi * 2
        node.x = cx + math.cos(angle) * SEED_RADIUS + (rng.random() - 0.5) * SEED_JITTER
        node.y = cy + math.sin(angle) * SEED_RADIUS + (rng.random() - 0.5) * SEED_JITTER
        node.vx = 0.0
        node.vy = 0.0
        node.is_dragging = False


@dataclass
class _PendingDocument:
    entry: DocumentEntry
    title: str
    parent_id: str | None
    color: str | None
    depth: int


class GraphModelBuilder:
    """Builds graph snapshots from a document tree.

    Args:
        include_hierarchy: Add folder nodes and hierarchy edges
        rng: Random source for position jitter (seed it for reproducible layouts)
    """

    def __init__(
        self, include_hierarchy: bool = False, rng: random.Random | None = None
    ) -> None:
        self.include_hierarchy = include_hierarchy
        self.rng = rng or random.Random()

    def build(
        self,
        tree: Sequence[DocumentEntry],
        link_reader: LinkReader,
        width: float = 400.0,
        height: float = 400.0,
    ) -> GraphSnapshot:
        """Build a snapshot with seeded positions.

        Args:
            tree: Top-level document tree entries
            link_reader: Returns the outbound link names of a leaf document;
                may raise ``DocumentReadError`` or ``OSError``
            width: Viewport width used to centre the initial layout
            height: Viewport height used to centre the initial layout

        Returns:
            GraphSnapshot with positions on a jittered circle
        """
        snapshot = self.build_model(tree, link_reader)
        seed_positions(snapshot.nodes, width, height, self.rng)
        return snapshot

    def build_model(
        self, tree: Sequence[DocumentEntry], link_reader: LinkReader
    ) -> GraphSnapshot:
        """Build nodes and edges without seeding positions."""
        folders: list[FolderNode] = []
        pending: list[_PendingDocument] = []
        hierarchy_edges: list[GraphEdge] = []
        self._walk(tree, None, 0, None, folders, pending, hierarchy_edges)

        nodes: list[GraphNode] = list(folders)
        title_index: dict[str, DocumentNode] = {}
        outbound: list[tuple[DocumentNode, list[str]]] = []
        skipped = 0

        for doc in pending:
            key = doc.title.lower()
            if key in title_index:
                logger.warning(
                    f"Duplicate note title '{doc.title}' at {doc.entry.id}; "
                    f"keeping {title_index[key].path}"
                )
                continue
            try:
                links = list(link_reader(doc.entry))
            except (DocumentReadError, OSError) as e:
                logger.warning(f"Skipping unreadable document {doc.entry.id}: {e}")
                skipped += 1
                continue

            node = DocumentNode(
                id=doc.title,
                label=doc.title,
                path=doc.entry.id,
                hierarchy=(
                    HierarchyInfo(doc.parent_id, doc.color, doc.depth)
                    if self.include_hierarchy
                    else None
                ),
            )
            nodes.append(node)
            title_index[key] = node
            if self.include_hierarchy and doc.parent_id:
                hierarchy_edges.append(
                    GraphEdge(doc.parent_id, node.id, EdgeType.HIERARCHY)
                )
            outbound.append((node, links))

        edges = list(hierarchy_edges)
        seen_links: set[frozenset[str]] = set()
        for source, links in outbound:
            for name in links:
                target = title_index.get(name.strip().lower())
                if target is None or target is source:
                    continue
                pair = frozenset((source.id, target.id))
                if pair in seen_links:
                    continue
                seen_links.add(pair)
                edges.append(GraphEdge(source.id, target.id, EdgeType.LINK))
                source.connections += 1
                target.connections += 1

        snapshot = GraphSnapshot(
            nodes=nodes, edges=edges, tree_hash=compute_tree_hash(tree)
        )
        logger.debug(
            f"Built graph: {len(nodes)} nodes ({len(folders)} folders), "
            f"{len(edges)} edges ({len(seen_links)} links), {skipped} skipped"
        )
        return snapshot

    def _walk(
        self,
        entries: Sequence[DocumentEntry],
        parent_id: str | None,
        depth: int,
        parent_color: str | None,
        folders: list[FolderNode],
        pending: list[_PendingDocument],
        hierarchy_edges: list[GraphEdge],
    ) -> None:
        for entry in entries:
            if entry.is_container:
                if not self.include_hierarchy:
                    self._walk(
                        entry.children or (),
                        None,
                        depth + 1,
                        None,
                        folders,
                        pending,
                        hierarchy_edges,
                    )
                    continue
                if not entry.children:
                    continue

                node_id = folder_id(entry.id)
                color = get_folder_color(len(folders))
                folders.append(
                    FolderNode(
                        id=node_id,
                        label=entry.name,
                        path=entry.id,
                        hierarchy=HierarchyInfo(parent_id, color, depth),
                    )
                )
                if parent_id:
                    hierarchy_edges.append(
                        GraphEdge(parent_id, node_id, EdgeType.HIERARCHY)
                    )
                self._walk(
                    entry.children,
                    node_id,
                    depth + 1,
                    color,
                    folders,
                    pending,
                    hierarchy_edges,
                )
            else:
                title = document_title(entry.name)
                pending.append(
                    _PendingDocument(entry, title, parent_id, parent_color, depth)
                )


class GraphCache:
    """Keeps the last built model per document tree hash."""

    def __init__(self, max_entries: int = 4) -> None:
        self.max_entries = max_entries
        self._entries: dict[str, GraphSnapshot] = {}

    def get(self, tree_hash: str) -> GraphSnapshot | None:
        """Return an independent copy of the cached model, if any."""
        cached = self._entries.get(tree_hash)
        return cached.copy() if cached is not None else None

    def put(self, snapshot: GraphSnapshot) -> None:
        if snapshot.tree_hash in self._entries:
            del self._entries[snapshot.tree_hash]
        elif len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
        self._entries[snapshot.tree_hash] = snapshot.copy()

    def invalidate(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
