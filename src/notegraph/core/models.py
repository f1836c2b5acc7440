"""Data models for the knowledge graph.

Nodes are mutable: the physics step and the pointer controller update
positions and velocities in place every frame.  Edges and document tree
entries are immutable values.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar


class EdgeType(StrEnum):
    LINK = "link"
    HIERARCHY = "hierarchy"


@dataclass(frozen=True)
class HierarchyInfo:
    """Folder-overlay attributes, present only when the hierarchy overlay is built."""

    parent_id: str | None
    color: str | None
    depth: int = 0


@dataclass(eq=False)
class GraphNode:
    """A node in the simulation, positioned in world coordinates."""

    id: str
    label: str
    path: str
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    connections: int = 0
    is_dragging: bool = False
    hierarchy: HierarchyInfo | None = None

    is_folder: ClassVar[bool] = False

    @property
    def color(self) -> str | None:
        return self.hierarchy.color if self.hierarchy else None

    def copy(self) -> GraphNode:
        """Return an independent copy (same concrete type)."""
        return dataclasses.replace(self)


@dataclass(eq=False)
class DocumentNode(GraphNode):
    """A note; clicking it opens the backing document."""


@dataclass(eq=False)
class FolderNode(GraphNode):
    """A folder in the hierarchy overlay; never a link target."""

    is_folder: ClassVar[bool] = True


@dataclass(frozen=True)
class GraphEdge:
    """Relationship between two nodes.

    Link edges are unordered; hierarchy edges point parent -> child.
    """

    source: str
    target: str
    type: EdgeType = EdgeType.LINK

    @property
    def pair(self) -> frozenset[str]:
        return frozenset((self.source, self.target))

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def other(self, node_id: str) -> str:
        return self.target if self.source == node_id else self.source


@dataclass(frozen=True)
class DocumentEntry:
    """One entry of the document tree handed to the builder.

    Attributes:
        name: Display name (file or folder name)
        id: Backing identifier, usually the filesystem path
        is_container: True for folders
        children: Child entries for containers
    """

    name: str
    id: str
    is_container: bool = False
    children: tuple[DocumentEntry, ...] | None = None

    def iter_documents(self) -> Iterator[DocumentEntry]:
        """Yield every leaf document beneath (or equal to) this entry."""
        if not self.is_container:
            yield self
            return
        for child in self.children or ():
            yield from child.iter_documents()


@dataclass
class GraphSnapshot:
    """A complete node/edge set.

    A snapshot is built fully before being handed to a scene and is then
    only mutated in place by physics and interaction (positions, velocities,
    drag flags).  The node/edge membership never changes after construction.
    """

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    tree_hash: str = ""
    _index: dict[str, GraphNode] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._index = {node.id: node for node in self.nodes}

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: str | None) -> GraphNode | None:
        if node_id is None:
            return None
        return self._index.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    @property
    def link_edges(self) -> list[GraphEdge]:
        return [e for e in self.edges if e.type == EdgeType.LINK]

    def neighbors(self, node_id: str) -> list[GraphNode]:
        """Nodes sharing an edge with ``node_id``, in edge order."""
        result = []
        for edge in self.edges:
            if edge.touches(node_id):
                other = self._index.get(edge.other(node_id))
                if other is not None:
                    result.append(other)
        return result

    def neighbor_ids(self, node_id: str) -> set[str]:
        return {e.other(node_id) for e in self.edges if e.touches(node_id)}

    def recount_connections(self) -> None:
        """Recompute ``connections`` from the current link edges."""
        for node in self.nodes:
            node.connections = 0
        for edge in self.link_edges:
            for node_id in (edge.source, edge.target):
                node = self._index.get(node_id)
                if node is not None:
                    node.connections += 1

    def copy(self) -> GraphSnapshot:
        """Deep-copy nodes so the copy can be simulated independently."""
        return GraphSnapshot(
            nodes=[node.copy() for node in self.nodes],
            edges=list(self.edges),
            tree_hash=self.tree_hash,
        )

    def isolate(self, node_id: str) -> GraphSnapshot:
        """Return the sub-graph of ``node_id`` and its direct neighbours.

        Returns an empty snapshot when ``node_id`` is unknown.
        """
        if node_id not in self._index:
            return GraphSnapshot(tree_hash=self.tree_hash)

        keep = self.neighbor_ids(node_id) | {node_id}
        nodes = [node.copy() for node in self.nodes if node.id in keep]
        edges = [e for e in self.edges if e.source in keep and e.target in keep]
        isolated = GraphSnapshot(nodes=nodes, edges=edges, tree_hash=self.tree_hash)
        isolated.recount_connections()
        return isolated
