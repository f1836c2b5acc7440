"""Force-directed layout simulation.

One call to ``PhysicsEngine.step`` advances every node by one time
increment using four additive terms:

    1. Pairwise repulsion   repulsion / (distSq + softening), cut off at 500
    2. Edge springs         (length - springLength) * springStrength
    3. Centre pull          centerPull * displacement from viewport centre
    4. Boundary correction  pluggable policy applied after integration

A node being dragged keeps the position the pointer gives it, but it still
acts as a source of repulsion and spring forces on every other node.

Performance: repulsion is O(n²); fine for vaults of tens to a few hundred
notes, which is what the pointer-driven view is meant for.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Protocol

from ..config.defaults import (
    CIRCULAR_BOUNDARY_FRACTION,
    CIRCULAR_BOUNDARY_PULL,
    MIN_DISTANCE_SQ,
    RECT_BOUNDARY_MARGIN,
    RECT_BOUNDARY_PUSH,
    REPULSION_CUTOFF,
    REPULSION_SOFTENING,
)
from ..config.settings import BoundaryKind, PhysicsParams
from .models import GraphEdge, GraphNode


class BoundaryPolicy(Protocol):
    """Keeps nodes inside the visible area after integration."""

    def apply(self, node: GraphNode, width: float, height: float, dt: float) -> None:
        ...


class CircularBoundary:
    """Soft circular boundary centred on the viewport.

    Nodes beyond ``fraction * min(width, height)`` from the centre are pulled
    back with a strength proportional to how far they overshoot.
    """

    def __init__(
        self,
        fraction: float = CIRCULAR_BOUNDARY_FRACTION,
        pull: float = CIRCULAR_BOUNDARY_PULL,
    ) -> None:
        self.fraction = fraction
        self.pull = pull

    def radius(self, width: float, height: float) -> float:
        return min(width, height) * self.fraction

    def apply(self, node: GraphNode, width: float, height: float, dt: float) -> None:
        dx = width / 2 - node.x
        dy = height / 2 - node.y
        dist = math.hypot(dx, dy)
        boundary = self.radius(width, height)
        if dist <= boundary:
            return

        strength = (dist - boundary) * self.pull
        node.vx += (dx / dist) * strength * dt
        node.vy += (dy / dist) * strength * dt


class RectangularBoundary:
    """Soft rectangular boundary: constant inward push inside an edge margin."""

    def __init__(
        self, margin: float = RECT_BOUNDARY_MARGIN, push: float = RECT_BOUNDARY_PUSH
    ) -> None:
        self.margin = margin
        self.push = push

    def apply(self, node: GraphNode, width: float, height: float, dt: float) -> None:
        if node.x < self.margin:
            node.vx += self.push * dt
        if node.x > width - self.margin:
            node.vx -= self.push * dt
        if node.y < self.margin:
            node.vy += self.push * dt
        if node.y > height - self.margin:
            node.vy -= self.push * dt


def make_boundary(kind: BoundaryKind) -> BoundaryPolicy:
    if kind == "rectangular":
        return RectangularBoundary()
    return CircularBoundary()


class PhysicsEngine:
    """Advances node state one frame at a time.

    The engine holds configuration only; all simulation state lives on the
    nodes themselves.
    """

    def __init__(
        self,
        boundary: BoundaryPolicy | None = None,
        cutoff: float = REPULSION_CUTOFF,
        softening: float = REPULSION_SOFTENING,
    ) -> None:
        self.boundary = boundary or CircularBoundary()
        self.cutoff = cutoff
        self.softening = softening

    def step(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        params: PhysicsParams,
        width: float,
        height: float,
    ) -> None:
        """Advance all non-dragging nodes by ``params.dt``.

        Args:
            nodes: Nodes to simulate (mutated in place)
            edges: Springs; edges whose endpoints are missing are ignored
            params: Force parameters
            width: Viewport width in world units
            height: Viewport height in world units
        """
        dt = params.dt
        self._apply_repulsion(nodes, params.repulsion, dt)
        self._apply_springs(nodes, edges, params.spring_length, params.spring_strength, dt)

        cx = width / 2
        cy = height / 2
        for node in nodes:
            if node.is_dragging:
                continue

            node.vx += (cx - node.x) * params.center_pull * dt
            node.vy += (cy - node.y) * params.center_pull * dt

            node.x += node.vx * dt
            node.y += node.vy * dt

            node.vx *= params.friction
            node.vy *= params.friction

            self.boundary.apply(node, width, height, dt)

    def _apply_repulsion(
        self, nodes: Sequence[GraphNode], repulsion: float, dt: float
    ) -> None:
        count = len(nodes)
        for i in range(count):
            u = nodes[i]
            for j in range(i + 1, count):
                v = nodes[j]
                dx = u.x - v.x
                dy = u.y - v.y
                dist_sq = max(dx * dx + dy * dy, MIN_DISTANCE_SQ)
                dist = math.sqrt(dist_sq)
                if dist >= self.cutoff:
                    continue

                force = repulsion / (dist_sq + self.softening)
                fx = (dx / dist) * force
                fy = (dy / dist) * force

                if not u.is_dragging:
                    u.vx += fx * dt
                    u.vy += fy * dt
                if not v.is_dragging:
                    v.vx -= fx * dt
                    v.vy -= fy * dt

    def _apply_springs(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        spring_length: float,
        spring_strength: float,
        dt: float,
    ) -> None:
        index = {node.id: node for node in nodes}
        for edge in edges:
            u = index.get(edge.source)
            v = index.get(edge.target)
            if u is None or v is None:
                continue

            dx = v.x - u.x
            dy = v.y - u.y
            dist = math.hypot(dx, dy)
            if dist == 0:
                continue

            force = (dist - spring_length) * spring_strength
            fx = (dx / dist) * force
            fy = (dy / dist) * force

            if not u.is_dragging:
                u.vx += fx * dt
                u.vy += fy * dt
            if not v.is_dragging:
                v.vx -= fx * dt
                v.vy -= fy * dt

    @staticmethod
    def kinetic_energy(nodes: Sequence[GraphNode]) -> float:
        """Sum of squared speeds, useful for detecting a settled layout."""
        return sum(node.vx * node.vx + node.vy * node.vy for node in nodes)
