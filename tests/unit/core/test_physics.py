"""Unit tests for the force-directed simulation."""

from __future__ import annotations

import math

import pytest

from notegraph.config.settings import PhysicsParams
from notegraph.core.models import DocumentNode, GraphEdge
from notegraph.core.physics import (
    CircularBoundary,
    PhysicsEngine,
    RectangularBoundary,
    make_boundary,
)


def node(node_id: str, x: float, y: float, **kwargs) -> DocumentNode:
    return DocumentNode(id=node_id, label=node_id, path=f"{node_id}.md", x=x, y=y, **kwargs)


class TestPhysicsEngine:
    """Force terms and integration."""

    def test_connected_pair_settles_near_spring_length(self):
        a = node("a", 150, 300)
        b = node("b", 650, 300)
        engine = PhysicsEngine()
        params = PhysicsParams()

        for _ in range(1000):
            engine.step([a, b], [GraphEdge("a", "b")], params, 800, 600)

        distance = math.hypot(a.x - b.x, a.y - b.y)
        assert abs(distance - 100) < 15
        assert engine.kinetic_energy([a, b]) < 1e-3

    def test_unconnected_pair_repels(self):
        a = node("a", 195, 200)
        b = node("b", 205, 200)
        engine = PhysicsEngine()

        engine.step([a, b], [], PhysicsParams(center_pull=0), 400, 400)

        assert a.vx < 0 < b.vx
        assert a.x < 195
        assert b.x > 205

    def test_repulsion_cut_off_beyond_500(self):
        a = node("a", 0, 0)
        b = node("b", 600, 0)
        engine = PhysicsEngine(boundary=RectangularBoundary(margin=-1e9))

        engine.step([a, b], [], PhysicsParams(center_pull=0), 600, 0)

        assert a.vx == 0
        assert b.vx == 0

    def test_dragged_node_is_pinned_but_still_pushes(self):
        dragged = node("x", 100, 100, is_dragging=True)
        other = node("y", 150, 100)
        params = PhysicsParams(center_pull=0)

        PhysicsEngine().step([dragged, other], [], params, 400, 400)

        assert (dragged.x, dragged.y) == (100, 100)
        assert dragged.vx == 0
        # repulsion 3000 / (2500 + 100) * dt, then friction
        expected_vx = 3000 / 2600 * params.dt * params.friction
        assert other.vx == pytest.approx(expected_vx)
        assert other.vy == pytest.approx(0)

    def test_edges_with_missing_endpoints_are_ignored(self):
        a = node("a", 100, 100)
        b = node("b", 300, 300)
        edges = [GraphEdge("a", "ghost"), GraphEdge("ghost", "b")]
        params = PhysicsParams(repulsion=0, center_pull=0)

        PhysicsEngine().step([a, b], edges, params, 400, 400)

        assert (a.vx, a.vy) == (0, 0)
        assert (b.vx, b.vy) == (0, 0)

    def test_coincident_nodes_stay_finite(self):
        a = node("a", 200, 200)
        b = node("b", 200, 200)

        PhysicsEngine().step([a, b], [GraphEdge("a", "b")], PhysicsParams(), 400, 400)

        for n in (a, b):
            assert all(math.isfinite(v) for v in (n.x, n.y, n.vx, n.vy))

    def test_center_pull(self):
        a = node("a", 300, 200)

        PhysicsEngine().step([a], [], PhysicsParams(center_pull=0.05), 400, 400)

        assert a.vx < 0
        assert a.vy == 0

    def test_empty_graph(self):
        PhysicsEngine().step([], [], PhysicsParams(), 400, 400)


class TestBoundaries:
    def test_circular_pulls_back_proportionally(self):
        boundary = CircularBoundary()
        a = node("a", 400, 200)  # 200 from centre, radius 180

        boundary.apply(a, 400, 400, 0.5)

        assert a.vx == pytest.approx(-(200 - 180) * 0.05 * 0.5)
        assert a.vy == pytest.approx(0)

    def test_circular_inside_untouched(self):
        a = node("a", 250, 250)
        CircularBoundary().apply(a, 400, 400, 0.15)
        assert (a.vx, a.vy) == (0, 0)

    def test_rectangular_pushes_inward_in_margin(self):
        boundary = RectangularBoundary()
        left = node("l", 10, 200)
        bottom_right = node("br", 390, 390)

        boundary.apply(left, 400, 400, 0.15)
        boundary.apply(bottom_right, 400, 400, 0.15)

        assert left.vx == pytest.approx(50 * 0.15)
        assert left.vy == 0
        assert bottom_right.vx == pytest.approx(-50 * 0.15)
        assert bottom_right.vy == pytest.approx(-50 * 0.15)

    def test_make_boundary(self):
        assert isinstance(make_boundary("circular"), CircularBoundary)
        assert isinstance(make_boundary("rectangular"), RectangularBoundary)
