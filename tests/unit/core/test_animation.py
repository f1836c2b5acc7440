"""Unit tests for the frame loop."""

from __future__ import annotations

import asyncio

import pytest

from notegraph.config.settings import GraphSettings
from notegraph.core.animation import AnimationDriver
from notegraph.core.graph_builder import GraphModelBuilder
from notegraph.core.physics import (
    CircularBoundary,
    PhysicsEngine,
    RectangularBoundary,
)
from notegraph.core.scene import GraphScene
from notegraph.render import RecordingSurface, RenderPipeline


@pytest.fixture
def scene(rng, abc_tree, abc_reader) -> GraphScene:
    scene = GraphScene(builder=GraphModelBuilder(rng=rng))
    scene.load(abc_tree, abc_reader)
    return scene


class SnapshotSpy(RenderPipeline):
    """Records which snapshot each frame drew and runs a hook after the first."""

    def __init__(self, on_first_draw=None):
        super().__init__()
        self.drawn = []
        self.on_first_draw = on_first_draw

    def draw(self, surface, snapshot, view, display, highlight=None):
        self.drawn.append(snapshot)
        if len(self.drawn) == 1 and self.on_first_draw:
            self.on_first_draw()
        super().draw(surface, snapshot, view, display, highlight)


class FailingPipeline(RenderPipeline):
    def draw(self, *args, **kwargs):
        raise RuntimeError("surface lost")


class TestFrames:
    def test_frame_steps_and_draws(self, scene):
        surface = RecordingSurface()
        driver = AnimationDriver(scene, surface)
        before = [(n.x, n.y) for n in scene.snapshot.nodes]

        driver.frame()

        assert driver.frames == 1
        assert [(n.x, n.y) for n in scene.snapshot.nodes] != before
        assert surface.commands[0].op == "clear"
        assert len(surface.of("fill")) == 3

    def test_run_frames(self, scene):
        driver = AnimationDriver(scene, RecordingSurface())
        driver.run_frames(25)
        assert driver.frames == 25

    def test_boundary_follows_settings(self):
        circular = AnimationDriver(GraphScene(), RecordingSurface())
        rect = AnimationDriver(
            GraphScene(GraphSettings(boundary="rectangular")), RecordingSurface()
        )
        assert isinstance(circular.physics.boundary, CircularBoundary)
        assert isinstance(rect.physics.boundary, RectangularBoundary)

    def test_boundary_change_applies_next_frame(self, scene):
        driver = AnimationDriver(scene, RecordingSurface())
        driver.frame()

        scene.settings.boundary = "rectangular"
        driver.frame()

        assert isinstance(driver.physics.boundary, RectangularBoundary)

    def test_explicit_physics_keeps_its_boundary(self, scene):
        physics = PhysicsEngine(CircularBoundary())
        driver = AnimationDriver(scene, RecordingSurface(), physics=physics)

        scene.settings.boundary = "rectangular"
        driver.frame()

        assert isinstance(physics.boundary, CircularBoundary)

    def test_frame_interval_from_settings(self):
        driver = AnimationDriver(
            GraphScene(GraphSettings(frame_rate=50)), RecordingSurface()
        )
        assert driver.frame_interval == pytest.approx(0.02)

    def test_swap_during_frame_applies_next_frame(self, scene, abc_tree, abc_reader):
        spy = SnapshotSpy(on_first_draw=lambda: scene.load(abc_tree[:1], abc_reader))
        driver = AnimationDriver(scene, RecordingSurface(), pipeline=spy)
        original = scene.snapshot

        driver.run_frames(2)

        assert spy.drawn[0] is original
        assert spy.drawn[1] is scene.snapshot
        assert len(spy.drawn[1]) == 1


class TestAsyncLoop:
    @pytest.mark.asyncio
    async def test_start_and_close(self, scene):
        driver = AnimationDriver(scene, RecordingSurface(), frame_interval=0.001)

        driver.start()
        await asyncio.sleep(0.05)
        assert driver.running
        assert driver.frames > 0

        await driver.close()
        assert not driver.running
        assert len(scene.snapshot) == 0

    @pytest.mark.asyncio
    async def test_start_twice_returns_same_task(self, scene):
        driver = AnimationDriver(scene, RecordingSurface(), frame_interval=0.001)
        task = driver.start()
        assert driver.start() is task
        await driver.close()

    @pytest.mark.asyncio
    async def test_failing_frame_does_not_stop_loop(self, scene):
        driver = AnimationDriver(
            scene, RecordingSurface(), pipeline=FailingPipeline(), frame_interval=0.001
        )

        driver.start()
        await asyncio.sleep(0.02)

        assert driver.running
        assert driver.frames == 0
        await driver.close()

    @pytest.mark.asyncio
    async def test_stop_finishes_loop(self, scene):
        driver = AnimationDriver(scene, RecordingSurface(), frame_interval=0.001)
        task = driver.start()
        await asyncio.sleep(0.01)

        driver.stop()
        await asyncio.wait_for(task, timeout=1)

        assert not driver.running
