"""Frame loop tying the simulation to the render pipeline."""

from __future__ import annotations

import asyncio

from loguru import logger

from ..render.pipeline import RenderPipeline
from ..render.surface import DrawingSurface
from .physics import PhysicsEngine, make_boundary
from .scene import GraphScene


class AnimationDriver:
    """Runs physics step + draw once per frame for a scene.

    Each frame reads the scene's snapshot reference exactly once, so a
    rebuild that lands mid-frame only takes effect on the next frame.

    Args:
        scene: Scene to simulate and draw
        surface: Drawing target
        physics: Physics engine (defaults to one whose boundary follows
            ``settings.boundary`` frame by frame)
        pipeline: Render pipeline
        frame_interval: Seconds between frames (defaults to settings frame rate)
    """

    def __init__(
        self,
        scene: GraphScene,
        surface: DrawingSurface,
        physics: PhysicsEngine | None = None,
        pipeline: RenderPipeline | None = None,
        frame_interval: float | None = None,
    ) -> None:
        self.scene = scene
        self.surface = surface
        self._boundary_kind = scene.settings.boundary
        self._follows_settings = physics is None
        self.physics = physics or PhysicsEngine(make_boundary(self._boundary_kind))
        self.pipeline = pipeline or RenderPipeline()
        self.frame_interval = (
            frame_interval
            if frame_interval is not None
            else scene.settings.frame_interval
        )
        self.frames = 0
        self._task: asyncio.Task | None = None
        self._stopping = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def frame(self) -> None:
        """Advance the simulation one step and draw the result."""
        scene = self.scene
        snapshot = scene.snapshot
        view = scene.view

        if self._follows_settings and scene.settings.boundary != self._boundary_kind:
            self._boundary_kind = scene.settings.boundary
            self.physics.boundary = make_boundary(self._boundary_kind)
            logger.debug(f"Boundary switched to {self._boundary_kind}")

        self.physics.step(
            snapshot.nodes, snapshot.edges, scene.params, view.width, view.height
        )
        self.pipeline.draw(
            self.surface, snapshot, view, scene.display, scene.highlight
        )
        self.frames += 1

    def run_frames(self, count: int) -> None:
        """Run ``count`` frames synchronously (headless rendering)."""
        for _ in range(count):
            self.frame()

    def start(self) -> asyncio.Task:
        """Schedule the frame loop on the running event loop."""
        if self.running:
            logger.warning("Animation already running")
            return self._task

        self._stopping = False
        self._task = asyncio.create_task(self._loop())
        logger.debug(f"Animation started ({self.frame_interval * 1000:.1f}ms/frame)")
        return self._task

    async def _loop(self) -> None:
        while not self._stopping:
            try:
                self.frame()
            except Exception as e:
                logger.error(f"Frame {self.frames} failed: {e}")
            await asyncio.sleep(self.frame_interval)

    def stop(self) -> None:
        """Ask the loop to finish after the current frame."""
        self._stopping = True

    async def close(self) -> None:
        """Stop the loop and tear down the scene."""
        self.stop()
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self.scene.teardown()
        logger.debug(f"Animation closed after {self.frames} frames")
