"""Watch command: re-render the vault graph whenever notes change."""

import asyncio
from pathlib import Path

import typer
from loguru import logger

from ...core.animation import AnimationDriver
from ...core.exceptions import NoteGraphError
from ...core.models import GraphSnapshot
from ...core.watcher import VaultWatcher
from ...render import THEMES, RenderPipeline, SvgSurface
from ..common import build_scene, load_settings
from ..output import console, print_error, print_info, print_success


def watch(
    vault: Path = typer.Argument(..., help="Vault directory containing Markdown notes"),
    output: Path = typer.Option(
        Path("graph.svg"),
        "--output",
        "-o",
        help="SVG file to rewrite after each change",
        rich_help_panel="📊 Output Options",
    ),
    steps: int = typer.Option(
        300,
        "--steps",
        "-n",
        help="Simulation steps per render",
        min=1,
        rich_help_panel="⚡ Simulation Options",
    ),
    width: int = typer.Option(800, "--width", min=50, help="Viewport width"),
    height: int = typer.Option(600, "--height", min=50, help="Viewport height"),
    theme: str = typer.Option("light", "--theme", help="Colour theme: light or dark"),
    hierarchy: bool = typer.Option(
        False,
        "--hierarchy",
        help="Include folder nodes and hierarchy edges",
        rich_help_panel="📊 Graph Options",
    ),
    debounce: float = typer.Option(
        0.5,
        "--debounce",
        help="Seconds of quiet before rebuilding",
        min=0.0,
        rich_help_panel="⚡ Simulation Options",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML settings file",
        exists=True,
        dir_okay=False,
        rich_help_panel="🔧 Global Options",
    ),
) -> None:
    """👀 Watch a vault and rewrite the SVG whenever notes change.

    Press Ctrl+C to stop.
    """
    if theme not in THEMES:
        print_error(f"Unknown theme '{theme}'. Must be one of: {', '.join(THEMES)}")
        raise typer.Exit(1)

    try:
        settings = load_settings(config, include_hierarchy=hierarchy or None)
        settings.preserve_positions = True
        scene = build_scene(vault, settings, width, height)
    except NoteGraphError as e:
        print_error(str(e))
        raise typer.Exit(1)

    surface = SvgSurface(background=THEMES[theme].background)
    driver = AnimationDriver(scene, surface, pipeline=RenderPipeline(THEMES[theme]))

    def write_frame(snapshot: GraphSnapshot) -> None:
        driver.run_frames(steps)
        output.parent.mkdir(parents=True, exist_ok=True)
        surface.write(output)
        print_success(
            f"Wrote {output} ({len(snapshot)} nodes, {len(snapshot.edges)} edges)"
        )

    write_frame(scene.snapshot)

    try:
        asyncio.run(_watch_forever(vault, scene, debounce, write_frame))
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped watching[/yellow]")


async def _watch_forever(vault, scene, debounce, on_rebuild) -> None:
    watcher = VaultWatcher(vault, scene, debounce_delay=debounce, on_rebuild=on_rebuild)
    async with watcher:
        print_info(f"Watching {vault} for changes (Ctrl+C to stop)")
        try:
            while True:
                await asyncio.sleep(1)
        except asyncio.CancelledError:
            logger.debug("Watch loop cancelled")
            raise
