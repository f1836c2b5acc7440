"""Render command: settle the layout headlessly and write an SVG."""

from pathlib import Path

import typer
from loguru import logger

from ...core.animation import AnimationDriver
from ...core.exceptions import NoteGraphError
from ...render import THEMES, RenderPipeline, SvgSurface
from ..common import build_scene, find_note, load_settings
from ..output import print_error, print_success


def render(
    vault: Path = typer.Argument(..., help="Vault directory containing Markdown notes"),
    output: Path = typer.Option(
        Path("graph.svg"),
        "--output",
        "-o",
        help="SVG file to write",
        rich_help_panel="📊 Output Options",
    ),
    steps: int = typer.Option(
        300,
        "--steps",
        "-n",
        help="Simulation steps to run before drawing",
        min=1,
        max=100000,
        rich_help_panel="⚡ Simulation Options",
    ),
    width: int = typer.Option(
        800, "--width", help="Viewport width", min=50, rich_help_panel="📊 Output Options"
    ),
    height: int = typer.Option(
        600, "--height", help="Viewport height", min=50, rich_help_panel="📊 Output Options"
    ),
    dpr: float | None = typer.Option(
        None,
        "--dpr",
        help="Device pixel ratio (overrides settings)",
        min=0.1,
        rich_help_panel="📊 Output Options",
    ),
    theme: str = typer.Option(
        "light",
        "--theme",
        help="Colour theme: light or dark",
        rich_help_panel="📊 Output Options",
    ),
    focus: str | None = typer.Option(
        None,
        "--focus",
        "-f",
        help="Only draw this note and its direct neighbours",
        rich_help_panel="📊 Graph Options",
    ),
    hierarchy: bool = typer.Option(
        False,
        "--hierarchy",
        help="Include folder nodes and hierarchy edges",
        rich_help_panel="📊 Graph Options",
    ),
    boundary: str | None = typer.Option(
        None,
        "--boundary",
        help="Boundary policy: circular or rectangular",
        rich_help_panel="⚡ Simulation Options",
    ),
    seed: int | None = typer.Option(
        None,
        "--seed",
        help="Random seed for a reproducible layout",
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
    """🖼  Lay out a vault's link graph and write it as SVG.

    [green]Examples:[/green]
        $ notegraph render ~/notes -o notes.svg
        $ notegraph render ~/notes --focus "Index" --steps 600
        $ notegraph render ~/notes --hierarchy --theme dark
    """
    if theme not in THEMES:
        print_error(f"Unknown theme '{theme}'. Must be one of: {', '.join(THEMES)}")
        raise typer.Exit(1)

    try:
        settings = load_settings(
            config, include_hierarchy=hierarchy or None, boundary=boundary
        )
        if dpr is not None:
            settings.display.device_pixel_ratio = dpr

        scene = build_scene(vault, settings, width, height, seed=seed)
        if focus:
            scene.focus(find_note(scene.snapshot, focus).id)

        surface = SvgSurface(background=THEMES[theme].background)
        driver = AnimationDriver(scene, surface, pipeline=RenderPipeline(THEMES[theme]))
        driver.run_frames(steps)

        output.parent.mkdir(parents=True, exist_ok=True)
        surface.write(output)
    except NoteGraphError as e:
        logger.debug(f"render failed: {e.context}")
        print_error(str(e))
        raise typer.Exit(1)

    print_success(
        f"Wrote {output} ({len(scene.snapshot)} nodes, "
        f"{len(scene.snapshot.edges)} edges, {steps} steps)"
    )
