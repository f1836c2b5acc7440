"""Inspection commands: vault statistics and note neighbourhoods."""

from pathlib import Path

import typer
from loguru import logger

from ...core.exceptions import NoteGraphError
from ..common import build_scene, find_note, load_settings
from ..output import print_error, print_graph_stats, print_neighbors


def stats(
    vault: Path = typer.Argument(..., help="Vault directory containing Markdown notes"),
    hierarchy: bool = typer.Option(
        False,
        "--hierarchy",
        help="Include folder nodes and hierarchy edges",
        rich_help_panel="📊 Graph Options",
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
    """📊 Show node, link and orphan counts for a vault.

    [green]Examples:[/green]
        $ notegraph stats ~/notes
        $ notegraph stats ~/notes --hierarchy
    """
    try:
        settings = load_settings(config, include_hierarchy=hierarchy or None)
        scene = build_scene(vault, settings, 400, 400)
        print_graph_stats(scene.snapshot, title=f"Vault: {vault.name}")
    except NoteGraphError as e:
        logger.debug(f"stats failed: {e.context}")
        print_error(str(e))
        raise typer.Exit(1)


def neighbors(
    vault: Path = typer.Argument(..., help="Vault directory containing Markdown notes"),
    note: str = typer.Argument(..., help="Note title (with or without .md)"),
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
    """🔗 List the notes directly linked to NOTE.

    [green]Example:[/green]
        $ notegraph neighbors ~/notes "Project Ideas"
    """
    try:
        settings = load_settings(config, include_hierarchy=False)
        scene = build_scene(vault, settings, 400, 400)
        node = find_note(scene.snapshot, note)
        print_neighbors(node, scene.connected_nodes(node.id))
    except NoteGraphError as e:
        logger.debug(f"neighbors failed: {e.context}")
        print_error(str(e))
        raise typer.Exit(1)
