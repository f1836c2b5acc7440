"""NoteGraph command line interface."""

import sys

import typer
from loguru import logger

from .. import __version__
from .commands.inspect import neighbors, stats
from .commands.render import render
from .commands.watch import watch
from .output import console

app = typer.Typer(
    name="notegraph",
    help="🕸  Force-directed link graphs for Markdown note vaults",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"notegraph version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
        rich_help_panel="🔧 Global Options",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
        rich_help_panel="🔧 Global Options",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """🕸  Build, inspect and render the wikilink graph of a notes folder."""
    logger.remove()
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "ERROR"
    else:
        level = "WARNING"
    logger.add(sys.stderr, level=level)


app.command()(stats)
app.command()(neighbors)
app.command()(render)
app.command()(watch)


if __name__ == "__main__":
    app()
