"""Rich console output helpers for the NoteGraph CLI."""

from rich.console import Console
from rich.table import Table

from ..core.models import GraphNode, GraphSnapshot

console = Console()


def print_error(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_info(message: str) -> None:
    console.print(f"[blue]ℹ[/blue] {message}")


def print_graph_stats(snapshot: GraphSnapshot, title: str = "Graph") -> None:
    """Print node/edge counts and the best connected notes."""
    folders = [n for n in snapshot.nodes if n.is_folder]
    documents = [n for n in snapshot.nodes if not n.is_folder]
    links = snapshot.link_edges

    table = Table(title=title, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Notes", str(len(documents)))
    table.add_row("Folders", str(len(folders)))
    table.add_row("Links", str(len(links)))
    table.add_row("Hierarchy edges", str(len(snapshot.edges) - len(links)))
    table.add_row("Orphans", str(sum(1 for n in documents if n.connections == 0)))
    console.print(table)

    top = sorted(documents, key=lambda n: (-n.connections, n.label.lower()))[:5]
    if top and top[0].connections:
        console.print("\n[bold]Most connected:[/bold]")
        for node in top:
            if node.connections:
                console.print(f"  {node.label} [dim]({node.connections})[/dim]")


def print_neighbors(node: GraphNode, neighbors: list[GraphNode]) -> None:
    """Print the direct neighbours of a note."""
    if not neighbors:
        print_info(f"'{node.label}' has no connections")
        return

    table = Table(title=f"Connections of {node.label}")
    table.add_column("Note", style="cyan")
    table.add_column("Links", justify="right")
    table.add_column("Path", style="dim")
    for other in neighbors:
        table.add_row(other.label, str(other.connections), other.path)
    console.print(table)
