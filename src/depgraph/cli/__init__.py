"""CLI entry point; registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="depgraph",
    help="depgraph - Project dependency graph analyzer",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        is_eager=True,
    ),
):
    """
    Build a file-level dependency graph for a project and report on it.

    [bold cyan]Examples:[/bold cyan]

      depgraph analyze .

      depgraph deps . src/app.ts

      depgraph cycles . --format json
    """
    if version:
        console.print(f"[bold cyan]depgraph[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .deps import deps as _deps  # noqa: F401, E402
from .cycles import cycles as _cycles  # noqa: F401, E402
from .graph import graph as _graph  # noqa: F401, E402
from .watch import watch as _watch  # noqa: F401, E402
