"""Watch mode: analyze once, then patch the graph as files change."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from ..graph import GraphSnapshot
from ..logging_config import setup_logging
from ..watcher import GraphWatcher
from . import app
from ._common import (
    config_option,
    console,
    handle_errors,
    path_argument,
    quiet_option,
    resolve_config,
    run_analysis,
    verbose_option,
)


@app.command()
def watch(
    path: Path = path_argument(),
    debounce: Optional[float] = typer.Option(
        None,
        "--debounce",
        "-d",
        help="Seconds of quiet before applying changes",
        min=0.0,
    ),
    config: Optional[Path] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
):
    """
    Keep the graph up to date while files change. Stop with Ctrl+C.
    """
    setup_logging(verbose=verbose, quiet=quiet)

    with handle_errors(verbose):
        engine = run_analysis(path, resolve_config(config, debounce_seconds=debounce))
        _print_status(engine.snapshot)
        console.print(f"[dim]Watching {engine.root_dir} (Ctrl+C to stop)[/dim]")

        watcher = GraphWatcher(engine, on_update=_print_status)
        try:
            asyncio.run(watcher.run())
        except KeyboardInterrupt:
            console.print("\n[yellow]Stopped[/yellow]")
            raise typer.Exit(130)


def _print_status(snapshot: GraphSnapshot) -> None:
    metrics = snapshot.metrics
    cycles = len(snapshot.cycles)
    cycle_style = "red" if cycles else "green"
    console.print(
        f"[cyan]{metrics.total_nodes}[/cyan] files, "
        f"[cyan]{metrics.total_edges}[/cyan] dependencies, "
        f"max depth [cyan]{metrics.max_depth}[/cyan], "
        f"[{cycle_style}]{cycles} cycles[/{cycle_style}]"
    )
