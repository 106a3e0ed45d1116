"""Per-file dependency lookup."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..graph import DependencyInfo
from ..logging_config import setup_logging
from . import app
from ._common import (
    check_format,
    config_option,
    console,
    format_option,
    handle_errors,
    path_argument,
    print_json,
    quiet_option,
    resolve_config,
    run_analysis,
    verbose_option,
)


@app.command()
def deps(
    path: Path = path_argument(),
    file: str = typer.Argument(..., help="File to inspect, relative to the project root"),
    fmt: str = format_option(),
    config: Optional[Path] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
):
    """
    Show what one file imports, what imports it, and what it exports.

    [bold cyan]Examples:[/bold cyan]

      depgraph deps . src/app.ts
    """
    setup_logging(verbose=verbose, quiet=quiet)
    check_format(fmt)

    with handle_errors(verbose):
        engine = run_analysis(path, resolve_config(config))
        info = engine.get_dependencies(file)

        if info is None:
            console.print(f"[yellow]{escape(file)} is not part of the dependency graph[/yellow]")
            raise typer.Exit(1)

        if fmt == "json":
            print_json(info.to_dict())
        else:
            _output_rich(info)


def _output_rich(info: DependencyInfo) -> None:
    console.print()
    console.print(
        f"[bold cyan]{escape(info.file)}[/bold cyan] "
        f"[dim]({info.file_type.value}, {info.language})[/dim]"
    )

    sections = (
        ("Depends on", list(info.dependencies)),
        ("Depended on by", list(info.dependents)),
        ("Import statements", [imp.source for imp in info.imports]),
        ("Unresolved imports", list(info.unresolved)),
        ("Exports", [f"{exp.name} ({exp.kind.value})" for exp in info.exports]),
    )
    for title, items in sections:
        console.print()
        console.print(f"[bold]{title}[/bold] [dim]({len(items)})[/dim]")
        for item in items:
            console.print(f"  {escape(item)}")
    console.print()

