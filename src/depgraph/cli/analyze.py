"""Full analysis command: summary, metrics, cycles and most-connected files."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..graph import DependencyReport
from ..logging_config import setup_logging
from . import app
from ._common import (
    check_format,
    config_option,
    console,
    format_cycle,
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
def analyze(
    path: Path = path_argument(),
    fmt: str = format_option(),
    top_n: Optional[int] = typer.Option(
        None,
        "--top",
        "-n",
        help="Entries in most-connected file rankings",
        min=1,
    ),
    config: Optional[Path] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
):
    """
    Analyze a project and print its dependency report.

    [bold cyan]Examples:[/bold cyan]

      depgraph analyze .

      depgraph analyze src --top 5 --format json
    """
    setup_logging(verbose=verbose, quiet=quiet)
    check_format(fmt)

    with handle_errors(verbose):
        engine = run_analysis(path, resolve_config(config, top_n=top_n))
        report = engine.get_dependency_report()

        if fmt == "json":
            print_json(
                {
                    "root": str(engine.root_dir),
                    "files_scanned": len(engine.files),
                    "status": engine.get_graph_status().to_dict(),
                    "report": report.to_dict(),
                }
            )
        else:
            _output_rich(report, len(engine.files))


def _output_rich(report: DependencyReport, files_scanned: int) -> None:
    console.print()
    console.print("[bold cyan]DEPENDENCY GRAPH[/bold cyan]")
    console.print()

    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("Metric", style="bold")
    summary.add_column("Value", justify="right")
    summary.add_row("Files scanned", str(files_scanned))
    summary.add_row("Graph nodes", str(report.total_files))
    summary.add_row("Dependencies", str(report.total_dependencies))
    summary.add_row("Average depth", f"{report.average_depth:.2f}")
    summary.add_row("Max depth", str(report.max_depth))
    summary.add_row("Circular dependencies", str(len(report.circular_dependencies)))
    console.print(summary)

    if report.file_types:
        types = ", ".join(f"{name}: {count}" for name, count in report.file_types.items())
        console.print(f"  [dim]File types:[/dim] {types}")

    if report.circular_dependencies:
        console.print()
        console.print("[bold red]Circular dependencies[/bold red]")
        for cycle in report.circular_dependencies:
            console.print(f"  {format_cycle(cycle)}")

    for title, entries in (
        ("Most depended-on files", report.most_dependent_files),
        ("Files with most dependencies", report.most_dependency_files),
    ):
        if not entries:
            continue
        console.print()
        table = Table(title=title, title_justify="left", title_style="bold")
        table.add_column("File", style="cyan")
        table.add_column("Count", justify="right")
        for entry in entries:
            table.add_row(escape(entry.file), str(entry.count))
        console.print(table)
    console.print()
