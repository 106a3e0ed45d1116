"""Circular dependency listing."""

from pathlib import Path
from typing import Optional

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
def cycles(
    path: Path = path_argument(),
    fmt: str = format_option(),
    config: Optional[Path] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
):
    """
    List circular dependencies with their severity.

    Shorter cycles are more severe: 2 files is high, 3-4 medium, more is low.
    """
    setup_logging(verbose=verbose, quiet=quiet)
    check_format(fmt)

    with handle_errors(verbose):
        engine = run_analysis(path, resolve_config(config))
        found = engine.find_circular_dependencies()

        if fmt == "json":
            print_json([cycle.to_dict() for cycle in found])
            return

        if not found:
            console.print("[green]No circular dependencies found[/green]")
            return
        console.print(f"[bold red]{len(found)} circular dependencies[/bold red]")
        for cycle in found:
            console.print(f"  {format_cycle(cycle)}")
