"""Visualization export: nodes, edges and metrics as JSON."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..logging_config import setup_logging
from . import app
from ._common import (
    config_option,
    handle_errors,
    path_argument,
    print_json,
    quiet_option,
    resolve_config,
    run_analysis,
    verbose_option,
)


@app.command()
def graph(
    path: Path = path_argument(),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write JSON to this file instead of stdout",
        dir_okay=False,
    ),
    config: Optional[Path] = config_option(),
    verbose: bool = verbose_option(),
    quiet: bool = quiet_option(),
):
    """
    Export the graph for rendering. Edges point from importer to imported file.

    [bold cyan]Examples:[/bold cyan]

      depgraph graph . -o graph.json
    """
    setup_logging(verbose=verbose, quiet=quiet)

    with handle_errors(verbose):
        engine = run_analysis(path, resolve_config(config))
        data = engine.get_graph_visualization().to_dict()

        if output is None:
            print_json(data)
        else:
            output.write_text(json.dumps(data, indent=2), encoding="utf-8")
