"""Shared CLI helpers."""

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import GraphConfig, load_config
from ..engine import DependencyGraphEngine
from ..exceptions import DepGraphError
from ..logging_config import get_logger
from ..graph import CircularDependency, CycleSeverity

console = Console()
logger = get_logger(__name__)

SEVERITY_STYLES = {
    CycleSeverity.HIGH: "red bold",
    CycleSeverity.MEDIUM: "yellow",
    CycleSeverity.LOW: "dim",
}


def path_argument() -> Any:
    return typer.Argument(
        Path("."),
        help="Project root to analyze",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    )


def config_option() -> Any:
    return typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    )


def format_option() -> Any:
    return typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (human-readable) or json",
    )


def resolve_config(config: Optional[Path] = None, **overrides) -> GraphConfig:
    """Build config from CLI options; unset options fall through to files/env."""
    return load_config(config_file=config, **overrides)


def run_analysis(path: Path, config: GraphConfig) -> DependencyGraphEngine:
    engine = DependencyGraphEngine(config)
    engine.analyze(path)
    return engine


def check_format(fmt: str) -> None:
    if fmt not in ("rich", "json"):
        console.print(f"[red]Error:[/red] unknown format '{fmt}' (expected rich or json)")
        raise typer.Exit(2)


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def format_cycle(cycle: CircularDependency) -> str:
    style = SEVERITY_STYLES[cycle.severity]
    chain = escape(" -> ".join(cycle.cycle))
    return f"[{style}]{cycle.severity.value:<6}[/{style}] {chain}"


def verbose_option() -> Any:
    return typer.Option(False, "--verbose", "-v", help="Enable debug logging")


def quiet_option() -> Any:
    return typer.Option(False, "--quiet", "-q", help="Only log errors")


@contextmanager
def handle_errors(verbose: bool = False):
    """Turn library errors into a red message and exit code 1."""
    try:
        yield
    except typer.Exit:
        raise
    except DepGraphError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)
