"""
Logging for depgraph.

Library modules only call ``get_logger(__name__)``; handlers are installed
once by the CLI through ``setup_logging()``. Output goes to stderr via rich
so that ``--format json`` keeps stdout machine-readable.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "depgraph"

# watchfiles reports every batch at INFO; we log our own summary instead
_NOISY_LOGGERS = ("watchfiles",)


def _level_for(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Install a rich stderr handler (and optionally a plain file handler).

    Args:
        verbose: DEBUG level, with source paths and locals in tracebacks
        quiet: ERROR level only; wins over ``verbose``
        log_file: Append plain-text records to this file as well

    Returns:
        The ``depgraph`` package logger
    """
    level = _level_for(verbose, quiet)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``depgraph`` namespace, e.g. ``get_logger(__name__)``."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
