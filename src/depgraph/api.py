"""Public API for depgraph.

Example:
    >>> from depgraph import analyze
    >>>
    >>> engine = analyze("/path/to/code")
    >>> engine.get_dependency_report().max_depth
    >>>
    >>> # With customization
    >>> engine = analyze("/path/to/code", top_n=5, exclude_patterns=["vendor"])
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import load_config
from .engine import DependencyGraphEngine
from .logging_config import get_logger

logger = get_logger(__name__)


def analyze(
    path: "Path | str" = ".",
    config_file: Optional[Path] = None,
    **overrides,
) -> DependencyGraphEngine:
    """Analyze a project and return the initialized engine.

    Configuration is auto-discovered (``~/.depgraph.toml``,
    ``./depgraph.toml``, ``DEPGRAPH_*``) and ``overrides`` are applied last.

    Raises:
        ConfigurationError: If configuration is invalid
        InvalidPathError: If ``path`` is not a readable directory
        AnalysisError: If the analysis fails as a whole
    """
    config = load_config(config_file=config_file, **overrides)
    logger.debug(f"Config: {config}")
    engine = DependencyGraphEngine(config)
    engine.analyze(path)
    return engine
