"""Exception hierarchy for depgraph."""

from .analysis import AnalysisError, FileAccessError, GraphNotInitializedError
from .base import DepGraphError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError

__all__ = [
    "DepGraphError",
    "AnalysisError",
    "FileAccessError",
    "GraphNotInitializedError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
