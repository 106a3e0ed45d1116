"""
depgraph - Project dependency graph engine

Discovers a project's source files, extracts their imports and exports with
line-level pattern matching, and links them into a directed file dependency
graph with cycle detection, depth metrics and incremental updates.
"""

__version__ = "0.1.0"

from .api import analyze
from .config import GraphConfig, load_config
from .engine import DependencyGraphEngine
from .graph import (
    ChangeKind,
    CircularDependency,
    DependencyInfo,
    DependencyReport,
    FileChange,
    GraphSnapshot,
    GraphStatus,
    GraphVisualization,
)

__all__ = [
    "analyze",  # Main entry point
    "DependencyGraphEngine",
    "GraphConfig",
    "load_config",
    "ChangeKind",
    "FileChange",
    "CircularDependency",
    "DependencyInfo",
    "DependencyReport",
    "GraphSnapshot",
    "GraphStatus",
    "GraphVisualization",
]
