"""Dependency graph: construction, resolution, cycles, metrics, updates."""

from .builder import GraphBuilder
from .cycles import cycle_severity, find_circular_dependencies, strongly_connected_components
from .metrics import (
    compute_depths,
    compute_metrics,
    file_type_distribution,
    most_dependency_files,
    most_dependent_files,
    top_files,
)
from .models import (
    CircularDependency,
    CycleSeverity,
    DependencyInfo,
    DependencyNode,
    DependencyReport,
    GraphEdge,
    GraphMetrics,
    GraphNode,
    GraphSnapshot,
    GraphStatus,
    GraphVisualization,
    TopFile,
)
from .report import build_report, build_status, build_visualization
from .resolver import PathResolver, SpecifierKind
from .updater import ChangeKind, FileChange, UpdateResult, apply_changes

__all__ = [
    # Construction
    "GraphBuilder",
    "PathResolver",
    "SpecifierKind",
    # Algorithms
    "find_circular_dependencies",
    "strongly_connected_components",
    "cycle_severity",
    "compute_depths",
    "compute_metrics",
    "file_type_distribution",
    "top_files",
    "most_dependent_files",
    "most_dependency_files",
    # Reporting
    "build_visualization",
    "build_report",
    "build_status",
    # Incremental updates
    "ChangeKind",
    "FileChange",
    "UpdateResult",
    "apply_changes",
    # Models
    "DependencyNode",
    "DependencyInfo",
    "CircularDependency",
    "CycleSeverity",
    "GraphMetrics",
    "GraphSnapshot",
    "GraphNode",
    "GraphEdge",
    "GraphVisualization",
    "TopFile",
    "DependencyReport",
    "GraphStatus",
]
