"""Data models for the dependency graph.

Ownership:
  DependencyNode  mutable, owned exclusively by GraphBuilder
  DependencyInfo  frozen per-file view handed to readers
  GraphSnapshot   frozen view of the whole graph plus derived metrics

Edges are directed: ``A.dependencies`` contains B means A imports B, and
``B.dependents`` contains A. The dependents side is a derived index,
rebuilt from the dependencies side after every write.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..scanning.models import ExportRecord, FileRecord, FileType, ImportRecord

# ── Builder-owned node ─────────────────────────────────────────────


@dataclass
class DependencyNode:
    """One graph node per included file.

    Attributes:
        path: Relative path, the unique node key
        file_type: Source or Test
        language: Extension-derived language tag
        imports: Import records in line order, including external ones
        exports: Export records in line order
        dependencies: Keys of nodes this node imports
        dependents: Keys of nodes importing this node (derived index)
        unresolved: Project-relative specifiers that matched no node
        record: Scan-time file snapshot, if the node came from disk
    """

    path: str
    file_type: FileType
    language: str = "unknown"
    imports: list[ImportRecord] = field(default_factory=list)
    exports: list[ExportRecord] = field(default_factory=list)
    dependencies: set[str] = field(default_factory=set)
    dependents: set[str] = field(default_factory=set)
    unresolved: list[str] = field(default_factory=list)
    record: Optional[FileRecord] = None

    def freeze(self) -> DependencyInfo:
        return DependencyInfo(
            file=self.path,
            file_type=self.file_type,
            language=self.language,
            dependencies=tuple(sorted(self.dependencies)),
            dependents=tuple(sorted(self.dependents)),
            imports=tuple(self.imports),
            exports=tuple(self.exports),
            unresolved=tuple(self.unresolved),
        )


# ── Read-only views ────────────────────────────────────────────────


@dataclass(frozen=True)
class DependencyInfo:
    """Dependency information for one file; dependency lists are sorted."""

    file: str
    file_type: FileType
    language: str
    dependencies: tuple[str, ...]
    dependents: tuple[str, ...]
    imports: tuple[ImportRecord, ...]
    exports: tuple[ExportRecord, ...]
    unresolved: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "type": self.file_type.value,
            "language": self.language,
            "dependencies": list(self.dependencies),
            "dependents": list(self.dependents),
            "imports": [imp.to_dict() for imp in self.imports],
            "exports": [exp.to_dict() for exp in self.exports],
            "unresolved": list(self.unresolved),
        }


class CycleSeverity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class CircularDependency:
    """A closed walk of node keys; the first key repeats as the last."""

    cycle: tuple[str, ...]
    severity: CycleSeverity

    @property
    def length(self) -> int:
        """Number of distinct files in the cycle."""
        return max(len(self.cycle) - 1, 0)

    def to_dict(self) -> dict[str, Any]:
        return {"cycle": list(self.cycle), "severity": self.severity.value}


@dataclass(frozen=True)
class GraphMetrics:
    total_nodes: int = 0
    total_edges: int = 0
    average_depth: float = 0.0
    max_depth: int = 0
    file_types: Mapping[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_nodes": self.total_nodes,
            "total_edges": self.total_edges,
            "average_depth": self.average_depth,
            "max_depth": self.max_depth,
            "file_types": dict(self.file_types),
        }


@dataclass(frozen=True)
class GraphSnapshot:
    """Immutable view of the graph at one point in time.

    Superseded, never mutated, by each analysis or incremental update.
    """

    nodes: Mapping[str, DependencyInfo]
    metrics: GraphMetrics
    depths: Mapping[str, int] = field(default_factory=dict)
    cycles: tuple[CircularDependency, ...] = ()

    @classmethod
    def create(
        cls,
        nodes: dict[str, DependencyInfo],
        metrics: GraphMetrics,
        depths: dict[str, int],
        cycles: list[CircularDependency],
    ) -> GraphSnapshot:
        return cls(
            nodes=MappingProxyType(dict(nodes)),
            metrics=metrics,
            depths=MappingProxyType(dict(depths)),
            cycles=tuple(cycles),
        )

    @property
    def adjacency(self) -> dict[str, tuple[str, ...]]:
        return {path: info.dependencies for path, info in self.nodes.items()}

    @property
    def edge_count(self) -> int:
        return self.metrics.total_edges

    def edges(self) -> list[tuple[str, str]]:
        """All (importer, imported) pairs, sorted."""
        return sorted(
            (path, dep) for path, info in self.nodes.items() for dep in info.dependencies
        )


# ── Reporter outputs ───────────────────────────────────────────────


@dataclass(frozen=True)
class GraphNode:
    id: str
    label: str
    type: FileType
    dependency_count: int
    dependent_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.type.value,
            "dependency_count": self.dependency_count,
            "dependent_count": self.dependent_count,
        }


@dataclass(frozen=True)
class GraphEdge:
    """Edge from importer (``source``) to imported file (``target``)."""

    source: str
    target: str
    type: str = "dependency"

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.source, "to": self.target, "type": self.type}


@dataclass(frozen=True)
class GraphVisualization:
    nodes: tuple[GraphNode, ...]
    edges: tuple[GraphEdge, ...]
    metrics: GraphMetrics

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "metrics": self.metrics.to_dict(),
        }


@dataclass(frozen=True)
class TopFile:
    file: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "count": self.count}


@dataclass(frozen=True)
class DependencyReport:
    """Aggregate report for the context/reporting collaborator."""

    total_files: int
    total_dependencies: int
    circular_dependencies: tuple[CircularDependency, ...]
    most_dependent_files: tuple[TopFile, ...]
    most_dependency_files: tuple[TopFile, ...]
    average_depth: float
    max_depth: int
    file_types: Mapping[str, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files": self.total_files,
            "total_dependencies": self.total_dependencies,
            "circular_dependencies": [c.to_dict() for c in self.circular_dependencies],
            "most_dependent_files": [t.to_dict() for t in self.most_dependent_files],
            "most_dependency_files": [t.to_dict() for t in self.most_dependency_files],
            "average_depth": self.average_depth,
            "max_depth": self.max_depth,
            "file_types": dict(self.file_types),
        }


@dataclass(frozen=True)
class GraphStatus:
    initialized: bool
    node_count: int = 0
    edge_count: int = 0
    cycle_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "initialized": self.initialized,
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "cycle_count": self.cycle_count,
        }
