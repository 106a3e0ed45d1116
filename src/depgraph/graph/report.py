"""Projections of a GraphSnapshot for consumers: visualization and report."""

import posixpath

from .metrics import most_dependency_files, most_dependent_files
from .models import (
    DependencyReport,
    GraphEdge,
    GraphNode,
    GraphSnapshot,
    GraphStatus,
    GraphVisualization,
)


def build_visualization(snapshot: GraphSnapshot) -> GraphVisualization:
    """Renderer-agnostic node and edge lists, sorted by key."""
    nodes = tuple(
        GraphNode(
            id=key,
            label=posixpath.basename(key),
            type=info.file_type,
            dependency_count=len(info.dependencies),
            dependent_count=len(info.dependents),
        )
        for key, info in sorted(snapshot.nodes.items())
    )
    edges = tuple(GraphEdge(source=src, target=dst) for src, dst in snapshot.edges())
    return GraphVisualization(nodes=nodes, edges=edges, metrics=snapshot.metrics)


def build_report(snapshot: GraphSnapshot, top_n: int = 10) -> DependencyReport:
    metrics = snapshot.metrics
    return DependencyReport(
        total_files=metrics.total_nodes,
        total_dependencies=metrics.total_edges,
        circular_dependencies=snapshot.cycles,
        most_dependent_files=tuple(most_dependent_files(snapshot.nodes, top_n)),
        most_dependency_files=tuple(most_dependency_files(snapshot.nodes, top_n)),
        average_depth=metrics.average_depth,
        max_depth=metrics.max_depth,
        file_types=metrics.file_types,
    )


def build_status(snapshot: GraphSnapshot) -> GraphStatus:
    return GraphStatus(
        initialized=True,
        node_count=snapshot.metrics.total_nodes,
        edge_count=snapshot.metrics.total_edges,
        cycle_count=len(snapshot.cycles),
    )
