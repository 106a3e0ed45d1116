"""Graph-level metrics: dependency depth, fan-in/fan-out rankings, type counts."""

from collections import Counter
from typing import Callable, Mapping, Sequence

from .cycles import strongly_connected_components
from .models import DependencyInfo, GraphMetrics, TopFile


def compute_depths(adjacency: Mapping[str, Sequence[str]]) -> dict[str, int]:
    """Longest dependency chain reachable from every node.

    Cycles are collapsed into strongly connected components first, and
    the chain is measured on the resulting DAG. A chain entering a
    component of k files walks through all of them (k - 1 edges) before
    leaving it. Once every member has been seen, the edge back into the
    cycle still counts, so each file of a cyclic component has depth at
    least k. All files of one component share its depth. Runs in time
    linear in nodes plus edges.
    """
    depths: dict[str, int] = {}
    component_depth: dict[int, int] = {}
    owner: dict[str, int] = {}

    # Dependencies come before dependents in Tarjan's output order
    for position, component in enumerate(strongly_connected_components(adjacency)):
        for node in component:
            owner[node] = position

        best_exit = -1
        for node in component:
            for dep in adjacency.get(node, ()):
                target = owner.get(dep)
                if target is not None and target != position:
                    best_exit = max(best_exit, component_depth[target])

        depth = len(component) - 1
        if best_exit >= 0:
            depth += 1 + best_exit
        if len(component) > 1:
            depth = max(depth, len(component))

        component_depth[position] = depth
        for node in component:
            depths[node] = depth

    return {node: depths[node] for node in sorted(depths)}


def file_type_distribution(nodes: Mapping[str, DependencyInfo]) -> dict[str, int]:
    counts = Counter(info.file_type.value for info in nodes.values())
    return dict(sorted(counts.items()))


def compute_metrics(
    nodes: Mapping[str, DependencyInfo], depths: Mapping[str, int]
) -> GraphMetrics:
    """Aggregate counts and depth statistics for a frozen node map."""
    total_edges = sum(len(info.dependencies) for info in nodes.values())
    values = [depths.get(key, 0) for key in nodes]
    average = round(sum(values) / len(values), 2) if values else 0.0
    return GraphMetrics(
        total_nodes=len(nodes),
        total_edges=total_edges,
        average_depth=average,
        max_depth=max(values, default=0),
        file_types=file_type_distribution(nodes),
    )


def top_files(
    nodes: Mapping[str, DependencyInfo],
    count_of: Callable[[DependencyInfo], int],
    limit: int = 10,
) -> list[TopFile]:
    """Highest-count files, ties broken by path. Zero counts are left out."""
    ranked = sorted(
        ((key, count_of(info)) for key, info in nodes.items()),
        key=lambda item: (-item[1], item[0]),
    )
    return [TopFile(file=key, count=count) for key, count in ranked[:limit] if count > 0]


def most_dependent_files(nodes: Mapping[str, DependencyInfo], limit: int = 10) -> list[TopFile]:
    """Files imported by the most other files (fan-in)."""
    return top_files(nodes, lambda info: len(info.dependents), limit)


def most_dependency_files(nodes: Mapping[str, DependencyInfo], limit: int = 10) -> list[TopFile]:
    """Files importing the most other files (fan-out)."""
    return top_files(nodes, lambda info: len(info.dependencies), limit)
