"""Circular dependency detection (DFS with a recursion stack) and SCC condensation."""

from typing import Mapping, Sequence

from .models import CircularDependency, CycleSeverity


def cycle_severity(length: int) -> CycleSeverity:
    """Severity tier from the number of distinct files in a cycle."""
    if length <= 2:
        return CycleSeverity.HIGH
    if length <= 4:
        return CycleSeverity.MEDIUM
    return CycleSeverity.LOW


def find_circular_dependencies(
    adjacency: Mapping[str, Sequence[str]],
) -> list[CircularDependency]:
    """Find circular dependencies by depth-first search (iterative).

    Roots are visited in sorted key order, as are each node's neighbors, so
    the result is deterministic. The visited set is global and permanent;
    the recursion stack is per root. When an edge reaches a node on the
    recursion stack, the cycle is the current path from that node onward,
    closed by repeating it, and the root's traversal stops there. At most
    one cycle is reported per root, so overlapping cycles reachable from
    one root are not all enumerated.
    """
    visited: set[str] = set()
    cycles: list[CircularDependency] = []

    for root in sorted(adjacency):
        if root in visited:
            continue

        path: list[str] = [root]
        on_path: set[str] = {root}
        visited.add(root)
        call_stack = [iter(_neighbors(adjacency, root))]
        found = None

        while call_stack and found is None:
            pushed = False
            for w in call_stack[-1]:
                if w in on_path:
                    found = path[path.index(w) :] + [w]
                    break
                if w not in visited:
                    visited.add(w)
                    path.append(w)
                    on_path.add(w)
                    call_stack.append(iter(_neighbors(adjacency, w)))
                    pushed = True
                    break

            if found is None and not pushed:
                call_stack.pop()
                on_path.discard(path.pop())

        if found is not None:
            cycles.append(
                CircularDependency(cycle=tuple(found), severity=cycle_severity(len(found) - 1))
            )

    return cycles


def strongly_connected_components(adjacency: Mapping[str, Sequence[str]]) -> list[list[str]]:
    """Tarjan's algorithm (iterative), components in reverse topological order.

    Every component is emitted after all components reachable from it, so
    a single pass over the result sees dependencies before dependents.
    Members of each component are sorted; targets missing from
    ``adjacency`` are ignored.
    """
    counter = 0
    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    scc_stack: list[str] = []
    on_stack: set[str] = set()
    components: list[list[str]] = []

    for root in sorted(adjacency):
        if root in index:
            continue

        index[root] = lowlink[root] = counter
        counter += 1
        scc_stack.append(root)
        on_stack.add(root)
        call_stack = [(root, iter(_neighbors(adjacency, root)))]

        while call_stack:
            v, it = call_stack[-1]
            pushed = False
            for w in it:
                if w not in index:
                    index[w] = lowlink[w] = counter
                    counter += 1
                    scc_stack.append(w)
                    on_stack.add(w)
                    call_stack.append((w, iter(_neighbors(adjacency, w))))
                    pushed = True
                    break
                if w in on_stack:
                    lowlink[v] = min(lowlink[v], index[w])
            if pushed:
                continue

            call_stack.pop()
            if call_stack:
                caller = call_stack[-1][0]
                lowlink[caller] = min(lowlink[caller], lowlink[v])

            if lowlink[v] == index[v]:
                component = []
                while True:
                    w = scc_stack.pop()
                    on_stack.discard(w)
                    component.append(w)
                    if w == v:
                        break
                components.append(sorted(component))

    return components


def _neighbors(adjacency: Mapping[str, Sequence[str]], node: str) -> list[str]:
    return sorted(dep for dep in adjacency.get(node, ()) if dep in adjacency)
