"""Dependency graph construction from extracted import records.

GraphBuilder is the only writer of the node map. A full build runs in two
passes: forward edges for every node first, then the dependents index is
recomputed from scratch by inverting the edge set. The result does not
depend on node insertion order.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence

from ..logging_config import get_logger
from ..scanning.extractor import ImportExportExtractor
from ..scanning.models import FileRecord
from .models import DependencyInfo, DependencyNode
from .resolver import PathResolver, SpecifierKind

logger = get_logger(__name__)


class GraphBuilder:
    """Owns the node map and keeps dependencies/dependents consistent."""

    def __init__(
        self,
        extensions: Sequence[str] = (".ts", ".tsx", ".js", ".jsx", ".py"),
        alias_prefix: str = "@/",
        source_root: str = "src",
        extractor: Optional[ImportExportExtractor] = None,
    ):
        self._nodes: dict[str, DependencyNode] = {}
        self.extractor = extractor or ImportExportExtractor()
        # Resolves against the live key set, so inserts are visible immediately
        self.resolver = PathResolver(
            self._nodes.keys(),
            extensions=extensions,
            alias_prefix=alias_prefix,
            source_root=source_root,
        )

    @property
    def nodes(self) -> Mapping[str, DependencyNode]:
        """Read-only view of the live node map."""
        return MappingProxyType(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    # ── Node creation ──────────────────────────────────────────

    def create_node(self, record: FileRecord, content: str) -> DependencyNode:
        """Extract imports/exports from content and wrap them in a node."""
        extracted = self.extractor.extract(content, record.language)
        return DependencyNode(
            path=record.relative_path,
            file_type=record.file_type,
            language=record.language,
            imports=extracted.imports,
            exports=extracted.exports,
            record=record,
        )

    # ── Full build ─────────────────────────────────────────────

    def build(self, nodes: Iterable[DependencyNode]) -> None:
        """Replace the node map and build all edges from scratch."""
        self._nodes.clear()
        for node in nodes:
            self.insert(node)
        self.resolve_edges()
        self.rebuild_dependents()
        logger.info(f"Graph built: {len(self._nodes)} nodes, {self.edge_count()} edges")

    # ── Mutation primitives ────────────────────────────────────

    def insert(self, node: DependencyNode) -> None:
        """Add or replace a node. Edges are not resolved here."""
        node.dependencies = set()
        node.dependents = set()
        node.unresolved = []
        self._nodes[node.path] = node

    def remove(self, key: str) -> Optional[DependencyNode]:
        """Drop a node. Other nodes' edges to it stay until prune_dangling()."""
        return self._nodes.pop(key, None)

    def resolve_edges(self, keys: Optional[Iterable[str]] = None) -> None:
        """(Re)compute forward edges for the given nodes, or all nodes.

        Duplicate imports of one module collapse to a single edge. Self
        imports and external specifiers never become edges; project-relative
        specifiers that match no node are kept on ``node.unresolved``.
        """
        targets = list(self._nodes) if keys is None else [k for k in keys if k in self._nodes]
        for key in targets:
            node = self._nodes[key]
            dependencies: set[str] = set()
            unresolved: list[str] = []
            for imp in node.imports:
                found = self.resolver.resolve_submodules(imp.source, imp.imports, node.path)
                resolved = self.resolver.resolve(imp.source, node.path)
                if resolved is not None:
                    found.append(resolved)
                if found:
                    dependencies.update(t for t in found if t != node.path)
                elif self.resolver.classify(imp.source, node.path) is not SpecifierKind.EXTERNAL:
                    unresolved.append(imp.source)
            node.dependencies = dependencies
            node.unresolved = unresolved

    def prune_dangling(self) -> set[str]:
        """Drop edges whose target no longer exists.

        Returns:
            Keys of nodes that lost at least one edge
        """
        affected: set[str] = set()
        for key, node in self._nodes.items():
            dangling = {dep for dep in node.dependencies if dep not in self._nodes}
            if dangling:
                node.dependencies -= dangling
                affected.add(key)
        return affected

    def rebuild_dependents(self) -> None:
        """Recompute every dependents set by inverting the dependency edges."""
        reverse: dict[str, set[str]] = {key: set() for key in self._nodes}
        for key, node in self._nodes.items():
            for dep in node.dependencies:
                if dep in reverse:
                    reverse[dep].add(key)
        for key, node in self._nodes.items():
            node.dependents = reverse[key]

    # ── Queries ────────────────────────────────────────────────

    def edge_count(self) -> int:
        return sum(len(node.dependencies) for node in self._nodes.values())

    def freeze(self) -> dict[str, DependencyInfo]:
        """Immutable copies of every node, keyed by path."""
        return {key: node.freeze() for key, node in sorted(self._nodes.items())}
