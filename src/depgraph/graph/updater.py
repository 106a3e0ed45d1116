"""Incremental graph updates from file change notifications."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional

from ..exceptions import DepGraphError
from ..logging_config import get_logger
from .builder import GraphBuilder
from .models import DependencyNode

logger = get_logger(__name__)


class ChangeKind(str, Enum):
    CREATED = "created"
    CHANGED = "changed"
    DELETED = "deleted"


@dataclass(frozen=True)
class FileChange:
    """A change to one file, keyed by its path relative to the project root."""

    path: str
    kind: ChangeKind


@dataclass
class UpdateResult:
    removed: set[str] = field(default_factory=set)
    added: set[str] = field(default_factory=set)
    failed: set[str] = field(default_factory=set)
    reresolved: int = 0

    @property
    def touched(self) -> bool:
        return bool(self.removed or self.added)


def apply_changes(
    builder: GraphBuilder,
    changes: Iterable[FileChange],
    load_node: Callable[[str], Optional[DependencyNode]],
) -> UpdateResult:
    """Patch the builder's graph for a batch of changes.

    Each changed path's old node is dropped and, unless deleted, re-read
    through ``load_node`` (which returns None for files that are not graph
    eligible). Then edges into removed nodes are pruned, forward edges are
    re-resolved where they may have changed, and the dependents index is
    rebuilt from scratch.

    A file that fails to load is logged and left out of the graph; the rest
    of the batch still applies.
    """
    result = UpdateResult()

    # Last change per path wins
    latest: dict[str, ChangeKind] = {}
    for change in changes:
        latest[change.path] = change.kind

    created = False
    for path, kind in sorted(latest.items()):
        existed = builder.remove(path) is not None
        if existed:
            result.removed.add(path)
        if kind is ChangeKind.DELETED:
            continue

        try:
            node = load_node(path)
        except DepGraphError as e:
            logger.warning(f"Skipping {path}: {e}")
            result.failed.add(path)
            continue
        if node is None:
            continue

        builder.insert(node)
        result.added.add(path)
        if not existed:
            created = True

    lost_edges = builder.prune_dangling()

    # A new file can satisfy, or take precedence for, any node's specifiers
    if created:
        to_resolve = set(builder.nodes)
    else:
        to_resolve = result.added | lost_edges
    builder.resolve_edges(to_resolve)
    builder.rebuild_dependents()
    result.reresolved = len(to_resolve)

    logger.debug(
        f"Applied {len(latest)} changes: {len(result.added)} loaded, "
        f"{len(result.removed)} removed, {result.reresolved} re-resolved"
    )
    return result
