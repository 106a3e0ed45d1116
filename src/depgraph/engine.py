"""Dependency graph engine: the context object consumers hold.

Lifecycle is ``create -> analyze (1..n times) -> dispose``. The engine owns
one GraphBuilder and is its single writer; every write (full analysis or
incremental update) runs under a lock and ends by publishing a new
immutable GraphSnapshot. Readers only ever see a published snapshot, so
they never observe a half-built graph.
"""

import os
import posixpath
import threading
from pathlib import Path
from typing import Iterable, Optional

from .config import GraphConfig
from .exceptions import (
    AnalysisError,
    DepGraphError,
    FileAccessError,
    GraphNotInitializedError,
    InvalidPathError,
)
from .graph import (
    CircularDependency,
    DependencyInfo,
    DependencyNode,
    DependencyReport,
    ChangeKind,
    FileChange,
    GraphBuilder,
    GraphSnapshot,
    GraphStatus,
    GraphVisualization,
    apply_changes,
    build_report,
    build_status,
    build_visualization,
    compute_depths,
    compute_metrics,
    find_circular_dependencies,
)
from .logging_config import get_logger
from .scanning import FileClassifier, FileDiscoverer, FileRecord, is_excluded, relative_key

logger = get_logger(__name__)


def validate_root_directory(path: Path) -> Path:
    """
    Resolve a project root and check it can be scanned.

    Raises:
        InvalidPathError: If the path is missing, not a directory, or unreadable
    """
    try:
        resolved = Path(path).resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidPathError(path, f"Cannot resolve path: {e}")

    if not resolved.exists():
        raise InvalidPathError(resolved, "Directory does not exist")
    if not resolved.is_dir():
        raise InvalidPathError(resolved, "Path is not a directory")
    if not os.access(resolved, os.R_OK):
        raise InvalidPathError(resolved, "Directory is not readable")
    return resolved


class DependencyGraphEngine:
    """Discovers, parses and links a project's files into a dependency graph.

    Example:
        >>> engine = DependencyGraphEngine()
        >>> engine.analyze("path/to/project")
        >>> engine.get_dependencies("src/app.ts").dependencies
    """

    def __init__(self, config: Optional[GraphConfig] = None):
        self.config = config or GraphConfig()
        self.root_dir: Optional[Path] = None

        self._lock = threading.Lock()
        self._builder: Optional[GraphBuilder] = None
        self._classifier: Optional[FileClassifier] = None
        self._records: dict[str, FileRecord] = {}
        self._snapshot: Optional[GraphSnapshot] = None

    # ── Lifecycle ──────────────────────────────────────────────

    @property
    def initialized(self) -> bool:
        return self._snapshot is not None

    def analyze(self, root: "Path | str") -> GraphSnapshot:
        """Scan ``root`` and build the graph from scratch.

        Unreadable files and directories are logged and skipped. Any other
        failure raises AnalysisError and leaves the previous graph (if any)
        in place.

        Returns:
            The newly published snapshot
        """
        root_dir = validate_root_directory(Path(root))
        logger.info(f"Analyzing project at: {root_dir}")

        with self._lock:
            builder = self._new_builder()
            classifier = FileClassifier(root_dir, self.config.max_file_size_bytes)
            try:
                records, nodes = self._scan(root_dir, classifier, builder)
                builder.build(nodes)
                snapshot = self._publish(builder)
            except DepGraphError:
                raise
            except Exception as e:
                raise AnalysisError(
                    f"Analysis failed: {e}", details={"root": str(root_dir)}
                ) from e

            self.root_dir = root_dir
            self._builder = builder
            self._classifier = classifier
            self._records = records
            self._snapshot = snapshot

        logger.info(
            f"Analysis complete: {len(records)} files, "
            f"{snapshot.metrics.total_nodes} nodes, {snapshot.metrics.total_edges} edges, "
            f"{len(snapshot.cycles)} cycles"
        )
        return snapshot

    def update(self, changes: Iterable[FileChange]) -> GraphSnapshot:
        """Apply file change notifications without a full re-scan.

        Paths may be absolute or relative to the project root; changes
        outside the root or under an excluded path are ignored.

        Returns:
            The newly published snapshot
        """
        with self._lock:
            if self._builder is None or self.root_dir is None:
                raise GraphNotInitializedError("update")

            known = set(self._builder.nodes) | set(self._records)
            relevant = []
            for change in changes:
                key = self._normalize_key(change.path)
                if key is None or is_excluded(key, self.config.exclude_patterns):
                    logger.debug(f"Ignoring change outside the project: {change.path}")
                    continue
                for item in self._expand_change(key, change.kind, known):
                    self._records.pop(item.path, None)
                    relevant.append(item)

            if not relevant:
                return self._snapshot

            result = apply_changes(self._builder, relevant, self._load_node)
            if not result.touched:
                return self._snapshot
            self._snapshot = self._publish(self._builder)
            return self._snapshot

    def dispose(self) -> None:
        """Drop the graph and return to the uninitialized state."""
        with self._lock:
            self.root_dir = None
            self._builder = None
            self._classifier = None
            self._records = {}
            self._snapshot = None

    # ── Accessors ──────────────────────────────────────────────

    @property
    def snapshot(self) -> GraphSnapshot:
        return self._require_snapshot("snapshot")

    @property
    def files(self) -> tuple[FileRecord, ...]:
        """Every discovered file, including those left out of the graph."""
        with self._lock:
            self._require_snapshot("files")
            return tuple(self._records[key] for key in sorted(self._records))

    def get_dependencies(self, path: "Path | str") -> Optional[DependencyInfo]:
        """Dependency info for one file, or None if it is not a graph node."""
        snapshot = self._require_snapshot("get_dependencies")
        key = self._normalize_key(path)
        if key is None:
            return None
        return snapshot.nodes.get(key)

    def find_circular_dependencies(self) -> list[CircularDependency]:
        return list(self._require_snapshot("find_circular_dependencies").cycles)

    def get_graph_visualization(self) -> GraphVisualization:
        return build_visualization(self._require_snapshot("get_graph_visualization"))

    def get_dependency_report(self) -> DependencyReport:
        snapshot = self._require_snapshot("get_dependency_report")
        return build_report(snapshot, top_n=self.config.top_n)

    def get_graph_status(self) -> GraphStatus:
        """Status summary. Unlike the other accessors, never raises."""
        snapshot = self._snapshot
        if snapshot is None:
            return GraphStatus(initialized=False)
        return build_status(snapshot)

    # ── Internals ──────────────────────────────────────────────

    def _require_snapshot(self, operation: str) -> GraphSnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise GraphNotInitializedError(operation)
        return snapshot

    def _new_builder(self) -> GraphBuilder:
        return GraphBuilder(
            extensions=self.config.resolve_extensions,
            alias_prefix=self.config.alias_prefix,
            source_root=self.config.source_root,
        )

    def _scan(
        self, root_dir: Path, classifier: FileClassifier, builder: GraphBuilder
    ) -> tuple[dict[str, FileRecord], list[DependencyNode]]:
        discoverer = FileDiscoverer(
            root_dir,
            self.config.exclude_patterns,
            max_files=self.config.max_files,
            follow_symlinks=self.config.follow_symlinks,
        )

        records: dict[str, FileRecord] = {}
        nodes: list[DependencyNode] = []
        for filepath in discoverer.discover():
            try:
                record = classifier.classify(filepath)
                records[record.relative_path] = record
                if classifier.is_graph_eligible(record):
                    nodes.append(builder.create_node(record, _read_source(filepath)))
            except FileAccessError as e:
                logger.warning(f"Skipping {filepath}: {e}")
        return records, nodes

    def _expand_change(
        self, key: str, kind: ChangeKind, known: set[str]
    ) -> list[FileChange]:
        """One change per file. A directory path stands for the files under it.

        watchfiles reports a directory moved or removed as one event for the
        directory itself. A deleted directory drops every known file under
        it; a created one is scanned, replacing whatever was known there. A
        modified directory carries no file content and is ignored.
        """
        directory = self.root_dir / key
        try:
            is_dir = kind is not ChangeKind.DELETED and directory.is_dir()
        except OSError as e:
            logger.warning(f"Cannot inspect {directory}: {e}")
            is_dir = False

        if not is_dir:
            prefix = key + "/"
            expanded = [
                FileChange(path=path, kind=ChangeKind.DELETED)
                for path in sorted(known)
                if kind is ChangeKind.DELETED and path.startswith(prefix)
            ]
            expanded.append(FileChange(path=key, kind=kind))
            return expanded
        if kind is ChangeKind.CHANGED:
            return []
        return self._rescan_directory(key, known)

    def _rescan_directory(self, key: str, known: set[str]) -> list[FileChange]:
        prefix = key + "/"
        expanded = [
            FileChange(path=path, kind=ChangeKind.DELETED)
            for path in sorted(known)
            if path.startswith(prefix)
        ]
        discoverer = FileDiscoverer(
            self.root_dir / key,
            self.config.exclude_patterns,
            max_files=self.config.max_files,
            follow_symlinks=self.config.follow_symlinks,
        )
        for filepath in discoverer.discover():
            path = relative_key(filepath, self.root_dir)
            if path is not None and not is_excluded(path, self.config.exclude_patterns):
                expanded.append(FileChange(path=path, kind=ChangeKind.CREATED))
        logger.debug(f"Directory {key}: {len(expanded)} file change(s)")
        return expanded

    def _load_node(self, key: str) -> Optional[DependencyNode]:
        """Re-read one file for an incremental update; None if it is gone or ineligible."""
        filepath = self.root_dir / key
        try:
            if not filepath.is_file():
                return None
        except OSError as e:
            raise FileAccessError(filepath, f"Cannot stat file: {e}")
        record = self._classifier.classify(filepath)
        self._records[key] = record
        if not self._classifier.is_graph_eligible(record):
            return None
        return self._builder.create_node(record, _read_source(filepath))

    def _publish(self, builder: GraphBuilder) -> GraphSnapshot:
        nodes = builder.freeze()
        adjacency = {key: info.dependencies for key, info in nodes.items()}
        depths = compute_depths(adjacency)
        return GraphSnapshot.create(
            nodes=nodes,
            metrics=compute_metrics(nodes, depths),
            depths=depths,
            cycles=find_circular_dependencies(adjacency),
        )

    def _normalize_key(self, path: "Path | str") -> Optional[str]:
        """Node key for an absolute or root-relative path, with ``/`` separators."""
        text = str(path).replace("\\", "/")
        candidate = Path(text)
        if candidate.is_absolute():
            if self.root_dir is None:
                return None
            try:
                text = candidate.resolve().relative_to(self.root_dir).as_posix()
            except ValueError:
                return None
        text = posixpath.normpath(text)
        if text == "." or text == ".." or text.startswith("../"):
            return None
        return text


def _read_source(filepath: Path) -> str:
    try:
        return filepath.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise FileAccessError(filepath, f"Cannot read file: {e}")
