"""Debounced file watching that patches the graph incrementally."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Iterable, Optional

from watchfiles import Change, awatch

from .engine import DependencyGraphEngine
from .exceptions import GraphNotInitializedError
from .graph import ChangeKind, FileChange, GraphSnapshot
from .logging_config import get_logger
from .scanning import is_excluded, relative_key

logger = get_logger(__name__)

_CHANGE_KINDS = {
    Change.added: ChangeKind.CREATED,
    Change.modified: ChangeKind.CHANGED,
    Change.deleted: ChangeKind.DELETED,
}


class DebouncedScheduler:
    """Coalesces change events and applies them once things go quiet.

    Every ``schedule()`` call restarts the quiet-period timer. When it
    fires, the pending batch (latest change per path) is handed to
    ``callback`` in a worker thread. Events arriving during a run are held
    and trigger one follow-up run after it finishes. Must be used from
    within a running event loop.
    """

    def __init__(self, callback: Callable[[list[FileChange]], object], delay: float = 1.0):
        self.callback = callback
        self.delay = delay
        self.runs = 0

        self._pending: dict[str, FileChange] = {}
        self._timer: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def pending(self) -> list[FileChange]:
        return [self._pending[path] for path in sorted(self._pending)]

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self, changes: Iterable[FileChange]) -> None:
        for change in changes:
            self._pending[change.path] = change
        if not self._pending:
            return

        self._idle.clear()
        if self.running:
            # Picked up when the in-flight run finishes
            return
        self._arm()

    async def wait_idle(self) -> None:
        """Wait until no timer is armed, no run is in flight, and nothing is pending."""
        await self._idle.wait()

    def cancel(self) -> None:
        """Drop pending changes and disarm the timer. An in-flight run completes."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending.clear()
        if not self.running:
            self._idle.set()

    def _arm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._timer = None
        batch = self.pending
        self._pending.clear()
        if not batch:
            self._idle.set()
            return
        self._task = asyncio.get_running_loop().create_task(self._run(batch))

    async def _run(self, batch: list[FileChange]) -> None:
        logger.debug(f"Applying {len(batch)} change(s)")
        try:
            await asyncio.to_thread(self.callback, batch)
        except Exception:
            logger.exception("Incremental update failed")
        finally:
            self.runs += 1
            self._task = None
            if self._pending:
                self._arm()
            else:
                self._idle.set()


class _ExcludeFilter:
    """watchfiles filter: drop paths outside the root or matching an exclude pattern."""

    def __init__(self, root_dir: Path, exclude_patterns: Iterable[str]):
        self.root_dir = root_dir
        self.exclude_patterns = list(exclude_patterns)

    def __call__(self, change: Change, path: str) -> bool:
        key = relative_key(Path(path), self.root_dir)
        return key is not None and not is_excluded(key, self.exclude_patterns)


class GraphWatcher:
    """Feeds filesystem events for an analyzed project into ``engine.update()``.

    Args:
        engine: An engine that has already run ``analyze()``
        on_update: Called with each new snapshot, from the worker thread
    """

    def __init__(
        self,
        engine: DependencyGraphEngine,
        on_update: Optional[Callable[[GraphSnapshot], object]] = None,
        debounce_seconds: Optional[float] = None,
    ):
        self.engine = engine
        self.on_update = on_update
        self.debounce_seconds = (
            engine.config.debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self.scheduler: Optional[DebouncedScheduler] = None

    def translate(self, changes: Iterable[tuple[Change, str]]) -> list[FileChange]:
        """Map watchfiles events to FileChanges with root-relative keys."""
        root_dir = self.engine.root_dir
        result = []
        for change, path in sorted(changes, key=lambda item: item[1]):
            kind = _CHANGE_KINDS.get(change)
            key = relative_key(Path(path), root_dir) if root_dir is not None else None
            if kind is None or key is None:
                continue
            result.append(FileChange(path=key, kind=kind))
        return result

    def apply(self, batch: list[FileChange]) -> GraphSnapshot:
        snapshot = self.engine.update(batch)
        if self.on_update is not None:
            self.on_update(snapshot)
        return snapshot

    async def run(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """Watch until ``stop_event`` is set (or the task is cancelled)."""
        root_dir = self.engine.root_dir
        if root_dir is None:
            raise GraphNotInitializedError("watch")

        self.scheduler = DebouncedScheduler(self.apply, self.debounce_seconds)
        watch_filter = _ExcludeFilter(root_dir, self.engine.config.exclude_patterns)
        logger.info(f"Watching {root_dir} for changes")

        try:
            async for changes in awatch(
                root_dir,
                stop_event=stop_event,
                watch_filter=watch_filter,
                debounce=200,
            ):
                batch = self.translate(changes)
                if batch:
                    logger.debug(f"Detected {len(batch)} changed file(s)")
                    self.scheduler.schedule(batch)
        finally:
            self.scheduler.cancel()
            await self.scheduler.wait_idle()
