"""File discovery: depth-first walk of the project tree with pruning."""

import os
from pathlib import Path
from typing import Iterable, Optional

from ..logging_config import get_logger

logger = get_logger(__name__)


def is_excluded(relative_path: str, exclude_patterns: Iterable[str]) -> bool:
    """True if any pattern occurs anywhere in the relative path.

    This is a plain substring test, not a glob: ``dist`` also excludes
    ``src/distance.ts``.
    """
    return any(pattern in relative_path for pattern in exclude_patterns)


class FileDiscoverer:
    """Walks a root directory and returns a flat, sorted list of files."""

    def __init__(
        self,
        root_dir: Path,
        exclude_patterns: Iterable[str],
        max_files: int = 10000,
        follow_symlinks: bool = False,
    ):
        """
        Initialize discoverer.

        Args:
            root_dir: Root directory to walk
            exclude_patterns: Substrings that prune matching directories/files
            max_files: Stop after this many files
            follow_symlinks: Descend into symlinked directories
        """
        self.root_dir = Path(root_dir).resolve()
        self.exclude_patterns = list(exclude_patterns)
        self.max_files = max_files
        self.follow_symlinks = follow_symlinks

        self.files_skipped = 0
        self.dirs_errored = 0

    def discover(self) -> list[Path]:
        """
        Walk the tree depth-first.

        Unreadable directories are logged and skipped; they never abort the
        walk.

        Returns:
            Absolute file paths sorted by path
        """
        self.files_skipped = 0
        self.dirs_errored = 0
        files: list[Path] = []

        # Track visited directories to break symlink loops
        visited: set[tuple[int, int]] = set()
        stack: list[Path] = [self.root_dir]

        while stack and len(files) < self.max_files:
            directory = stack.pop()
            try:
                st = directory.stat()
                key = (st.st_dev, st.st_ino)
                if key in visited:
                    logger.debug(f"Skipped (already visited): {directory}")
                    continue
                visited.add(key)
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except OSError as e:
                self.dirs_errored += 1
                logger.warning(f"Cannot read directory {directory}: {e}")
                continue

            subdirs: list[Path] = []
            for entry in entries:
                path = Path(entry.path)
                relative = path.relative_to(self.root_dir).as_posix()
                if is_excluded(relative, self.exclude_patterns):
                    self.files_skipped += 1
                    logger.debug(f"Skipped (pattern): {relative}")
                    continue
                try:
                    if entry.is_dir(follow_symlinks=self.follow_symlinks):
                        subdirs.append(path)
                    elif entry.is_file(follow_symlinks=self.follow_symlinks):
                        files.append(path.absolute())
                except OSError as e:
                    self.files_skipped += 1
                    logger.warning(f"Cannot stat {path}: {e}")
                    continue

                if len(files) >= self.max_files:
                    logger.warning(f"Reached max files limit ({self.max_files})")
                    break

            # Reversed so the alphabetically-first directory is popped first
            stack.extend(reversed(subdirs))

        files.sort()
        logger.info(
            f"Discovery complete: {len(files)} files, {self.files_skipped} skipped, "
            f"{self.dirs_errored} unreadable directories"
        )
        return files


def discover_files(
    root_dir: Path,
    exclude_patterns: Iterable[str],
    max_files: int = 10000,
    follow_symlinks: bool = False,
) -> list[Path]:
    """Convenience wrapper around FileDiscoverer.discover()."""
    return FileDiscoverer(
        root_dir, exclude_patterns, max_files=max_files, follow_symlinks=follow_symlinks
    ).discover()


def relative_key(path: Path, root_dir: Path) -> Optional[str]:
    """POSIX path of ``path`` relative to ``root_dir``, or None if outside it."""
    try:
        return Path(path).relative_to(root_dir).as_posix()
    except ValueError:
        return None
