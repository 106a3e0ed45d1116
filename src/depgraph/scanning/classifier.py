"""File classification: FileRecord snapshot plus Source/Test/Config/Asset tag."""

from pathlib import Path

from ..exceptions import FileAccessError
from ..logging_config import get_logger
from .languages import (
    BINARY_EXTENSIONS,
    CONFIG_NAME_PATTERNS,
    SOURCE_EXTENSIONS,
    TEST_MARKERS,
    detect_language,
    is_parseable,
)
from .models import FileRecord, FileType

logger = get_logger(__name__)


def classify_path(relative_path: str) -> FileType:
    """Assign a FileType from the relative path alone.

    Order (first match wins): test marker anywhere in the path, config
    file name or dotfile, recognized source extension, otherwise asset.
    """
    lowered = relative_path.lower()
    name = lowered.rsplit("/", 1)[-1]

    if any(marker in lowered for marker in TEST_MARKERS):
        return FileType.TEST
    if name.startswith(".") or any(pattern in name for pattern in CONFIG_NAME_PATTERNS):
        return FileType.CONFIG
    if Path(name).suffix in SOURCE_EXTENSIONS:
        return FileType.SOURCE
    return FileType.ASSET


class FileClassifier:
    """Builds FileRecords for discovered paths under a project root."""

    def __init__(self, root_dir: Path, max_file_size_bytes: int = 1024 * 1024):
        self.root_dir = Path(root_dir).resolve()
        self.max_file_size_bytes = max_file_size_bytes

    def classify(self, filepath: Path) -> FileRecord:
        """
        Stat the file and build its record.

        Args:
            filepath: Absolute path under the root

        Returns:
            Immutable FileRecord

        Raises:
            FileAccessError: If the file cannot be stat'ed or read
        """
        filepath = Path(filepath)
        relative = filepath.relative_to(self.root_dir).as_posix()
        extension = filepath.suffix.lower()

        try:
            st = filepath.stat()
        except OSError as e:
            raise FileAccessError(filepath, f"Cannot stat file: {e}")

        lines = 0
        if extension not in BINARY_EXTENSIONS and st.st_size <= self.max_file_size_bytes:
            lines = self._count_lines(filepath)

        return FileRecord(
            path=str(filepath),
            relative_path=relative,
            name=filepath.name,
            extension=extension,
            size=st.st_size,
            last_modified=st.st_mtime,
            lines=lines,
            language=detect_language(extension),
            file_type=classify_path(relative),
        )

    def is_graph_eligible(self, record: FileRecord) -> bool:
        """Source and test files in a parseable language, within the size limit."""
        return (
            record.file_type in (FileType.SOURCE, FileType.TEST)
            and is_parseable(record.language)
            and record.size <= self.max_file_size_bytes
        )

    @staticmethod
    def _count_lines(filepath: Path) -> int:
        try:
            data = filepath.read_bytes()
        except OSError as e:
            raise FileAccessError(filepath, f"Cannot read file: {e}")
        if not data:
            return 0
        return data.count(b"\n") + (0 if data.endswith(b"\n") else 1)
