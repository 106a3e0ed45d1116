"""Analysis-related exceptions: file access, graph lifecycle."""

from pathlib import Path

from .base import DepGraphError


class AnalysisError(DepGraphError):
    """Base class for analysis-related errors."""

    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class GraphNotInitializedError(AnalysisError):
    """Raised when the graph is queried before a successful analysis."""

    def __init__(self, operation: str):
        super().__init__(
            "Dependency graph is not initialized",
            details={"operation": operation},
        )
        self.operation = operation
