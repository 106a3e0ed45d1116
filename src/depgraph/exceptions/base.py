"""Root of the depgraph exception tree."""

from typing import Any, Mapping, Optional


class DepGraphError(Exception):
    """Base exception for all depgraph errors.

    ``details`` holds structured context (paths, keys, reasons) as strings.
    ``str()`` appends the entries the message does not already mention.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: dict[str, str] = {k: str(v) for k, v in (details or {}).items()}

    def __str__(self) -> str:
        extra = [f"{k}={v}" for k, v in self.details.items() if v not in self.message]
        if extra:
            return f"{self.message} ({', '.join(extra)})"
        return self.message
