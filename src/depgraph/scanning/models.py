"""Scan-time models: file identity, classification, import/export records.

FileRecord is an immutable snapshot taken when a file is scanned; a re-scan
replaces it wholesale. ImportRecord and ExportRecord are the structured
output of line-level extraction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FileType(str, Enum):
    """Category assigned by the classifier."""

    SOURCE = "source"
    TEST = "test"
    CONFIG = "config"
    ASSET = "asset"


class ExportKind(str, Enum):
    FUNCTION = "function"
    CLASS = "class"
    VARIABLE = "variable"
    DEFAULT = "default"


@dataclass(frozen=True)
class FileRecord:
    """Identity of a scanned file.

    Attributes:
        path: Absolute path
        relative_path: POSIX path relative to the project root (graph key)
        name: Base name
        extension: Lower-cased suffix including the dot ("" if none)
        size: Size in bytes
        last_modified: mtime as a POSIX timestamp
        lines: Line count (0 for binary or oversized files)
        language: Extension-derived language tag ("unknown" if unrecognized)
        file_type: Classifier category
    """

    path: str
    relative_path: str
    name: str
    extension: str
    size: int
    last_modified: float
    lines: int
    language: str
    file_type: FileType

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "relative_path": self.relative_path,
            "name": self.name,
            "extension": self.extension,
            "size": self.size,
            "last_modified": self.last_modified,
            "lines": self.lines,
            "language": self.language,
            "file_type": self.file_type.value,
        }


@dataclass(frozen=True)
class ImportRecord:
    """One import declaration.

    Attributes:
        source: Raw specifier as written ("./b", "react", "..models")
        imports: Bound symbol names, empty for side-effect imports
        is_default: Default import (``import x from "m"``)
        is_namespace: Whole-module binding (``* as ns``, ``import m``)
        line_number: 1-indexed originating line
    """

    source: str
    imports: tuple[str, ...] = field(default_factory=tuple)
    is_default: bool = False
    is_namespace: bool = False
    line_number: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "imports": list(self.imports),
            "is_default": self.is_default,
            "is_namespace": self.is_namespace,
            "line_number": self.line_number,
        }


@dataclass(frozen=True)
class ExportRecord:
    """One exported symbol."""

    name: str
    kind: ExportKind
    line_number: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "kind": self.kind.value, "line_number": self.line_number}
