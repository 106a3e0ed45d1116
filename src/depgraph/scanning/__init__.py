"""File discovery, classification, and import/export extraction."""

from .classifier import FileClassifier, classify_path
from .discovery import FileDiscoverer, discover_files, is_excluded, relative_key
from .extractor import ExtractionResult, ImportExportExtractor
from .languages import (
    EXTENSION_LANGUAGES,
    GRAMMARS,
    SOURCE_EXTENSIONS,
    Grammar,
    LineRule,
    detect_language,
    get_grammar,
    is_parseable,
)
from .models import ExportKind, ExportRecord, FileRecord, FileType, ImportRecord

__all__ = [
    # Discovery
    "FileDiscoverer",
    "discover_files",
    "is_excluded",
    "relative_key",
    # Classification
    "FileClassifier",
    "classify_path",
    # Extraction
    "ImportExportExtractor",
    "ExtractionResult",
    "Grammar",
    "LineRule",
    "GRAMMARS",
    "EXTENSION_LANGUAGES",
    "SOURCE_EXTENSIONS",
    "detect_language",
    "get_grammar",
    "is_parseable",
    # Models
    "FileRecord",
    "FileType",
    "ImportRecord",
    "ExportRecord",
    "ExportKind",
]
