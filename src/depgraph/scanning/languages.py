"""Language tables: the single source of truth for classification and extraction.

Each parseable language maps to a Grammar: an ordered table of line-shape
rules for imports and another for exports. A line is tried against each
rule in order and the first match wins; unmatched lines contribute nothing.

Adding a new language:
  1. Map its extensions in EXTENSION_LANGUAGES (and SOURCE_EXTENSIONS).
  2. Add a Grammar to GRAMMARS and point LANGUAGE_GRAMMARS at it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Union

from .models import ExportKind, ExportRecord, ImportRecord

Record = Union[ImportRecord, ExportRecord]
RuleBuilder = Callable[["re.Match[str]", int], list]


@dataclass(frozen=True)
class LineRule:
    """A single line shape: a compiled pattern plus a record builder."""

    name: str
    pattern: re.Pattern
    build: RuleBuilder


@dataclass(frozen=True)
class Grammar:
    """Ordered import and export rules for one language family."""

    name: str
    import_rules: tuple[LineRule, ...]
    export_rules: tuple[LineRule, ...]
    comment_prefixes: tuple[str, ...] = ()


# ── Extension tables ───────────────────────────────────────────────

EXTENSION_LANGUAGES: dict[str, str] = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".vue": "vue",
    ".py": "python",
    ".java": "java",
    ".cs": "csharp",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".go": "go",
    ".rs": "rust",
    ".php": "php",
    ".rb": "ruby",
    ".swift": "swift",
    ".kt": "kotlin",
    ".scala": "scala",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".json": "json",
    ".xml": "xml",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".md": "markdown",
}

# Extensions classified as Source (when not a test or config file).
SOURCE_EXTENSIONS = frozenset(
    {
        ".ts",
        ".tsx",
        ".mts",
        ".cts",
        ".js",
        ".jsx",
        ".mjs",
        ".cjs",
        ".vue",
        ".py",
        ".java",
        ".cs",
        ".c",
        ".h",
        ".cpp",
        ".cc",
        ".hpp",
        ".go",
        ".rs",
        ".php",
        ".rb",
        ".swift",
        ".kt",
        ".scala",
    }
)

# Substrings of the lower-cased relative path that mark a test file.
TEST_MARKERS: tuple[str, ...] = ("test", "spec", "__tests__", "__test__")

# Substrings of the lower-cased base name that mark a configuration file.
CONFIG_NAME_PATTERNS: tuple[str, ...] = (
    "package.json",
    "package-lock.json",
    "tsconfig",
    "jsconfig",
    "webpack.config",
    "vite.config",
    "rollup.config",
    "next.config",
    "nuxt.config",
    "tailwind.config",
    "babel.config",
    "jest.config",
    "eslint.config",
    "pyproject.toml",
    "setup.cfg",
    "setup.py",
    "tox.ini",
    "requirements",
    "pipfile",
    "cargo.toml",
    "go.mod",
    "go.sum",
    "pom.xml",
    "build.gradle",
    "makefile",
    "dockerfile",
)

# Never read these as text.
BINARY_EXTENSIONS = frozenset(
    {
        ".exe",
        ".dll",
        ".so",
        ".dylib",
        ".o",
        ".a",
        ".class",
        ".jar",
        ".pyc",
        ".wasm",
        ".png",
        ".jpg",
        ".jpeg",
        ".gif",
        ".bmp",
        ".ico",
        ".webp",
        ".mp3",
        ".mp4",
        ".wav",
        ".zip",
        ".tar",
        ".gz",
        ".7z",
        ".pdf",
        ".ttf",
        ".otf",
        ".woff",
        ".woff2",
        ".db",
        ".sqlite",
        ".bin",
    }
)


# ── Shared helpers for rule builders ───────────────────────────────

_QUOTED = r"""['"`]([^'"`]+)['"`]"""


def _split_names(raw: str) -> list[str]:
    """Split ``a, b as c, type d`` into clauses, dropping empties."""
    names = []
    for part in raw.split(","):
        part = part.strip().rstrip("\\").strip()
        if part.startswith("type "):
            part = part[5:].strip()
        if part:
            names.append(part)
    return names


def _imported_names(raw: str) -> tuple[str, ...]:
    """Names as exported by the target module: ``b as c`` yields ``b``."""
    return tuple(re.split(r"\s+as\s+", name)[0] for name in _split_names(raw))


def _exported_names(raw: str) -> list[str]:
    """Names as seen by importers: ``b as c`` yields ``c``."""
    return [re.split(r"\s+as\s+", name)[-1] for name in _split_names(raw)]


def _rule(name: str, pattern: str, build: RuleBuilder) -> LineRule:
    return LineRule(name=name, pattern=re.compile(pattern), build=build)


# ── ECMAScript (JavaScript / TypeScript) ───────────────────────────


def _es_default_and_named(m, line):
    names = (m.group(1),) + _imported_names(m.group(2))
    return [ImportRecord(m.group(3), names, is_default=True, line_number=line)]


def _es_export_list(m, line):
    records = []
    for name in _exported_names(m.group(1)):
        kind = ExportKind.DEFAULT if name == "default" else ExportKind.VARIABLE
        records.append(ExportRecord(name, kind, line))
    return records


def _es_reexport(m, line):
    if m.group(2) is not None:
        return [ImportRecord(m.group(3), _imported_names(m.group(2)), line_number=line)]
    alias = (m.group(1),) if m.group(1) else ()
    return [ImportRecord(m.group(3), alias, is_namespace=True, line_number=line)]


_ES_IMPORT_RULES = (
    _rule(
        "namespace",
        r"^\s*import\s+(?:type\s+)?\*\s+as\s+([\w$]+)\s+from\s+" + _QUOTED,
        lambda m, line: [
            ImportRecord(m.group(2), (m.group(1),), is_namespace=True, line_number=line)
        ],
    ),
    _rule(
        "default_and_namespace",
        r"^\s*import\s+([\w$]+)\s*,\s*\*\s+as\s+([\w$]+)\s+from\s+" + _QUOTED,
        lambda m, line: [
            ImportRecord(
                m.group(3),
                (m.group(1), m.group(2)),
                is_default=True,
                is_namespace=True,
                line_number=line,
            )
        ],
    ),
    _rule(
        "default_and_named",
        r"^\s*import\s+(?:type\s+)?([\w$]+)\s*,\s*\{([^}]*)\}\s*from\s+" + _QUOTED,
        _es_default_and_named,
    ),
    _rule(
        "named",
        r"^\s*import\s+(?:type\s+)?\{([^}]*)\}\s*from\s+" + _QUOTED,
        lambda m, line: [ImportRecord(m.group(2), _imported_names(m.group(1)), line_number=line)],
    ),
    _rule(
        "default",
        r"^\s*import\s+(?:type\s+)?([\w$]+)\s+from\s+" + _QUOTED,
        lambda m, line: [
            ImportRecord(m.group(2), (m.group(1),), is_default=True, line_number=line)
        ],
    ),
    _rule(
        "side_effect",
        r"^\s*import\s+" + _QUOTED,
        lambda m, line: [ImportRecord(m.group(1), line_number=line)],
    ),
    _rule(
        "reexport",
        r"^\s*export\s+(?:type\s+)?(?:\*(?:\s+as\s+([\w$]+))?|\{([^}]*)\})\s*from\s+" + _QUOTED,
        _es_reexport,
    ),
    _rule(
        "require_named",
        r"^\s*(?:const|let|var)\s+\{([^}]*)\}\s*=\s*require\(\s*" + _QUOTED + r"\s*\)",
        lambda m, line: [
            ImportRecord(m.group(2), _imported_names(m.group(1).replace(":", " as ")), line_number=line)
        ],
    ),
    _rule(
        "require_default",
        r"^\s*(?:const|let|var)\s+([\w$]+)\s*=\s*require\(\s*" + _QUOTED + r"\s*\)",
        lambda m, line: [
            ImportRecord(m.group(2), (m.group(1),), is_default=True, line_number=line)
        ],
    ),
    _rule(
        "require",
        r".*?\brequire\(\s*" + _QUOTED + r"\s*\)",
        lambda m, line: [ImportRecord(m.group(1), line_number=line)],
    ),
)


def _es_default_export(m, line):
    name = m.group(1) if m.lastindex else ""
    return [ExportRecord(name or "default", ExportKind.DEFAULT, line)]


_ES_EXPORT_RULES = (
    _rule(
        "default_function",
        r"^\s*export\s+default\s+(?:async\s+)?function\*?\s*([\w$]*)",
        _es_default_export,
    ),
    _rule(
        "default_class",
        r"^\s*export\s+default\s+(?:abstract\s+)?class\b(?:\s+(?!extends\b|implements\b)([\w$]+))?",
        _es_default_export,
    ),
    _rule("default", r"^\s*export\s+default\b", _es_default_export),
    _rule(
        "function",
        r"^\s*export\s+(?:declare\s+)?(?:async\s+)?function\*?\s+([\w$]+)",
        lambda m, line: [ExportRecord(m.group(1), ExportKind.FUNCTION, line)],
    ),
    _rule(
        "class",
        r"^\s*export\s+(?:declare\s+)?(?:abstract\s+)?class\s+([\w$]+)",
        lambda m, line: [ExportRecord(m.group(1), ExportKind.CLASS, line)],
    ),
    _rule(
        "variable",
        r"^\s*export\s+(?:declare\s+)?(?:const|let|var)\s+([\w$]+)",
        lambda m, line: [ExportRecord(m.group(1), ExportKind.VARIABLE, line)],
    ),
    _rule(
        "interface_or_enum",
        r"^\s*export\s+(?:declare\s+)?(?:const\s+)?(?:interface|enum)\s+([\w$]+)",
        lambda m, line: [ExportRecord(m.group(1), ExportKind.CLASS, line)],
    ),
    _rule(
        "type_alias",
        r"^\s*export\s+(?:declare\s+)?type\s+([\w$]+)\s*[=<]",
        lambda m, line: [ExportRecord(m.group(1), ExportKind.VARIABLE, line)],
    ),
    _rule("list", r"^\s*export\s+(?:type\s+)?\{([^}]*)\}", _es_export_list),
)


# ── Python ─────────────────────────────────────────────────────────


def _py_import_modules(m, line):
    records = []
    for clause in _split_names(m.group(1)):
        parts = re.split(r"\s+as\s+", clause)
        module = parts[0]
        bound = parts[-1] if len(parts) > 1 else module.split(".")[0]
        records.append(ImportRecord(module, (bound,), is_namespace=True, line_number=line))
    return records


def _py_from_import(m, line):
    raw = m.group(2).split("#")[0].strip().rstrip("(").rstrip(")")
    return [ImportRecord(m.group(1), _imported_names(raw), line_number=line)]


_PY_MODULE = r"(\.+[\w.]*|[A-Za-z_][\w.]*)"

_PY_IMPORT_RULES = (
    _rule(
        "from_star",
        r"^\s*from\s+" + _PY_MODULE + r"\s+import\s+\*",
        lambda m, line: [ImportRecord(m.group(1), is_namespace=True, line_number=line)],
    ),
    _rule(
        "from",
        r"^\s*from\s+" + _PY_MODULE + r"\s+import\s+\(?\s*([^)]*)",
        _py_from_import,
    ),
    _rule(
        "import",
        r"^\s*import\s+([A-Za-z_][\w.]*(?:\s+as\s+\w+)?(?:\s*,\s*[A-Za-z_][\w.]*(?:\s+as\s+\w+)?)*)",
        _py_import_modules,
    ),
)

# Top-level definitions are implicit exports; indented ones are not.
_PY_EXPORT_RULES = (
    _rule(
        "function",
        r"^(?:async\s+)?def\s+(\w+)",
        lambda m, line: [ExportRecord(m.group(1), ExportKind.FUNCTION, line)],
    ),
    _rule(
        "class",
        r"^class\s+(\w+)",
        lambda m, line: [ExportRecord(m.group(1), ExportKind.CLASS, line)],
    ),
)


# ── Java ───────────────────────────────────────────────────────────


def _java_import(m, line):
    source = m.group(2)
    if m.group(3):
        return [ImportRecord(source, is_namespace=True, line_number=line)]
    return [ImportRecord(source, (source.rsplit(".", 1)[-1],), line_number=line)]


_JAVA_IMPORT_RULES = (
    _rule("import", r"^\s*import\s+(static\s+)?([\w.]+?)(\.\*)?\s*;", _java_import),
)

_JAVA_EXPORT_RULES = (
    _rule(
        "public_type",
        r"^\s*public\s+(?:(?:abstract|final|static|sealed)\s+)*(?:class|interface|enum|record)\s+(\w+)",
        lambda m, line: [ExportRecord(m.group(1), ExportKind.CLASS, line)],
    ),
)


# ── Grammar registry ───────────────────────────────────────────────

GRAMMARS: dict[str, Grammar] = {
    "ecmascript": Grammar(
        name="ecmascript",
        import_rules=_ES_IMPORT_RULES,
        export_rules=_ES_EXPORT_RULES,
        comment_prefixes=("//", "/*", "*"),
    ),
    "python": Grammar(
        name="python",
        import_rules=_PY_IMPORT_RULES,
        export_rules=_PY_EXPORT_RULES,
        comment_prefixes=("#",),
    ),
    "java": Grammar(
        name="java",
        import_rules=_JAVA_IMPORT_RULES,
        export_rules=_JAVA_EXPORT_RULES,
        comment_prefixes=("//", "/*", "*"),
    ),
}

LANGUAGE_GRAMMARS: dict[str, str] = {
    "typescript": "ecmascript",
    "javascript": "ecmascript",
    "python": "python",
    "java": "java",
}


def detect_language(extension: str) -> str:
    """Language tag for an extension, or "unknown"."""
    return EXTENSION_LANGUAGES.get(extension.lower(), "unknown")


def get_grammar(language: str) -> Grammar | None:
    """Grammar for a language tag, or None if the language isn't parseable."""
    grammar_name = LANGUAGE_GRAMMARS.get(language)
    if grammar_name is None:
        return None
    return GRAMMARS[grammar_name]


def is_parseable(language: str) -> bool:
    return language in LANGUAGE_GRAMMARS
