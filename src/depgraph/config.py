"""Configuration loading and management for depgraph.

Configuration sources are merged in priority order:
    1. Defaults (defined in GraphConfig)
    2. Global config (~/.depgraph.toml)
    3. Project config (./depgraph.toml)
    4. Explicit config file
    5. Environment variables (DEPGRAPH_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(top_n=5)
    >>> config.top_n
    5
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

DEFAULT_EXCLUDE_PATTERNS = [
    "node_modules",
    ".git",
    ".vscode",
    "dist",
    "build",
    "coverage",
    ".next",
    ".nuxt",
    "out",
    "target",
    "bin",
    "obj",
    ".vs",
    "__pycache__",
    ".pytest_cache",
    "venv",
    "env",
]

DEFAULT_RESOLVE_EXTENSIONS = [".ts", ".tsx", ".js", ".jsx", ".py"]


@dataclass(frozen=True)
class GraphConfig:
    """Configuration for dependency graph analysis.

    Attributes:
        File discovery:
            exclude_patterns: Substrings; any directory or file whose path
                relative to the root contains one of them is pruned
            max_files: Discovery stops after this many files
            max_file_size_mb: Larger files are listed but never parsed
            follow_symlinks: Descend into symlinked directories

        Import resolution:
            resolve_extensions: Ordered extensions tried for extensionless
                specifiers and for ``index.<ext>`` directory entries
            alias_prefix: Root-relative specifier prefix (``@/`` by default)
            source_root: Directory the alias prefix maps to

        Reporting:
            top_n: Number of entries in most-connected file rankings

        Watching:
            debounce_seconds: Quiet period before a batch of file events
                is applied to the graph
    """

    # File discovery
    exclude_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    max_files: int = 10000
    max_file_size_mb: float = 1.0
    follow_symlinks: bool = False

    # Import resolution
    resolve_extensions: list[str] = field(
        default_factory=lambda: list(DEFAULT_RESOLVE_EXTENSIONS)
    )
    alias_prefix: str = "@/"
    source_root: str = "src"

    # Reporting
    top_n: int = 10

    # Watching
    debounce_seconds: float = 1.0

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_files < 1:
            raise InvalidConfigError("max_files", self.max_files, "must be at least 1")
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError(
                "max_file_size_mb", self.max_file_size_mb, "must be positive"
            )
        if self.top_n < 1:
            raise InvalidConfigError("top_n", self.top_n, "must be at least 1")
        if self.debounce_seconds < 0:
            raise InvalidConfigError(
                "debounce_seconds", self.debounce_seconds, "must be non-negative"
            )
        for ext in self.resolve_extensions:
            if not ext.startswith("."):
                raise InvalidConfigError("resolve_extensions", ext, "must start with '.'")
        if not self.alias_prefix:
            raise InvalidConfigError("alias_prefix", self.alias_prefix, "must not be empty")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


def load_config(config_file: Optional[Path] = None, **overrides) -> GraphConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); ``None``
            values are ignored

    Returns:
        Validated GraphConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".depgraph.toml"
    if global_config.exists():
        merged.update(_load_toml_section(global_config))

    project_config = Path.cwd() / "depgraph.toml"
    if project_config.exists():
        merged.update(_load_toml_section(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_section(config_file))

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return GraphConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from DEPGRAPH_* environment variables.

    Only scalar fields are read; list fields (exclude_patterns,
    resolve_extensions) must come from a config file.
    """
    type_hints = get_type_hints(GraphConfig)

    result: dict[str, Any] = {}

    for field_name in GraphConfig.__dataclass_fields__:
        env_key = f"DEPGRAPH_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that can't be expressed as a single string.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)
    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str:
        return value

    return None


def _load_toml_section(path: Path) -> dict:
    """Load a TOML file and return its settings.

    A ``[depgraph]`` table is used when present, otherwise the top level.
    """
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    section = data.get("depgraph", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid config file '{path}': [depgraph] must be a table")
    return dict(section)


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
