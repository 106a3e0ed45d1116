"""Import specifier resolution to in-project node keys."""

import posixpath
from collections.abc import Collection
from enum import Enum
from typing import Optional, Sequence


class SpecifierKind(str, Enum):
    RELATIVE = "relative"
    ALIAS = "alias"
    EXTERNAL = "external"


class PathResolver:
    """Maps raw import specifiers to node keys.

    Resolution order:
      1. Relative (``./x``, ``../x``; Python ``.x``, ``..pkg.x``): joined
         with the importer's directory, then looked up.
      2. Alias-rooted (``@/x``): prefix replaced by the source root, then
         looked up.
      3. Anything else is an external package: None, never an error.

    Lookup tries the path as written, then each extension in order, then
    ``index.<ext>`` (or ``__init__.py``) inside the path as a directory.
    A path outside ``known_paths`` resolves to None.
    """

    def __init__(
        self,
        known_paths: Collection[str],
        extensions: Sequence[str] = (".ts", ".tsx", ".js", ".jsx", ".py"),
        alias_prefix: str = "@/",
        source_root: str = "src",
    ):
        self.known_paths = known_paths
        self.extensions = tuple(extensions)
        self.alias_prefix = alias_prefix
        self.source_root = source_root.strip("/")

    def classify(self, specifier: str, importer: str) -> SpecifierKind:
        if _is_path_relative(specifier) or (
            importer.endswith(".py") and specifier.startswith(".")
        ):
            return SpecifierKind.RELATIVE
        if specifier.startswith(self.alias_prefix):
            return SpecifierKind.ALIAS
        return SpecifierKind.EXTERNAL

    def resolve(self, specifier: str, importer: str) -> Optional[str]:
        """Resolve ``specifier`` as written in the file ``importer``.

        Args:
            specifier: Raw import source
            importer: Node key of the importing file

        Returns:
            Node key of the target, or None if external or unresolvable
        """
        specifier = specifier.strip()
        kind = self.classify(specifier, importer)

        if kind is SpecifierKind.RELATIVE:
            base_dir = posixpath.dirname(importer)
            if importer.endswith(".py"):
                target = _python_relative_target(specifier, base_dir)
                # Bare dots name a package, never a module file
                package_only = not specifier.lstrip(".")
                return self._lookup(target, python=True, package_only=package_only)
            return self._lookup(posixpath.join(base_dir, specifier), python=False)

        if kind is SpecifierKind.ALIAS:
            rest = specifier[len(self.alias_prefix) :]
            target = posixpath.join(self.source_root, rest) if self.source_root else rest
            return self._lookup(target, python=False)

        return None

    def resolve_submodules(
        self, specifier: str, names: Sequence[str], importer: str
    ) -> list[str]:
        """Imported names that are modules of a relatively imported package.

        ``from . import b`` in ``pkg/a.py`` depends on ``pkg/b.py`` (or
        ``pkg/b/__init__.py``), not only on the package. Names that match
        no file are plain attributes and yield nothing.
        """
        specifier = specifier.strip()
        if not importer.endswith(".py"):
            return []
        if self.classify(specifier, importer) is not SpecifierKind.RELATIVE:
            return []

        package = _python_relative_target(specifier, posixpath.dirname(importer))
        found = []
        for name in names:
            if not name.isidentifier():
                continue
            resolved = self._lookup(posixpath.join(package, name), python=True)
            if resolved is not None:
                found.append(resolved)
        return found

    def _lookup(self, target: str, python: bool, package_only: bool = False) -> Optional[str]:
        target = posixpath.normpath(target)
        if target == ".." or target.startswith("../") or target.startswith("/"):
            return None

        extensions = (".py",) if python else self.extensions
        candidates = []
        if target != "." and not package_only:
            candidates.append(target)
            candidates.extend(target + ext for ext in extensions)
        directory = "" if target == "." else target + "/"
        if python:
            candidates.append(directory + "__init__.py")
        else:
            candidates.extend(directory + "index" + ext for ext in self.extensions)

        for candidate in candidates:
            if candidate in self.known_paths:
                return candidate
        return None


def _is_path_relative(specifier: str) -> bool:
    return specifier in (".", "..") or specifier.startswith(("./", "../"))


def _python_relative_target(specifier: str, base_dir: str) -> str:
    """``..pkg.mod`` from ``a/b/x.py`` -> ``a/pkg/mod``.

    One dot is the importer's package; each further dot goes up a level.
    """
    dots = len(specifier) - len(specifier.lstrip("."))
    module = specifier[dots:]
    target = base_dir
    for _ in range(dots - 1):
        target = posixpath.dirname(target) if target else ".."
    if module:
        target = posixpath.join(target, module.replace(".", "/"))
    return target or "."
