"""Shared test fixtures for depgraph."""

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Factory writing ``{relative_path: content}`` under a fresh project root."""
    root = tmp_path / "project"
    root.mkdir()

    def _make(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            target = root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def scenario_project(make_project) -> Path:
    """a.ts imports b.ts; c.ts imports both."""
    return make_project(
        {
            "a.ts": "import { x } from './b';\n",
            "b.ts": "export const x = 1;\n",
            "c.ts": "import './a';\nimport './b';\n",
        }
    )


@pytest.fixture
def check_bidirectional():
    """Asserts every edge is recorded on both ends and only existing nodes are referenced."""

    def _check(nodes) -> None:
        for key, info in nodes.items():
            for dep in info.dependencies:
                assert dep in nodes, f"{key} -> {dep} points outside the graph"
                assert key in nodes[dep].dependents, f"{key} -> {dep} missing reverse edge"
            for dependent in info.dependents:
                assert dependent in nodes
                assert key in nodes[dependent].dependencies

    return _check
