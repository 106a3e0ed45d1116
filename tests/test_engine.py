"""End-to-end tests for DependencyGraphEngine."""

import shutil
from pathlib import Path

import pytest

from depgraph import ChangeKind, DependencyGraphEngine, FileChange, GraphConfig, analyze
from depgraph.exceptions import AnalysisError, GraphNotInitializedError, InvalidPathError
from depgraph.graph import CycleSeverity, GraphBuilder
from depgraph.scanning import FileType


@pytest.fixture
def engine() -> DependencyGraphEngine:
    return DependencyGraphEngine()


# ── Full analysis ─────────────────────────────────────────────────


class TestAnalyze:
    def test_scenario(self, engine, scenario_project, check_bidirectional):
        snapshot = engine.analyze(scenario_project)

        assert set(snapshot.nodes) == {"a.ts", "b.ts", "c.ts"}
        assert snapshot.edges() == [("a.ts", "b.ts"), ("c.ts", "a.ts"), ("c.ts", "b.ts")]
        assert engine.get_dependencies("b.ts").dependents == ("a.ts", "c.ts")
        assert engine.find_circular_dependencies() == []
        assert snapshot.depths["c.ts"] == 2
        check_bidirectional(snapshot.nodes)

    def test_two_file_cycle(self, engine, make_project):
        root = make_project({"x.ts": "import './y';\n", "y.ts": "import './x';\n"})
        engine.analyze(root)

        (cycle,) = engine.find_circular_dependencies()
        assert cycle.cycle == ("x.ts", "y.ts", "x.ts")
        assert cycle.severity is CycleSeverity.HIGH

    def test_three_file_cycle(self, engine, make_project):
        root = make_project(
            {
                "a.ts": "import { b } from './b';\n",
                "b.ts": "import { c } from './c';\n",
                "c.ts": "import { a } from './a';\n",
            }
        )
        engine.analyze(root)
        (cycle,) = engine.find_circular_dependencies()
        assert cycle.cycle == ("a.ts", "b.ts", "c.ts", "a.ts")
        assert cycle.severity is CycleSeverity.MEDIUM

    def test_external_imports_do_not_create_nodes(self, engine, make_project):
        root = make_project(
            {"app.tsx": "import React from 'react';\nimport { x } from './missing';\n"}
        )
        snapshot = engine.analyze(root)
        info = engine.get_dependencies("app.tsx")

        assert set(snapshot.nodes) == {"app.tsx"}
        assert info.dependencies == ()
        assert [imp.source for imp in info.imports] == ["react", "./missing"]
        assert info.unresolved == ("./missing",)

    def test_alias_imports(self, engine, make_project):
        root = make_project(
            {
                "src/lib/index.ts": "export const helper = 1;\n",
                "src/pages/home.tsx": "import { helper } from '@/lib';\n",
            }
        )
        engine.analyze(root)
        assert engine.get_dependencies("src/pages/home.tsx").dependencies == ("src/lib/index.ts",)

    def test_python_package(self, engine, make_project):
        root = make_project(
            {
                "pkg/__init__.py": "",
                "pkg/core.py": "import os\nfrom .models import User\n\ndef run():\n    pass\n",
                "pkg/models.py": "class User:\n    pass\n",
            }
        )
        engine.analyze(root)
        core = engine.get_dependencies("pkg/core.py")
        assert core.dependencies == ("pkg/models.py",)
        assert [e.name for e in engine.get_dependencies("pkg/models.py").exports] == ["User"]

    def test_python_from_package_import_module(self, engine, make_project):
        root = make_project(
            {
                "pkg/__init__.py": "",
                "pkg/a.py": "from . import b\n",
                "pkg/b.py": "VALUE = 1\n",
                "pkg/sub/c.py": "from .. import a, b\n",
            }
        )
        engine.analyze(root)

        assert engine.get_dependencies("pkg/a.py").dependencies == ("pkg/__init__.py", "pkg/b.py")
        assert engine.get_dependencies("pkg/sub/c.py").dependencies == (
            "pkg/__init__.py",
            "pkg/a.py",
            "pkg/b.py",
        )
        assert engine.get_dependencies("pkg/b.py").dependents == ("pkg/a.py", "pkg/sub/c.py")

    def test_only_source_and_test_files_become_nodes(self, engine, make_project):
        root = make_project(
            {
                "a.ts": "",
                "a.test.ts": "import './a';\n",
                "package.json": "{}",
                "README.md": "# readme\n",
                "main.go": "package main\n",
            }
        )
        snapshot = engine.analyze(root)

        assert set(snapshot.nodes) == {"a.ts", "a.test.ts"}
        assert snapshot.nodes["a.test.ts"].file_type is FileType.TEST
        assert {r.relative_path for r in engine.files} == {
            "a.ts",
            "a.test.ts",
            "package.json",
            "README.md",
            "main.go",
        }

    def test_excluded_directories(self, engine, make_project):
        root = make_project(
            {"src/app.ts": "import x from 'dep';\n", "node_modules/dep/index.js": ""}
        )
        engine.analyze(root)
        assert [r.relative_path for r in engine.files] == ["src/app.ts"]

    def test_oversized_file_is_listed_but_not_a_node(self, make_project):
        root = make_project({"small.ts": "", "big.ts": "export const x = 1;\n" * 100})
        engine = DependencyGraphEngine(GraphConfig(max_file_size_mb=0.001))
        snapshot = engine.analyze(root)

        assert set(snapshot.nodes) == {"small.ts"}
        assert "big.ts" in {r.relative_path for r in engine.files}

    def test_deterministic(self, scenario_project):
        first = DependencyGraphEngine()
        second = DependencyGraphEngine()
        first.analyze(scenario_project)
        second.analyze(scenario_project)
        assert first.get_graph_visualization() == second.get_graph_visualization()
        assert first.get_dependency_report() == second.get_dependency_report()

    def test_invalid_root(self, engine, tmp_path):
        with pytest.raises(InvalidPathError):
            engine.analyze(tmp_path / "missing")

    def test_failed_analysis_keeps_previous_graph(self, engine, scenario_project, monkeypatch):
        engine.analyze(scenario_project)
        previous = engine.snapshot

        def boom(self, nodes):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(GraphBuilder, "build", boom)
        with pytest.raises(AnalysisError):
            engine.analyze(scenario_project)
        assert engine.snapshot is previous

    def test_public_analyze_helper(self, scenario_project, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.chdir(tmp_path)
        engine = analyze(scenario_project, top_n=1)
        assert engine.config.top_n == 1
        assert len(engine.get_dependency_report().most_dependent_files) == 1


# ── Accessors ─────────────────────────────────────────────────────


class TestAccessors:
    @pytest.mark.parametrize(
        "call",
        [
            lambda e: e.get_dependencies("a.ts"),
            lambda e: e.find_circular_dependencies(),
            lambda e: e.get_graph_visualization(),
            lambda e: e.get_dependency_report(),
            lambda e: e.snapshot,
            lambda e: e.files,
            lambda e: e.update([]),
        ],
    )
    def test_uninitialized_access_raises(self, engine, call):
        with pytest.raises(GraphNotInitializedError):
            call(engine)

    def test_status_before_and_after(self, engine, scenario_project):
        assert engine.get_graph_status().to_dict() == {
            "initialized": False,
            "node_count": 0,
            "edge_count": 0,
            "cycle_count": 0,
        }
        engine.analyze(scenario_project)
        status = engine.get_graph_status()
        assert status.initialized
        assert (status.node_count, status.edge_count, status.cycle_count) == (3, 3, 0)

    def test_path_normalization(self, engine, make_project):
        root = make_project({"sub/a.ts": "", "sub/b.ts": "import './a';\n"})
        engine.analyze(root)

        assert engine.get_dependencies("sub/a.ts") is not None
        assert engine.get_dependencies("./sub/a.ts") is not None
        assert engine.get_dependencies("sub\\a.ts") is not None
        assert engine.get_dependencies(root / "sub" / "a.ts") is not None
        assert engine.get_dependencies(str(root / "sub" / "a.ts")) is not None
        assert engine.get_dependencies("nope.ts") is None

    def test_visualization(self, engine, scenario_project):
        engine.analyze(scenario_project)
        data = engine.get_graph_visualization().to_dict()

        assert [n["id"] for n in data["nodes"]] == ["a.ts", "b.ts", "c.ts"]
        b = data["nodes"][1]
        assert (b["dependency_count"], b["dependent_count"]) == (0, 2)
        assert {"from": "c.ts", "to": "a.ts", "type": "dependency"} in data["edges"]
        assert data["metrics"]["total_edges"] == 3

    def test_report(self, engine, scenario_project):
        engine.analyze(scenario_project)
        report = engine.get_dependency_report().to_dict()

        assert report["total_files"] == 3
        assert report["total_dependencies"] == 3
        assert report["circular_dependencies"] == []
        assert report["most_dependent_files"][0] == {"file": "b.ts", "count": 2}
        assert report["most_dependency_files"][0] == {"file": "c.ts", "count": 2}
        assert report["max_depth"] == 2
        assert report["average_depth"] == 1.0
        assert report["file_types"] == {"source": 3}

    def test_dispose(self, engine, scenario_project):
        engine.analyze(scenario_project)
        engine.dispose()
        assert not engine.get_graph_status().initialized
        with pytest.raises(GraphNotInitializedError):
            engine.get_dependencies("a.ts")


# ── Incremental updates ───────────────────────────────────────────


class TestUpdate:
    def test_delete(self, engine, scenario_project, check_bidirectional):
        engine.analyze(scenario_project)
        (scenario_project / "b.ts").unlink()
        snapshot = engine.update([FileChange("b.ts", ChangeKind.DELETED)])

        assert "b.ts" not in snapshot.nodes
        assert engine.get_dependencies("a.ts").dependencies == ()
        assert engine.get_dependencies("a.ts").unresolved == ("./b",)
        assert "b.ts" not in {r.relative_path for r in engine.files}
        check_bidirectional(snapshot.nodes)

    def test_create(self, engine, scenario_project, check_bidirectional):
        engine.analyze(scenario_project)
        (scenario_project / "d.ts").write_text("import './a';\n")
        snapshot = engine.update([FileChange(str(scenario_project / "d.ts"), ChangeKind.CREATED)])

        assert engine.get_dependencies("a.ts").dependents == ("c.ts", "d.ts")
        assert snapshot.depths["d.ts"] == 2
        check_bidirectional(snapshot.nodes)

    def test_modify_introduces_cycle(self, engine, scenario_project, check_bidirectional):
        engine.analyze(scenario_project)
        (scenario_project / "b.ts").write_text("import './c';\nexport const x = 1;\n")
        snapshot = engine.update([FileChange("b.ts", ChangeKind.CHANGED)])

        assert engine.get_dependencies("b.ts").dependencies == ("c.ts",)
        assert len(snapshot.cycles) == 1
        assert engine.get_graph_status().cycle_count == 1
        check_bidirectional(snapshot.nodes)

    def test_update_matches_fresh_analysis(self, engine, scenario_project):
        engine.analyze(scenario_project)
        (scenario_project / "a.ts").write_text("import './c';\n")
        (scenario_project / "e.ts").write_text("import './a';\nimport './b';\n")
        engine.update(
            [
                FileChange("a.ts", ChangeKind.CHANGED),
                FileChange("e.ts", ChangeKind.CREATED),
            ]
        )

        fresh = DependencyGraphEngine()
        fresh.analyze(scenario_project)
        assert dict(engine.snapshot.nodes) == dict(fresh.snapshot.nodes)
        assert engine.find_circular_dependencies() == fresh.find_circular_dependencies()

    def test_excluded_and_outside_paths_are_ignored(self, engine, scenario_project, tmp_path):
        before = engine.analyze(scenario_project)
        after = engine.update(
            [
                FileChange("node_modules/x/index.js", ChangeKind.CREATED),
                FileChange(str(tmp_path / "elsewhere.ts"), ChangeKind.CREATED),
            ]
        )
        assert after is before

    def test_previously_snapshot_is_not_mutated(self, engine, scenario_project):
        before = engine.analyze(scenario_project)
        (scenario_project / "b.ts").unlink()
        engine.update([FileChange("b.ts", ChangeKind.DELETED)])
        assert "b.ts" in before.nodes
        assert before.nodes["a.ts"].dependencies == ("b.ts",)

    def test_deleted_directory_removes_every_file_under_it(
        self, engine, make_project, check_bidirectional
    ):
        root = make_project(
            {
                "app.ts": "import { x } from './lib/x';\n",
                "lib/x.ts": "export const x = 1;\n",
                "lib/y.ts": "import './x';\n",
            }
        )
        engine.analyze(root)
        shutil.rmtree(root / "lib")

        snapshot = engine.update([FileChange(str(root / "lib"), ChangeKind.DELETED)])

        assert set(snapshot.nodes) == {"app.ts"}
        assert engine.get_dependencies("app.ts").unresolved == ("./lib/x",)
        assert [r.relative_path for r in engine.files] == ["app.ts"]
        check_bidirectional(snapshot.nodes)

    def test_moved_directory(self, engine, make_project, check_bidirectional):
        root = make_project(
            {
                "app.ts": "import './core/x';\n",
                "lib/x.ts": "export const x = 1;\n",
                "lib/y.ts": "import './x';\n",
            }
        )
        engine.analyze(root)
        (root / "lib").rename(root / "core")

        snapshot = engine.update(
            [
                FileChange("lib", ChangeKind.DELETED),
                FileChange("core", ChangeKind.CREATED),
            ]
        )

        assert set(snapshot.nodes) == {"app.ts", "core/x.ts", "core/y.ts"}
        assert engine.get_dependencies("app.ts").dependencies == ("core/x.ts",)
        assert engine.get_dependencies("core/y.ts").dependencies == ("core/x.ts",)
        check_bidirectional(snapshot.nodes)

    def test_modified_directory_event_is_ignored(self, engine, make_project):
        root = make_project({"lib/x.ts": "export const x = 1;\n"})
        before = engine.analyze(root)
        assert engine.update([FileChange("lib", ChangeKind.CHANGED)]) is before

    def test_paths_escaping_the_root_are_ignored(self, engine, scenario_project, tmp_path):
        before = engine.analyze(scenario_project)
        other = tmp_path / "other"
        other.mkdir()
        (other / "x.ts").write_text("export const x = 1;\n")

        after = engine.update(
            [
                FileChange("../other/x.ts", ChangeKind.CREATED),
                FileChange("sub/../../other/x.ts", ChangeKind.CHANGED),
            ]
        )

        assert after is before
        assert all(not key.startswith("..") for key in after.nodes)

    def test_relative_paths_are_normalized(self, engine, scenario_project):
        engine.analyze(scenario_project)
        assert engine.get_dependencies("sub/../a.ts").file == "a.ts"
        assert engine.get_dependencies("../project/a.ts") is None
        assert engine.get_dependencies(".") is None

    def test_unstatable_path_is_skipped(
        self, engine, scenario_project, monkeypatch, check_bidirectional
    ):
        engine.analyze(scenario_project)
        real_is_file = Path.is_file

        def is_file(self):
            if self.name == "b.ts":
                raise PermissionError(13, "Permission denied", str(self))
            return real_is_file(self)

        monkeypatch.setattr(Path, "is_file", is_file)
        snapshot = engine.update(
            [FileChange("b.ts", ChangeKind.CHANGED), FileChange("c.ts", ChangeKind.CHANGED)]
        )

        assert set(snapshot.nodes) == {"a.ts", "c.ts"}
        assert engine.get_dependencies("a.ts").unresolved == ("./b",)
        assert engine.get_dependencies("c.ts").dependencies == ("a.ts",)
        check_bidirectional(snapshot.nodes)
