"""Tests for graph/builder.py."""

import pytest

from depgraph.graph import DependencyNode, GraphBuilder
from depgraph.scanning import FileRecord, FileType, ImportRecord


def _node(path: str, *sources: str, file_type: FileType = FileType.SOURCE) -> DependencyNode:
    """Shortcut to build a node importing ``sources``."""
    return DependencyNode(
        path=path,
        file_type=file_type,
        language="python" if path.endswith(".py") else "typescript",
        imports=[ImportRecord(source, line_number=i + 1) for i, source in enumerate(sources)],
    )


def _scenario():
    return [_node("a.ts", "./b"), _node("b.ts"), _node("c.ts", "./a", "./b")]


def _build(nodes) -> GraphBuilder:
    builder = GraphBuilder()
    builder.build(nodes)
    return builder


# ── Full build ────────────────────────────────────────────────────


class TestBuild:
    def test_empty(self):
        builder = _build([])
        assert len(builder) == 0
        assert builder.edge_count() == 0

    def test_scenario_edges(self, check_bidirectional):
        builder = _build(_scenario())
        nodes = builder.nodes

        assert nodes["a.ts"].dependencies == {"b.ts"}
        assert nodes["c.ts"].dependencies == {"a.ts", "b.ts"}
        assert nodes["b.ts"].dependents == {"a.ts", "c.ts"}
        assert nodes["c.ts"].dependents == set()
        assert builder.edge_count() == 3
        check_bidirectional(nodes)

    def test_insertion_order_does_not_matter(self):
        forward = _build(_scenario()).freeze()
        backward = _build(list(reversed(_scenario()))).freeze()
        assert forward == backward

    def test_duplicate_imports_collapse(self):
        builder = _build([_node("a.ts", "./b", "./b.ts", "./b"), _node("b.ts")])
        assert builder.nodes["a.ts"].dependencies == {"b.ts"}
        assert builder.edge_count() == 1

    def test_self_import_is_not_an_edge(self):
        builder = _build([_node("a.ts", "./a")])
        assert builder.nodes["a.ts"].dependencies == set()
        assert builder.nodes["a.ts"].unresolved == []

    def test_external_imports_stay_on_node_only(self):
        builder = _build([_node("a.ts", "react", "lodash/fp"), _node("react.ts")])
        node = builder.nodes["a.ts"]
        assert node.dependencies == set()
        assert node.unresolved == []
        assert [imp.source for imp in node.imports] == ["react", "lodash/fp"]

    def test_unresolved_relative_imports_are_recorded(self):
        builder = _build([_node("a.ts", "./missing", "@/nowhere", "react")])
        assert builder.nodes["a.ts"].unresolved == ["./missing", "@/nowhere"]

    def test_python_package_imports(self, check_bidirectional):
        builder = _build(
            [
                _node("pkg/__init__.py"),
                _node("pkg/a.py", ".b", "os", "..outside"),
                _node("pkg/b.py", "."),
            ]
        )
        assert builder.nodes["pkg/a.py"].dependencies == {"pkg/b.py"}
        assert builder.nodes["pkg/a.py"].unresolved == ["..outside"]
        assert builder.nodes["pkg/b.py"].dependencies == {"pkg/__init__.py"}
        check_bidirectional(builder.nodes)

    def test_from_package_import_sibling_module(self, check_bidirectional):
        def from_import(source: str, *names: str) -> ImportRecord:
            return ImportRecord(source, names, line_number=1)

        a = _node("pkg/sub/a.py")
        a.imports = [from_import(".", "b"), from_import("..", "c"), from_import(".", "helper")]
        builder = _build(
            [
                a,
                _node("pkg/sub/__init__.py"),
                _node("pkg/sub/b.py"),
                _node("pkg/c.py"),
            ]
        )

        assert builder.nodes["pkg/sub/a.py"].dependencies == {
            "pkg/sub/__init__.py",
            "pkg/sub/b.py",
            "pkg/c.py",
        }
        assert builder.nodes["pkg/sub/a.py"].unresolved == []
        assert builder.nodes["pkg/sub/b.py"].dependents == {"pkg/sub/a.py"}
        check_bidirectional(builder.nodes)

    def test_rebuild_replaces_previous_graph(self):
        builder = _build(_scenario())
        builder.build([_node("z.ts")])
        assert set(builder.nodes) == {"z.ts"}


# ── Mutation primitives ───────────────────────────────────────────


class TestMutation:
    def test_remove_then_prune(self, check_bidirectional):
        builder = _build(_scenario())
        builder.remove("b.ts")
        affected = builder.prune_dangling()
        builder.rebuild_dependents()

        assert affected == {"a.ts", "c.ts"}
        assert builder.nodes["a.ts"].dependencies == set()
        assert builder.nodes["c.ts"].dependencies == {"a.ts"}
        check_bidirectional(builder.nodes)

    def test_remove_unknown_key(self):
        builder = _build(_scenario())
        assert builder.remove("nope.ts") is None
        assert len(builder) == 3

    def test_insert_and_resolve_subset(self, check_bidirectional):
        builder = _build(_scenario())
        builder.insert(_node("d.ts", "./c"))
        builder.resolve_edges(["d.ts"])
        builder.rebuild_dependents()

        assert builder.nodes["d.ts"].dependencies == {"c.ts"}
        assert builder.nodes["c.ts"].dependents == {"d.ts"}
        check_bidirectional(builder.nodes)

    def test_insert_resets_stale_edges(self):
        node = _node("a.ts")
        node.dependencies = {"ghost.ts"}
        node.dependents = {"ghost.ts"}
        builder = GraphBuilder()
        builder.insert(node)
        assert builder.nodes["a.ts"].dependencies == set()
        assert builder.nodes["a.ts"].dependents == set()

    def test_nodes_view_is_read_only(self):
        builder = _build(_scenario())
        with pytest.raises(TypeError):
            builder.nodes["x.ts"] = _node("x.ts")  # type: ignore[index]
        assert "x.ts" not in builder


# ── Node creation and freezing ────────────────────────────────────


class TestCreateAndFreeze:
    def test_create_node_extracts_imports_and_exports(self):
        record = FileRecord(
            path="/abs/src/a.ts",
            relative_path="src/a.ts",
            name="a.ts",
            extension=".ts",
            size=40,
            last_modified=0.0,
            lines=2,
            language="typescript",
            file_type=FileType.SOURCE,
        )
        node = GraphBuilder().create_node(
            record, "import { x } from './b';\nexport const y = x;\n"
        )
        assert node.path == "src/a.ts"
        assert node.record is record
        assert [imp.source for imp in node.imports] == ["./b"]
        assert [exp.name for exp in node.exports] == ["y"]

    def test_freeze_sorts_dependency_lists(self):
        frozen = _build(_scenario()).freeze()
        assert list(frozen) == ["a.ts", "b.ts", "c.ts"]
        assert frozen["c.ts"].dependencies == ("a.ts", "b.ts")
        assert frozen["b.ts"].dependents == ("a.ts", "c.ts")
        assert frozen["c.ts"].to_dict()["type"] == "source"
