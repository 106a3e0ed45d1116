"""Tests for project file discovery."""

import logging
import os

from depgraph.scanning import FileDiscoverer, discover_files, is_excluded, relative_key


def _relative(paths, root):
    return [p.relative_to(root).as_posix() for p in paths]


class TestIsExcluded:
    def test_substring_anywhere_in_path(self):
        assert is_excluded("node_modules/react/index.js", ["node_modules"])
        assert is_excluded("packages/web/node_modules/x.js", ["node_modules"])

    def test_partial_name_match_also_excludes(self):
        assert is_excluded("src/distance.ts", ["dist"])

    def test_no_match(self):
        assert not is_excluded("src/app.ts", ["node_modules", ".git"])


class TestFileDiscoverer:
    def test_returns_sorted_absolute_paths(self, make_project):
        root = make_project({"b.ts": "", "a.ts": "", "sub/c.ts": "", "sub/deep/d.py": ""})
        files = discover_files(root, [])

        assert all(p.is_absolute() for p in files)
        assert _relative(files, root) == ["a.ts", "b.ts", "sub/c.ts", "sub/deep/d.py"]

    def test_excluded_directories_are_pruned(self, make_project):
        root = make_project(
            {
                "src/app.ts": "",
                "node_modules/react/index.js": "",
                ".git/HEAD": "",
                "dist/bundle.js": "",
            }
        )
        files = discover_files(root, ["node_modules", ".git", "dist"])
        assert _relative(files, root) == ["src/app.ts"]

    def test_max_files_limit(self, make_project):
        root = make_project({f"f{i}.ts": "" for i in range(10)})
        files = discover_files(root, [], max_files=3)
        assert len(files) == 3

    def test_deterministic(self, make_project):
        root = make_project({"x/a.ts": "", "y/b.ts": "", "c.ts": ""})
        assert discover_files(root, []) == discover_files(root, [])

    def test_unreadable_directory_is_skipped(self, make_project, monkeypatch, caplog):
        root = make_project({"ok/a.ts": "", "locked/b.ts": "", "c.ts": ""})
        real_scandir = os.scandir

        def fake_scandir(path):
            if os.path.basename(os.fspath(path)) == "locked":
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", fake_scandir)

        discoverer = FileDiscoverer(root, [])
        with caplog.at_level(logging.WARNING, logger="depgraph"):
            files = discoverer.discover()

        assert _relative(files, root) == ["c.ts", "ok/a.ts"]
        assert discoverer.dirs_errored == 1
        assert "locked" in caplog.text

    def test_empty_directory(self, make_project):
        root = make_project({})
        assert discover_files(root, []) == []


class TestRelativeKey:
    def test_inside_root(self, tmp_path):
        assert relative_key(tmp_path / "src" / "a.ts", tmp_path) == "src/a.ts"

    def test_outside_root(self, tmp_path):
        assert relative_key(tmp_path.parent / "elsewhere.ts", tmp_path) is None
