"""Tests for the glob walker and ignore rules."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from cpd_finder.core.ignore import IgnoreRules
from cpd_finder.core.walker import glob_entries, match_segments, split_expression


def _symlink(target: Path, link: Path) -> Path:
    try:
        os.symlink(target, link)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported on this platform")
    return link


@pytest.fixture()
def tree(tmp_path: Path) -> Path:
    """A small project with nested, hidden and mixed-format files."""
    (tmp_path / "src" / "lib").mkdir(parents=True)
    (tmp_path / "src" / "app.js").write_text("a\n")
    (tmp_path / "src" / "lib" / "util.js").write_text("u\n")
    (tmp_path / "src" / "lib" / "util.ts").write_text("t\n")
    (tmp_path / "src" / ".hidden.js").write_text("h\n")
    (tmp_path / "README.md").write_text("# r\n")
    (tmp_path / "node_modules" / "dep").mkdir(parents=True)
    (tmp_path / "node_modules" / "dep" / "index.js").write_text("d\n")
    return tmp_path


def _rel(entries, root: Path) -> list[str]:
    return [Path(e.path).relative_to(root).as_posix() for e in entries]


class TestSplitExpression:
    def test_splits_at_first_wildcard(self):
        assert split_expression("src/app/**/*.js") == ("src/app", ["**", "*.js"])

    def test_absolute_base(self):
        assert split_expression("/proj/**/*") == ("/proj", ["**", "*"])

    def test_wildcard_at_start(self):
        assert split_expression("**/*.py") == (".", ["**", "*.py"])

    def test_literal(self):
        assert split_expression("/proj/a.js") == ("/proj/a.js", [])


class TestMatchSegments:
    def test_double_star_spans_zero_or_more_dirs(self):
        pattern = ["**", "*.js"]
        assert match_segments(pattern, ["a.js"])
        assert match_segments(pattern, ["x", "y", "a.js"])
        assert not match_segments(pattern, ["a.ts"])

    def test_single_star_does_not_cross_directories(self):
        assert match_segments(["*.js"], ["a.js"])
        assert not match_segments(["*.js"], ["x", "a.js"])

    def test_dot_files(self):
        assert match_segments(["**", "*"], [".env"], dot=True)
        assert not match_segments(["**", "*"], [".env"], dot=False)
        assert not match_segments(["**", "*"], [".git", "config"], dot=False)
        assert match_segments([".*"], [".env"], dot=False)


class TestGlobEntries:
    """glob_entries returns regular files with stats, in walk order."""

    def test_recursive_pattern(self, tree: Path):
        """**/*.js finds files at every depth, dot-files included."""
        entries = glob_entries([f"{tree}/**/*.js"])
        assert _rel(entries, tree) == [
            "node_modules/dep/index.js",
            "src/.hidden.js",
            "src/app.js",
            "src/lib/util.js",
        ]

    def test_entries_carry_stats(self, tree: Path):
        """Each entry has a size taken from the filesystem."""
        [entry] = glob_entries([f"{tree}/README.md"])
        assert entry.stats.size == len("# r\n")
        assert entry.stats.is_file
        assert entry.name == "README.md"

    def test_only_files(self, tree: Path):
        """Directories are never returned by default."""
        entries = glob_entries([f"{tree}/**/*"])
        assert all(e.stats.is_file for e in entries)
        assert "src" not in _rel(entries, tree)

    def test_directories_when_requested(self, tree: Path):
        """only_files=False also reports matching directories."""
        entries = glob_entries([f"{tree}/*"], only_files=False)
        assert _rel(entries, tree) == ["node_modules", "src", "README.md"]

    def test_hidden_excluded_without_dot(self, tree: Path):
        entries = glob_entries([f"{tree}/**/*.js"], dot=False)
        assert "src/.hidden.js" not in _rel(entries, tree)

    def test_duplicates_reported_once(self, tree: Path):
        """Overlapping expressions keep the first occurrence only."""
        entries = glob_entries([f"{tree}/src/*.js", f"{tree}/**/*.js"])
        rel = _rel(entries, tree)
        assert rel[0] == "src/.hidden.js"
        assert len(rel) == len(set(rel)) == 4

    def test_ignore_patterns(self, tree: Path):
        """gitwildmatch ignore patterns drop matching entries."""
        entries = glob_entries([f"{tree}/**/*.js"], ignore=["**/node_modules/**"])
        assert "node_modules/dep/index.js" not in _rel(entries, tree)
        assert "src/app.js" in _rel(entries, tree)

    def test_ignore_relative_to_base(self, tree: Path):
        """Patterns may be written relative to the walked root."""
        entries = glob_entries([f"{tree}/**/*.js"], ignore=["src/lib/**"])
        assert "src/lib/util.js" not in _rel(entries, tree)

    def test_relative_expression_paths(self, tree: Path, monkeypatch: pytest.MonkeyPatch):
        """Relative expressions yield relative paths unless absolute is set."""
        monkeypatch.chdir(tree)
        entries = glob_entries(["src/**/*.ts"])
        assert [e.path for e in entries] == ["src/lib/util.ts"]

        entries = glob_entries(["src/**/*.ts"], absolute=True)
        assert [e.path for e in entries] == [os.path.abspath("src/lib/util.ts")]

    def test_literal_file_expression(self, tree: Path):
        """A wildcard-free expression naming a file yields that file."""
        target = tree / "src" / "app.js"
        entries = glob_entries([str(target)])
        assert [e.path for e in entries] == [str(target)]

    def test_missing_base_yields_nothing(self, tmp_path: Path):
        assert glob_entries([f"{tmp_path}/missing/**/*"]) == []

    def test_symlinked_directory_followed(self, tree: Path, tmp_path_factory: pytest.TempPathFactory):
        """follow_symlinks=True descends into symlinked directories."""
        outside = tmp_path_factory.mktemp("outside")
        (outside / "ext.js").write_text("e\n")
        _symlink(outside, tree / "linked")

        followed = _rel(glob_entries([f"{tree}/**/*.js"]), tree)
        assert "linked/ext.js" in followed

        not_followed = _rel(glob_entries([f"{tree}/**/*.js"], follow_symlinks=False), tree)
        assert "linked/ext.js" not in not_followed

    def test_symlinked_file_not_followed(self, tree: Path):
        """Without following, a symlinked file is not a regular file."""
        _symlink(tree / "src" / "app.js", tree / "alias.js")
        assert "alias.js" in _rel(glob_entries([f"{tree}/*.js"]), tree)
        assert _rel(glob_entries([f"{tree}/*.js"], follow_symlinks=False), tree) == []

    def test_symlink_cycle_terminates(self, tmp_path: Path):
        """A directory linking to its parent is walked once."""
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "x.js").write_text("x\n")
        _symlink(tmp_path, tmp_path / "a" / "loop")
        entries = glob_entries([f"{tmp_path}/**/*.js"])
        assert _rel(entries, tmp_path) == ["a/x.js"]


    def test_sibling_link_keeps_real_directory(self, tmp_path: Path):
        """Only ancestor links count as cycles; siblings are walked twice."""
        (tmp_path / "z_real").mkdir()
        (tmp_path / "z_real" / "f.js").write_text("f\n")
        _symlink(tmp_path / "z_real", tmp_path / "a_link")
        entries = glob_entries([f"{tmp_path}/**/*.js"])
        assert _rel(entries, tmp_path) == ["a_link/f.js", "z_real/f.js"]

    def test_unlistable_directory_is_logged(self, tree: Path, caplog: pytest.LogCaptureFixture):
        if os.name == "nt" or os.geteuid() == 0:
            pytest.skip("permission bits not enforced")
        locked = tree / "src" / "lib"
        locked.chmod(0)
        try:
            with caplog.at_level(logging.DEBUG, logger="cpd_finder.core.walker"):
                entries = glob_entries([f"{tree}/**/*.js"])
        finally:
            locked.chmod(0o755)
        assert "src/lib/util.js" not in _rel(entries, tree)
        assert "src/app.js" in _rel(entries, tree)
        assert any("Cannot list" in r.getMessage() and "lib" in r.getMessage() for r in caplog.records)


class TestIgnoreRules:
    def test_empty_rules_match_nothing(self):
        rules = IgnoreRules()
        assert not rules
        assert rules.matches("/any/path.js") is False

    def test_absolute_paths_match_globstar_patterns(self):
        rules = IgnoreRules(["**/vendor/**"])
        assert rules.matches("/proj/vendor/lib.js")
        assert not rules.matches("/proj/src/lib.js")

    def test_gitignore_applies_below_its_root(self, tree: Path):
        """.gitignore rules are read when enabled and scoped to their root."""
        (tree / ".gitignore").write_text("*.ts\nnode_modules/\n")
        rules = IgnoreRules.from_options([], [str(tree)], gitignore=True)
        assert rules.matches(str(tree / "src" / "lib" / "util.ts"))
        assert rules.matches(str(tree / "node_modules" / "dep" / "index.js"))
        assert not rules.matches(str(tree / "src" / "app.js"))

    def test_gitignore_disabled_by_default(self, tree: Path):
        (tree / ".gitignore").write_text("*.ts\n")
        rules = IgnoreRules.from_options([], [str(tree)])
        assert not rules.matches(str(tree / "src" / "lib" / "util.ts"))
