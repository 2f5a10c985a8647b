"""Tests for depth-limited subtree resolution."""

import pytest

from workspace_tree.exceptions import InvalidPathError, UnloadedDirectoryError
from workspace_tree.model import Directory, DirectoryEntry
from workspace_tree.paths import RelativePath
from workspace_tree.resolver import fetch_subtree


class TestFetchSubtree:
    """Tests for fetch_subtree."""

    def test_root_returns_whole_tree(self, sample_tree: Directory):
        result = fetch_subtree(sample_tree, RelativePath(""))
        assert result == sample_tree
        assert result is not sample_tree

    def test_nested_directory(self, sample_tree: Directory):
        result = fetch_subtree(sample_tree, RelativePath("src/app"))
        assert result is not None
        assert result.relative_path == "src/app"
        assert [entry.name for entry in result.entries] == ["core", "main.py"]

    def test_accepts_plain_strings(self, sample_tree: Directory):
        assert fetch_subtree(sample_tree, "src/app/core").relative_path == "src/app/core"

    def test_missing_component_returns_none(self, sample_tree: Directory):
        assert fetch_subtree(sample_tree, RelativePath("missing/path")) is None
        assert fetch_subtree(sample_tree, RelativePath("src/nope")) is None

    def test_path_through_file_returns_none(self, sample_tree: Directory):
        assert fetch_subtree(sample_tree, RelativePath("src/util.py/x")) is None

    def test_file_path_returns_none(self, sample_tree: Directory):
        assert fetch_subtree(sample_tree, RelativePath("src/util.py")) is None

    def test_names_match_exactly(self, sample_tree: Directory):
        assert fetch_subtree(sample_tree, RelativePath("SRC")) is None
        assert fetch_subtree(sample_tree, RelativePath("src/app!")).relative_path == "src/app!"

    def test_depth_zero_lists_immediate_entries_only(self, sample_tree: Directory):
        result = fetch_subtree(sample_tree, RelativePath("src"), depth_limit=0)

        assert [entry.name for entry in result.entries] == ["app", "app!", "util.py"]
        app, bang, util = result.entries
        assert app.is_directory and not app.is_loaded
        assert bang.is_directory and not bang.is_loaded
        assert util.is_file

    def test_depth_one(self, sample_tree: Directory):
        result = fetch_subtree(sample_tree, RelativePath(""), depth_limit=1)

        src = result.find_entry("src").info
        assert src is not None
        assert not src.find_entry("app").is_loaded
        assert src.find_entry("util.py").is_file

    def test_depth_two(self, sample_tree: Directory):
        result = fetch_subtree(sample_tree, RelativePath(""), depth_limit=2)

        app = result.find_entry("src").info.find_entry("app").info
        assert app is not None
        assert not app.find_entry("core").is_loaded

    def test_source_tree_is_not_modified(self, sample_tree: Directory):
        before = sample_tree.copy()
        fetch_subtree(sample_tree, RelativePath(""), depth_limit=0)
        assert sample_tree == before

    def test_unloaded_directory_is_an_invariant_violation(self):
        root = Directory(RelativePath(), [DirectoryEntry.directory("lazy")])

        with pytest.raises(UnloadedDirectoryError) as exc_info:
            fetch_subtree(root, RelativePath("lazy/child"))
        assert exc_info.value.path == "lazy"

    def test_unloaded_directory_is_not_a_lookup_miss(self):
        root = Directory(RelativePath(), [DirectoryEntry.directory("lazy")])
        with pytest.raises(UnloadedDirectoryError):
            fetch_subtree(root, RelativePath("lazy"))

    def test_unloaded_sibling_is_not_visited(self):
        loaded = Directory(RelativePath("loaded"))
        root = Directory(
            RelativePath(),
            [DirectoryEntry.directory("lazy"), DirectoryEntry.directory("loaded", loaded)],
        )
        assert fetch_subtree(root, RelativePath("loaded")) == loaded

    def test_negative_depth_rejected(self, sample_tree: Directory):
        with pytest.raises(ValueError):
            fetch_subtree(sample_tree, RelativePath(""), depth_limit=-1)

    def test_invalid_path_string_rejected_before_lookup(self, sample_tree: Directory):
        with pytest.raises(InvalidPathError):
            fetch_subtree(sample_tree, "/src")
