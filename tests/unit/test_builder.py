"""Tests for building trees from sorted walks."""

import pytest

from workspace_tree.builder import TreeBuilder, WalkEntry, build_tree
from workspace_tree.exceptions import WalkInputError
from workspace_tree.model import ChangeState, ConflictState, Directory, FileInfo, FileMetadata
from workspace_tree.paths import RelativePath


def flatten_files(directory: Directory) -> list[str]:
    return [str(path) for path in directory.iter_file_paths()]


class TestBuildTree:
    """Tests for the tree produced by build_tree."""

    def test_build_and_flatten(self):
        tree = build_tree(
            [
                WalkEntry("a", True),
                WalkEntry("a/b", True),
                WalkEntry("a/b/c.txt", False, 10, 1000),
                WalkEntry("a/d.txt", False, 5, 2000),
            ]
        )

        assert tree.relative_path.is_root
        assert [entry.name for entry in tree.entries] == ["a"]

        a = tree.entries[0].info
        assert isinstance(a, Directory)
        assert a.relative_path == "a"
        assert [entry.name for entry in a.entries] == ["b", "d.txt"]

        b = a.entries[0].info
        assert isinstance(b, Directory)
        assert b.relative_path == "a/b"
        assert b.entries[0].name == "c.txt"
        assert b.entries[0].info == FileInfo(FileMetadata(10, 1000))

        assert a.entries[1].info.metadata == FileMetadata(5, 2000)

        assert flatten_files(tree) == ["a/b/c.txt", "a/d.txt"]

    def test_flatten_reproduces_sorted_input(self, sample_entries: list[WalkEntry]):
        tree = build_tree(sample_entries)
        expected = [str(entry.path) for entry in sample_entries if not entry.is_dir]
        assert flatten_files(tree) == expected

    def test_component_order_siblings(self, sample_tree: Directory):
        src = sample_tree.find_entry("src").info
        assert [entry.name for entry in src.entries] == ["app", "app!", "util.py"]

    def test_implicit_directories_are_created(self):
        tree = build_tree(
            [
                WalkEntry("x/y/z/deep.txt", False, 1, 1),
                WalkEntry("x/y/zz.txt", False, 2, 2),
                WalkEntry("z.txt", False, 3, 3),
            ]
        )

        x = tree.find_entry("x").info
        y = x.find_entry("y").info
        z = y.find_entry("z").info
        assert y.relative_path == "x/y"
        assert z.relative_path == "x/y/z"
        assert [entry.name for entry in y.entries] == ["z", "zz.txt"]
        assert flatten_files(tree) == ["x/y/z/deep.txt", "x/y/zz.txt", "z.txt"]

    def test_empty_directories_are_kept_loaded(self):
        tree = build_tree(
            [
                WalkEntry("a", True),
                WalkEntry("a/empty", True),
                WalkEntry("b.txt", False),
            ]
        )

        empty_entry = tree.find_entry("a").info.find_entry("empty")
        assert empty_entry.is_loaded
        assert empty_entry.info.entries == []
        assert empty_entry.info.relative_path == "a/empty"

    def test_every_directory_path_matches_position(self, sample_tree: Directory):
        for path, entry in sample_tree.walk():
            if isinstance(entry.info, Directory):
                assert entry.info.relative_path == path

    def test_files_get_default_states(self, sample_tree: Directory):
        assert sample_tree.change_states == ChangeState.UNCHANGED
        assert sample_tree.conflict_states == ConflictState.NONE

    def test_empty_input_gives_empty_root(self):
        tree = build_tree([])
        assert tree.relative_path.is_root
        assert tree.entries == []

    def test_accepts_relative_path_entries(self):
        tree = build_tree([WalkEntry(RelativePath("dir\\file.txt"), False, 4, 4)])
        assert flatten_files(tree) == ["dir/file.txt"]


class TestTreeBuilder:
    """Tests for builder statistics and input validation."""

    def test_stats(self, sample_entries: list[WalkEntry]):
        builder = TreeBuilder()
        builder.extend(sample_entries)
        builder.finish()

        assert builder.stats.files == 6
        assert builder.stats.directories == 5
        assert builder.stats.total_entries == len(sample_entries)

    def test_rejects_unsorted_input(self):
        builder = TreeBuilder()
        builder.add(WalkEntry("b.txt", False))
        with pytest.raises(WalkInputError):
            builder.add(WalkEntry("a.txt", False))

    def test_rejects_string_order_that_is_not_component_order(self):
        builder = TreeBuilder()
        builder.add(WalkEntry("a/b!/c", False))
        with pytest.raises(WalkInputError):
            builder.add(WalkEntry("a/b/c", False))

    def test_rejects_duplicates(self):
        builder = TreeBuilder()
        builder.add(WalkEntry("a.txt", False))
        with pytest.raises(WalkInputError):
            builder.add(WalkEntry("a.txt", False))

    def test_rejects_root_entry(self):
        with pytest.raises(WalkInputError):
            build_tree([WalkEntry("", True)])
