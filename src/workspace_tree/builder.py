"""Single-pass construction of a directory tree from a sorted walk."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import NamedTuple

from .exceptions import WalkInputError
from .model import Directory, DirectoryEntry, FileMetadata
from .paths import RelativePath

logger = logging.getLogger(__name__)


class WalkEntry(NamedTuple):
    """One entry of a full-tree walk, relative to the walk root."""

    path: RelativePath | str
    is_dir: bool
    size_bytes: int = 0
    modified_time_unix_ms_utc: int = 0


@dataclass
class BuildStats:
    """Statistics from building a tree."""

    files: int = 0
    directories: int = 0

    @property
    def total_entries(self) -> int:
        return self.files + self.directories


class TreeBuilder:
    """Folds walk entries sorted in path order into a ``Directory`` tree.

    Keeps a stack of open directories ("frames") whose paths are the prefixes
    of the most recent entry. The root frame is always at the bottom. A frame
    is closed, and attached to its parent, as soon as an entry arrives that is
    not inside it; sorted input guarantees it never needs to be reopened.
    """

    def __init__(self) -> None:
        self._stack: list[Directory] = [Directory(RelativePath())]
        self._previous: RelativePath | None = None
        self.stats = BuildStats()

    @property
    def _top(self) -> Directory:
        return self._stack[-1]

    def add(self, entry: WalkEntry) -> None:
        path = entry.path if isinstance(entry.path, RelativePath) else RelativePath(entry.path)
        if path.is_root:
            raise WalkInputError("The walk root itself must not be part of the input")
        if self._previous is not None and not self._previous < path:
            raise WalkInputError(
                f"Walk entries must be strictly ascending: '{path}' follows '{self._previous}'"
            )
        self._previous = path

        # Close frames until the top is the deepest directory containing this entry
        top_path = self._top.relative_path
        ancestor = top_path.common_ancestor(path)
        while self._top.relative_path != ancestor:
            self._pop_frame()

        # Open frames for intermediate directories not listed explicitly
        missing = path.components_starting_at_common_ancestor(top_path)
        for _ in missing:
            if not missing.is_at_last_entry:
                self._push_frame(RelativePath._unchecked(missing.accumulated_str))

        if entry.is_dir:
            self._push_frame(path)
        else:
            self.stats.files += 1
            self._top.push_entry(
                DirectoryEntry.file(
                    path.file_name,
                    FileMetadata(entry.size_bytes, entry.modified_time_unix_ms_utc),
                )
            )

    def extend(self, entries: Iterable[WalkEntry]) -> None:
        for entry in entries:
            self.add(entry)

    def finish(self) -> Directory:
        """Close every open frame and return the root directory."""
        while len(self._stack) > 1:
            self._pop_frame()
        root = self._stack[0]
        logger.debug(
            "Built tree with %d files and %d directories",
            self.stats.files,
            self.stats.directories,
        )
        return root

    def _push_frame(self, path: RelativePath) -> None:
        self.stats.directories += 1
        self._stack.append(Directory(path))

    def _pop_frame(self) -> None:
        if len(self._stack) == 1:
            raise WalkInputError("Walk entries are not sorted in path order")
        finished = self._stack.pop()
        self._top.push_entry(DirectoryEntry.directory(finished.relative_path.file_name, finished))


def build_tree(entries: Iterable[WalkEntry]) -> Directory:
    """Build a directory tree from walk entries sorted in path order."""
    builder = TreeBuilder()
    builder.extend(entries)
    return builder.finish()
