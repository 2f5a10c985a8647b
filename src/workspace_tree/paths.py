"""Normalized relative paths used to address entries inside a workspace."""

from __future__ import annotations

from collections.abc import Iterator
from functools import total_ordering
from pathlib import PurePath

from .exceptions import InvalidPathError, OsPathConversionError

SEPARATOR = "/"


class RelativePathComponents(Iterator[str]):
    """Iterator over the components of a relative path string.

    Besides yielding components it exposes the full string and the string
    accumulated up to the current position, so callers can materialize
    intermediate prefixes without joining components back together.
    """

    def __init__(self, inner: str, index: int = 0):
        self._inner = inner
        self._index = index

    def __iter__(self) -> RelativePathComponents:
        return self

    def __next__(self) -> str:
        if self._index >= len(self._inner):
            raise StopIteration
        end = self._inner.find(SEPARATOR, self._index)
        if end == -1:
            end = len(self._inner)
        component = self._inner[self._index : end]
        self._index = end + 1  # skip the separator
        return component

    @property
    def full_str(self) -> str:
        """The whole path string, independent of the iterator position."""
        return self._inner

    @property
    def accumulated_str(self) -> str:
        """The path string up to and including the last yielded component."""
        return self._inner[: max(self._index - 1, 0)]

    @property
    def is_at_last_entry(self) -> bool:
        return self._index >= len(self._inner)

    def __repr__(self) -> str:
        return f"RelativePathComponents({self._inner!r}, index={self._index})"


@total_ordering
class RelativePath:
    """A path relative to some workspace root.

    Always uses ``/`` as separator and never starts or ends with one. The empty
    path is the root. Ordering compares component sequences, so siblings sort
    the way a tree lists them: ``a/b!/c`` sorts after ``a/b/c`` even though the
    raw strings compare the other way.

    Components like ``.`` or ``..`` and doubled separators are not rejected yet.
    """

    __slots__ = ("_path",)

    def __init__(self, path: str = ""):
        normalized = path.replace("\\", SEPARATOR)
        if normalized.startswith(SEPARATOR) or normalized.endswith(SEPARATOR):
            raise InvalidPathError(normalized)
        self._path = normalized

    @classmethod
    def from_path(cls, path: PurePath | str) -> RelativePath:
        """Convert an OS path relative to the workspace root."""
        pure = path if isinstance(path, PurePath) else PurePath(path)
        if pure.is_absolute():
            raise OsPathConversionError(str(path))
        posix = pure.as_posix()
        return cls("" if posix == "." else posix)

    @classmethod
    def _unchecked(cls, path: str) -> RelativePath:
        # Slices of an already valid path skip normalization.
        instance = cls.__new__(cls)
        instance._path = path
        return instance

    def as_str(self) -> str:
        return self._path

    @property
    def is_root(self) -> bool:
        return not self._path

    @property
    def file_name(self) -> str | None:
        """Last component, or None for the root."""
        if not self._path:
            return None
        return self._path[self._path.rfind(SEPARATOR) + 1 :]

    def components(self) -> RelativePathComponents:
        return RelativePathComponents(self._path)

    def join(self, name: str) -> RelativePath:
        """Append one or more components to this path."""
        if not self._path:
            return RelativePath(name)
        return RelativePath(f"{self._path}{SEPARATOR}{name}")

    def common_ancestor(self, other: RelativePath) -> RelativePath:
        """Longest shared sequence of whole components.

        The common ancestor of ``a/b/c/d`` and ``a/b/e/f`` is ``a/b``; of
        ``a/b/c`` and ``d/e/f`` it is the root.
        """
        offset = self._common_ancestor_offset(other)
        return RelativePath._unchecked(self._path[: max(offset - 1, 0)])

    def components_starting_at_common_ancestor(
        self, other: RelativePath
    ) -> RelativePathComponents:
        """Components of this path, already advanced past the prefix shared with ``other``.

        For ``a/b/c/d`` against ``a/b/e/f`` the iterator yields ``c`` then ``d``.
        """
        return RelativePathComponents(self._path, self._common_ancestor_offset(other))

    def _common_ancestor_offset(self, other: RelativePath) -> int:
        """Offset just past the separator following the last shared component."""
        mine = self.components()
        theirs = other.components()
        offset = 0
        for component in mine:
            if component != next(theirs, None):
                break
            offset = mine._index
        return offset

    def __copy__(self) -> RelativePath:
        return self

    def __deepcopy__(self, memo: dict) -> RelativePath:
        return self

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"RelativePath({self._path!r})"

    def __bool__(self) -> bool:
        return bool(self._path)

    def __hash__(self) -> int:
        return hash(self._path)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RelativePath):
            return self._path == other._path
        if isinstance(other, str):
            return self._path == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RelativePath):
            return NotImplemented
        return tuple(self.components()) < tuple(other.components())
