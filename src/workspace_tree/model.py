"""Directory tree model with aggregated change and conflict states."""

from __future__ import annotations

import copy
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Flag, auto
from typing import Any

from .paths import RelativePath


class ChangeState(Flag):
    """Change state of a file relative to its base version.

    A single member is the state of one file; a combination of members is the
    aggregated set of states below a directory.
    """

    UNCHANGED = auto()
    ADDED = auto()
    MODIFIED = auto()
    DELETED = auto()


class ConflictState(Flag):
    """Conflict state of a file."""

    NONE = auto()
    UNRESOLVED = auto()
    RESOLVED = auto()
    INCOMING = auto()


# Aggregated sets are plain Flag values; these aliases document intent.
ChangeStateSet = ChangeState
ConflictStateSet = ConflictState


def state_names(states: Flag) -> list[str]:
    """Serialize a state set as a list of member names, e.g. ``["Unchanged", "Added"]``."""
    return [member.name.title() for member in states]


def parse_state(state_type: type[Flag], name: str) -> Flag:
    """Parse a single state name produced by ``state_names``."""
    return state_type[name.upper()]


def parse_states(state_type: type[Flag], names: list[str]) -> Flag:
    result = state_type(0)
    for name in names:
        result |= parse_state(state_type, name)
    return result


@dataclass(frozen=True)
class FileMetadata:
    """Size and last modification time of a file."""

    size_bytes: int
    modified_time_unix_ms_utc: int

    def to_dict(self) -> dict[str, int]:
        return {
            "size_bytes": self.size_bytes,
            "modified_time_unix_ms_utc": self.modified_time_unix_ms_utc,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileMetadata:
        return cls(
            size_bytes=int(data["size_bytes"]),
            modified_time_unix_ms_utc=int(data["modified_time_unix_ms_utc"]),
        )


@dataclass(frozen=True)
class FileInfo:
    """Payload of a file entry."""

    metadata: FileMetadata
    change_state: ChangeState = ChangeState.UNCHANGED
    conflict_state: ConflictState = ConflictState.NONE


@dataclass
class DirectoryEntry:
    """A named entry of a directory.

    ``info`` is a ``FileInfo`` for files. For directories it is the loaded
    ``Directory``, or ``None`` when the directory exists but its contents are
    not loaded.
    """

    name: str
    info: FileInfo | Directory | None

    @classmethod
    def file(
        cls,
        name: str,
        metadata: FileMetadata,
        change_state: ChangeState = ChangeState.UNCHANGED,
        conflict_state: ConflictState = ConflictState.NONE,
    ) -> DirectoryEntry:
        return cls(name, FileInfo(metadata, change_state, conflict_state))

    @classmethod
    def directory(cls, name: str, directory: Directory | None = None) -> DirectoryEntry:
        return cls(name, directory)

    @property
    def is_file(self) -> bool:
        return isinstance(self.info, FileInfo)

    @property
    def is_directory(self) -> bool:
        return not self.is_file

    @property
    def is_loaded(self) -> bool:
        """False only for unloaded directory placeholders."""
        return self.info is not None

    def aggregate_states(self) -> tuple[ConflictStateSet, ChangeStateSet]:
        """States this entry contributes to its parent's aggregated sets."""
        info = self.info
        if isinstance(info, FileInfo):
            return info.conflict_state, info.change_state
        if isinstance(info, Directory):
            return info.conflict_states, info.change_states
        # Unloaded directory contributes nothing
        return ConflictState(0), ChangeState(0)

    def to_dict(self) -> dict[str, Any]:
        info = self.info
        if isinstance(info, FileInfo):
            return {
                "name": self.name,
                "file": {
                    "metadata": info.metadata.to_dict(),
                    "change_state": info.change_state.name.title(),
                    "conflict_state": info.conflict_state.name.title(),
                },
            }
        return {
            "name": self.name,
            "directory": info.to_dict() if info is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DirectoryEntry:
        name = data["name"]
        if "file" in data:
            file_data = data["file"]
            return cls.file(
                name,
                FileMetadata.from_dict(file_data["metadata"]),
                change_state=parse_state(ChangeState, file_data.get("change_state", "Unchanged")),
                conflict_state=parse_state(ConflictState, file_data.get("conflict_state", "None")),
            )
        if "directory" in data:
            directory_data = data["directory"]
            if directory_data is None:
                return cls.directory(name)
            return cls.directory(name, Directory.from_dict(directory_data))
        raise ValueError(f"Entry '{name}' is neither a file nor a directory")


@dataclass
class Directory:
    """A directory with its entries and the states aggregated over loaded descendants.

    The aggregated sets are computed on construction and kept up to date by
    ``push_entry``. Unloaded sub-directories contribute nothing, and pruning
    never recomputes them, so they describe what was loaded when the
    directory was built.
    """

    relative_path: RelativePath
    entries: list[DirectoryEntry] = field(default_factory=list)
    conflict_states: ConflictStateSet = field(init=False)
    change_states: ChangeStateSet = field(init=False)

    def __post_init__(self) -> None:
        self.conflict_states = ConflictState(0)
        self.change_states = ChangeState(0)
        for entry in self.entries:
            self._aggregate(entry)

    def _aggregate(self, entry: DirectoryEntry) -> None:
        conflicts, changes = entry.aggregate_states()
        self.conflict_states |= conflicts
        self.change_states |= changes

    def push_entry(self, entry: DirectoryEntry) -> None:
        # TODO: keep entries sorted and names unique once callers other than the builder push entries
        self._aggregate(entry)
        self.entries.append(entry)

    def find_entry(self, name: str) -> DirectoryEntry | None:
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def prune_to_depth(self, depth_limit: int) -> None:
        """Unload sub-directories nested deeper than ``depth_limit`` levels.

        With a limit of 0 every entry of this directory stays visible but each
        sub-directory becomes an unloaded placeholder. Files are never removed.
        """
        if depth_limit < 0:
            raise ValueError(f"depth_limit must be non-negative, got {depth_limit}")
        for entry in self.entries:
            if isinstance(entry.info, Directory):
                if depth_limit > 0:
                    entry.info.prune_to_depth(depth_limit - 1)
                else:
                    entry.info = None

    def copy(self) -> Directory:
        """Independent deep copy of this directory."""
        return copy.deepcopy(self)

    def walk(self) -> Iterator[tuple[RelativePath, DirectoryEntry]]:
        """Yield ``(path, entry)`` for every reachable entry, depth-first, left to right."""
        for entry in self.entries:
            yield self.relative_path.join(entry.name), entry
            if isinstance(entry.info, Directory):
                yield from entry.info.walk()

    def iter_file_paths(self) -> Iterator[RelativePath]:
        for path, entry in self.walk():
            if entry.is_file:
                yield path

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "relative_path": str(self.relative_path),
            "entries": [entry.to_dict() for entry in self.entries],
            "conflict_states": state_names(self.conflict_states),
            "change_states": state_names(self.change_states),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Directory:
        """Deserialize from dictionary.

        Aggregated sets are recomputed from the entries; stored sets are ignored.
        """
        return cls(
            relative_path=RelativePath(data["relative_path"]),
            entries=[DirectoryEntry.from_dict(entry) for entry in data.get("entries", [])],
        )
