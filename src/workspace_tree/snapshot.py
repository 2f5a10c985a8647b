"""Tree snapshot files for Workspace Tree."""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .exceptions import SnapshotError
from .model import Directory


class SnapshotStats(BaseModel):
    """Statistics about the snapshotted tree."""

    total_files: int = 0
    total_directories: int = 0


class Snapshot(BaseModel):
    """Snapshot containing a serialized directory tree and its metadata."""

    version: int = 1
    created_at: datetime
    source: str | None = None  # Directory the tree was scanned from
    stats: SnapshotStats = Field(default_factory=SnapshotStats)
    tree: dict[str, Any]

    def to_tree(self) -> Directory:
        return _tree_from_dict(self.tree)


def create_snapshot(tree: Directory, source: Path | str | None = None) -> Snapshot:
    """Create a snapshot of the given tree."""
    stats = SnapshotStats()
    for _, entry in tree.walk():
        if entry.is_file:
            stats.total_files += 1
        else:
            stats.total_directories += 1
    return Snapshot(
        created_at=datetime.now(UTC),
        source=str(source) if source is not None else None,
        stats=stats,
        tree=tree.to_dict(),
    )


def save_snapshot(snapshot: Snapshot, path: Path, compact: bool = False) -> None:
    """Save snapshot to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(snapshot.model_dump(mode="json"), f, indent=None if compact else 2)


def load_snapshot(path: Path) -> Snapshot:
    """Load a snapshot document from a JSON file."""
    data = _read_json(path)
    try:
        return Snapshot.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot {path}: {e}") from e


def tree_to_json(tree: Directory, compact: bool = False) -> str:
    """Serialize a bare directory tree to JSON."""
    if compact:
        return json.dumps(tree.to_dict(), separators=(",", ":"))
    return json.dumps(tree.to_dict(), indent=2)


def parse_tree(json_data: str) -> Directory:
    """Parse a tree from JSON.

    Accepts either a snapshot document or a bare directory document.
    """
    try:
        data = json.loads(json_data)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Failed to parse JSON data: {e}") from e
    return _tree_from_document(data)


def load_tree(path: Path) -> Directory:
    """Load a tree from a snapshot or bare directory JSON file."""
    return _tree_from_document(_read_json(path))


def _read_json(path: Path) -> Any:
    try:
        with open(path) as f:
            return json.load(f)
    except OSError as e:
        raise SnapshotError(f"I/O error reading {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Failed to parse JSON data in {path}: {e}") from e


def _tree_from_document(data: Any) -> Directory:
    if not isinstance(data, dict):
        raise SnapshotError("Tree document must be a JSON object")
    if "tree" in data and "relative_path" not in data:
        try:
            return Snapshot.model_validate(data).to_tree()
        except ValidationError as e:
            raise SnapshotError(f"Invalid snapshot: {e}") from e
    return _tree_from_dict(data)


def _tree_from_dict(data: dict[str, Any]) -> Directory:
    try:
        return Directory.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Invalid directory tree: {e!r}") from e
