"""Filesystem walk producing sorted walk entries for the tree builder."""

from __future__ import annotations

import fnmatch
import logging
import stat
from collections.abc import Iterable, Iterator
from pathlib import Path

from .builder import BuildStats, TreeBuilder, WalkEntry
from .model import Directory
from .paths import RelativePath

logger = logging.getLogger(__name__)


def should_exclude(path: Path, exclude_patterns: Iterable[str]) -> bool:
    """Check if path matches any exclusion pattern."""
    name = path.name
    for pattern in exclude_patterns:
        if fnmatch.fnmatch(name, pattern):
            return True
    return False


def walk_directory(root: Path, exclude_patterns: Iterable[str] = ()) -> Iterator[WalkEntry]:
    """
    Walk ``root`` depth-first, yielding entries in path order.

    Siblings are visited sorted by name and parents before their children, which
    is exactly the component ordering of ``RelativePath``. The root itself is
    not yielded. Symlinks and excluded names are skipped along with everything
    below them.

    Args:
        root: Directory to walk
        exclude_patterns: fnmatch patterns matched against entry names
    """
    yield from _walk(root, root, list(exclude_patterns))


def scan_tree(root: Path, exclude_patterns: Iterable[str] = ()) -> tuple[Directory, BuildStats]:
    """Walk ``root`` and build its directory tree."""
    builder = TreeBuilder()
    builder.extend(walk_directory(root, exclude_patterns))
    return builder.finish(), builder.stats


def _walk(directory: Path, root: Path, exclude_patterns: list[str]) -> Iterator[WalkEntry]:
    try:
        children = sorted(directory.iterdir(), key=lambda child: child.name)
    except OSError as e:
        logger.warning("Cannot list directory %s: %s", directory, e)
        return

    for child in children:
        if should_exclude(child, exclude_patterns):
            logger.debug("Excluding %s", child)
            continue

        try:
            st = child.lstat()
        except OSError as e:
            logger.warning("Cannot stat %s: %s", child, e)
            continue

        if stat.S_ISLNK(st.st_mode):
            logger.debug("Skipping symlink %s", child)
            continue

        is_dir = stat.S_ISDIR(st.st_mode)
        yield WalkEntry(
            path=RelativePath.from_path(child.relative_to(root)),
            is_dir=is_dir,
            size_bytes=0 if is_dir else st.st_size,
            modified_time_unix_ms_utc=st.st_mtime_ns // 1_000_000,
        )

        if is_dir:
            yield from _walk(child, root, exclude_patterns)
