"""Depth-limited subtree lookup over a fully loaded directory tree."""

from __future__ import annotations

import logging

from .exceptions import UnloadedDirectoryError
from .model import Directory, FileInfo
from .paths import RelativePath

logger = logging.getLogger(__name__)


def fetch_subtree(
    root: Directory,
    path: RelativePath | str,
    depth_limit: int | None = None,
) -> Directory | None:
    """
    Resolve ``path`` inside ``root`` and return an independent copy of that directory.

    Args:
        root: Fully loaded source tree; it is never modified
        path: Directory to fetch, the empty path meaning ``root`` itself
        depth_limit: Sub-directory levels to keep loaded, None for unlimited

    Returns:
        The copied (and pruned) directory, or None when a component is missing
        or names a file.

    Raises:
        UnloadedDirectoryError: The walk reached an unloaded directory, which a
            fully loaded source tree must not contain.
    """
    if depth_limit is not None and depth_limit < 0:
        raise ValueError(f"depth_limit must be non-negative, got {depth_limit}")
    if not isinstance(path, RelativePath):
        path = RelativePath(path)

    current = root
    for component in path.components():
        entry = current.find_entry(component)
        if entry is None:
            logger.debug("No entry '%s' in '%s' while resolving '%s'", component, current.relative_path, path)
            return None
        if isinstance(entry.info, FileInfo):
            logger.debug("'%s' is a file, cannot resolve '%s'", component, path)
            return None
        if entry.info is None:
            unloaded = current.relative_path.join(component)
            logger.error("Unloaded directory '%s' in source tree while resolving '%s'", unloaded, path)
            raise UnloadedDirectoryError(str(unloaded))
        current = entry.info

    directory = current.copy()
    if depth_limit is not None:
        directory.prune_to_depth(depth_limit)
    return directory
