"""In-memory workspace API with simulated request latency."""

from __future__ import annotations

import asyncio
import logging
import random
from pathlib import Path

from .client import DirectoryFetchOptions, WorkspaceApi
from .config import WorkspaceTreeConfig
from .exceptions import SnapshotError
from .model import Directory
from .paths import RelativePath
from .resolver import fetch_subtree
from .snapshot import parse_tree

logger = logging.getLogger(__name__)


class MockWorkspaceApi(WorkspaceApi):
    """Serves directory fetches from a fully loaded in-memory tree.

    Each request is delayed by a random number of milliseconds drawn from
    ``request_latency_range_ms`` (half-open). Replacing the tree swaps the
    reference, so fetches already in flight keep reading the old tree.
    """

    def __init__(
        self,
        tree: Directory | None = None,
        request_latency_range_ms: tuple[int, int] = (0, 1),
    ):
        low, high = request_latency_range_ms
        if low < 0 or high <= low:
            raise ValueError(f"Invalid latency range {request_latency_range_ms}")
        self.full_directory_tree = tree if tree is not None else Directory(RelativePath())
        self.request_latency_range_ms = (low, high)

    @classmethod
    def from_config(cls, config: WorkspaceTreeConfig, tree: Directory | None = None) -> MockWorkspaceApi:
        return cls(tree, request_latency_range_ms=config.request_latency_range_ms)

    def set_directory_tree(self, tree: Directory) -> None:
        self.full_directory_tree = tree

    async def set_directory_tree_from_json_str(self, json_data: str) -> None:
        self.set_directory_tree(parse_tree(json_data))

    async def set_directory_tree_from_json_file(self, json_file_path: Path) -> None:
        try:
            json_data = await asyncio.to_thread(Path(json_file_path).read_text)
        except OSError as e:
            raise SnapshotError(f"I/O error reading {json_file_path}: {e}") from e
        await self.set_directory_tree_from_json_str(json_data)

    async def _delay(self) -> None:
        delay_ms = random.randrange(*self.request_latency_range_ms)
        if delay_ms > 0:
            logger.debug("MockWorkspaceApi delaying request by %d ms", delay_ms)
        await asyncio.sleep(delay_ms / 1000)

    async def fetch_directory(
        self,
        path: RelativePath,
        options: DirectoryFetchOptions | None = None,
    ) -> Directory | None:
        options = options or DirectoryFetchOptions()
        tree = self.full_directory_tree

        await self._delay()

        if options.filter_string:
            logger.debug("filter_string %r is not supported and was ignored", options.filter_string)
        return fetch_subtree(tree, path, options.depth_limit)
