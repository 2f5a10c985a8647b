"""Workspace API interface for fetching directories."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .model import Directory
from .paths import RelativePath


@dataclass
class DirectoryFetchOptions:
    """Options for a directory fetch."""

    # Sub-directory levels to load below the fetched directory, None for unlimited.
    # A limit of 0 loads only the fetched directory's own entries.
    depth_limit: int | None = None
    # Case-insensitive name filter; accepted but not applied by MockWorkspaceApi
    filter_string: str | None = None

    def __post_init__(self) -> None:
        if self.depth_limit is not None and self.depth_limit < 0:
            raise ValueError(f"depth_limit must be non-negative, got {self.depth_limit}")


class WorkspaceApi(ABC):
    """Abstract base class for workspace directory services."""

    @abstractmethod
    async def fetch_directory(
        self,
        path: RelativePath,
        options: DirectoryFetchOptions | None = None,
    ) -> Directory | None:
        """
        Fetch the directory at ``path``.

        Args:
            path: Directory to fetch, the root path for the whole workspace
            options: Fetch options, defaults to unlimited depth

        Returns:
            The directory, or None if ``path`` does not name a directory.
        """
        ...
