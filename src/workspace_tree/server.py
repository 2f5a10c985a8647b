"""MCP server implementation for Workspace Tree."""

import asyncio
from dataclasses import dataclass
from pathlib import Path

from fastmcp import FastMCP

from .client import DirectoryFetchOptions
from .config import WorkspaceTreeConfig, load_config
from .exceptions import InvalidPathError
from .mock_client import MockWorkspaceApi
from .model import state_names
from .paths import RelativePath
from .snapshot import load_tree


@dataclass
class ServerState:
    """Shared state for MCP server components."""

    snapshot_path: Path
    config: WorkspaceTreeConfig
    api: MockWorkspaceApi


# Module-level singleton for server state
_state: ServerState | None = None


def get_state() -> ServerState:
    """Get the server state, raising if not initialized."""
    if _state is None:
        raise RuntimeError("Server not initialized. Call run_server() first.")
    return _state


def create_state(snapshot_path: Path, project_root: Path) -> ServerState:
    """Load config and the snapshot tree into a new server state."""
    config = load_config(project_root)
    tree = load_tree(snapshot_path)
    return ServerState(
        snapshot_path=snapshot_path,
        config=config,
        api=MockWorkspaceApi.from_config(config, tree),
    )


# =============================================================================
# Tool Implementation Functions (for testing)
# =============================================================================


async def fetch_directory_impl(
    path: str = "",
    depth_limit: int | None = None,
    filter_string: str | None = None,
) -> dict:
    """Fetch a directory subtree from the workspace."""
    state = get_state()

    if depth_limit is None:
        depth_limit = state.config.default_depth_limit

    try:
        relative_path = RelativePath(path)
        options = DirectoryFetchOptions(depth_limit=depth_limit, filter_string=filter_string)
    except (InvalidPathError, ValueError) as e:
        return {"found": False, "path": path, "directory": None, "error": str(e)}

    try:
        directory = await asyncio.wait_for(
            state.api.fetch_directory(relative_path, options),
            timeout=state.config.request_timeout_s,
        )
    except TimeoutError:
        return {
            "found": False,
            "path": path,
            "directory": None,
            "error": f"Request timed out after {state.config.request_timeout_s}s",
        }

    return {
        "found": directory is not None,
        "path": str(relative_path),
        "directory": directory.to_dict() if directory is not None else None,
        "error": None,
    }


def get_status_impl() -> dict:
    """Snapshot statistics and aggregated workspace states."""
    state = get_state()
    tree = state.api.full_directory_tree

    total_files = 0
    total_directories = 0
    for _, entry in tree.walk():
        if entry.is_file:
            total_files += 1
        else:
            total_directories += 1

    return {
        "snapshot": str(state.snapshot_path),
        "total_files": total_files,
        "total_directories": total_directories,
        "change_states": state_names(tree.change_states),
        "conflict_states": state_names(tree.conflict_states),
        "latency_range_ms": list(state.api.request_latency_range_ms),
        "default_depth_limit": state.config.default_depth_limit,
    }


# =============================================================================
# FastMCP Server and MCP Tool/Resource Wrappers
# =============================================================================

mcp = FastMCP("Workspace Tree")


@mcp.tool
async def fetch_directory(
    path: str = "",
    depth_limit: int | None = None,
    filter_string: str | None = None,
) -> dict:
    """
    Fetch a directory of the workspace with its entries.

    Args:
        path: Relative path of the directory, "" for the workspace root
        depth_limit: Sub-directory levels to load; 0 loads only the directory's
            own entries. Defaults to the configured limit (unlimited if unset).
        filter_string: Reserved, currently ignored

    Returns:
        found flag, the serialized directory (unloaded sub-directories are null)
        and an error message for invalid requests.
    """
    return await fetch_directory_impl(path, depth_limit, filter_string)


@mcp.resource("wst://status")
def get_status() -> dict:
    """Snapshot statistics and aggregated workspace states."""
    return get_status_impl()


# =============================================================================
# Server Entry Point
# =============================================================================


def run_server(snapshot_path: Path, project_root: Path, port: int | None = None) -> None:
    """
    Start the MCP server.

    Args:
        snapshot_path: Tree snapshot to serve
        project_root: Path to the project root holding the configuration
        port: If provided, use HTTP transport on this port. Otherwise use stdio.
    """
    global _state

    _state = create_state(snapshot_path, project_root)

    # Run server
    if port is not None:
        mcp.run(transport="sse", host="127.0.0.1", port=port)
    else:
        mcp.run()  # stdio (default)
