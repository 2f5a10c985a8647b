"""CLI for Workspace Tree."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.tree import Tree

from . import WST_DIR, __version__
from .client import DirectoryFetchOptions
from .config import (
    WorkspaceTreeConfig,
    get_config_path,
    get_snapshot_path,
    get_wst_dir,
    load_config,
    save_config,
)
from .exceptions import InvalidPathError, SnapshotError
from .mock_client import MockWorkspaceApi
from .model import ChangeState, ConflictState, Directory, FileInfo
from .paths import RelativePath
from .resolver import fetch_subtree
from .scanner import scan_tree
from .snapshot import create_snapshot, load_tree, save_snapshot, tree_to_json

console = Console()
error_console = Console(stderr=True)


class RelativePathType(click.ParamType):
    """Click parameter type converting strings to RelativePath."""

    name = "path"

    def convert(self, value, param, ctx):
        if isinstance(value, RelativePath):
            return value
        try:
            return RelativePath(value)
        except InvalidPathError as e:
            self.fail(str(e), param, ctx)


RELATIVE_PATH = RelativePathType()


def get_project_root() -> Path:
    """Get the project root directory (current working directory)."""
    return Path.cwd()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich on stderr."""
    handler = RichHandler(console=error_console, show_path=False)
    logger = logging.getLogger("workspace_tree")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _load_tree_or_exit(snapshot: Path) -> Directory:
    try:
        return load_tree(snapshot)
    except SnapshotError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)


def _resolve_depth(depth: int | None, config: WorkspaceTreeConfig) -> int | None:
    return depth if depth is not None else config.default_depth_limit


@click.group()
@click.version_option(version=__version__, prog_name="wst")
@click.option("--verbose", "-v", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """Workspace Tree - Partially loaded workspace directory trees."""
    configure_logging(verbose)


@main.command()
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(force: bool) -> None:
    """Initialize wst configuration in the current project."""
    project_root = get_project_root()
    wst_dir = get_wst_dir(project_root)

    if get_config_path(project_root).exists() and not force:
        error_console.print(
            f"[yellow]Warning:[/yellow] {WST_DIR}/ already exists. Use --force to reinitialize."
        )
        sys.exit(1)

    config = WorkspaceTreeConfig()
    save_config(config, project_root)

    console.print(
        Panel(
            f"[green]Initialized Workspace Tree[/green]\n\n"
            f"Config directory: [dim]{wst_dir}[/dim]\n\n"
            f"Next steps:\n"
            f"  1. Run [bold]wst snapshot . -o {WST_DIR}/{config.snapshot_file}[/bold] to scan the project\n"
            f"  2. Run [bold]wst serve[/bold] to start the MCP server",
            title="wst init",
        )
    )


@main.command()
@click.argument("target_dir", type=click.Path(path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write a snapshot file instead of printing",
)
@click.option("-c", "--compact", is_flag=True, help="Output compact JSON instead of pretty-printed")
def snapshot(target_dir: Path, output: Path | None, compact: bool) -> None:
    """Scan TARGET_DIR and serialize its directory tree as JSON."""
    if not target_dir.is_dir():
        error_console.print(f"[red]Error:[/red] target path '{escape(str(target_dir))}' is not a directory")
        sys.exit(1)

    config = load_config(get_project_root())
    tree, stats = scan_tree(target_dir, config.exclude_patterns)

    if output is None:
        click.echo(tree_to_json(tree, compact=compact))
        return

    save_snapshot(create_snapshot(tree, source=target_dir.resolve()), output, compact=compact)
    error_console.print(
        f"[green]Wrote {output}[/green] ({stats.files} files, {stats.directories} directories)"
    )


@main.command()
@click.argument("snapshot_file", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--path", "path", type=RELATIVE_PATH, default="", help="Directory to show")
@click.option("--depth", type=click.IntRange(min=0), default=None, help="Sub-directory levels to expand")
def show(snapshot_file: Path | None, path: RelativePath, depth: int | None) -> None:
    """Render a snapshot (or part of it) as a tree."""
    project_root = get_project_root()
    config = load_config(project_root)
    snapshot_file = snapshot_file or get_snapshot_path(project_root, config)

    tree = _load_tree_or_exit(snapshot_file)
    directory = fetch_subtree(tree, path, _resolve_depth(depth, config))
    if directory is None:
        error_console.print(f"[red]Not found:[/red] '{escape(str(path))}' is not a directory")
        sys.exit(1)

    console.print(build_rich_tree(directory))


@main.command()
@click.argument("snapshot_file", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("path", type=RELATIVE_PATH, default="")
@click.option("--depth", type=click.IntRange(min=0), default=None, help="Sub-directory levels to load")
@click.option("-c", "--compact", is_flag=True, help="Output compact JSON instead of pretty-printed")
def fetch(snapshot_file: Path, path: RelativePath, depth: int | None, compact: bool) -> None:
    """Fetch PATH from SNAPSHOT_FILE through the mock workspace API."""
    config = load_config(get_project_root())
    api = MockWorkspaceApi.from_config(config, _load_tree_or_exit(snapshot_file))
    options = DirectoryFetchOptions(depth_limit=_resolve_depth(depth, config))

    try:
        directory = asyncio.run(
            asyncio.wait_for(api.fetch_directory(path, options), timeout=config.request_timeout_s)
        )
    except TimeoutError:
        error_console.print(f"[red]Error:[/red] request timed out after {config.request_timeout_s}s")
        sys.exit(1)

    if directory is None:
        error_console.print(f"[red]Not found:[/red] '{escape(str(path))}' is not a directory")
        sys.exit(1)

    click.echo(tree_to_json(directory, compact=compact))


@main.command()
@click.argument("snapshot_file", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--port", default=None, type=int, help="Port for HTTP transport (default: stdio)")
def serve(snapshot_file: Path | None, port: int | None) -> None:
    """Start the MCP server for a snapshot."""
    from .server import run_server

    project_root = get_project_root()
    snapshot_file = snapshot_file or get_snapshot_path(project_root, load_config(project_root))
    if not snapshot_file.exists():
        error_console.print(
            f"[red]Error:[/red] No snapshot at {escape(str(snapshot_file))}. Run [bold]wst snapshot[/bold] first."
        )
        sys.exit(1)

    run_server(snapshot_file, project_root, port=port)


def build_rich_tree(directory: Directory) -> Tree:
    """Render a directory as a rich Tree, marking unloaded directories."""
    label = str(directory.relative_path) or "."
    root = Tree(f"[bold blue]{escape(label)}/[/bold blue]")
    _add_entries(root, directory)
    return root


def _add_entries(node: Tree, directory: Directory) -> None:
    for entry in directory.entries:
        info = entry.info
        name = escape(entry.name)
        if isinstance(info, FileInfo):
            label = f"{name} [dim]{info.metadata.size_bytes} B[/dim]"
            if info.change_state != ChangeState.UNCHANGED:
                label += f" [yellow]{info.change_state.name.title()}[/yellow]"
            if info.conflict_state != ConflictState.NONE:
                label += f" [red]{info.conflict_state.name.title()}[/red]"
            node.add(label)
        elif info is None:
            node.add(f"[blue]{name}/[/blue] [dim](unloaded)[/dim]")
        else:
            _add_entries(node.add(f"[bold blue]{name}/[/bold blue]"), info)


if __name__ == "__main__":
    main()
