"""Shared test fixtures for workspace-tree."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from workspace_tree.builder import WalkEntry, build_tree
from workspace_tree.config import WorkspaceTreeConfig, save_config
from workspace_tree.model import Directory


@pytest.fixture
def cli_runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_entries() -> list[WalkEntry]:
    """
    Sorted walk of a small workspace.

    Structure:
        README.md
        docs/
            guide.md
        src/
            app/
                core/
                    engine.py
                main.py
            app!/
                odd.py
            util.py
    """
    return [
        WalkEntry("README.md", False, 120, 1_000),
        WalkEntry("docs", True),
        WalkEntry("docs/guide.md", False, 300, 2_000),
        WalkEntry("src", True),
        WalkEntry("src/app", True),
        WalkEntry("src/app/core", True),
        WalkEntry("src/app/core/engine.py", False, 900, 3_000),
        WalkEntry("src/app/main.py", False, 50, 4_000),
        WalkEntry("src/app!", True),
        WalkEntry("src/app!/odd.py", False, 7, 5_000),
        WalkEntry("src/util.py", False, 10, 6_000),
    ]


@pytest.fixture
def sample_tree(sample_entries: list[WalkEntry]) -> Directory:
    """Fully loaded tree built from ``sample_entries``."""
    return build_tree(sample_entries)


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """
    A small project on disk.

    Structure:
        project/
        ├── README.md
        ├── empty/
        ├── node_modules/
        │   └── dep.js      (excluded by default config)
        └── src/
            ├── a!.txt
            ├── a/
            │   └── b.txt
            └── main.py
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / "README.md").write_text("# Project\n")
    (root / "empty").mkdir()
    (root / "node_modules").mkdir()
    (root / "node_modules" / "dep.js").write_text("module.exports = 1;\n")
    src = root / "src"
    src.mkdir()
    (src / "a!.txt").write_text("bang\n")
    (src / "a").mkdir()
    (src / "a" / "b.txt").write_text("nested\n")
    (src / "main.py").write_text("print('hello')\n")
    return root


def setup_wst_project(project_root: Path, config: WorkspaceTreeConfig | None = None) -> WorkspaceTreeConfig:
    """Write a wst config into the given project root.

    Args:
        project_root: Path to the project root
        config: Optional config to use (defaults to instant responses)

    Returns:
        The config that was saved
    """
    if config is None:
        config = WorkspaceTreeConfig(latency_min_ms=0, latency_max_ms=1)
    save_config(config, project_root)
    return config
