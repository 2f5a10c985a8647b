"""Configuration management for Workspace Tree."""

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from . import CONFIG_FILE, SNAPSHOT_FILE, WST_DIR


class WorkspaceTreeConfig(BaseModel):
    """Configuration for Workspace Tree."""

    version: int = 1
    latency_min_ms: int = Field(default=0, ge=0)
    latency_max_ms: int = Field(default=1, ge=1)
    request_timeout_s: float = Field(default=30.0, gt=0)
    default_depth_limit: int | None = Field(default=None, ge=0)
    exclude_patterns: list[str] = Field(
        default=[
            ".git",
            "__pycache__",
            "node_modules",
            ".venv",
            ".workspace-tree",
        ]
    )
    snapshot_file: str = SNAPSHOT_FILE

    @model_validator(mode="after")
    def _check_latency_range(self) -> "WorkspaceTreeConfig":
        if self.latency_max_ms <= self.latency_min_ms:
            raise ValueError("latency_max_ms must be greater than latency_min_ms")
        return self

    @property
    def request_latency_range_ms(self) -> tuple[int, int]:
        """Half-open range of simulated request latency."""
        return self.latency_min_ms, self.latency_max_ms


def get_wst_dir(project_root: Path) -> Path:
    """Get the .workspace-tree directory path."""
    return project_root / WST_DIR


def get_config_path(project_root: Path) -> Path:
    """Get the config file path."""
    return get_wst_dir(project_root) / CONFIG_FILE


def get_snapshot_path(project_root: Path, config: WorkspaceTreeConfig) -> Path:
    """Get the default snapshot file path."""
    return get_wst_dir(project_root) / config.snapshot_file


def load_config(project_root: Path) -> WorkspaceTreeConfig:
    """Load configuration from the project's config file.

    Falls back to defaults if file doesn't exist.
    Environment variables can override config values.
    """
    config_path = get_config_path(project_root)

    if config_path.exists():
        with open(config_path) as f:
            data = json.load(f)
        config = WorkspaceTreeConfig.model_validate(data)
    else:
        config = WorkspaceTreeConfig()

    # Apply environment variable overrides
    config = _apply_env_overrides(config)

    return config


def save_config(config: WorkspaceTreeConfig, project_root: Path) -> None:
    """Save configuration to the project's config file."""
    config_path = get_config_path(project_root)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config.model_dump(), f, indent=2)


def _apply_env_overrides(config: WorkspaceTreeConfig) -> WorkspaceTreeConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    # WST_LATENCY_MS="min,max"
    if latency := os.environ.get("WST_LATENCY_MS"):
        low, sep, high = latency.partition(",")
        if not sep:
            raise ValueError(f"WST_LATENCY_MS must look like 'min,max', got '{latency}'")
        data["latency_min_ms"] = low.strip()
        data["latency_max_ms"] = high.strip()

    # WST_DEPTH_LIMIT, empty or "none" for unlimited
    if (depth := os.environ.get("WST_DEPTH_LIMIT")) is not None:
        data["default_depth_limit"] = None if depth.strip().lower() in ("", "none") else depth

    # WST_REQUEST_TIMEOUT
    if timeout := os.environ.get("WST_REQUEST_TIMEOUT"):
        data["request_timeout_s"] = timeout

    return WorkspaceTreeConfig.model_validate(data)
