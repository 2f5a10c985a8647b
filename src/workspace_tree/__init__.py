"""Workspace Tree - Relative paths and partially loaded directory trees for workspaces."""

__version__ = "0.1.0"

# Directory and file constants
WST_DIR = ".workspace-tree"
CONFIG_FILE = "config.json"
SNAPSHOT_FILE = "tree.json"
