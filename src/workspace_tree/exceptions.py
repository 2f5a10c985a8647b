"""Exception hierarchy for Workspace Tree."""


class WorkspaceTreeError(Exception):
    """Base class for all Workspace Tree errors."""


class InvalidPathError(WorkspaceTreeError, ValueError):
    """A string cannot be used as a relative path."""

    def __init__(self, path: str, reason: str = "is invalid as a relative path"):
        self.path = path
        super().__init__(f"The provided path '{path}' {reason}")


class OsPathConversionError(InvalidPathError):
    """An OS path cannot be converted into a relative path."""

    def __init__(self, path: str):
        super().__init__(path, reason="cannot be converted to a relative path")


class WalkInputError(WorkspaceTreeError, ValueError):
    """Tree builder input is not a strictly ascending walk below the root."""


class UnloadedDirectoryError(WorkspaceTreeError, RuntimeError):
    """An unloaded directory was found where a fully loaded tree was required.

    This is never a normal lookup miss: it means the source tree was pruned or
    built incorrectly.
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Directory '{path}' is unloaded, but the source tree must be fully loaded"
        )


class SnapshotError(WorkspaceTreeError):
    """A tree snapshot could not be read or decoded."""
