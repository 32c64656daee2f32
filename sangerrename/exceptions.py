"""Exception types raised while parsing, editing and renaming Sanger files."""

from pathlib import Path


class SangerRenameError(Exception):
    """Base class for all sanger-rename errors."""


class ValidationError(SangerRenameError):
    """A user-supplied value cannot be used in a standardized filename.

    Raised for blank components, components containing a dot or a path
    separator, and malformed dates. The workflow shows the message and asks
    again.
    """


class CollisionError(SangerRenameError):
    """The rename target already exists on disk."""

    def __init__(self, target: Path) -> None:
        super().__init__(f"Target file already exists: {target}")
        self.target = target


class FilesystemError(SangerRenameError):
    """The operating system refused the rename (missing source, permissions, ...)."""

    def __init__(self, source: Path, reason: str) -> None:
        super().__init__(f"Could not rename {source}: {reason}")
        self.source = source
        self.reason = reason


class ConfigurationError(SangerRenameError):
    """An unknown vendor was requested. Indicates a programming or usage error."""


class WorkflowCancelled(SangerRenameError):
    """The user aborted the interactive session."""
