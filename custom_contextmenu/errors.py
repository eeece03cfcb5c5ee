"""Error kinds raised by the patch engine."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class PatchError(Exception):
    """Base class for all engine failures."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class PathNotFound(PatchError):
    """No candidate root contains a workbench markup file."""


class ReadError(PatchError):
    """The workbench file, a backup or the script template could not be read."""


class WriteError(PatchError):
    """The workbench file or a backup could not be written (often permissions)."""


class BackupNotFound(PatchError):
    """Uninstall found a session marker but no backup for it."""
