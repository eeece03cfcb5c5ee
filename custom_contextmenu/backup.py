"""Session-keyed backups of the workbench file (.bak-custom-css)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from .errors import ReadError, WriteError
from .markers import is_session_token

BACKUP_SUFFIX = ".bak-custom-css"


class BackupStore:
    """Sidecar snapshots stored next to the workbench file."""

    def __init__(self, target: Path) -> None:
        self.target = target

    @property
    def directory(self) -> Path:
        return self.target.parent

    def backup_path_for(self, session_id: str) -> Path:
        """Return the backup path for a session id."""
        if not is_session_token(session_id):
            raise ValueError(f"Invalid session id: {session_id!r}")
        return self.directory / f"workbench.{session_id}{BACKUP_SUFFIX}"

    def save(self, session_id: str, clean_content: str) -> Path:
        """
        Write the unpatched content for a session.

        Raises WriteError if the directory is not writable.
        """
        bak = self.backup_path_for(session_id)
        try:
            bak.write_bytes(clean_content.encode("utf-8"))
        except OSError as e:
            raise WriteError(f"backup write failed: {e}", bak) from e
        # Preserve permissions
        try:
            st = self.target.stat()
            os.chmod(bak, st.st_mode)
        except OSError:
            pass
        return bak

    def restore(self, session_id: str) -> Optional[str]:
        """Return the backed-up content, or None if there is no backup."""
        bak = self.backup_path_for(session_id)
        if not bak.is_file():
            return None
        try:
            return bak.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(f"backup read failed: {e}", bak) from e

    def has_backup(self, session_id: str) -> bool:
        """Check if a backup exists for the given session."""
        try:
            return self.backup_path_for(session_id).is_file()
        except ValueError:
            return False

    def list_backups(self) -> List[Path]:
        """Return every backup file in the workbench directory, sorted."""
        try:
            return sorted(
                p for p in self.directory.iterdir()
                if p.name.endswith(BACKUP_SUFFIX) and p.is_file()
            )
        except FileNotFoundError:
            return []
        except OSError as e:
            raise ReadError(f"listing backups failed: {e}", self.directory) from e

    def purge_all(self) -> List[Path]:
        """
        Delete every backup in the directory, whatever its session.

        Backups orphaned by repeated installs are reclaimed here too.
        Returns the removed paths.
        """
        removed: List[Path] = []
        for bak in self.list_backups():
            try:
                bak.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise WriteError(f"backup delete failed: {e}", bak) from e
            removed.append(bak)
        return removed
