"""Core patching engine: the only code that reads or writes the workbench file."""

from __future__ import annotations

import logging
import os
import re
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .backup import BackupStore
from .errors import BackupNotFound, ReadError, WriteError
from .markers import extract_session_id, has_patch, render_block, strip_patch

logger = logging.getLogger(__name__)

# The workbench CSP forbids inline scripts; the tag is dropped before injecting.
_RE_CSP_META = re.compile(
    r'<meta\s+http-equiv="Content-Security-Policy"[\s\S]*?/>'
)

_CLOSING_TAG = "</html>"

# Per-file locks so two operations in one process never interleave.
_locks: Dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


@contextmanager
def _file_lock(path: Path) -> Iterator[None]:
    key = os.path.normcase(str(path.resolve()))
    with _locks_guard:
        lock = _locks.setdefault(key, threading.Lock())
    with lock:
        yield


@dataclass
class InstallResult:
    target: Path
    session_id: str
    backup: Path
    previous_session: Optional[str] = None  # set when re-installing over a patch
    csp_removed: bool = False


@dataclass
class UninstallResult:
    target: Path
    session_id: Optional[str] = None
    already_clean: bool = False  # no session marker, nothing was written
    purged: List[Path] = field(default_factory=list)
    purge_error: str = ""  # restore succeeded but some backups could not be deleted


@dataclass
class TargetStatus:
    target: Path
    patched: bool = False
    session_id: Optional[str] = None
    has_session_backup: bool = False
    backups: List[Path] = field(default_factory=list)


def remove_csp(content: str) -> Tuple[str, bool]:
    """Drop the Content-Security-Policy meta tag if present."""
    new_content, n = _RE_CSP_META.subn("", content, count=1)
    return new_content, n > 0


def inject(content: str, block: str) -> str:
    """Insert block right before the closing </html> (appended if missing)."""
    idx = content.rfind(_CLOSING_TAG)
    if idx < 0:
        return content + block
    return content[:idx] + block + content[idx:]


class PatchEngine:
    """Install and uninstall the marked script block in one workbench file."""

    def __init__(self, target: Path) -> None:
        self.target = target
        self.backups = BackupStore(target)

    def read(self) -> str:
        # Binary mode keeps line endings exactly as they are on disk.
        try:
            return self.target.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(f"read failed: {e}", self.target) from e

    def write(self, content: str) -> None:
        """Replace the whole file via tmp+rename, keeping its permissions."""
        path = self.target
        tmp = path.with_name(f".{path.name}.ccm.tmp")
        try:
            st: Optional[os.stat_result] = path.stat()
        except OSError:
            st = None
        try:
            tmp.write_bytes(content.encode("utf-8"))
            if st is not None:
                try:
                    os.chmod(tmp, st.st_mode)
                except OSError:
                    pass
            os.replace(tmp, path)
        except OSError as e:
            try:
                tmp.unlink()
            except OSError:
                pass
            raise WriteError(f"write failed: {e}", path) from e

    def install(self, session_id: str, payload: str) -> InstallResult:
        """
        Inject payload under a new session.

        The new backup carries over the previous session's snapshot when one
        exists, so the pre-patch file (CSP tag included) survives re-installs.
        Otherwise it holds the stripped content.
        """
        with _file_lock(self.target):
            content = self.read()
            previous = extract_session_id(content)

            clean = self.backups.restore(previous) if previous is not None else None
            if clean is None:
                clean = strip_patch(content)
            backup = self.backups.save(session_id, clean)
            logger.debug("saved backup %s", backup)

            patched, csp_removed = remove_csp(strip_patch(clean))
            patched = inject(patched, render_block(session_id, payload))
            self.write(patched)
            logger.info("installed session %s into %s", session_id, self.target)

            return InstallResult(
                target=self.target,
                session_id=session_id,
                backup=backup,
                previous_session=previous,
                csp_removed=csp_removed,
            )

    def uninstall(self) -> UninstallResult:
        """
        Restore the backup for the embedded session and purge all backups.

        Nothing is written unless a backup for that session exists.
        """
        with _file_lock(self.target):
            content = self.read()
            session_id = extract_session_id(content)
            if session_id is None:
                logger.info("no session marker in %s, nothing to remove", self.target)
                return UninstallResult(target=self.target, already_clean=True)

            restored = self.backups.restore(session_id)
            if restored is None:
                raise BackupNotFound(
                    f"no backup for session {session_id}",
                    self.backups.backup_path_for(session_id),
                )

            self.write(restored)
            result = UninstallResult(target=self.target, session_id=session_id)
            try:
                result.purged = self.backups.purge_all()
            except WriteError as e:
                # The workbench file is already restored at this point.
                logger.warning("restored %s but backups remain: %s", self.target, e)
                result.purge_error = str(e)
                return result
            logger.info(
                "restored %s from session %s, removed %d backup(s)",
                self.target, session_id, len(result.purged),
            )
            return result

    def status(self) -> TargetStatus:
        """Report whether the file is patched and which backups exist."""
        content = self.read()
        session_id = extract_session_id(content)
        return TargetStatus(
            target=self.target,
            patched=has_patch(content),
            session_id=session_id,
            has_session_backup=(
                self.backups.has_backup(session_id) if session_id is not None else False
            ),
            backups=self.backups.list_backups(),
        )
