"""Report data classes for install/uninstall/status operations."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from . import messages as msg
from .restart import RestartResult

Error = Tuple[Optional[Path], str]


def _has_permission_error(errors: List[Error]) -> bool:
    """Check if any error looks like a permission issue."""
    for _, text in errors:
        low = text.lower()
        if "permission denied" in low or "errno 13" in low or "access is denied" in low:
            return True
    return False


def _permission_hint(command: str) -> List[str]:
    if sys.platform == "win32":
        return ["Fix: Run as Administrator"]
    return ["Fix: Run with elevated permissions:", f"  sudo ccm {command}"]


def _error_lines(errors: List[Error], command: str) -> List[str]:
    lines = [f"Errors: {len(errors)}"]
    for path, text in errors:
        lines.append(f"  {path}: {text}" if path is not None else f"  {text}")
    if _has_permission_error(errors):
        lines.append("")
        lines.extend(_permission_hint(command))
    return lines


def _restart_lines(restart: Optional[RestartResult]) -> List[str]:
    if restart is None:
        return []
    if restart.success:
        return [f"Restart: launched {restart.command}"]
    return [f"Restart FAILED: {restart.error}"]


@dataclass
class InstallReport:
    """Report for an install operation."""
    target: Optional[Path] = None
    session_id: str = ""
    previous_session: Optional[str] = None
    backup: Optional[Path] = None
    csp_removed: bool = False
    errors: List[Error] = field(default_factory=list)
    notifications: List[str] = field(default_factory=list)
    restart: Optional[RestartResult] = None

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        lines = list(self.notifications)
        if lines:
            lines.append("")
        if self.target is not None:
            lines.append(f"Workbench: {self.target}")
        if self.ok:
            lines.append(f"Session: {self.session_id}")
            if self.previous_session:
                lines.append(f"Replaced session: {self.previous_session}")
            if self.backup is not None:
                lines.append(f"Backup: {self.backup}")
            if self.csp_removed:
                lines.append("Removed Content-Security-Policy meta tag")
        else:
            lines.extend(_error_lines(self.errors, "install"))
        lines.extend(_restart_lines(self.restart))
        return "\n".join(lines)


@dataclass
class UninstallReport:
    """Report for an uninstall operation."""
    target: Optional[Path] = None
    session_id: Optional[str] = None
    already_clean: bool = False  # workbench had no session marker
    nothing_to_remove: bool = False  # workbench file not found at all
    purged: List[Path] = field(default_factory=list)
    purge_error: str = ""  # restored, but some backups could not be deleted
    errors: List[Error] = field(default_factory=list)
    notifications: List[str] = field(default_factory=list)
    restart: Optional[RestartResult] = None

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        lines = list(self.notifications)
        if lines:
            lines.append("")
        if self.nothing_to_remove:
            lines.append(msg.NOTHING_TO_REMOVE)
        if self.target is not None:
            lines.append(f"Workbench: {self.target}")
        if self.errors:
            lines.extend(_error_lines(self.errors, "uninstall"))
        elif self.already_clean:
            lines.append("Not installed (no session marker).")
        elif self.session_id:
            lines.append(f"Restored session: {self.session_id}")
            lines.append(f"Backups removed: {len(self.purged)}")
            if self.purge_error:
                lines.append(msg.STALE_BACKUPS_REMAIN + self.purge_error)
        lines.extend(_restart_lines(self.restart))
        return "\n".join(lines)


@dataclass
class StatusReport:
    """Report for status command."""
    target: Optional[Path] = None
    patched: bool = False
    session_id: Optional[str] = None
    has_session_backup: bool = False
    backups: List[Path] = field(default_factory=list)
    error: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": str(self.target) if self.target is not None else None,
            "patched": self.patched,
            "session_id": self.session_id,
            "has_session_backup": self.has_session_backup,
            "backups": [str(p) for p in self.backups],
            "error": self.error,
        }

    def summary(self) -> str:
        if self.target is None:
            return "No VS Code workbench file found."

        lines = [f"Workbench: {self.target}"]
        if self.error:
            lines.append(f"ERROR: {self.error}")
            return "\n".join(lines)
        if self.patched:
            lines.append(f"Installed: yes (session: {self.session_id or 'unknown'})")
            if not self.has_session_backup:
                lines.append("WARNING: backup for this session is missing")
        else:
            lines.append("Installed: no")
        lines.append(f"Backups: {len(self.backups)}")
        for p in self.backups:
            lines.append(f"  {p.name}")
        return "\n".join(lines)
