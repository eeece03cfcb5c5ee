"""Restart the host editor after the workbench file changed."""

from __future__ import annotations

import shlex
import shutil
import subprocess
import sys
from dataclasses import dataclass
from typing import List


@dataclass
class RestartResult:
    """Result of a restart attempt."""
    attempted: bool = False  # True if a process was launched
    success: bool = False
    command: str = ""
    error: str = ""


def _split(command: str) -> List[str]:
    return shlex.split(command, posix=sys.platform != "win32")


def restart_host(command: str) -> RestartResult:
    """
    Launch the configured restart command, detached from this process.

    The editor is usually still running when this is called, so the command
    is not waited on.
    """
    result = RestartResult(command=command)
    if not command:
        result.error = "no restart command configured (custom-contextmenu.restartCommand)"
        return result

    try:
        args = _split(command)
    except ValueError as e:
        result.error = f"invalid restart command: {e}"
        return result
    if not args:
        result.error = "no restart command configured (custom-contextmenu.restartCommand)"
        return result

    binary = shutil.which(args[0])
    if not binary:
        result.error = f"{args[0]} not found"
        return result

    result.attempted = True
    try:
        subprocess.Popen(
            [binary, *args[1:]],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        result.success = True
    except OSError as e:
        result.error = str(e)
    return result
