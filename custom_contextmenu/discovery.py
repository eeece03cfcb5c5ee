"""Locate the VS Code workbench markup file (cross-platform)."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Sequence

from .config import Configuration
from .errors import PathNotFound

# Set by the host (or a wrapper script) to the editor's app/out directory.
ENV_VSCODE_APP_DIR = "CCM_VSCODE_APP_DIR"

# Probed in order under each root: newer layouts first.
WORKBENCH_RELPATHS: List[Path] = [
    Path("vs/code/electron-sandbox/workbench/workbench.html"),
    Path("vs/code/electron-sandbox/workbench/workbench.esm.html"),
    Path("vs/workbench/electron-sandbox/workbench.html"),
    Path("vs/workbench/electron-sandbox/workbench.esm.html"),
    Path("vs/workbench/workbench.html"),
    Path("vs/workbench/workbench.esm.html"),
]

_MAC_APP_NAMES = ("Visual Studio Code", "Visual Studio Code - Insiders", "VSCodium")
_WIN_DIR_NAMES = ("Microsoft VS Code", "Microsoft VS Code Insiders", "VSCodium")


def _platform_roots() -> List[Path]:
    """Return platform-specific candidate app/out directories."""
    candidates: List[Path] = []
    home = Path.home()
    platform = sys.platform

    if platform == "darwin":
        for app in _MAC_APP_NAMES:
            rel = Path(f"{app}.app") / "Contents" / "Resources" / "app" / "out"
            candidates.extend([
                Path("/Applications") / rel,
                home / "Applications" / rel,
            ])
    elif platform == "win32":
        bases = []
        for key in ("LOCALAPPDATA", "PROGRAMFILES"):
            raw = os.environ.get(key, "")
            if raw:
                bases.append(Path(raw) / "Programs" if key == "LOCALAPPDATA" else Path(raw))
        for base in bases:
            for name in _WIN_DIR_NAMES:
                candidates.append(base / name / "resources" / "app" / "out")
    else:
        # Linux
        candidates.extend([
            Path("/usr/share/code/resources/app/out"),
            Path("/usr/share/code-insiders/resources/app/out"),
            Path("/usr/share/codium/resources/app/out"),
            Path("/opt/visual-studio-code/resources/app/out"),
            Path("/snap/code/current/usr/share/code/resources/app/out"),
            home / ".vscode-oss" / "resources" / "app" / "out",
        ])

    return candidates


def candidate_roots(config: Configuration) -> List[Path]:
    """
    Ordered root directories to probe.

    Priority: configured override > env var > platform defaults.
    """
    raw: List[Path] = []
    if config.vscode_install_path:
        raw.append(Path(config.vscode_install_path).expanduser())
    env_dir = os.environ.get(ENV_VSCODE_APP_DIR, "").strip()
    if env_dir:
        raw.append(Path(env_dir).expanduser())
    raw.extend(_platform_roots())

    roots: List[Path] = []
    seen = set()
    for p in raw:
        key = str(p)
        if key in seen:
            continue
        seen.add(key)
        roots.append(p)
    return roots


def find_workbench(root: Path) -> Path:
    """Return the first workbench file under a single root."""
    for rel in WORKBENCH_RELPATHS:
        candidate = root / rel
        if candidate.is_file():
            return candidate
    raise PathNotFound(f"no workbench file under {root}", root)


def locate(roots: Sequence[Path]) -> Path:
    """Return the first workbench file across roots in order."""
    for root in roots:
        try:
            return find_workbench(root)
        except PathNotFound:
            continue
    raise PathNotFound("unable to locate the VS Code workbench file")
