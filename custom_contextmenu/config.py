"""User configuration, read from VS Code's settings.json on every operation."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

ENV_SETTINGS_FILE = "CCM_SETTINGS_FILE"
ENV_INSTALL_PATH = "CCM_VSCODE_INSTALL_PATH"

SECTION = "custom-contextmenu"


@dataclass(frozen=True)
class Configuration:
    vscode_install_path: str = ""  # root override, empty means auto-detect
    show_go_tos: bool = True
    show_clipboard_items: bool = True
    restart_command: str = ""  # shell-style command used to restart the editor


def default_settings_path() -> Path:
    """Return the platform default location of VS Code's user settings."""
    home = Path.home()
    if sys.platform == "darwin":
        base = home / "Library" / "Application Support"
    elif sys.platform == "win32":
        appdata = os.environ.get("APPDATA", "")
        base = Path(appdata) if appdata else home / "AppData" / "Roaming"
    else:
        xdg = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(xdg) if xdg else home / ".config"
    return base / "Code" / "User" / "settings.json"


def _strip_jsonc(text: str) -> str:
    """Drop // and /* */ comments and trailing commas, leaving strings alone."""
    out: List[str] = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        c = text[i]
        if in_string:
            out.append(c)
            if c == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if c == '"':
                in_string = False
            i += 1
            continue
        if c == '"':
            in_string = True
            out.append(c)
            i += 1
        elif text.startswith("//", i):
            nl = text.find("\n", i)
            i = n if nl < 0 else nl
        elif text.startswith("/*", i):
            close = text.find("*/", i + 2)
            i = n if close < 0 else close + 2
        elif c == ",":
            # Trailing comma: next significant char closes the container.
            j = i + 1
            while j < n and text[j] in " \t\r\n":
                j += 1
            if j < n and text[j] in "}]":
                i += 1
            else:
                out.append(c)
                i += 1
        else:
            out.append(c)
            i += 1
    return "".join(out)


def _read_settings(path: Path) -> Dict[str, Any]:
    """Parse a settings file. Missing or malformed files yield {}."""
    if not path.is_file():
        return {}
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError):
        return {}
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = json.loads(_strip_jsonc(text))
        except ValueError:
            return {}
    if not isinstance(data, dict):
        return {}
    return data


def _section_value(data: Dict[str, Any], key: str) -> Any:
    # Flat "section.key" form is what VS Code writes; nested form is accepted too.
    flat = data.get(f"{SECTION}.{key}")
    if flat is not None:
        return flat
    nested = data.get(SECTION)
    if isinstance(nested, dict):
        return nested.get(key)
    return None


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    return default


def _as_str(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    return ""


def load_configuration(
    settings_file: Optional[str] = None,
    *,
    install_path: Optional[str] = None,
) -> Configuration:
    """
    Load a fresh configuration snapshot.

    Priority for the install path: explicit arg > env var > settings file.
    Settings file location: explicit arg > env var > platform default.
    """
    raw_path = settings_file or os.environ.get(ENV_SETTINGS_FILE)
    path = Path(raw_path).expanduser() if raw_path else default_settings_path()
    data = _read_settings(path)

    override = install_path or os.environ.get(ENV_INSTALL_PATH) or _as_str(
        _section_value(data, "vscodeInstallPath")
    )

    return Configuration(
        vscode_install_path=(override or "").strip(),
        show_go_tos=_as_bool(_section_value(data, "showGoTos"), True),
        show_clipboard_items=_as_bool(_section_value(data, "showClipboardItems"), True),
        restart_command=_as_str(_section_value(data, "restartCommand")),
    )
