"""Render the injected script from the bundled template and configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from .config import Configuration
from .errors import ReadError

TEMPLATE_PATH = Path(__file__).resolve().parent / "static" / "user.js"


def _js_bool(value: bool) -> str:
    return "true" if value else "false"


def placeholders(config: Configuration) -> Dict[str, str]:
    return {
        "%showGoTos%": _js_bool(config.show_go_tos),
        "%showClipboardItems%": _js_bool(config.show_clipboard_items),
    }


def render_payload(config: Configuration, template_path: Optional[Path] = None) -> str:
    """Read the script template, fill in the toggles, wrap it in a script tag."""
    path = template_path or TEMPLATE_PATH
    try:
        script = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(f"template read failed: {e}", path) from e

    for token, value in placeholders(config).items():
        script = script.replace(token, value)
    return f"<script>{script}</script>"
