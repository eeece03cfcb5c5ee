"""Sentinel comments that delimit and identify the injected block.

Three fixed sentinel forms are embedded as HTML comments so the workbench
ignores them:

    <!-- !! VSCODE-CUSTOM-CSS-SESSION-ID <token> !! -->
    <!-- !! VSCODE-CUSTOM-CSS-START !! -->
    ...injected markup...
    <!-- !! VSCODE-CUSTOM-CSS-END !! -->

Everything here works on in-memory text and has no side effects.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import FrozenSet, Optional, Union

SESSION_PREFIX = "<!-- !! VSCODE-CUSTOM-CSS-SESSION-ID "
SENTINEL_SUFFIX = " !! -->"
START_SENTINEL = "<!-- !! VSCODE-CUSTOM-CSS-START !! -->"
END_SENTINEL = "<!-- !! VSCODE-CUSTOM-CSS-END !! -->"

# Session ids we write and read back are hex + hyphens (uuid4 text).
HEX_TOKEN_CHARS: FrozenSet[str] = frozenset(string.hexdigits + "-")
# Stripping is looser so that hand-edited or foreign ids are cleared too.
WORD_TOKEN_CHARS: FrozenSet[str] = frozenset(string.ascii_letters + string.digits + "_-")


@dataclass(frozen=True)
class Found:
    """Span of a sentinel (or a whole block) inside the content."""
    start: int
    end: int  # exclusive, trailing newlines not included
    token: str = ""  # session id for session sentinels


class NotFound:
    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = NotFound()

Scan = Union[Found, NotFound]


def is_session_token(token: str) -> bool:
    """Return True if token is a usable session id (hex digits and hyphens)."""
    return bool(token) and all(c in HEX_TOKEN_CHARS for c in token)


def session_sentinel(session_id: str) -> str:
    return f"{SESSION_PREFIX}{session_id}{SENTINEL_SUFFIX}"


def find_session(
    content: str,
    pos: int = 0,
    token_chars: FrozenSet[str] = HEX_TOKEN_CHARS,
) -> Scan:
    """Find the first well-formed session sentinel at or after pos."""
    while True:
        i = content.find(SESSION_PREFIX, pos)
        if i < 0:
            return NOT_FOUND
        j = i + len(SESSION_PREFIX)
        k = j
        while k < len(content) and content[k] in token_chars:
            k += 1
        if k > j and content.startswith(SENTINEL_SUFFIX, k):
            return Found(i, k + len(SENTINEL_SUFFIX), content[j:k])
        # Malformed or unterminated prefix: keep scanning past it.
        pos = i + 1


def find_block(content: str, pos: int = 0) -> Scan:
    """Find the first start sentinel and the first end sentinel after it."""
    i = content.find(START_SENTINEL, pos)
    if i < 0:
        return NOT_FOUND
    j = content.find(END_SENTINEL, i + len(START_SENTINEL))
    if j < 0:
        return NOT_FOUND
    return Found(i, j + len(END_SENTINEL))


def _skip_newlines(content: str, pos: int) -> int:
    while pos < len(content) and content[pos] == "\n":
        pos += 1
    return pos


def extract_session_id(content: str) -> Optional[str]:
    """Return the id from the first session sentinel, or None."""
    found = find_session(content)
    if not found:
        return None
    return found.token


def has_patch(content: str) -> bool:
    """Return True if any block or session sentinel is present."""
    return bool(find_block(content)) or bool(find_session(content, token_chars=WORD_TOKEN_CHARS))


def _strip_once(content: str) -> str:
    block = find_block(content)
    if block:
        content = content[:block.start] + content[_skip_newlines(content, block.end):]

    parts = []
    pos = 0
    while True:
        found = find_session(content, pos, WORD_TOKEN_CHARS)
        if not found:
            break
        parts.append(content[pos:found.start])
        pos = _skip_newlines(content, found.end)
    parts.append(content[pos:])
    return "".join(parts)


def strip_patch(content: str) -> str:
    """
    Remove the injected block and every session sentinel.

    One pass removes the first block plus all session lines; passes repeat
    until nothing changes, so stacked blocks from corrupted files are cleared
    and the result is a fixed point.
    """
    while True:
        stripped = _strip_once(content)
        if stripped == content:
            return stripped
        content = stripped


def render_block(session_id: str, payload: str) -> str:
    """Build the newline-terminated session + start + payload + end lines."""
    if not is_session_token(session_id):
        raise ValueError(f"Invalid session id: {session_id!r}")
    if not payload.endswith("\n"):
        payload += "\n"
    return (
        f"{session_sentinel(session_id)}\n"
        f"{START_SENTINEL}\n"
        f"{payload}"
        f"{END_SENTINEL}\n"
    )
