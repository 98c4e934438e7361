"""
Filesystem-safe path segment derivation for archive labels.
"""

from __future__ import annotations

import re

MAX_SEGMENT_LENGTH = 200
FALLBACK_SEGMENT = "untitled"

_ILLEGAL_CHARS = re.compile(r'[\\:*?"<>|]')
_SPACING = re.compile(r"[\s_]+")


def sanitize(label: str) -> str:
    """Turn an arbitrary label into a single filesystem-safe path segment.

    Slashes become dashes, characters illegal on common filesystems are dropped,
    runs of whitespace and underscores collapse into one space, and the result is
    trimmed and cut to ``MAX_SEGMENT_LENGTH`` characters. Empty and dot-only results
    fall back to ``"untitled"``. The function is idempotent.
    """
    name = (label or "").replace("/", "-")
    name = _ILLEGAL_CHARS.sub("", name)
    name = _SPACING.sub(" ", name)
    name = name.strip()
    if len(name) > MAX_SEGMENT_LENGTH:
        name = name[:MAX_SEGMENT_LENGTH].rstrip()
    if not name or set(name) == {"."}:
        return FALLBACK_SEGMENT
    return name
