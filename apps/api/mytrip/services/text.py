"""Text clean-up helpers shared by the detail and listing services."""
from __future__ import annotations

import re
import unicodedata

PLACEHOLDER_VALUES = frozenset({"없음", "-"})

_BLOCK_BREAKS = (
    (re.compile(r"<br\s*/?>", re.IGNORECASE), "\n"),
    (re.compile(r"</p>", re.IGNORECASE), "\n"),
    (re.compile(r"<p[^>]*>", re.IGNORECASE), ""),
    (re.compile(r"</div>", re.IGNORECASE), "\n"),
    (re.compile(r"<div[^>]*>", re.IGNORECASE), ""),
)
_ANY_TAG = re.compile(r"<[^>]+>")
_EXCESS_BLANK_LINES = re.compile(r"\n\s*\n\s*\n")
_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
)


def is_blank(value: str | None) -> bool:
    """True for None, empty or whitespace-only strings."""

    return value is None or not str(value).strip()


def clean_field(value: str | None) -> str | None:
    """Return the trimmed value, or None for blanks and placeholder values."""

    if is_blank(value):
        return None
    trimmed = str(value).strip()
    if trimmed in PLACEHOLDER_VALUES:
        return None
    return trimmed


def sanitize_text(text: str) -> str:
    """Strip markup from an upstream free-text field, keeping line breaks."""

    sanitized = text
    for pattern, replacement in _BLOCK_BREAKS:
        sanitized = pattern.sub(replacement, sanitized)
    sanitized = _ANY_TAG.sub("", sanitized)
    for entity, replacement in _ENTITIES:
        sanitized = sanitized.replace(entity, replacement)
    sanitized = _EXCESS_BLANK_LINES.sub("\n\n", sanitized)
    return sanitized.strip()


def _char_rank(char: str) -> int:
    if char.isspace() or unicodedata.category(char)[0] in {"P", "S"}:
        return 0
    if char.isdigit():
        return 1
    code = ord(char)
    if 0xAC00 <= code <= 0xD7A3 or 0x1100 <= code <= 0x11FF or 0x3130 <= code <= 0x318F:
        return 2
    if 0x4E00 <= code <= 0x9FFF:
        return 3
    return 4


def korean_sort_key(text: str) -> tuple[tuple[int, str], ...]:
    """Collation key ordering titles the way Korean dictionaries do.

    Punctuation and digits sort first, then Hangul (whose code points are
    already in dictionary order), then Han, then other scripts.
    Comparison is case-insensitive.
    """

    normalized = unicodedata.normalize("NFC", text).casefold()
    return tuple((_char_rank(char), char) for char in normalized)
