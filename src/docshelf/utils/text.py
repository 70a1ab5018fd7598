"""Text helpers for excerpts and search snippets."""

from __future__ import annotations

import re

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[-\s]+")


def excerpt(text: str, *, max_chars: int = 500) -> str:
    """Return a bounded prefix of ``text``."""
    if max_chars <= 0:
        return ""
    return text[:max_chars]


def slugify(value: str, separator: str = "-") -> str:
    """Heading text to anchor id: lowercase, drop non-word chars, hyphenate whitespace."""
    value = _NON_WORD.sub("", value).strip().lower()
    return _SEPARATORS.sub(separator, value)


def snippet(text: str, query: str, *, before: int = 100, after: int = 200, fallback: int = 300) -> str:
    """Cut a window of ``text`` around the first case-insensitive match of ``query``.

    Without a match the first ``fallback`` characters are returned.
    """
    index = text.lower().find(query.lower()) if query else -1
    if index < 0:
        return text[:fallback] + ("..." if len(text) > fallback else "")

    start = max(0, index - before)
    end = min(len(text), index + len(query) + after)
    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(text) else ""
    return f"{prefix}{text[start:end]}{suffix}"

