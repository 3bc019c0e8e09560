"""Whitespace normalization for extracted article text."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Trim and collapse every whitespace run (newlines included) into one space."""
    return _WHITESPACE_RE.sub(" ", text.strip()).strip()
