"""Publish-date parsing for the site's ``15 Aug 2022 02:43PM`` format."""

from __future__ import annotations

import re
from datetime import datetime, timezone

_ANNOTATION_RE = re.compile(r"\(.*\)")
_MERIDIAN_RE = re.compile(r"(AM|PM)")
_WHITESPACE_RE = re.compile(r"\s+")
_FORMATS = ("%d %b %Y %H:%M", "%d %B %Y %H:%M")


class InvalidDate(ValueError):
    """Raised when a raw date string cannot be parsed into a timestamp."""


def normalize_date(raw: str, *, honor_meridian: bool = False) -> str:
    """Convert a raw site date into an ISO-8601 UTC string with milliseconds.

    The site renders local time without a zone; it is read as UTC. By default
    the AM/PM marker is dropped without shifting the hour, which keeps parity
    with records already stored. ``honor_meridian`` converts to 24-hour time.
    """
    if raw is None:
        raise InvalidDate("empty date string")
    value = _ANNOTATION_RE.sub("", raw).strip()
    meridian = _MERIDIAN_RE.search(value)
    value = _MERIDIAN_RE.sub("", value, count=1)
    value = _WHITESPACE_RE.sub(" ", value).strip()
    if not value:
        raise InvalidDate(f"no date found in {raw!r}")

    parsed = None
    for fmt in _FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
            break
        except ValueError:
            continue
    if parsed is None:
        raise InvalidDate(f"unrecognized date {raw!r}")

    if honor_meridian and meridian is not None and parsed.hour <= 12:
        hour = parsed.hour % 12
        if meridian.group(1) == "PM":
            hour += 12
        parsed = parsed.replace(hour=hour)

    parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M:%S.") + f"{parsed.microsecond // 1000:03d}Z"
