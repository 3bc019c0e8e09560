"""Location checks against the expected article domain."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional, Pattern


@lru_cache(maxsize=32)
def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern)


def is_valid_location(location: Optional[str], pattern: str) -> bool:
    """Return True when ``location`` matches ``pattern`` from its first character.

    Redirects to intermediate or foreign domains are rejected because the
    page location, not the requested link, is checked.
    """
    if not location:
        return False
    return _compile(pattern).match(location) is not None
