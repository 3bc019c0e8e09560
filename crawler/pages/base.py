"""Page capability consumed by the extractor and the orchestrator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional


class PageError(Exception):
    """Base page error."""


class NavigationError(PageError):
    """The page could not be moved to the requested URL."""


class PageElement(ABC):
    @property
    @abstractmethod
    def text_content(self) -> str:
        """Concatenated text of the element and its descendants."""


class Page(ABC):
    """A rendered document at a location that can be navigated elsewhere."""

    @property
    @abstractmethod
    def location(self) -> Optional[str]:
        """Current location, after any redirects."""

    @property
    @abstractmethod
    def entry_url(self) -> Optional[str]:
        """URL that was requested to reach the current document."""

    @abstractmethod
    def navigate(self, url: str) -> None:
        """Replace the current document with the one at ``url``."""

    @abstractmethod
    def select(self, selector: str) -> List[PageElement]:
        """All elements matching ``selector`` in document order."""

    def select_one(self, selector: str) -> Optional[PageElement]:
        matches = self.select(selector)
        return matches[0] if matches else None

    def is_at(self, url: str) -> bool:
        return url in (self.location, self.entry_url)
