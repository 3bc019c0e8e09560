"""Publish-date and body extraction from a rendered article page."""

from __future__ import annotations

from typing import List, Optional

from crawler.models.domain import Article
from crawler.pages.base import Page, PageElement
from crawler.settings import SiteProfile
from crawler.utils.logging import get_logger

from .dates import InvalidDate, normalize_date
from .text import normalize_text

logger = get_logger(__name__)


class ExtractionError(Exception):
    """Base extraction error."""


class PublishDateError(ExtractionError):
    """The article cannot be dated; callers discard it."""


class MissingPublishDate(PublishDateError):
    """No publish-date element on the page."""


class InvalidPublishDate(PublishDateError):
    """The publish-date element holds an unparseable value."""


class MissingBodyText(ExtractionError):
    """None of the body selectors matched any element."""


class ContentExtractor:
    """Fills ``date_published`` and ``text`` of an article from a page.

    Body selectors are tried in order and the first one with any match wins;
    the last entry is expected to be the coarse fallback.
    """

    def __init__(self, profile: SiteProfile):
        self._profile = profile

    def extract(self, article: Article, page: Page) -> Article:
        date_el = page.select_one(self._profile.date_selector)
        if date_el is None:
            raise MissingPublishDate(f"no element matches {self._profile.date_selector!r}")
        try:
            article.date_published = normalize_date(
                date_el.text_content, honor_meridian=self._profile.honor_meridian
            )
        except InvalidDate as exc:
            raise InvalidPublishDate(str(exc)) from exc

        selector, paragraphs = self._find_body(page)
        if not paragraphs:
            raise MissingBodyText(f"no body element matches any of {self._profile.body_selectors}")
        logger.debug(
            "extract.body",
            extra={"article_id": article.id, "selector": selector, "elements": len(paragraphs)},
        )

        parts = [article.text or ""]
        parts.extend(el.text_content for el in paragraphs)
        article.set_text(normalize_text(" ".join(parts)))
        return article

    def _find_body(self, page: Page) -> tuple[Optional[str], List[PageElement]]:
        for selector in self._profile.body_selectors:
            matches = page.select(selector)
            if matches:
                return selector, matches
        return None, []
