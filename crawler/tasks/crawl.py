"""Crawl cycle: claim an article, extract it from the page, write it back."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import List, Optional

from celery import shared_task
from pydantic import BaseModel

from crawler.connectors.article_store import ArticleStoreClient
from crawler.connectors.base import ArticleStore
from crawler.models.domain import Article
from crawler.pages.base import NavigationError, Page
from crawler.pages.html import HttpPage
from crawler.services.extractor import ContentExtractor, MissingBodyText, PublishDateError
from crawler.services.url_validator import is_valid_location
from crawler.settings import Settings, SiteProfile, get_settings
from crawler.utils.logging import get_logger

logger = get_logger(__name__)


class CycleOutcome(str, Enum):
    NO_WORK = "no_work"
    NAVIGATED = "navigated"
    DISCARDED = "discarded"
    PERSISTED = "persisted"
    ABORTED = "aborted"


class CycleReport(BaseModel):
    outcome: CycleOutcome
    article_id: Optional[str] = None
    next_link: Optional[str] = None
    reason: Optional[str] = None

    @property
    def should_continue(self) -> bool:
        """A follow-up article is waiting at (or was navigated to by) the page."""
        return self.outcome is not CycleOutcome.ABORTED and self.next_link is not None


class CrawlOrchestrator:
    """Runs one crawl cycle per call against a page.

    A cycle ends on the first navigation, so nothing but the page carries
    over between calls. Failures never roll back side effects already made:
    an aborted cycle can leave its article locked in the store.
    """

    def __init__(
        self,
        store: ArticleStore,
        profile: SiteProfile,
        extractor: Optional[ContentExtractor] = None,
    ):
        self._store = store
        self._profile = profile
        self._extractor = extractor or ContentExtractor(profile)

    def run_cycle(self, page: Page) -> CycleReport:
        fetched = self._store.fetch_next()
        if not fetched or fetched.value is None:
            return CycleReport(outcome=CycleOutcome.NO_WORK, reason=fetched.detail)
        article: Article = fetched.value
        trace_id = str(uuid.uuid4())
        logger.info(
            "crawl.start",
            extra={"trace_id": trace_id, "article_id": article.id, "link": article.link, "location": page.location},
        )

        if not page.is_at(article.link):
            return self._navigate(page, article, CycleOutcome.NAVIGATED, article.id)

        if not is_valid_location(page.location, self._profile.url_pattern):
            return self._discard(page, article, "off_domain_location")

        if not self._store.set_lock(article, True):
            return self._abort(article, "lock_failed")

        if page.select_one(self._profile.not_found_selector) is not None:
            return self._discard(page, article, "page_not_found")

        try:
            self._extractor.extract(article, page)
        except PublishDateError as exc:
            return self._discard(page, article, f"publish_date: {exc}")
        except MissingBodyText:
            # article stays locked; recovery happens out of band
            return self._abort(article, "no_body_text")
        if not article.text:
            return self._abort(article, "empty_text")

        if not self._store.persist(article):
            return self._abort(article, "persist_failed")
        if not self._store.set_lock(article, False):
            return self._abort(article, "unlock_failed")

        logger.info(
            "crawl.persisted",
            extra={
                "trace_id": trace_id,
                "article_id": article.id,
                "text_length": article.text_length,
                "date_published": article.date_published,
            },
        )
        return self._advance(page, CycleOutcome.PERSISTED, article.id)

    def _discard(self, page: Page, article: Article, reason: str) -> CycleReport:
        logger.info("crawl.discard", extra={"article_id": article.id, "link": article.link, "reason": reason})
        if not self._store.delete(article):
            return self._abort(article, "delete_failed")
        return self._advance(page, CycleOutcome.DISCARDED, article.id, reason)

    def _advance(
        self, page: Page, outcome: CycleOutcome, article_id: str, reason: Optional[str] = None
    ) -> CycleReport:
        fetched = self._store.fetch_next()
        if not fetched or fetched.value is None:
            return CycleReport(outcome=outcome, article_id=article_id, reason=reason)
        return self._navigate(page, fetched.value, outcome, article_id, reason)

    def _navigate(
        self,
        page: Page,
        target: Article,
        outcome: CycleOutcome,
        article_id: str,
        reason: Optional[str] = None,
    ) -> CycleReport:
        if not page.is_at(target.link):
            try:
                page.navigate(target.link)
            except NavigationError as exc:
                logger.warning("crawl.navigation.failed", extra={"article_id": target.id, "error": str(exc)})
                return CycleReport(outcome=CycleOutcome.ABORTED, article_id=article_id, reason="navigation_failed")
        return CycleReport(outcome=outcome, article_id=article_id, next_link=target.link, reason=reason)

    def _abort(self, article: Article, reason: str) -> CycleReport:
        logger.warning("crawl.abort", extra={"article_id": article.id, "reason": reason})
        return CycleReport(outcome=CycleOutcome.ABORTED, article_id=article.id, reason=reason)


def run_until_idle(orchestrator: CrawlOrchestrator, page: Page, max_cycles: int) -> List[CycleReport]:
    """Re-enter the cycle after every navigation, as a page load would."""
    reports: List[CycleReport] = []
    for _ in range(max_cycles):
        report = orchestrator.run_cycle(page)
        reports.append(report)
        if not report.should_continue:
            break
    return reports


def crawl_core(
    settings: Optional[Settings] = None,
    *,
    store: Optional[ArticleStore] = None,
    page: Optional[Page] = None,
) -> List[CycleReport]:
    """Core logic of the crawl task; collaborators are injectable for tests."""
    cfg = settings or get_settings()
    store = store or ArticleStoreClient(settings=cfg)
    own_page = page is None
    page = page or HttpPage(timeout=cfg.page_timeout_seconds, user_agent=cfg.user_agent)
    orchestrator = CrawlOrchestrator(store, cfg.site_profile())
    try:
        reports = run_until_idle(orchestrator, page, cfg.max_cycles)
    finally:
        if own_page and isinstance(page, HttpPage):
            page.close()
    counts = {outcome.value: sum(1 for r in reports if r.outcome is outcome) for outcome in CycleOutcome}
    logger.info("crawl.finished", extra={"cycles": len(reports), **counts})
    return reports


@shared_task(name="crawler.tasks.crawl.crawl_articles")
def crawl_articles() -> List[str]:  # pragma: no cover - wrapper
    return [report.outcome.value for report in crawl_core()]
