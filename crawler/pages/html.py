"""BeautifulSoup-backed pages: a static document and an httpx-driven one."""

from __future__ import annotations

from typing import List, Optional

import httpx
from bs4 import BeautifulSoup, Tag

from crawler.utils.logging import get_logger

from .base import NavigationError, Page, PageElement

logger = get_logger(__name__)


class SoupElement(PageElement):
    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def text_content(self) -> str:
        return self._tag.get_text()


class HtmlPage(Page):
    """A parsed HTML document sitting at a fixed location.

    ``navigate`` only records the request; the document is not replaced.
    """

    def __init__(self, html: str = "", location: Optional[str] = None, entry_url: Optional[str] = None):
        self._soup = BeautifulSoup(html, "html.parser")
        self._location = location
        self._entry_url = entry_url if entry_url is not None else location
        self.navigations: List[str] = []

    @property
    def location(self) -> Optional[str]:
        return self._location

    @property
    def entry_url(self) -> Optional[str]:
        return self._entry_url

    def navigate(self, url: str) -> None:
        self.navigations.append(url)

    def select(self, selector: str) -> List[PageElement]:
        return [SoupElement(tag) for tag in self._soup.select(selector)]

    def _load(self, html: str, location: str, entry_url: str) -> None:
        self._soup = BeautifulSoup(html, "html.parser")
        self._location = location
        self._entry_url = entry_url


class HttpPage(HtmlPage):
    """Page that navigates by fetching over HTTP and following redirects.

    Error statuses are still parsed so that not-found documents can be
    recognised by their markup.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        *,
        timeout: float = 20.0,
        user_agent: Optional[str] = None,
    ):
        super().__init__()
        headers = {"User-Agent": user_agent} if user_agent else None
        self._client = client or httpx.Client(follow_redirects=True, timeout=timeout, headers=headers)
        self._owns_client = client is None

    def navigate(self, url: str) -> None:
        self.navigations.append(url)
        try:
            resp = self._client.get(url)
        except httpx.HTTPError as exc:
            raise NavigationError(f"navigation to {url} failed: {exc}") from exc
        final = str(resp.url)
        if final != url:
            logger.info("page.redirected", extra={"requested": url, "location": final})
        if resp.status_code >= 400:
            logger.info("page.error_status", extra={"url": final, "status": resp.status_code})
        self._load(resp.text, final, url)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpPage":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()
