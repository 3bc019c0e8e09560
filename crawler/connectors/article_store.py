"""HTTP client for the remote article queue/store."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from crawler.models.domain import Article, StoreFailure, StoreResult
from crawler.settings import Settings, get_settings
from crawler.utils.logging import get_logger

from .base import PermanentStoreError, StoreError, TransientStoreError, error_for_status

logger = get_logger(__name__)


class ArticleStoreClient:
    """Fetch, overwrite, lock and delete article records.

    Every call is a single round trip without retries. Failures are logged
    and returned as ``StoreResult`` values instead of raised.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        source: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
        settings: Optional[Settings] = None,
    ):
        cfg = settings or get_settings()
        self._base_url = (base_url or cfg.store_base_url).rstrip("/")
        self._source = source or cfg.source
        self._timeout = float(timeout if timeout is not None else cfg.store_timeout_seconds)
        self._client = client

    @property
    def source(self) -> str:
        return self._source

    def fetch_next(self) -> StoreResult[Article]:
        """Return one record with empty text for the source, or an empty success."""
        try:
            body = self._request(
                "GET",
                "/article/getArticleByText",
                "fetch",
                params={"text": "", "source": self._source},
            )
            record = _unwrap_record(body)
            article = Article.model_validate(record) if record else None
        except StoreError as exc:
            return self._failed("store.fetch.failed", exc)
        except ValueError as exc:
            return self._failed("store.fetch.failed", PermanentStoreError(str(exc), StoreFailure.DECODE))
        if article is None:
            logger.info("store.fetch.empty", extra={"source": self._source})
        return StoreResult.success(article)

    def persist(self, article: Article) -> StoreResult[Article]:
        try:
            self._request("POST", f"/article/{article.id}", "update", json=article.to_payload())
        except StoreError as exc:
            return self._failed("store.update.failed", exc, article)
        return StoreResult.success(article)

    def set_lock(self, article: Article, locked: bool) -> StoreResult[Article]:
        """Set or clear ``isProcessing``; clearing removes the field from the record."""
        article.is_processing = True if locked else None
        try:
            self._request("POST", f"/article/{article.id}", "lock", json=article.to_payload())
        except StoreError as exc:
            return self._failed("store.lock.failed", exc, article, locked=locked)
        return StoreResult.success(article)

    def delete(self, article: Article) -> StoreResult[Article]:
        try:
            self._request("DELETE", f"/article/{article.id}", "delete")
        except StoreError as exc:
            return self._failed("store.delete.failed", exc, article)
        logger.info("store.deleted", extra={"article_id": article.id, "link": article.link})
        return StoreResult.success(article)

    def _request(self, method: str, path: str, action: str, **kwargs: Any) -> Any:
        url = f"{self._base_url}{path}"
        try:
            if self._client is not None:
                resp = self._client.request(method, url, timeout=self._timeout, **kwargs)
            else:
                resp = httpx.request(method, url, timeout=self._timeout, **kwargs)
        except httpx.TimeoutException as exc:
            raise TransientStoreError(f"{action} timed out") from exc
        except httpx.HTTPError as exc:
            raise TransientStoreError(f"{action} transport error: {exc}") from exc

        error = error_for_status(resp.status_code, action)
        if error is not None:
            raise error
        if method != "GET":
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise PermanentStoreError(f"{action} returned invalid JSON", StoreFailure.DECODE) from exc

    def _failed(self, event: str, exc: StoreError, article: Optional[Article] = None, **extra: Any) -> StoreResult:
        fields: Dict[str, Any] = {"failure": exc.failure.value, "error": str(exc), **extra}
        if article is not None:
            fields["article_id"] = article.id
        logger.warning(event, extra=fields)
        return StoreResult.error(exc.failure, str(exc))


def _unwrap_record(body: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(body, dict):
        raise PermanentStoreError("fetch response is not an object", StoreFailure.DECODE)
    outer = body.get("data")
    if outer is None:
        return None
    if not isinstance(outer, dict):
        raise PermanentStoreError("fetch response has no data envelope", StoreFailure.DECODE)
    record = outer.get("data")
    if record is not None and not isinstance(record, dict):
        raise PermanentStoreError("fetch response record is not an object", StoreFailure.DECODE)
    return record
