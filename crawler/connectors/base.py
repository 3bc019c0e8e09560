"""Store connector errors and their mapping to result failures."""

from __future__ import annotations

from typing import Protocol

from crawler.models.domain import Article, StoreFailure, StoreResult


class StoreError(Exception):
    """Base article store error."""

    failure: StoreFailure = StoreFailure.TRANSPORT


class TransientStoreError(StoreError):
    """Network hiccup or 5xx; the cycle aborts and a later one may succeed."""

    def __init__(self, message: str, failure: StoreFailure = StoreFailure.TRANSPORT):
        super().__init__(message)
        self.failure = failure


class PermanentStoreError(StoreError):
    """4xx semantics or an undecodable body."""

    def __init__(self, message: str, failure: StoreFailure = StoreFailure.CLIENT):
        super().__init__(message)
        self.failure = failure


def error_for_status(status_code: int, action: str) -> StoreError | None:
    if status_code >= 500:
        return TransientStoreError(f"{action} server error: {status_code}", StoreFailure.SERVER)
    if status_code >= 400:
        return PermanentStoreError(f"{action} rejected: {status_code}", StoreFailure.CLIENT)
    return None


class ArticleStore(Protocol):
    """Operations a crawl cycle needs from the article store."""

    def fetch_next(self) -> StoreResult[Article]: ...

    def persist(self, article: Article) -> StoreResult[Article]: ...

    def set_lock(self, article: Article, locked: bool) -> StoreResult[Article]: ...

    def delete(self, article: Article) -> StoreResult[Article]: ...
