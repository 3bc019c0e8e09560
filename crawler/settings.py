"""Configuration models for the article crawler."""

from __future__ import annotations

import json
import re
from functools import lru_cache
from typing import Any, List

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveFloat,
    PositiveInt,
    ValidationError,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BODY_SELECTORS = [
    ".text-long > p",
    ".text-long > div > p",
    ".text-long",
]


class SiteProfile(BaseModel):
    """Site-specific constants consumed by a crawl cycle."""

    model_config = ConfigDict(frozen=True)

    source: str = Field("cna", description="Source tag owned by this extractor pipeline.")
    url_pattern: str = Field(
        r"https://www\.channelnewsasia\.com.*",
        description="Regular expression the current page location must match.",
    )
    date_selector: str = Field(".article-publish", description="Selector of the publish-date element.")
    not_found_selector: str = Field(
        '[about="/page-not-found"]',
        description="Selector whose presence marks a page-not-found document.",
    )
    body_selectors: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BODY_SELECTORS),
        description="Body paragraph selectors, most specific first.",
    )
    honor_meridian: bool = Field(False, description="Convert AM/PM to 24-hour time when parsing dates.")

    @field_validator("source")
    @classmethod
    def _normalize_source(cls, value: str) -> str:
        source = value.strip()
        if not source:
            raise ValueError("source must not be blank.")
        return source

    @field_validator("url_pattern")
    @classmethod
    def _validate_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"url_pattern is not a valid regular expression: {exc}") from exc
        return value

    @field_validator("body_selectors")
    @classmethod
    def _validate_body_selectors(cls, value: List[str]) -> List[str]:
        selectors = [s.strip() for s in value if s and s.strip()]
        if not selectors:
            raise ValueError("body_selectors needs at least one selector.")
        return selectors


class Settings(BaseSettings):
    """Environment settings for the crawler."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    store_base_url: str = Field(
        "http://localhost:8000",
        alias="CRAWLER_STORE_BASE_URL",
        description="Base URL of the article store API.",
    )
    store_timeout_seconds: PositiveFloat = Field(
        10.0, alias="CRAWLER_STORE_TIMEOUT_SECONDS", description="Article store request timeout (seconds)."
    )
    source: str = Field("cna", alias="CRAWLER_SOURCE", description="Source tag of queued articles.")
    url_pattern: str = Field(
        r"https://www\.channelnewsasia\.com.*",
        alias="CRAWLER_URL_PATTERN",
        description="Expected article location pattern.",
    )
    date_selector: str = Field(".article-publish", alias="CRAWLER_DATE_SELECTOR")
    not_found_selector: str = Field('[about="/page-not-found"]', alias="CRAWLER_NOT_FOUND_SELECTOR")
    body_selectors: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BODY_SELECTORS),
        alias="CRAWLER_BODY_SELECTORS",
        description="JSON array of body selectors, most specific first.",
    )
    honor_meridian: bool = Field(False, alias="CRAWLER_HONOR_MERIDIAN")
    page_timeout_seconds: PositiveFloat = Field(
        20.0, alias="CRAWLER_PAGE_TIMEOUT_SECONDS", description="Page navigation timeout (seconds)."
    )
    user_agent: str = Field(
        "Mozilla/5.0 (compatible; article-crawler/0.1)",
        alias="CRAWLER_USER_AGENT",
    )
    max_cycles: PositiveInt = Field(
        50, alias="CRAWLER_MAX_CYCLES", description="Upper bound of cycles per task invocation."
    )
    interval_seconds: PositiveInt = Field(
        300, alias="CRAWLER_INTERVAL_SECONDS", description="Beat interval of the crawl task (seconds)."
    )
    schedule_enabled: bool = Field(True, alias="CRAWLER_SCHEDULE_ENABLED")
    redis_url: str = Field(
        "redis://localhost:6379/0",
        alias="CRAWLER_REDIS_URL",
        description="Celery broker/backend Redis DSN.",
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL", description="Root log level.")
    log_json: bool = Field(False, alias="LOG_JSON", description="Emit logs as JSON lines.")

    @field_validator("body_selectors", mode="before")
    @classmethod
    def _parse_body_selectors(cls, value: Any) -> List[Any]:
        if value in (None, "", []):
            return list(DEFAULT_BODY_SELECTORS)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except json.JSONDecodeError as exc:
                raise ValueError("CRAWLER_BODY_SELECTORS must be a JSON array.") from exc
            if not isinstance(parsed, list):
                raise ValueError("CRAWLER_BODY_SELECTORS must be a JSON array.")
            return parsed
        if isinstance(value, list):
            return value
        raise ValueError("CRAWLER_BODY_SELECTORS must be a list.")

    @field_validator("store_base_url")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        if "://" not in value:
            raise ValueError("CRAWLER_STORE_BASE_URL must be an absolute URL.")
        return value.rstrip("/")

    def site_profile(self) -> SiteProfile:
        return SiteProfile(
            source=self.source,
            url_pattern=self.url_pattern,
            date_selector=self.date_selector,
            not_found_selector=self.not_found_selector,
            body_selectors=list(self.body_selectors),
            honor_meridian=self.honor_meridian,
        )


@lru_cache()
def get_settings() -> Settings:
    """Return the Settings instance built from the environment."""
    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Environment validation failed: {exc}") from exc


def reset_settings_cache() -> None:
    """Clear the Settings cache (used by tests)."""
    get_settings.cache_clear()  # type: ignore[attr-defined]
