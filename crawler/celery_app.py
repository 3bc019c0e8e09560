"""Celery application bootstrap."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict

from celery import Celery
from celery.schedules import schedule as celery_schedule

from .settings import Settings, get_settings
from .utils.logging import configure_logging

CRAWL_TASK_NAME = "crawler.tasks.crawl.crawl_articles"

_CELERY_APP: Celery | None = None


def create_celery_app(settings: Settings | None = None) -> Celery:
    """Build the Celery instance from settings."""
    config = settings or get_settings()
    configure_logging(config.log_level, json_enabled=config.log_json)

    app = Celery("crawler", broker=config.redis_url, backend=config.redis_url)
    app.conf.update(
        task_default_queue="crawler.default",
        task_default_exchange="crawler",
        task_default_routing_key="crawler.default",
        # one page, one cycle at a time
        worker_concurrency=1,
        worker_prefetch_multiplier=1,
        beat_schedule=_build_beat_schedule(config),
        timezone="UTC",
        enable_utc=True,
    )

    app.autodiscover_tasks(["crawler.tasks"], related_name="crawl")
    _install_signal_handlers(app)
    return app


def get_celery_app() -> Celery:
    """Return the singleton Celery instance."""
    global _CELERY_APP
    if _CELERY_APP is None:
        _CELERY_APP = create_celery_app()
    return _CELERY_APP


def _build_beat_schedule(settings: Settings) -> Dict[str, Dict[str, Any]]:
    if not settings.schedule_enabled:
        return {}
    return {
        f"crawl.{settings.source}": {
            "task": CRAWL_TASK_NAME,
            "schedule": celery_schedule(timedelta(seconds=settings.interval_seconds)),
            "options": {"queue": "crawler.crawl", "expires": settings.interval_seconds},
        }
    }


def _install_signal_handlers(app: Celery) -> None:
    from celery import signals

    logger = logging.getLogger("crawler.worker")

    @signals.worker_shutdown.connect  # type: ignore[attr-defined]
    def _on_worker_shutdown(sender=None, **kwargs):  # noqa: ANN001
        logger.info("Celery worker shutdown detected", extra={"sender": str(sender)})
