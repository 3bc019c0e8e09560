import pytest

celery = pytest.importorskip("celery")  # noqa: F841

from crawler.celery_app import CRAWL_TASK_NAME, create_celery_app
from crawler.settings import Settings


def test_create_celery_app_builds_crawl_schedule():
    settings = Settings(redis_url="redis://localhost:6379/1", interval_seconds=120, log_level="DEBUG")

    app = create_celery_app(settings)

    entry = app.conf.beat_schedule["crawl.cna"]
    assert entry["task"] == CRAWL_TASK_NAME
    assert entry["schedule"].run_every.total_seconds() == 120
    assert app.conf.worker_concurrency == 1


def test_disabled_schedule_is_empty():
    app = create_celery_app(Settings(schedule_enabled=False))

    assert app.conf.beat_schedule == {}
