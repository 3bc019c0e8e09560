import json

import pytest

from crawler.settings import DEFAULT_BODY_SELECTORS, SiteProfile, get_settings, reset_settings_cache


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    reset_settings_cache()
    yield
    reset_settings_cache()


def test_defaults_target_cna(monkeypatch):
    monkeypatch.delenv("CRAWLER_STORE_BASE_URL", raising=False)
    settings = get_settings()

    assert settings.store_base_url == "http://localhost:8000"
    assert settings.source == "cna"
    assert settings.body_selectors == DEFAULT_BODY_SELECTORS
    assert settings.honor_meridian is False


def test_get_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("CRAWLER_STORE_BASE_URL", "https://store.internal/api/")
    monkeypatch.setenv("CRAWLER_SOURCE", "straitstimes")
    monkeypatch.setenv("CRAWLER_BODY_SELECTORS", json.dumps([".story p", ".story"]))
    monkeypatch.setenv("CRAWLER_HONOR_MERIDIAN", "true")
    monkeypatch.setenv("CRAWLER_MAX_CYCLES", "7")

    settings = get_settings()

    assert settings.store_base_url == "https://store.internal/api"
    assert settings.max_cycles == 7
    profile = settings.site_profile()
    assert profile.source == "straitstimes"
    assert profile.body_selectors == [".story p", ".story"]
    assert profile.honor_meridian is True


def test_reset_settings_cache_reloads(monkeypatch):
    monkeypatch.setenv("CRAWLER_SOURCE", "first")
    assert get_settings().source == "first"

    monkeypatch.setenv("CRAWLER_SOURCE", "second")
    assert get_settings().source == "first"

    reset_settings_cache()
    assert get_settings().source == "second"


def test_invalid_base_url_raises(monkeypatch):
    monkeypatch.setenv("CRAWLER_STORE_BASE_URL", "localhost:8000")

    with pytest.raises(RuntimeError) as exc:
        get_settings()

    assert "CRAWLER_STORE_BASE_URL" in str(exc.value)


def test_site_profile_validation():
    with pytest.raises(Exception):
        SiteProfile(url_pattern="([unclosed")
    with pytest.raises(Exception):
        SiteProfile(body_selectors=["  ", ""])
    with pytest.raises(Exception):
        SiteProfile(source=" ")
