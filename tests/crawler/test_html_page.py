from __future__ import annotations

import httpx
import pytest

pytest.importorskip("pytest_httpx")

from crawler.pages.base import NavigationError
from crawler.pages.html import HtmlPage, HttpPage

LINK = "https://www.channelnewsasia.com/a/1"


def test_html_page_selects_in_document_order():
    page = HtmlPage("<div><p>one</p><p>two <b>bold</b></p></div>", location=LINK)

    assert [el.text_content for el in page.select("div > p")] == ["one", "two bold"]
    assert page.select_one("span") is None
    assert page.is_at(LINK)


def test_html_page_navigate_only_records():
    page = HtmlPage("<p>x</p>", location="about:blank")

    page.navigate(LINK)

    assert page.navigations == [LINK]
    assert page.location == "about:blank"
    assert not page.is_at(LINK)


def test_html_page_entry_url_counts_as_arrived():
    page = HtmlPage("", location="https://www.channelnewsasia.com/other", entry_url=LINK)

    assert page.is_at(LINK)
    assert page.is_at("https://www.channelnewsasia.com/other")


def test_http_page_loads_document(httpx_mock):
    httpx_mock.add_response(url=LINK, html='<div class="article-publish">1 Jan 2023 09:00AM</div>')

    with HttpPage() as page:
        page.navigate(LINK)

        assert page.location == LINK
        assert page.entry_url == LINK
        assert page.select_one(".article-publish").text_content == "1 Jan 2023 09:00AM"


def test_http_page_follows_redirects(httpx_mock):
    target = "https://sso.example.com/login"
    httpx_mock.add_response(url=LINK, status_code=302, headers={"Location": target})
    httpx_mock.add_response(url=target, html="<p>login</p>")

    with HttpPage() as page:
        page.navigate(LINK)

        assert page.location == target
        assert page.entry_url == LINK
        assert page.is_at(LINK)


def test_http_page_parses_error_documents(httpx_mock):
    httpx_mock.add_response(url=LINK, status_code=404, html='<div about="/page-not-found">Gone</div>')

    with HttpPage() as page:
        page.navigate(LINK)

        assert page.select_one('[about="/page-not-found"]') is not None


def test_http_page_transport_error(httpx_mock):
    httpx_mock.add_exception(httpx.ConnectError("down"))

    with HttpPage() as page:
        with pytest.raises(NavigationError):
            page.navigate(LINK)
        assert page.location is None
