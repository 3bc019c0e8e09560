import pytest

from crawler.services.text import normalize_text


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  Hello   World  ", "Hello World"),
        ("Hello\n\n\tWorld", "Hello World"),
        (" lead  trail \n", "lead trail"),
        ("", ""),
        ("   \n\t ", ""),
        ("single", "single"),
    ],
)
def test_normalize_text_collapses_whitespace(raw, expected):
    assert normalize_text(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["  a  b\n\nc ", "x\r\ny", "\t\tindent", "no-op", " ", "p1 \n p2 \n\n p3"],
)
def test_normalize_text_is_idempotent_and_clean(raw):
    once = normalize_text(raw)
    assert normalize_text(once) == once
    assert once == once.strip()
    assert "  " not in once
    assert "\n" not in once and "\t" not in once
