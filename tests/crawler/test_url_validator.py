import pytest

from crawler.services.url_validator import is_valid_location

PATTERN = r"https://www\.channelnewsasia\.com.*"


@pytest.mark.parametrize(
    "location",
    [
        "https://www.channelnewsasia.com/a/1",
        "https://www.channelnewsasia.com/singapore/some-story-123",
        "https://www.channelnewsasia.com",
    ],
)
def test_valid_locations(location):
    assert is_valid_location(location, PATTERN)


@pytest.mark.parametrize(
    "location",
    [
        None,
        "",
        "http://www.channelnewsasia.com/a/1",
        "https://cnalifestyle.channelnewsasia.com/a/1",
        "https://login.example.com/?next=https://www.channelnewsasia.com/a/1",
        "about:blank",
    ],
)
def test_invalid_locations(location):
    assert not is_valid_location(location, PATTERN)
