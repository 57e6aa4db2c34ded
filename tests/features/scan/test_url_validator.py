import pytest

from app.platform.exceptions import InvalidInput, InvalidUrl
from app.platform.utils.url_validator import normalize_url, validate_url


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("SunriseClinic.com", "https://sunriseclinic.com"),
        ("  https://sunriseclinic.com/  ", "https://sunriseclinic.com"),
        ("http://sunriseclinic.com/contact/", "http://sunriseclinic.com/contact"),
        ("https://www.sunriseclinic.com//", "https://www.sunriseclinic.com"),
        ("localhost:8080", "https://localhost:8080"),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["sunriseclinic.com", "HTTP://SunriseClinic.com/", "https://sunriseclinic.com/a/b/", "example.org//"],
)
def test_normalize_is_idempotent(raw):
    once = normalize_url(raw)
    assert normalize_url(once) == once


@pytest.mark.parametrize("raw", ["", "   ", "ftp://sunriseclinic.com", "https://", "not a url", "clinic"])
def test_normalize_rejects_invalid_input(raw):
    with pytest.raises(InvalidUrl):
        normalize_url(raw)


def test_invalid_url_is_invalid_input():
    assert issubclass(InvalidUrl, InvalidInput)
    assert InvalidUrl().status_code == 400


def test_validate_url_returns_tuple():
    assert validate_url("sunriseclinic.com") == (True, "https://sunriseclinic.com", "")

    ok, url, error = validate_url("ftp://sunriseclinic.com")
    assert ok is False
    assert url == ""
    assert error
