import pytest
from holidaze.core.config import Settings
from pydantic import ValidationError


def test_defaults(monkeypatch):
    monkeypatch.delenv("AVAILABILITY_CONCURRENCY_LIMIT", raising=False)
    monkeypatch.delenv("BOOKING_SOURCE", raising=False)
    s = Settings()
    assert s.availability_concurrency_limit == 8
    assert s.booking_source in {"fixture", "noroff"}


def test_concurrency_limit_must_be_positive(monkeypatch):
    monkeypatch.setenv("AVAILABILITY_CONCURRENCY_LIMIT", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_booking_source_is_normalized(monkeypatch):
    monkeypatch.setenv("BOOKING_SOURCE", " Noroff ")
    assert Settings().booking_source == "noroff"

    monkeypatch.setenv("BOOKING_SOURCE", "carrier-pigeon")
    with pytest.raises(ValidationError):
        Settings()


@pytest.mark.parametrize(
    "raw,expected",
    [
        ('["http://a.test", "http://b.test"]', ["http://a.test", "http://b.test"]),
        ("[http://a.test, http://b.test]", ["http://a.test", "http://b.test"]),
        ("http://a.test, http://b.test", ["http://a.test", "http://b.test"]),
        ("*", ["*"]),
        ("", []),
    ],
)
def test_cors_origins_formats(monkeypatch, raw, expected):
    monkeypatch.setenv("CORS_ORIGINS", raw)
    assert Settings().cors_origins == expected
