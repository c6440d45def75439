from __future__ import annotations

import pytest

from photoframe.engine import url_parser
from photoframe.engine.errors import InvalidUrl


def test_parse_short_url():
    reference = url_parser.parse_album_url("https://photos.app.goo.gl/ABC123")

    assert reference.album_id == "ABC123"
    assert reference.url_shape == "short"
    assert reference.raw_url == "https://photos.app.goo.gl/ABC123"


def test_parse_full_url_strips_query_and_trailing_slash():
    plain = url_parser.parse_album_url("https://photos.google.com/share/AF1QipMZNuJ5JH6n3yF")
    decorated = url_parser.parse_album_url(
        "https://photos.google.com/share/AF1QipMZNuJ5JH6n3yF/?key=abc&hl=en"
    )
    other_query = url_parser.parse_album_url(
        "https://photos.google.com/share/AF1QipMZNuJ5JH6n3yF?key=xyz"
    )

    assert plain.album_id == decorated.album_id == other_query.album_id == "AF1QipMZNuJ5JH6n3yF"
    assert decorated.url_shape == "full"
    assert decorated.raw_url == "https://photos.google.com/share/AF1QipMZNuJ5JH6n3yF/?key=abc&hl=en"


def test_parse_trims_whitespace():
    reference = url_parser.parse_album_url("  https://photos.app.goo.gl/QKGRYqfdS15bj8Kr5\n")
    assert reference.album_id == "QKGRYqfdS15bj8Kr5"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_parse_requires_value(value):
    with pytest.raises(InvalidUrl) as excinfo:
        url_parser.parse_album_url(value)
    assert excinfo.value.reason == "required"


@pytest.mark.parametrize(
    ("value", "reason"),
    [
        ("http://photos.app.goo.gl/ABC123", "insecure scheme"),
        ("ftp://photos.google.com/share/ABC", "insecure scheme"),
        ("https://example.com/share/ABC", "wrong domain"),
        ("https://photos.google.com.evil.example/share/ABC", "wrong domain"),
        ("https://photos.google.com@evil.example/share/ABC", "wrong domain"),
        ("https://photos.google.com/album/ABC", "invalid format"),
        ("https://photos.app.goo.gl/ABC/extra", "invalid format"),
        ("https://photos.app.goo.gl/ABC?x=1", "invalid format"),
        ("https://user@photos.google.com/share/ABC", "invalid format"),
        ("https://photos.google.com/share/", "invalid format"),
        ("https://photos.app.goo.gl/AB%20C", "invalid format"),
        ("https://photos.app.goo.gl/AB\x00C", "malformed"),
        ("https://photos.app.goo.gl/ABCé", "malformed"),
        ("https://photos.app.goo.gl/ABC\U0001f600", "malformed"),
    ],
)
def test_parse_rejects_invalid_urls(value, reason):
    with pytest.raises(InvalidUrl) as excinfo:
        url_parser.parse_album_url(value)
    assert excinfo.value.reason == reason


def test_parse_enforces_length_limits():
    too_long_id = "A" * (url_parser.MAX_ALBUM_ID_LENGTH + 1)
    with pytest.raises(InvalidUrl) as excinfo:
        url_parser.parse_album_url(f"https://photos.app.goo.gl/{too_long_id}")
    assert excinfo.value.reason == "album id too long"

    too_long_url = "https://photos.google.com/share/ABC?q=" + "x" * url_parser.MAX_URL_LENGTH
    with pytest.raises(InvalidUrl) as excinfo:
        url_parser.parse_album_url(too_long_url)
    assert excinfo.value.reason == "too long"


def test_max_length_identity_is_accepted():
    album_id = "a" * url_parser.MAX_ALBUM_ID_LENGTH
    assert url_parser.extract_album_id(f"https://photos.app.goo.gl/{album_id}") == album_id


def test_error_message_does_not_echo_url():
    with pytest.raises(InvalidUrl) as excinfo:
        url_parser.parse_album_url("https://example.com/secret-token")
    assert "secret-token" not in excinfo.value.message


def test_helpers_wrap_parse():
    assert url_parser.extract_album_id("https://example.com/x") is None
    assert url_parser.is_valid_album_url("https://photos.app.goo.gl/ABC123")
    assert not url_parser.is_valid_album_url("not a url")
    assert (
        url_parser.normalize_album_url("https://photos.google.com/share/ABC/?key=1")
        == "https://photos.google.com/share/ABC"
    )
    assert url_parser.normalize_album_url(None) is None


def test_normalize_album_url_builds_canonical_short_and_full_forms():
    assert (
        url_parser.normalize_album_url("  https://photos.app.goo.gl/QKGRYqfdS15bj8Kr5 ")
        == "https://photos.app.goo.gl/QKGRYqfdS15bj8Kr5"
    )
    assert (
        url_parser.normalize_album_url("https://photos.google.com/share/AF1Qip/?key=abc#top")
        == "https://photos.google.com/share/AF1Qip"
    )
    assert url_parser.normalize_album_url("https://example.com/share/AF1Qip") is None
