"""Validation and album-identity extraction for Google Photos shared album URLs.

Supported shapes:

* short: ``https://photos.app.goo.gl/{code}``
* full: ``https://photos.google.com/share/{album_id}`` with an optional
  trailing slash and query string

The extracted identity doubles as the album cache key, so full URLs are
normalized (query, fragment and trailing slash dropped) before extraction.
The reference keeps the trimmed original URL as ``raw_url``: the ``key``
query parameter of a full link is what grants access to the album page.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlparse

from photoframe.engine.errors import InvalidUrl
from photoframe.engine.models import AlbumReference
from photoframe.engine.obfuscation import obfuscate_url

logger = logging.getLogger(__name__)

SHORT_URL_HOST = "photos.app.goo.gl"
FULL_URL_HOST = "photos.google.com"

MAX_URL_LENGTH = 2048
MAX_ALBUM_ID_LENGTH = 200

_SHORT_PATH = re.compile(r"^/([A-Za-z0-9_-]+)$")
_FULL_PATH = re.compile(r"^/share/([A-Za-z0-9_-]+)/?$")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def parse_album_url(url: str | None) -> AlbumReference:
    if url is None or not str(url).strip():
        raise InvalidUrl("required")

    candidate = str(url).strip()
    if len(candidate) > MAX_URL_LENGTH:
        raise InvalidUrl("too long")
    if not candidate.isascii() or _CONTROL_CHARS.search(candidate):
        raise InvalidUrl("malformed")

    try:
        parsed = urlparse(candidate)
        hostname = (parsed.hostname or "").lower()
    except ValueError as exc:
        raise InvalidUrl("malformed") from exc

    if parsed.scheme.lower() != "https":
        raise InvalidUrl("insecure scheme")
    if hostname not in (SHORT_URL_HOST, FULL_URL_HOST):
        logger.warning("Rejected album URL from unsupported domain: %s", obfuscate_url(candidate))
        raise InvalidUrl("wrong domain")
    if parsed.netloc.lower() != hostname:
        # userinfo or explicit ports are never part of a shared album link
        raise InvalidUrl("invalid format")

    if hostname == SHORT_URL_HOST:
        if parsed.query or parsed.fragment:
            raise InvalidUrl("invalid format")
        album_id = _match_identity(_SHORT_PATH, parsed.path)
        return AlbumReference(
            raw_url=candidate,
            album_id=album_id,
            url_shape="short",
        )

    album_id = _match_identity(_FULL_PATH, parsed.path)
    return AlbumReference(
        raw_url=candidate,
        album_id=album_id,
        url_shape="full",
    )


def extract_album_id(url: str | None) -> str | None:
    try:
        return parse_album_url(url).album_id
    except InvalidUrl:
        return None


def is_valid_album_url(url: str | None) -> bool:
    return extract_album_id(url) is not None


def normalize_album_url(url: str | None) -> str | None:
    try:
        reference = parse_album_url(url)
    except InvalidUrl:
        return None
    if reference.url_shape == "short":
        return f"https://{SHORT_URL_HOST}/{reference.album_id}"
    return f"https://{FULL_URL_HOST}/share/{reference.album_id}"


def _match_identity(pattern: re.Pattern[str], path: str) -> str:
    match = pattern.match(path)
    if match is None:
        raise InvalidUrl("invalid format")
    album_id = match.group(1)
    if len(album_id) > MAX_ALBUM_ID_LENGTH:
        raise InvalidUrl("album id too long")
    return album_id
