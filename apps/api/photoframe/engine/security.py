"""Validation for every value that leaves the resolver.

Photo URLs must point at the Google Photos CDN. The hostname is matched
exactly against ``lh<N>.googleusercontent.com`` after parsing, so hosts such
as ``lh3.googleusercontent.com.evil.example`` are rejected.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from urllib.parse import urlparse

from photoframe.engine.errors import SecurityValidationFailure
from photoframe.engine.schemas import ResolvedPhoto

logger = logging.getLogger(__name__)

CDN_HOST_PATTERN = re.compile(r"^lh[0-9]+\.googleusercontent\.com$")

MAX_PHOTO_COUNT = 50_000
MIN_PHOTO_COUNT = 0
MAX_CAPTION_LENGTH = 5_000
MAX_ALBUM_NAME_LENGTH = 500
DEFAULT_ALBUM_NAME = "Google Photos Shared Album"

_SCRIPT_SCHEMES = ("data:", "javascript:", "vbscript:")


def validate_photo_url(url: str | None) -> str:
    if not url or not isinstance(url, str):
        raise SecurityValidationFailure("Photo URL is missing.")
    lowered = url.lower()
    if not lowered.startswith("https://"):
        raise SecurityValidationFailure("Photo URL must use https.")
    if any(scheme in lowered for scheme in _SCRIPT_SCHEMES):
        raise SecurityValidationFailure("Photo URL contains a script or data payload.")
    try:
        parsed = urlparse(url)
        hostname = (parsed.hostname or "").lower()
    except ValueError as exc:
        raise SecurityValidationFailure("Photo URL is malformed.") from exc
    if parsed.netloc.lower() != hostname or not CDN_HOST_PATTERN.match(hostname):
        raise SecurityValidationFailure("Photo URL host is not the Google Photos CDN.")
    return url


def is_valid_photo_url(url: str | None) -> bool:
    try:
        validate_photo_url(url)
    except SecurityValidationFailure:
        return False
    return True


def sanitize_caption(caption: str | None) -> str | None:
    if not caption or not isinstance(caption, str):
        return None
    trimmed = caption.strip()
    if not trimmed:
        return None
    if len(trimmed) > MAX_CAPTION_LENGTH:
        logger.warning("Caption exceeds maximum length: %d > %d", len(trimmed), MAX_CAPTION_LENGTH)
        return None
    return trimmed


def sanitize_album_name(album_name: str | None, default: str = DEFAULT_ALBUM_NAME) -> str:
    if not album_name or not isinstance(album_name, str):
        return default
    trimmed = album_name.strip()
    if not trimmed or len(trimmed) > MAX_ALBUM_NAME_LENGTH:
        return default
    return trimmed


def validate_photo_count(count: int | float | None) -> int:
    if isinstance(count, bool) or not isinstance(count, (int, float)) or count != count:
        return 0
    if count < MIN_PHOTO_COUNT:
        logger.warning("Photo count below minimum: %s", count)
        return MIN_PHOTO_COUNT
    if count > MAX_PHOTO_COUNT:
        logger.warning("Photo count exceeds maximum: %s > %d", count, MAX_PHOTO_COUNT)
        return MAX_PHOTO_COUNT
    return int(count)


def validate_timestamp(timestamp: str | None, now: datetime | None = None) -> str:
    """Return ``timestamp`` as a UTC ISO 8601 string, or ``now`` when it is unusable."""
    if not timestamp or not isinstance(timestamp, str):
        return _now_iso(now)
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Invalid timestamp format: %s", timestamp[:40])
        return _now_iso(now)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return format_iso(parsed)


def timestamp_from_millis(millis: int | None) -> str | None:
    if millis is None:
        return None
    try:
        return format_iso(datetime.fromtimestamp(millis / 1000, tz=UTC))
    except (OverflowError, OSError, ValueError):
        return None


def format_iso(value: datetime) -> str:
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def validate_photo_data(photo: ResolvedPhoto) -> ResolvedPhoto:
    """Re-check every outbound URL and bound before a photo is handed out."""
    try:
        validate_photo_url(photo.photo_url)
        if photo.thumbnail_url is not None:
            validate_photo_url(photo.thumbnail_url)
    except SecurityValidationFailure:
        logger.error("Invalid photo URL detected in response")
        raise
    if not MIN_PHOTO_COUNT <= photo.photo_count <= MAX_PHOTO_COUNT:
        logger.error("Invalid photo count in response: %d", photo.photo_count)
        raise SecurityValidationFailure("Photo count out of range.")
    if photo.caption is not None and len(photo.caption) > MAX_CAPTION_LENGTH:
        raise SecurityValidationFailure("Caption exceeds maximum length.")
    return photo


def _now_iso(now: datetime | None = None) -> str:
    return format_iso(now or datetime.now(tz=UTC))
