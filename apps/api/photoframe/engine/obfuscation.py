from __future__ import annotations

from urllib.parse import urlparse

_MASK = "...***"


def obfuscate_url(url: str | None, max_length: int = 40) -> str:
    """Shorten a URL for logs so the album or photo cannot be reconstructed."""
    if not url or not isinstance(url, str):
        return "[no-url]"

    parsed = urlparse(url)
    if not parsed.scheme or not parsed.hostname:
        if len(url) <= max_length:
            return url[: max(0, len(url) - 8)] + _MASK
        return url[: max_length - len(_MASK)] + _MASK

    prefix = f"{parsed.scheme}://{parsed.hostname}/"
    remaining = max_length - len(prefix) - len(_MASK)
    if remaining <= 0:
        return prefix + _MASK

    path = parsed.path.lstrip("/")
    return f"{prefix}{path[: min(4, remaining)]}{_MASK}"


def obfuscate_album_id(album_id: str | None) -> str:
    if not album_id or not isinstance(album_id, str):
        return "[no-id]"
    if len(album_id) <= 4:
        return album_id[:1] + _MASK
    return album_id[:4] + _MASK
