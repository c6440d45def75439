from __future__ import annotations

import ipaddress
import socket
import urllib.request
from collections import OrderedDict
from collections.abc import Callable
from urllib.parse import urlparse

from photoframe.engine.errors import SecurityValidationFailure
from photoframe.engine.security import validate_photo_url

DownloadFetcher = Callable[[str], bytes]

MAX_DOWNLOAD_BYTES = 5 * 1024 * 1024
MAX_CACHED_DOWNLOADS = 32


class DownloadManager:
    def __init__(
        self,
        fetcher: DownloadFetcher | None = None,
        headers: dict[str, str] | None = None,
        timeout_seconds: float = 1.0,
        max_bytes: int = MAX_DOWNLOAD_BYTES,
        max_cached: int = MAX_CACHED_DOWNLOADS,
    ) -> None:
        self._cache: OrderedDict[str, bytes] = OrderedDict()
        self._max_cached = max_cached
        self._fetcher = fetcher or _default_fetcher
        self._headers = headers or {}
        self._timeout_seconds = timeout_seconds
        self._max_bytes = max_bytes
        self.download_count = 0

    @property
    def cached_count(self) -> int:
        return len(self._cache)

    def get_bytes(self, url: str) -> bytes:
        if url in self._cache:
            self._cache.move_to_end(url)
            return self._cache[url]
        data = (
            self._fetcher(url)
            if self._fetcher is not _default_fetcher
            else _default_fetcher(
                url,
                headers=self._headers,
                timeout_seconds=self._timeout_seconds,
                max_bytes=self._max_bytes,
            )
        )
        self._cache[url] = data
        while len(self._cache) > self._max_cached:
            self._cache.popitem(last=False)
        self.download_count += 1
        return data


def _default_fetcher(
    url: str,
    *,
    headers: dict[str, str],
    timeout_seconds: float,
    max_bytes: int,
) -> bytes:
    validate_download_url(url)
    request = urllib.request.Request(url, headers=headers)
    with urllib.request.urlopen(request, timeout=timeout_seconds) as response:
        data = response.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise ValueError("Download exceeded the maximum allowed size.")
    return data


def validate_download_url(url: str) -> None:
    try:
        validate_photo_url(url)
    except SecurityValidationFailure as exc:
        raise ValueError(exc.message) from exc
    _reject_private_addresses((urlparse(url).hostname or "").lower())


def _reject_private_addresses(hostname: str) -> None:
    for result in socket.getaddrinfo(hostname, None):
        ip_str = result[4][0]
        ip_address = ipaddress.ip_address(ip_str)
        _raise_if_private(ip_address)


def _raise_if_private(ip_address: ipaddress.IPv4Address | ipaddress.IPv6Address) -> None:
    if not ip_address.is_global:
        raise ValueError("Download URL resolves to a non-global address.")
