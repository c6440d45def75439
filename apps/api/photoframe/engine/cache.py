"""Cache-aside storage for album listings.

Entries live under ``album:{album_id}`` and are shared by every caller that
references the same album. Expiry is enforced by the backing store; this
module only passes the TTL along. Store failures never propagate: reads
degrade to a miss and writes are dropped.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Protocol

import redis
from pydantic import ValidationError

from photoframe.engine.errors import CacheError
from photoframe.engine.obfuscation import obfuscate_album_id
from photoframe.engine.schemas import CachedAlbumEntry, RawPhotoRecord

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 3600


class KeyValueStore(Protocol):
    def get(self, key: str) -> bytes | None: ...

    def put(self, key: str, value: bytes, ttl_seconds: int) -> None: ...


class MemoryStore:
    """In-process store for local runs and tests."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._items: dict[str, tuple[bytes, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes | None:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            value, expires_at = item
            if self._clock() >= expires_at:
                del self._items[key]
                return None
            return value

    def put(self, key: str, value: bytes, ttl_seconds: int) -> None:
        with self._lock:
            self._items[key] = (value, self._clock() + ttl_seconds)


class RedisStore:
    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, *, socket_timeout: float = 0.3) -> RedisStore:
        client = redis.Redis.from_url(
            url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    def get(self, key: str) -> bytes | None:
        value = self._client.get(key)
        if value is None:
            return None
        return value if isinstance(value, bytes) else str(value).encode("utf-8")

    def put(self, key: str, value: bytes, ttl_seconds: int) -> None:
        self._client.setex(key, ttl_seconds, value)


def cache_key(album_id: str) -> str:
    return f"album:{album_id}"


class AlbumCache:
    def __init__(self, store: KeyValueStore, ttl_seconds: int = CACHE_TTL_SECONDS) -> None:
        self._store = store
        self._ttl_seconds = ttl_seconds

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def get(self, album_id: str) -> CachedAlbumEntry | None:
        log_key = cache_key(obfuscate_album_id(album_id))
        try:
            entry = self._load(cache_key(album_id))
        except CacheError as exc:
            logger.error("Cache lookup error for %s: %s", log_key, exc.__cause__ or exc)
            return None

        if entry is None or not entry.photos:
            logger.info("Cache MISS for %s", log_key)
            return None
        logger.info("Cache HIT for %s (%d photos)", log_key, entry.photo_count)
        return entry

    def set(self, album_id: str, photos: Sequence[RawPhotoRecord]) -> None:
        log_key = cache_key(obfuscate_album_id(album_id))
        if not photos:
            logger.warning("Refusing to cache empty album for %s", log_key)
            return
        entry = CachedAlbumEntry(
            album_id=album_id,
            fetched_at=datetime.now(tz=UTC),
            photo_count=len(photos),
            photos=list(photos),
        )
        try:
            self._save(cache_key(album_id), entry)
        except CacheError as exc:
            logger.error("Cache storage error for %s: %s", log_key, exc.__cause__ or exc)
            return
        logger.info(
            "Cache STORED for %s (%d photos, TTL: %ds)",
            log_key,
            entry.photo_count,
            self._ttl_seconds,
        )

    def _load(self, key: str) -> CachedAlbumEntry | None:
        try:
            payload = self._store.get(key)
        except Exception as exc:  # any backend failure counts as a miss
            raise CacheError() from exc
        if payload is None:
            return None
        try:
            return CachedAlbumEntry.model_validate_json(payload)
        except ValidationError as exc:
            raise CacheError("Cached album entry is corrupt.") from exc

    def _save(self, key: str, entry: CachedAlbumEntry) -> None:
        payload = entry.model_dump_json(by_alias=True).encode("utf-8")
        try:
            self._store.put(key, payload, self._ttl_seconds)
        except Exception as exc:
            raise CacheError() from exc
