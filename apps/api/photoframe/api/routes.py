import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, Query, status

from photoframe.core.config import Settings, get_settings
from photoframe.engine.brightness import BrightnessAnalyzer
from photoframe.engine.cache import AlbumCache, KeyValueStore, MemoryStore, RedisStore
from photoframe.engine.downloads import DownloadManager
from photoframe.engine.errors import (
    AlbumAccessDenied,
    AlbumNotFound,
    EmptyAlbum,
    InvalidUrl,
    PhotoResolutionError,
    SecurityValidationFailure,
)
from photoframe.engine.listing import GooglePhotosAlbumClient
from photoframe.engine.optimizer import resolve_device_profile
from photoframe.engine.resolver import PhotoResolver
from photoframe.engine.schemas import ResolvedPhoto

router = APIRouter()
logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[PhotoResolutionError], int] = {
    InvalidUrl: status.HTTP_400_BAD_REQUEST,
    AlbumNotFound: status.HTTP_404_NOT_FOUND,
    EmptyAlbum: status.HTTP_404_NOT_FOUND,
    AlbumAccessDenied: status.HTTP_403_FORBIDDEN,
}


@lru_cache
def get_resolver() -> PhotoResolver:
    settings = get_settings()
    store: KeyValueStore
    if settings.redis_url:
        store = RedisStore.from_url(
            settings.redis_url, socket_timeout=settings.cache_socket_timeout_seconds
        )
    else:
        store = MemoryStore()
    listing = GooglePhotosAlbumClient(
        timeout=settings.listing_timeout_seconds,
        retries=settings.listing_retries,
    )
    analyzer = None
    if settings.brightness_enabled:
        analyzer = BrightnessAnalyzer(
            DownloadManager(timeout_seconds=settings.brightness_timeout_seconds),
            edge_fraction=settings.brightness_edge_fraction,
        )
    return PhotoResolver(
        listing,
        AlbumCache(store, ttl_seconds=settings.cache_ttl_seconds),
        settings,
        brightness_analyzer=analyzer,
    )


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {
        "status": "healthy",
        "service": settings.app_name,
        "cache": "redis" if settings.redis_url else "memory",
    }


@router.get("/api/photo", response_model=ResolvedPhoto)
def random_photo(
    album_url: str = Query(...),
    device: str | None = None,
    width: int | None = Query(default=None, ge=1),
    height: int | None = Query(default=None, ge=1),
    resolver: PhotoResolver = Depends(get_resolver),
) -> ResolvedPhoto:
    profile = resolve_device_profile(device, width, height)
    try:
        return resolver.resolve(album_url, profile)
    except SecurityValidationFailure as exc:
        logger.error("Refusing to return photo: %s", exc.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to load a photo right now.",
        ) from exc
    except PhotoResolutionError as exc:
        status_code = _ERROR_STATUS.get(type(exc), status.HTTP_502_BAD_GATEWAY)
        raise HTTPException(status_code=status_code, detail=exc.message) from exc
