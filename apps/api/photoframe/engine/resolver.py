from __future__ import annotations

import logging
import random
import time
from dataclasses import asdict
from datetime import UTC, datetime

from photoframe.core.config import Settings
from photoframe.engine.brightness import BrightnessAnalyzer
from photoframe.engine.cache import AlbumCache
from photoframe.engine.errors import SecurityValidationFailure
from photoframe.engine.fetcher import fetch_album_photos, select_random_photo
from photoframe.engine.listing import AlbumListing, GooglePhotosAlbumClient
from photoframe.engine.metadata import (
    calculate_aspect_ratio,
    calculate_megapixels,
    format_relative_date,
)
from photoframe.engine.models import DeviceProfile
from photoframe.engine.obfuscation import obfuscate_album_id
from photoframe.engine.optimizer import DEFAULT_PROFILE, optimize_for_profile, optimize_thumbnail_url
from photoframe.engine.schemas import BrightnessPayload, PhotoMetadata, RawPhotoRecord, ResolvedPhoto
from photoframe.engine.security import (
    format_iso,
    sanitize_album_name,
    sanitize_caption,
    timestamp_from_millis,
    validate_photo_count,
    validate_photo_data,
    validate_timestamp,
)
from photoframe.engine.url_parser import parse_album_url

logger = logging.getLogger(__name__)


class PhotoResolver:
    """Composition root for resolving an album URL into one display-ready photo."""

    def __init__(
        self,
        listing: AlbumListing,
        cache: AlbumCache | None = None,
        settings: Settings | None = None,
        brightness_analyzer: BrightnessAnalyzer | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._listing = listing
        self._cache = cache
        self._settings = settings or Settings()
        self._brightness_analyzer = brightness_analyzer
        self._rng = rng

    def resolve(self, album_url: str, profile: DeviceProfile | None = None) -> ResolvedPhoto:
        start = time.perf_counter()
        reference = parse_album_url(album_url)
        photos = fetch_album_photos(reference, self._cache, self._listing)
        selected = select_random_photo(photos, self._rng)

        photo = build_resolved_photo(
            selected,
            photo_count=len(photos),
            profile=profile or DEFAULT_PROFILE,
            album_name=self._settings.default_album_name,
        )
        if self._brightness_analyzer is not None and photo.thumbnail_url is not None:
            scores = self._brightness_analyzer.analyze(photo.thumbnail_url)
            if scores is not None:
                photo = photo.model_copy(update={"brightness": BrightnessPayload(**asdict(scores))})

        try:
            validate_photo_data(photo)
        except SecurityValidationFailure:
            logger.critical(
                "Resolved photo for album %s failed final security validation",
                obfuscate_album_id(reference.album_id),
            )
            raise

        logger.info(
            "Resolved photo %s of %d for album %s in %.2fms",
            obfuscate_album_id(selected.uid),
            photo.photo_count,
            obfuscate_album_id(reference.album_id),
            (time.perf_counter() - start) * 1000,
        )
        return photo


def build_resolved_photo(
    photo: RawPhotoRecord,
    *,
    photo_count: int,
    profile: DeviceProfile = DEFAULT_PROFILE,
    album_name: str | None = None,
    now: datetime | None = None,
) -> ResolvedPhoto:
    current = now or datetime.now(tz=UTC)
    image_update_date = validate_timestamp(timestamp_from_millis(photo.image_update_date), current)
    return ResolvedPhoto(
        photo_url=optimize_for_profile(photo.url, profile),
        thumbnail_url=optimize_thumbnail_url(photo.url),
        caption=sanitize_caption(photo.caption),
        timestamp=validate_timestamp(format_iso(current)),
        image_update_date=image_update_date,
        album_name=sanitize_album_name(album_name),
        photo_count=validate_photo_count(photo_count),
        relative_date=format_relative_date(image_update_date, now=current),
        aspect_ratio=calculate_aspect_ratio(photo.width, photo.height),
        megapixels=calculate_megapixels(photo.width, photo.height),
        metadata=PhotoMetadata(
            uid=photo.uid,
            original_width=photo.width,
            original_height=photo.height,
            image_update_date=image_update_date,
            album_add_date=validate_timestamp(timestamp_from_millis(photo.album_add_date), current),
        ),
    )


def fetch_random_photo(
    album_url: str,
    cache: AlbumCache | None = None,
    listing: AlbumListing | None = None,
    profile: DeviceProfile | None = None,
) -> ResolvedPhoto:
    if listing is not None:
        return PhotoResolver(listing, cache).resolve(album_url, profile)

    settings = Settings()
    client = GooglePhotosAlbumClient(
        timeout=settings.listing_timeout_seconds,
        retries=settings.listing_retries,
    )
    try:
        return PhotoResolver(client, cache, settings).resolve(album_url, profile)
    finally:
        client.close()
