from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from photoframe.engine.cache import AlbumCache
from photoframe.engine.errors import (
    AlbumAccessDenied,
    AlbumNotFound,
    EmptyAlbum,
    PhotoResolutionError,
    TransportError,
)
from photoframe.engine.listing import AlbumListing
from photoframe.engine.models import AlbumReference
from photoframe.engine.obfuscation import obfuscate_album_id
from photoframe.engine.schemas import RawPhotoRecord

logger = logging.getLogger(__name__)


def fetch_album_photos(
    reference: AlbumReference,
    cache: AlbumCache | None,
    listing: AlbumListing,
) -> list[RawPhotoRecord]:
    album_label = obfuscate_album_id(reference.album_id)
    if cache is not None:
        cached = cache.get(reference.album_id)
        if cached is not None:
            logger.info("Using cached photos for album %s (%d photos)", album_label, cached.photo_count)
            return list(cached.photos)

    logger.info("Fetching photos from the album page for album %s", album_label)
    try:
        photos = listing.fetch_image_urls(reference.raw_url)
    except PhotoResolutionError:
        raise
    except Exception as exc:
        raise _translate_listing_error(exc) from exc

    if not photos:
        raise EmptyAlbum()

    if cache is not None:
        cache.set(reference.album_id, photos)
    return list(photos)


def select_random_photo(
    photos: Sequence[RawPhotoRecord], rng: random.Random | None = None
) -> RawPhotoRecord:
    if not photos:
        raise EmptyAlbum("No photos available to select from.")
    index = (rng or random).randrange(len(photos))
    return photos[index]


def _translate_listing_error(exc: Exception) -> PhotoResolutionError:
    status_code = getattr(exc, "status_code", None)
    message = str(exc).lower()
    if status_code == 404 or "404" in message or "not found" in message:
        logger.warning("Album listing reported not found")
        return AlbumNotFound()
    if status_code == 403 or "403" in message or "forbidden" in message:
        logger.warning("Album listing reported access denied")
        return AlbumAccessDenied()
    logger.error("Album listing failed: %s", type(exc).__name__)
    return TransportError()
