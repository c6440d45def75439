from __future__ import annotations

import logging
import re
import time
from collections.abc import Sequence
from typing import Any, Protocol

import httpx
import json5

from photoframe.engine.captions import CaptionExtractor, HeuristicCaptionExtractor
from photoframe.engine.obfuscation import obfuscate_url
from photoframe.engine.schemas import RawPhotoRecord

logger = logging.getLogger(__name__)

_INIT_DATA_BLOCK = re.compile(r"AF_initDataCallback\((\{.*?)\);</script>", re.DOTALL)


class AlbumListing(Protocol):
    def fetch_image_urls(self, album_url: str) -> list[RawPhotoRecord]: ...


class AlbumListingError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GooglePhotosAlbumClient:
    """Lists the photos of a public shared album by reading its web page."""

    def __init__(
        self,
        timeout: float = 10.0,
        retries: int = 3,
        caption_extractor: CaptionExtractor | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.timeout = timeout
        self.retries = max(retries, 1)
        self._captions = caption_extractor or HeuristicCaptionExtractor()
        self.client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def close(self) -> None:
        self.client.close()

    def fetch_image_urls(self, album_url: str) -> list[RawPhotoRecord]:
        html = self._get_album_page(album_url)
        photos = parse_album_page(html, self._captions)
        logger.info(
            "Listed %d photos from %s (%d bytes of HTML)",
            len(photos),
            obfuscate_url(album_url),
            len(html),
        )
        return photos

    def _get_album_page(self, album_url: str) -> str:
        for attempt in range(self.retries):
            try:
                response = self.client.get(album_url)
                response.raise_for_status()
                return response.text
            except httpx.HTTPStatusError as exc:
                status_code = exc.response.status_code
                if status_code >= 500 and attempt < self.retries - 1:
                    time.sleep(2**attempt)
                    continue
                raise AlbumListingError(
                    f"Album page returned HTTP {status_code}", status_code=status_code
                ) from exc
            except httpx.RequestError as exc:
                if attempt == self.retries - 1:
                    raise AlbumListingError(f"Album page request failed: {type(exc).__name__}") from exc
                time.sleep(2**attempt)
        raise AlbumListingError("Album page request failed")


def parse_album_page(
    html: str, caption_extractor: CaptionExtractor | None = None
) -> list[RawPhotoRecord]:
    blocks = [match.group(1) for match in _INIT_DATA_BLOCK.finditer(html)]
    blocks = [block for block in blocks if "data" in block]
    if not blocks:
        logger.warning("No AF_initDataCallback block found in album page")
        return []

    # the photo listing is by far the largest embedded block
    largest = max(blocks, key=len)
    try:
        payload = json5.loads(largest)
    except ValueError:
        logger.warning("Album page data block could not be parsed")
        return []
    return parse_photo_rows(payload, caption_extractor)


def parse_photo_rows(
    payload: Any, caption_extractor: CaptionExtractor | None = None
) -> list[RawPhotoRecord]:
    if not isinstance(payload, dict):
        return []
    data = payload.get("data")
    if not isinstance(data, list) or len(data) < 2 or not isinstance(data[1], list):
        return []

    records: list[RawPhotoRecord] = []
    for row in data[1]:
        record = _parse_row(row, caption_extractor)
        if record is not None:
            records.append(record)
    return records


def _parse_row(
    row: Any, caption_extractor: CaptionExtractor | None
) -> RawPhotoRecord | None:
    if not isinstance(row, list) or len(row) < 6:
        return None
    uid = row[0]
    detail = row[1]
    image_update_date = _coerce_number(row[2])
    album_add_date = _coerce_number(row[5])
    if not isinstance(uid, str) or image_update_date is None or album_add_date is None:
        return None
    if not isinstance(detail, list) or len(detail) < 3:
        return None
    url = detail[0]
    width = _coerce_number(detail[1])
    height = _coerce_number(detail[2])
    if not isinstance(url, str) or width is None or height is None:
        return None

    return RawPhotoRecord(
        uid=uid,
        url=url,
        width=width,
        height=height,
        imageUpdateDate=image_update_date,
        albumAddDate=album_add_date,
        caption=_extract_caption(row, caption_extractor),
    )


def _extract_caption(row: Sequence[Any], caption_extractor: CaptionExtractor | None) -> str | None:
    if caption_extractor is None:
        return None
    return caption_extractor.extract(row)


def _coerce_number(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)
