from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RawPhotoRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    uid: str
    url: str
    width: int
    height: int
    image_update_date: int = Field(alias="imageUpdateDate")
    album_add_date: int = Field(alias="albumAddDate")
    caption: str | None = None


class CachedAlbumEntry(BaseModel):
    album_id: str
    fetched_at: datetime
    photo_count: int
    photos: list[RawPhotoRecord]


class PhotoMetadata(BaseModel):
    uid: str
    original_width: int
    original_height: int
    image_update_date: str | None = None
    album_add_date: str | None = None


class BrightnessPayload(BaseModel):
    edge_brightness_score: float
    brightness_score: float
    background_class: str


class ResolvedPhoto(BaseModel):
    photo_url: str
    thumbnail_url: str | None = None
    caption: str | None = None
    timestamp: str
    image_update_date: str | None = None
    album_name: str
    photo_count: int
    relative_date: str | None = None
    aspect_ratio: str | None = None
    megapixels: float | None = None
    metadata: PhotoMetadata
    brightness: BrightnessPayload | None = None
