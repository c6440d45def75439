from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

UrlShape = Literal["short", "full"]


@dataclass(frozen=True)
class AlbumReference:
    raw_url: str
    album_id: str
    url_shape: UrlShape


@dataclass(frozen=True)
class DeviceProfile:
    name: str
    width: int
    height: int


@dataclass(frozen=True)
class BrightnessScores:
    edge_brightness_score: float
    brightness_score: float
    background_class: str
