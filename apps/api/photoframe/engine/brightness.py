"""Edge brightness analysis for choosing a display background shade.

Only the left and right edges are measured: on a landscape e-ink panel a
portrait photo is letterboxed, and the background should blend with the
image edges rather than its centre. Scores are Rec. 709 luminance on a
0-100 scale.
"""

from __future__ import annotations

import logging
import time
from io import BytesIO
from typing import TYPE_CHECKING

from photoframe.engine.downloads import DownloadManager
from photoframe.engine.models import BrightnessScores
from photoframe.engine.obfuscation import obfuscate_url

if TYPE_CHECKING:
    from PIL import Image as PilImage

logger = logging.getLogger(__name__)

REC709_WEIGHTS = (0.2126, 0.7152, 0.0722)

BACKGROUND_CLASSES = (
    "bg--black",
    "bg--gray-10",
    "bg--gray-15",
    "bg--gray-20",
    "bg--gray-25",
    "bg--gray-30",
    "bg--gray-35",
    "bg--gray-40",
    "bg--gray-45",
    "bg--gray-50",
    "bg--gray-55",
    "bg--gray-60",
    "bg--gray-65",
    "bg--gray-70",
    "bg--gray-75",
    "bg--white",
)


class BrightnessAnalyzer:
    def __init__(self, download_manager: DownloadManager, edge_fraction: float = 0.1) -> None:
        self._download_manager = download_manager
        self._edge_fraction = edge_fraction

    def analyze(self, image_url: str) -> BrightnessScores | None:
        start = time.perf_counter()
        try:
            data = self._download_manager.get_bytes(image_url)
            edge_score, overall_score = compute_brightness(data, edge_fraction=self._edge_fraction)
        except (OSError, ValueError) as exc:
            logger.warning(
                "Brightness analysis failed after %.2fms for %s: %s",
                _elapsed_ms(start),
                obfuscate_url(image_url),
                type(exc).__name__,
            )
            return None

        logger.info(
            "Brightness analysis complete in %.2fms (edge %.1f, overall %.1f)",
            _elapsed_ms(start),
            edge_score,
            overall_score,
        )
        return BrightnessScores(
            edge_brightness_score=edge_score,
            brightness_score=overall_score,
            background_class=map_brightness_to_background(edge_score),
        )


def compute_brightness(image_bytes: bytes, *, edge_fraction: float = 0.1) -> tuple[float, float]:
    """Return ``(edge_score, overall_score)`` for an encoded image."""
    image = _load_image(image_bytes)
    width, height = image.size
    if width == 0 or height == 0:
        raise ValueError("Image has no pixels.")
    edge_width = max(1, int(width * edge_fraction))
    left = image.crop((0, 0, edge_width, height))
    right = image.crop((width - edge_width, 0, width, height))
    edge_score = (_mean_luminance(left) + _mean_luminance(right)) / 2
    return round(edge_score, 2), round(_mean_luminance(image), 2)


def map_brightness_to_background(score: float) -> str:
    clamped = max(0.0, min(100.0, score))
    index = min(int(clamped / 6.25), len(BACKGROUND_CLASSES) - 1)
    return BACKGROUND_CLASSES[index]


def _mean_luminance(image: PilImage.Image) -> float:
    from PIL import ImageStat

    red, green, blue = ImageStat.Stat(image).mean[:3]
    luminance = red * REC709_WEIGHTS[0] + green * REC709_WEIGHTS[1] + blue * REC709_WEIGHTS[2]
    return luminance / 255 * 100


def _load_image(image_bytes: bytes) -> PilImage.Image:
    from PIL import Image, ImageOps

    with Image.open(BytesIO(image_bytes)) as img:
        transposed = ImageOps.exif_transpose(img)
        rgb = transposed.convert("RGB")
        return rgb.copy()


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
