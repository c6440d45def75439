"""Device-aware resize directives for Google Photos CDN URLs.

The CDN accepts a ``=w{W}-h{H}`` suffix and serves the image scaled to fit
that bounding box with its aspect ratio preserved; nothing is cropped.
"""

from __future__ import annotations

from photoframe.engine.models import DeviceProfile
from photoframe.engine.security import validate_photo_url

DEFAULT_PROFILE = DeviceProfile(name="og", width=800, height=480)
THUMBNAIL_PROFILE = DeviceProfile(name="thumbnail", width=400, height=300)

MAX_DIMENSION = 4096

DEVICE_PROFILES: dict[str, DeviceProfile] = {
    profile.name: profile
    for profile in (
        DEFAULT_PROFILE,
        DeviceProfile(name="og_png", width=800, height=480),
        DeviceProfile(name="v2", width=1872, height=1404),
        DeviceProfile(name="amazon_kindle_2024", width=1448, height=1072),
        DeviceProfile(name="kobo_libra_2", width=1680, height=1264),
        DeviceProfile(name="waveshare_7in5_v2", width=800, height=480),
    )
}


def optimize_photo_url(url: str, width: int | None = None, height: int | None = None) -> str:
    validate_photo_url(url)
    target_width = width if width is not None else DEFAULT_PROFILE.width
    target_height = height if height is not None else DEFAULT_PROFILE.height
    _check_dimension(target_width)
    _check_dimension(target_height)
    return validate_photo_url(f"{url}=w{target_width}-h{target_height}")


def optimize_for_profile(url: str, profile: DeviceProfile) -> str:
    return optimize_photo_url(url, profile.width, profile.height)


def optimize_thumbnail_url(url: str) -> str:
    return optimize_for_profile(url, THUMBNAIL_PROFILE)


def resolve_device_profile(
    device_model_id: str | None = None,
    screen_width: int | None = None,
    screen_height: int | None = None,
) -> DeviceProfile:
    if device_model_id:
        profile = DEVICE_PROFILES.get(device_model_id.strip().lower())
        if profile is not None:
            return profile
    if screen_width and screen_height:
        return DeviceProfile(
            name="screen",
            width=_clamp_dimension(screen_width),
            height=_clamp_dimension(screen_height),
        )
    return DEFAULT_PROFILE


def _check_dimension(value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 < value <= MAX_DIMENSION:
        raise ValueError(f"Resize dimension must be between 1 and {MAX_DIMENSION}.")


def _clamp_dimension(value: int) -> int:
    return max(1, min(int(value), MAX_DIMENSION))
