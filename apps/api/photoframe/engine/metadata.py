from __future__ import annotations

import math
import re
from datetime import UTC, datetime

COMMON_RATIOS: tuple[tuple[int, int], ...] = (
    (1, 1),
    (4, 3),
    (3, 2),
    (16, 10),
    (5, 3),
    (16, 9),
    (2, 1),
    (21, 9),
    (3, 1),
)
RATIO_TOLERANCE = 0.05
MAX_READABLE_TERM = 100
APPROXIMATION_DENOMINATORS = range(2, 21)

_LEADING_YEAR = re.compile(r"^(\d{4})")


def calculate_aspect_ratio(width: int, height: int) -> str:
    """Describe ``width``/``height`` as a short ``W:H`` label.

    Common photo ratios win when within 5%; otherwise the exact reduced
    fraction is used, or a small-denominator approximation when the reduced
    fraction is still unreadable (``1201:1000`` becomes ``6:5``).
    """
    if width <= 0 or height <= 0:
        return "Unknown"

    ratio = width / height
    portrait = ratio < 1
    landscape_ratio = 1 / ratio if portrait else ratio
    for ratio_width, ratio_height in COMMON_RATIOS:
        target = ratio_width / ratio_height
        if abs(landscape_ratio - target) / target <= RATIO_TOLERANCE:
            if portrait:
                return f"{ratio_height}:{ratio_width}"
            return f"{ratio_width}:{ratio_height}"

    divisor = math.gcd(width, height)
    reduced_width = width // divisor
    reduced_height = height // divisor
    if reduced_width <= MAX_READABLE_TERM and reduced_height <= MAX_READABLE_TERM:
        return f"{reduced_width}:{reduced_height}"

    long_side, short_side = _approximate_ratio(landscape_ratio)
    if long_side > MAX_READABLE_TERM:
        # too extreme for a small fraction
        return f"{reduced_width}:{reduced_height}"
    if portrait:
        return f"{short_side}:{long_side}"
    return f"{long_side}:{short_side}"


def calculate_megapixels(width: int, height: int) -> float:
    megapixels = (width * height) / 1_000_000
    return math.floor(megapixels * 2 + 0.5) / 2


def format_relative_date(iso_timestamp: str, now: datetime | None = None) -> str:
    try:
        moment = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    except (AttributeError, TypeError, ValueError):
        return _fallback_year(iso_timestamp)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)

    current = now or datetime.now(tz=UTC)
    seconds = int((current - moment).total_seconds())
    if seconds < 0:
        return "Just now"

    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    months = days // 30
    years = days // 365

    if years > 0:
        return _ago(years, "year")
    if months > 0:
        return _ago(months, "month")
    if days > 0:
        return _ago(days, "day")
    if hours > 0:
        return _ago(hours, "hour")
    if minutes > 0:
        return _ago(minutes, "minute")
    return "Just now"


def _approximate_ratio(ratio: float) -> tuple[int, int]:
    best_numerator = 1
    best_denominator = 1
    best_error = math.inf
    for denominator in APPROXIMATION_DENOMINATORS:
        numerator = max(1, int(ratio * denominator + 0.5))
        error = abs(ratio - numerator / denominator)
        if error < best_error:
            best_numerator, best_denominator, best_error = numerator, denominator, error
    divisor = math.gcd(best_numerator, best_denominator)
    return best_numerator // divisor, best_denominator // divisor


def _ago(count: int, unit: str) -> str:
    suffix = "" if count == 1 else "s"
    return f"{count} {unit}{suffix} ago"


def _fallback_year(value: object) -> str:
    if isinstance(value, str):
        match = _LEADING_YEAR.match(value.strip())
        if match:
            return match.group(1)
    return "Unknown"
