from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from photoframe.engine.metadata import (
    calculate_aspect_ratio,
    calculate_megapixels,
    format_relative_date,
)

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    ("width", "height", "expected"),
    [
        (1920, 1080, "16:9"),
        (1080, 1920, "9:16"),
        (1000, 1000, "1:1"),
        (1000, 1040, "1:1"),
        (3024, 4032, "3:4"),
        (4000, 3000, "4:3"),
        (6000, 4000, "3:2"),
        (2560, 1600, "16:10"),
        (3440, 1440, "21:9"),
        (4000, 2000, "2:1"),
        (1000, 1100, "10:11"),
    ],
)
def test_calculate_aspect_ratio(width, height, expected):
    assert calculate_aspect_ratio(width, height) == expected


def test_calculate_aspect_ratio_prefers_first_common_ratio_within_tolerance():
    # 1.397 sits 4.8% from 4:3 and 6.9% from 3:2
    assert calculate_aspect_ratio(5694, 4075) == "4:3"


def test_calculate_aspect_ratio_approximates_unreadable_fractions():
    assert calculate_aspect_ratio(1201, 1000) == "6:5"
    assert calculate_aspect_ratio(1000, 1201) == "5:6"


def test_calculate_aspect_ratio_keeps_reduced_pair_for_extreme_ratios():
    assert calculate_aspect_ratio(10000, 1) == "10000:1"
    assert calculate_aspect_ratio(1, 10000) == "1:10000"
    assert calculate_aspect_ratio(3901, 1000) == "39:10"
    assert calculate_aspect_ratio(1000, 3901) == "10:39"


def test_calculate_aspect_ratio_handles_degenerate_dimensions():
    assert calculate_aspect_ratio(0, 1080) == "Unknown"
    assert calculate_aspect_ratio(1920, 0) == "Unknown"


@pytest.mark.parametrize(
    ("width", "height", "expected"),
    [
        (3024, 4032, 12),
        (1920, 1080, 2),
        (3840, 2160, 8.5),
        (6000, 4000, 24),
        (2200, 1500, 3.5),
        (2500, 1500, 4),
        (400, 300, 0),
        (8688, 5792, 50.5),
    ],
)
def test_calculate_megapixels_rounds_to_half(width, height, expected):
    assert calculate_megapixels(width, height) == expected


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(days=400), "1 year ago"),
        (timedelta(days=800), "2 years ago"),
        (timedelta(days=95), "3 months ago"),
        (timedelta(days=31), "1 month ago"),
        (timedelta(days=5), "5 days ago"),
        (timedelta(days=1), "1 day ago"),
        (timedelta(hours=3), "3 hours ago"),
        (timedelta(hours=1), "1 hour ago"),
        (timedelta(minutes=10), "10 minutes ago"),
        (timedelta(minutes=1), "1 minute ago"),
        (timedelta(seconds=30), "Just now"),
        (timedelta(minutes=-5), "Just now"),
    ],
)
def test_format_relative_date_buckets(delta, expected):
    assert format_relative_date((NOW - delta).isoformat(), now=NOW) == expected


def test_format_relative_date_accepts_zulu_and_naive_timestamps():
    assert format_relative_date("2026-06-15T11:50:00Z", now=NOW) == "10 minutes ago"
    assert format_relative_date("2026-06-15T11:50:00", now=NOW) == "10 minutes ago"


def test_format_relative_date_defaults_to_current_time():
    ten_minutes_ago = datetime.now(tz=UTC) - timedelta(minutes=10, seconds=5)
    assert format_relative_date(ten_minutes_ago.isoformat()) == "10 minutes ago"


def test_format_relative_date_falls_back_to_year_or_unknown():
    assert format_relative_date("2019-99-99 sometime", now=NOW) == "2019"
    assert format_relative_date("sometime last summer", now=NOW) == "Unknown"
    assert format_relative_date("", now=NOW) == "Unknown"
