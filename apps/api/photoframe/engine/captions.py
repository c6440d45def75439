"""Best-effort caption lookup for rows of a shared album page.

The album page embeds photos as undocumented nested arrays. Captions, when
present, show up as free-standing strings after the fixed fields, so the
extractor below scans for string values that look like prose rather than
identifiers or URLs. It is a heuristic: it can miss captions or pick up
unrelated strings, and nothing in photo resolution depends on it.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

MAX_CAPTION_SCAN_LENGTH = 1000
FIRST_EXTRA_FIELD = 6


class CaptionExtractor(Protocol):
    def extract(self, row: Sequence[Any]) -> str | None: ...


class NullCaptionExtractor:
    def extract(self, row: Sequence[Any]) -> str | None:
        return None


class HeuristicCaptionExtractor:
    def extract(self, row: Sequence[Any]) -> str | None:
        for field in row[FIRST_EXTRA_FIELD:]:
            if _looks_like_caption(field):
                return field
            if isinstance(field, list):
                for nested in field:
                    if _looks_like_caption(nested):
                        return nested
        return None


def _looks_like_caption(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    if not 0 < len(value) < MAX_CAPTION_SCAN_LENGTH:
        return False
    # photo uids and CDN links share the same slots as captions
    return not value.startswith(("AF1", "http"))
