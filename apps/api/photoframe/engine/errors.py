from __future__ import annotations


class PhotoResolutionError(Exception):
    """Base class for failures surfaced to callers of the resolver.

    ``message`` is safe to show to an end user: it never contains the album
    URL, photo URLs or upstream response bodies.
    """

    default_message = "Failed to fetch a photo from the album."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidUrl(PhotoResolutionError):
    default_message = "Invalid album URL."

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid album URL: {reason}.")


class AlbumNotFound(PhotoResolutionError):
    default_message = "Album not found. The album may have been deleted or made private."


class AlbumAccessDenied(PhotoResolutionError):
    default_message = "Album access denied. Ensure the album has link sharing enabled."


class EmptyAlbum(PhotoResolutionError):
    default_message = (
        "No photos found in album. Ensure the album is publicly shared and contains photos."
    )


class TransportError(PhotoResolutionError):
    default_message = "Failed to fetch album photos."


class CacheError(PhotoResolutionError):
    """Raised inside the album cache only; never escapes it."""

    default_message = "Album cache unavailable."


class SecurityValidationFailure(PhotoResolutionError):
    """A URL or field failed domain validation.

    When raised after a photo has been assembled this indicates a bug rather
    than bad input, and the photo must not be returned.
    """

    default_message = "Security validation failed."
