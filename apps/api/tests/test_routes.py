from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from photoframe.api.routes import get_resolver
from photoframe.engine.cache import AlbumCache, MemoryStore
from photoframe.engine.errors import SecurityValidationFailure
from photoframe.engine.listing import AlbumListingError
from photoframe.engine.resolver import PhotoResolver
from photoframe.engine.schemas import RawPhotoRecord
from photoframe.engine.url_parser import MAX_URL_LENGTH
from photoframe.main import app

ALBUM_URL = "https://photos.google.com/share/AF1QipAlbum?key=abc"


@pytest.fixture
def client() -> Iterator[TestClient]:
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_random_photo_returns_resolved_photo(client: TestClient):
    _override(_FakeListing([_photo("a")]))

    response = client.get("/api/photo", params={"album_url": ALBUM_URL, "device": "v2"})

    assert response.status_code == 200
    body = response.json()
    assert body["photo_url"] == "https://lh3.googleusercontent.com/a=w1872-h1404"
    assert body["thumbnail_url"] == "https://lh3.googleusercontent.com/a=w400-h300"
    assert body["photo_count"] == 1
    assert body["aspect_ratio"] == "16:9"
    assert body["metadata"]["uid"] == "a"


def test_random_photo_uses_screen_size(client: TestClient):
    _override(_FakeListing([_photo("a")]))

    response = client.get(
        "/api/photo", params={"album_url": ALBUM_URL, "width": 1024, "height": 758}
    )

    assert response.json()["photo_url"].endswith("=w1024-h758")


@pytest.mark.parametrize(
    ("listing_error", "status_code"),
    [
        (AlbumListingError("HTTP 404", status_code=404), 404),
        (AlbumListingError("HTTP 403", status_code=403), 403),
        (AlbumListingError("HTTP 500", status_code=500), 502),
    ],
)
def test_random_photo_maps_domain_errors(client: TestClient, listing_error, status_code):
    _override(_FailingListing(listing_error))

    response = client.get("/api/photo", params={"album_url": ALBUM_URL})

    assert response.status_code == status_code
    assert "photos.google.com" not in response.text


def test_random_photo_rejects_invalid_album_url(client: TestClient):
    _override(_FakeListing([_photo("a")]))

    response = client.get("/api/photo", params={"album_url": "https://example.com/share/x"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid album URL: wrong domain."


@pytest.mark.parametrize("length", [MAX_URL_LENGTH + 1, 5000])
def test_random_photo_rejects_overlong_album_url_as_bad_request(client: TestClient, length):
    _override(_FakeListing([_photo("a")]))
    album_url = ALBUM_URL + "x" * (length - len(ALBUM_URL))

    response = client.get("/api/photo", params={"album_url": album_url})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid album URL: too long."


def test_random_photo_reports_empty_album(client: TestClient):
    _override(_FakeListing([]))

    response = client.get("/api/photo", params={"album_url": ALBUM_URL})

    assert response.status_code == 404


def test_random_photo_hides_security_failures(client: TestClient):
    class _ExplodingResolver:
        def resolve(self, album_url, profile=None):
            raise SecurityValidationFailure("Photo URL host is not the Google Photos CDN.")

    app.dependency_overrides[get_resolver] = lambda: _ExplodingResolver()

    response = client.get("/api/photo", params={"album_url": ALBUM_URL})

    assert response.status_code == 500
    assert response.json() == {"detail": "Unable to load a photo right now."}


def _override(listing) -> None:
    resolver = PhotoResolver(listing, AlbumCache(MemoryStore()))
    app.dependency_overrides[get_resolver] = lambda: resolver


class _FakeListing:
    def __init__(self, photos: list[RawPhotoRecord]) -> None:
        self._photos = photos

    def fetch_image_urls(self, album_url: str) -> list[RawPhotoRecord]:
        return list(self._photos)


class _FailingListing:
    def __init__(self, error: Exception) -> None:
        self._error = error

    def fetch_image_urls(self, album_url: str) -> list[RawPhotoRecord]:
        raise self._error


def _photo(uid: str) -> RawPhotoRecord:
    return RawPhotoRecord(
        uid=uid,
        url=f"https://lh3.googleusercontent.com/{uid}",
        width=1920,
        height=1080,
        imageUpdateDate=1_700_000_000_000,
        albumAddDate=1_700_000_100_000,
    )
