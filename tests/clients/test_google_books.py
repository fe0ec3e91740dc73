# tests/clients/test_google_books.py
import httpx
import pytest

from bookify.clients.google_books import GoogleBooksClient, format_volume


VOLUME = {
    "id": "abc123",
    "volumeInfo": {
        "title": "The Left Hand of Darkness",
        "authors": ["Ursula K. Le Guin", "Second", "Third", "Fourth"],
        "description": "Winter.",
        "publishedDate": "1969-03",
        "categories": ["Fiction / Science Fiction / General"],
        "imageLinks": {
            "smallThumbnail": "http://books.google.com/small.jpg",
            "thumbnail": "http://books.google.com/thumb.jpg",
            "large": "http://books.google.com/large.jpg",
        },
        "pageCount": 304,
        "publisher": "Ace",
        "language": "en",
    },
}


def _search_transport(payload, status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)
    return httpx.MockTransport(handler)


def test_format_volume():
    candidate = format_volume(VOLUME)

    assert candidate["google_id"] == "abc123"
    assert candidate["author"] == "Ursula K. Le Guin, Second, Third"
    assert candidate["published_year"] == 1969
    assert candidate["genre"] == "Fiction"
    assert candidate["cover_image_url"] == "https://books.google.com/large.jpg"
    assert candidate["thumbnail"] == "https://books.google.com/thumb.jpg"
    assert candidate["page_count"] == 304


def test_format_volume_fallbacks():
    candidate = format_volume({"id": "x", "volumeInfo": {"publishedDate": "unknown"}})

    assert candidate["title"] == "Unknown Title"
    assert candidate["author"] == "Unknown Author"
    assert candidate["published_year"] is None
    assert candidate["genre"] == "General"
    assert candidate["cover_image_url"] is None
    assert candidate["language"] == "en"


async def test_search_returns_candidates():
    seen = []
    client = GoogleBooksClient(api_key="secret", transport=_search_transport({"items": [VOLUME]}, seen=seen))

    results = await client.search("le guin", max_results=5)

    assert [r["title"] for r in results] == ["The Left Hand of Darkness"]
    params = seen[0].url.params
    assert params["q"] == "le guin"
    assert params["maxResults"] == "5"
    assert params["key"] == "secret"
    assert params["langRestrict"] == "en"


async def test_search_without_key_and_clamped_results():
    seen = []
    client = GoogleBooksClient(api_key="", transport=_search_transport({"totalItems": 0}, seen=seen))

    assert await client.search("nothing", max_results=500) == []
    assert "key" not in seen[0].url.params
    assert seen[0].url.params["maxResults"] == "40"


async def test_search_http_error_yields_empty_list():
    client = GoogleBooksClient(transport=_search_transport({"error": "quota"}, status_code=429))

    assert await client.search("dune") == []


async def test_search_transport_error_yields_empty_list():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client = GoogleBooksClient(transport=httpx.MockTransport(handler))

    assert await client.search("dune") == []


async def test_search_malformed_payload_yields_empty_list():
    def handler(request):
        return httpx.Response(200, content=b"<html>not json</html>")

    client = GoogleBooksClient(transport=httpx.MockTransport(handler))

    assert await client.search("dune") == []


async def test_fetch_and_store(tmp_path):
    def handler(request):
        return httpx.Response(200, content=b"\x89PNG fake image")

    client = GoogleBooksClient(media_root=str(tmp_path), transport=httpx.MockTransport(handler))

    filename = await client.fetch_and_store("https://books.google.com/cover.png?zoom=1")

    assert filename.startswith("covers/google_book_")
    assert filename.endswith(".png")
    assert (tmp_path / filename).read_bytes() == b"\x89PNG fake image"

    assert await client.delete_cover(filename) is True
    assert not (tmp_path / filename).exists()
    assert await client.delete_cover(filename) is False


async def test_fetch_and_store_defaults_to_jpg(tmp_path):
    client = GoogleBooksClient(
        media_root=str(tmp_path),
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=b"jpeg")),
    )

    filename = await client.fetch_and_store("https://books.google.com/books/content?id=abc")

    assert filename.endswith(".jpg")


@pytest.mark.parametrize("status_code", [404, 500])
async def test_fetch_and_store_failure_returns_none(tmp_path, status_code):
    client = GoogleBooksClient(
        media_root=str(tmp_path),
        transport=httpx.MockTransport(lambda request: httpx.Response(status_code)),
    )

    assert await client.fetch_and_store("https://books.google.com/missing.jpg") is None
    assert not (tmp_path / "covers").exists() or not any((tmp_path / "covers").iterdir())


@pytest.mark.parametrize("filename", ["../victim.txt", "covers/../../victim.txt"])
async def test_delete_cover_stays_inside_media_root(tmp_path, filename):
    media_root = tmp_path / "public"
    (media_root / "covers").mkdir(parents=True)
    victim = tmp_path / "victim.txt"
    victim.write_text("keep me")
    client = GoogleBooksClient(media_root=str(media_root))

    assert await client.delete_cover(filename) is False
    assert await client.delete_cover(str(victim)) is False
    assert victim.read_text() == "keep me"
