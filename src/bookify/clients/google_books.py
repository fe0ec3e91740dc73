"""
Async client for the Google Books API.
Searches external book metadata and downloads cover images into the local
media directory, so admins can add books to the Bookify catalog without
typing every field by hand.
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import aiofiles
import aiofiles.os
import httpx

from bookify.core.config import settings

logger = logging.getLogger(__name__)

GOOGLE_BOOKS_API_URL = "https://www.googleapis.com/books/v1/volumes"
COVERS_DIR = "covers"
MAX_RESULTS_LIMIT = 40
MAX_AUTHORS = 3
SEARCH_LANGUAGE = "en"

# Largest first.
COVER_SIZES = ("extraLarge", "large", "medium", "small", "thumbnail", "smallThumbnail")

YEAR_PATTERN = re.compile(r"\d{4}")
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}


def _format_authors(authors: Optional[List[str]]) -> str:
    if not authors:
        return "Unknown Author"
    return ", ".join(authors[:MAX_AUTHORS])


def _extract_year(published_date: Optional[str]) -> Optional[int]:
    """First four-digit run of a publishedDate such as '2004', '2004-05' or 'c. 1999'."""
    if not published_date:
        return None
    match = YEAR_PATTERN.search(published_date)
    return int(match.group(0)) if match else None


def _extract_genre(categories: Optional[List[str]]) -> str:
    """'Fiction / Science Fiction / General' -> 'Fiction'."""
    if not categories:
        return "General"
    genre = categories[0].split("/")[0].strip()
    return genre or "General"


def _best_cover_image(image_links: Optional[Dict[str, str]]) -> Optional[str]:
    if not image_links:
        return None
    for size in COVER_SIZES:
        url = image_links.get(size)
        if url:
            return url.replace("http://", "https://", 1)
    return None


def format_volume(item: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flattens a Google Books volume into a catalog candidate.

    Args:
        item (Dict[str, Any]): One entry of the API's `items` list.

    Returns:
        Dict[str, Any]: Candidate with google_id, title, author, description,
        published_year, genre, cover_image_url, thumbnail, page_count,
        publisher and language.
    """
    info = item.get("volumeInfo") or {}
    image_links = info.get("imageLinks") or {}
    thumbnail = image_links.get("thumbnail")
    return {
        "google_id": item.get("id"),
        "title": info.get("title") or "Unknown Title",
        "author": _format_authors(info.get("authors")),
        "description": info.get("description") or "",
        "published_year": _extract_year(info.get("publishedDate")),
        "genre": _extract_genre(info.get("categories")),
        "cover_image_url": _best_cover_image(image_links),
        "thumbnail": thumbnail.replace("http://", "https://", 1) if thumbnail else None,
        "page_count": info.get("pageCount"),
        "publisher": info.get("publisher"),
        "language": info.get("language") or "en",
    }


def _extension_from_url(url: str) -> str:
    suffix = Path(urlparse(url).path).suffix.lower().lstrip(".")
    return suffix if suffix in IMAGE_EXTENSIONS else "jpg"


class GoogleBooksClient:
    """
    Google Books search and cover download.

    Neither operation raises on remote failures: `search` returns an empty
    list and `fetch_and_store` returns None, and the caller goes on without
    the data.

    Args:
        api_key (Optional[str]): API key; defaults to GOOGLE_BOOKS_API_KEY. Sent only when set.
        media_root (Optional[str]): Directory covers are stored under; defaults to MEDIA_ROOT.
        transport (Optional[httpx.AsyncBaseTransport]): Custom transport, used in tests.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        media_root: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_BOOKS_API_KEY
        self.media_root = Path(media_root or settings.MEDIA_ROOT)
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport, follow_redirects=True)

    async def search(self, query: str, max_results: int = 10) -> List[Dict[str, Any]]:
        """
        Searches Google Books.

        Args:
            query (str): Keywords, title, author...
            max_results (int): Clamped to 1..40.

        Returns:
            List[Dict[str, Any]]: Formatted candidates; empty on any failure.
        """
        max_results = max(1, min(MAX_RESULTS_LIMIT, int(max_results)))
        params: Dict[str, Any] = {
            "q": query,
            "maxResults": max_results,
            "printType": "books",
            "langRestrict": SEARCH_LANGUAGE,
        }
        if self.api_key:
            params["key"] = self.api_key

        try:
            async with self._client(settings.GOOGLE_BOOKS_SEARCH_TIMEOUT) as client:
                response = await client.get(GOOGLE_BOOKS_API_URL, params=params)
                response.raise_for_status()
                data = response.json()
            items = data.get("items") or []
            results = [format_volume(item) for item in items]
        except httpx.HTTPStatusError as exc:
            logger.error(f"HTTP error from Google Books API: {exc.response.status_code} - {exc.response.text}")
            return []
        except httpx.RequestError as exc:
            logger.error(f"Request to Google Books API failed: {exc}")
            return []
        except (ValueError, AttributeError, TypeError) as exc:
            logger.error(f"Malformed Google Books response for '{query}': {exc}")
            return []

        logger.info(f"Google Books search for '{query}' returned {len(results)} results.")
        return results

    async def fetch_and_store(self, url: str) -> Optional[str]:
        """
        Downloads a cover image into MEDIA_ROOT/covers.

        Args:
            url (str): Remote image URL.

        Returns:
            Optional[str]: Relative filename ("covers/google_book_<hex>.<ext>"), or None on failure.
        """
        filename = f"{COVERS_DIR}/google_book_{uuid.uuid4().hex}.{_extension_from_url(url)}"
        target = self.media_root / filename

        try:
            async with self._client(settings.COVER_DOWNLOAD_TIMEOUT) as client:
                response = await client.get(url)
                response.raise_for_status()
                content = response.content
            if not content:
                logger.warning(f"Cover download from {url} returned an empty body.")
                return None
            await aiofiles.os.makedirs(target.parent, exist_ok=True)
            async with aiofiles.open(target, "wb") as f:
                await f.write(content)
        except httpx.HTTPStatusError as exc:
            logger.error(f"Cover download from {url} failed with status {exc.response.status_code}")
            return None
        except httpx.RequestError as exc:
            logger.error(f"Cover download from {url} failed: {exc}")
            return None
        except OSError as exc:
            logger.error(f"Could not write cover {target}: {exc}")
            return None

        logger.info(f"Cover stored as {filename} ({len(content)} bytes).")
        return filename

    async def delete_cover(self, filename: Optional[str]) -> bool:
        """Removes a stored cover. Returns False if there was nothing to remove."""
        if not filename:
            return False
        root = self.media_root.resolve()
        target = (root / filename).resolve()
        if not target.is_relative_to(root):
            logger.warning(f"Refusing to delete cover outside the media root: {filename}")
            return False
        if not target.is_file():
            logger.warning(f"Cover not found for deletion: {filename}")
            return False
        await aiofiles.os.remove(target)
        logger.info(f"Cover deleted: {filename}")
        return True
