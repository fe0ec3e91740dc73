"""
Populates the Bookify catalog with books from the Google Books API.

Runs themed searches (or a single --query), downloads each cover into
MEDIA_ROOT/covers and stores the book unrated. Results without a cover URL,
books already present by title/author and books whose cover download failed
are skipped.

Usage:
    python scripts/import_google_books.py --count 50
    python scripts/import_google_books.py --count 10 --query "dune herbert"
"""

import argparse
import asyncio
import datetime
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

import bookify.models  # noqa: F401
from bookify.clients.google_books import GoogleBooksClient
from bookify.core.config import settings
from bookify.crud.crud_book import create_book, get_book_by_title_author
from bookify.db.session import Base, SessionLocal, engine
from bookify.schemas.book import BookCreate

logging.basicConfig(level=settings.LOG_LEVEL.upper(), format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

SEARCH_QUERIES: List[str] = [
    "bestseller fiction",
    "classic literature",
    "science fiction",
    "fantasy novels",
    "mystery thriller",
    "romance novels",
    "biography",
    "history books",
    "self help",
    "business books",
    "technology programming",
    "philosophy",
    "psychology",
    "young adult",
    "children books",
    "horror books",
    "adventure novels",
    "poetry",
    "drama plays",
    "crime novels",
    "political books",
    "art books",
    "cooking books",
    "travel books",
    "sports books",
]
MAX_RESULTS_PER_QUERY: int = 15
QUERY_DELAY_SECONDS: float = 0.5
DEFAULT_DESCRIPTION = "No description available."


def _book_payload(candidate: Dict[str, Any], cover: str) -> BookCreate:
    return BookCreate(
        title=candidate["title"],
        author=candidate["author"],
        publication_year=candidate.get("published_year") or datetime.date.today().year,
        genre=candidate.get("genre") or "General",
        description=candidate.get("description") or DEFAULT_DESCRIPTION,
        google_books_cover=cover,
    )


async def import_books(db: Session, client: GoogleBooksClient, count: int, query: Optional[str] = None) -> Dict[str, int]:
    """
    Imports up to `count` books.

    Args:
        db (Session): Active SQLAlchemy session.
        client (GoogleBooksClient): Search and cover download client.
        count (int): Number of books to import.
        query (Optional[str]): Single search query replacing the built-in topics.

    Returns:
        Dict[str, int]: imported, skipped and processed counts.
    """
    queries = [query] if query else SEARCH_QUERIES
    imported = 0
    skipped = 0

    for search_query in queries:
        if imported >= count:
            break
        logger.info(f"Searching Google Books for '{search_query}'...")
        results = await client.search(search_query, MAX_RESULTS_PER_QUERY)

        for candidate in results:
            if imported >= count:
                break
            if not candidate.get("cover_image_url"):
                skipped += 1
                continue
            if get_book_by_title_author(db, candidate["title"], candidate["author"]):
                logger.debug(f"  Skipping '{candidate['title']}': already in the catalog.")
                skipped += 1
                continue

            cover = await client.fetch_and_store(candidate["cover_image_url"])
            if not cover:
                skipped += 1
                continue

            try:
                book = create_book(db, _book_payload(candidate, cover))
            except ValidationError as e:
                logger.warning(f"  Skipping '{candidate['title']}': {e.error_count()} invalid fields.")
                await client.delete_cover(cover)
                skipped += 1
                continue
            imported += 1
            logger.info(f"  ({imported}/{count}) Imported '{book.title}' by {book.author} (ID: {book.id})")

        await asyncio.sleep(QUERY_DELAY_SECONDS)

    return {"imported": imported, "skipped": skipped, "processed": imported + skipped}


def main() -> None:
    parser = argparse.ArgumentParser(description="Import books from the Google Books API into the Bookify database.")
    parser.add_argument("--count", type=int, default=50, help="Number of books to import (default: 50)")
    parser.add_argument("--query", default=None, help="Specific search query instead of the built-in topics")
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        summary = asyncio.run(import_books(db, GoogleBooksClient(), args.count, args.query))
    except Exception as e:
        logger.exception(f"Critical error while importing books: {e}")
        db.rollback()
        raise
    finally:
        db.close()

    logger.info("--- Import completed ---")
    logger.info(f"Books imported: {summary['imported']}")
    logger.info(f"Books skipped: {summary['skipped']}")
    logger.info(f"Total processed: {summary['processed']}")
    if summary["imported"] == 0:
        logger.warning("No new books were imported. They may already exist in the database.")


if __name__ == "__main__":
    main()
