"""
CRUD operations for the Book model.

Includes the catalog listing (filters + closed set of sort keys), lookups and
the admin create/update/delete operations. Catalog edits never touch
`rating` or `review_count`; those belong to the rating aggregator.
"""

import logging
from sqlalchemy.orm import Session
from sqlalchemy import select, or_, func
from sqlalchemy.sql import Select
from typing import List, Optional

from ..models.book import Book
from ..schemas.book import BookCreate, BookUpdate

logger = logging.getLogger(__name__)

DEFAULT_SORT = "newest"

SORT_ORDERS = {
    "newest": (Book.created_at.desc(), Book.id.desc()),
    "oldest": (Book.created_at.asc(), Book.id.asc()),
    "title_asc": (Book.title.asc(), Book.id.asc()),
    "title_desc": (Book.title.desc(), Book.id.desc()),
    "rating_high": (Book.rating.desc(), Book.id.desc()),
    "rating_low": (Book.rating.asc(), Book.id.asc()),
    "popular": (Book.review_count.desc(), Book.id.desc()),
}

SORT_ALIASES = {
    "title": "title_asc",
    "rating": "rating_high",
}


def resolve_sort(sort: Optional[str]) -> str:
    """
    Maps a requested sort key onto a supported one; anything unknown is `newest`.

    Args:
        sort (Optional[str]): Sort key from the request.

    Returns:
        str: A key of SORT_ORDERS.
    """
    key = SORT_ALIASES.get(sort, sort)
    return key if key in SORT_ORDERS else DEFAULT_SORT


def _apply_filters(
    stmt: Select,
    search: Optional[str] = None,
    genre: Optional[str] = None,
    min_rating: Optional[float] = None,
    year: Optional[int] = None,
) -> Select:
    if search:
        stmt = stmt.where(or_(
            Book.title.ilike(f"%{search}%"),
            Book.author.ilike(f"%{search}%"),
        ))
    if genre:
        stmt = stmt.where(Book.genre == genre)
    if min_rating is not None:
        stmt = stmt.where(Book.rating >= min_rating)
    if year is not None:
        stmt = stmt.where(Book.publication_year == year)
    return stmt


def list_books(
    db: Session,
    search: Optional[str] = None,
    genre: Optional[str] = None,
    min_rating: Optional[float] = None,
    year: Optional[int] = None,
    sort: Optional[str] = DEFAULT_SORT,
    skip: int = 0,
    limit: int = 1000,
) -> List[Book]:
    """
    Lists catalog books matching the filters, in the requested order.

    Args:
        db (Session): SQLAlchemy session.
        search (Optional[str]): Case-insensitive substring of title or author.
        genre (Optional[str]): Exact genre.
        min_rating (Optional[float]): Minimum book rating.
        year (Optional[int]): Exact publication year.
        sort (Optional[str]): One of SORT_ORDERS (aliases accepted); unknown keys sort as `newest`.
        skip (int): Rows to skip.
        limit (int): Maximum rows returned.

    Returns:
        List[Book]: Matching books.
    """
    stmt = _apply_filters(select(Book), search, genre, min_rating, year)
    stmt = stmt.order_by(*SORT_ORDERS[resolve_sort(sort)]).offset(skip).limit(limit)
    return list(db.execute(stmt).scalars().all())


def count_books(
    db: Session,
    search: Optional[str] = None,
    genre: Optional[str] = None,
    min_rating: Optional[float] = None,
    year: Optional[int] = None,
) -> int:
    stmt = _apply_filters(select(func.count(Book.id)), search, genre, min_rating, year)
    return db.execute(stmt).scalar_one()


def list_genres(db: Session) -> List[str]:
    """Distinct genres present in the catalog, alphabetically."""
    stmt = select(Book.genre).distinct().order_by(Book.genre)
    return list(db.execute(stmt).scalars().all())


def get_book_by_id(db: Session, book_id: int) -> Optional[Book]:
    """
    Fetches a book by primary key.

    Returns:
        Optional[Book]: The book, or None if it does not exist.
    """
    return db.get(Book, book_id)


def get_book_by_title_author(db: Session, title: str, author: str) -> Optional[Book]:
    stmt = select(Book).where(Book.title == title, Book.author == author)
    return db.execute(stmt).scalars().first()


def create_book(db: Session, book_in: BookCreate) -> Book:
    """
    Adds a book to the catalog. New books start unrated (0.00, 0 reviews).

    Args:
        db (Session): SQLAlchemy session.
        book_in (BookCreate): Catalog fields; `google_books_cover` becomes the cover.

    Returns:
        Book: The stored book.
    """
    data = book_in.model_dump(exclude={"google_books_cover"})
    db_book = Book(**data, cover_image=book_in.google_books_cover)
    db.add(db_book)
    db.commit()
    db.refresh(db_book)
    logger.info(f"Book {db_book.id} '{db_book.title}' created (cover={db_book.cover_image}).")
    return db_book


def update_book(db: Session, db_book: Book, book_in: BookUpdate) -> Book:
    """
    Applies a partial catalog update to a book.

    Args:
        db (Session): SQLAlchemy session.
        db_book (Book): Book to change.
        book_in (BookUpdate): Fields to change; unset fields are left alone.

    Returns:
        Book: The updated book.
    """
    changes = book_in.model_dump(exclude_unset=True, exclude={"google_books_cover"})
    for field, value in changes.items():
        if value is not None:
            setattr(db_book, field, value)
    if book_in.google_books_cover:
        db_book.cover_image = book_in.google_books_cover
    db.add(db_book)
    db.commit()
    db.refresh(db_book)
    logger.info(f"Book {db_book.id} updated: {sorted(changes)}")
    return db_book


def delete_book(db: Session, db_book: Book) -> None:
    """
    Deletes a book together with its reviews and favorites.
    No rating recompute is needed: the book row goes away as well.
    """
    book_id = db_book.id
    try:
        db.delete(db_book)
        db.commit()
    except Exception as e:
        logger.exception(f"Error deleting book {book_id}: {e}")
        db.rollback()
        raise
    logger.info(f"Book {book_id} deleted with its reviews and favorites.")


def book_summary(book: Book) -> dict:
    """Compact JSON-ready view of a book for statistics payloads."""
    return {
        "id": book.id,
        "title": book.title,
        "author": book.author,
        "genre": book.genre,
        "rating": float(book.rating),
        "review_count": book.review_count,
        "cover_image": book.cover_image,
    }
