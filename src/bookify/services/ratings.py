"""
Rating aggregation for books.

A book's `rating` and `review_count` are denormalized summaries of its
reviews. They are recomputed here, and only here, after every review create,
update and delete. The CRUD functions call `recompute_book_rating` inside the
same transaction as the review mutation, so both commit or roll back together.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.book import Book
from ..models.review import Review

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
EMPTY_RATING = Decimal("0.00")


def average_rating(ratings: Iterable) -> Decimal:
    """
    Unweighted mean of review ratings, rounded half-up to two decimals.

    Args:
        ratings: Review rating values (Decimal, float or str).

    Returns:
        Decimal: The mean, or Decimal("0.00") for an empty collection.
    """
    values = [Decimal(str(r)) for r in ratings]
    if not values:
        return EMPTY_RATING
    mean = sum(values, Decimal("0")) / len(values)
    return mean.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def recompute_book_rating(db: Session, book_id: int) -> Optional[Book]:
    """
    Recalculates `rating` and `review_count` of a book from its reviews.

    The book row is locked (SELECT ... FOR UPDATE) before reviews are read so
    that concurrent review submissions for the same book are serialized.
    Changes are flushed, not committed: the caller owns the transaction.

    Args:
        db (Session): Active session holding the triggering review change.
        book_id (int): Book to refresh.

    Returns:
        Optional[Book]: The refreshed book, or None if it does not exist.
    """
    book = db.query(Book).filter(Book.id == book_id).with_for_update().first()
    if book is None:
        logger.warning(f"Rating recompute requested for non-existent book {book_id}")
        return None

    ratings = db.execute(select(Review.rating).where(Review.book_id == book_id)).scalars().all()

    book.review_count = len(ratings)
    book.rating = average_rating(ratings)
    db.add(book)
    db.flush()
    logger.debug(f"Book {book_id} rating recomputed: {book.rating} over {book.review_count} reviews")
    return book


def recalculate_all_book_ratings(db: Session) -> int:
    """
    Recomputes the aggregates of every book and commits once.

    Useful after data migrations or manual database edits.

    Returns:
        int: Number of books processed.
    """
    book_ids = db.execute(select(Book.id).order_by(Book.id)).scalars().all()
    try:
        for book_id in book_ids:
            recompute_book_rating(db, book_id)
        db.commit()
    except Exception as e:
        logger.exception(f"Error recalculating ratings for all books: {e}")
        db.rollback()
        raise
    logger.info(f"Ratings recalculated for {len(book_ids)} books.")
    return len(book_ids)
