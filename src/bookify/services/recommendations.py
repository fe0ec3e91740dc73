"""
Similar-book recommendations.

A candidate is eligible when it shares the source book's genre or its rating
lies within RATING_WINDOW of the source rating (bounds clamped to 0..5).
Candidates are ordered by:

1. genre match first (bucket 1) then rating-only matches (bucket 2),
2. ascending distance between candidate and source rating, measured in
   whole hundredths so equal gaps compare equal on every backend,
3. descending review_count,
4. ascending id, so equal candidates always come back in the same order.
"""

import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import Session

from ..core.config import settings
from ..models.book import Book

logger = logging.getLogger(__name__)

RATING_WINDOW = Decimal("0.5")
MIN_RATING = Decimal("0")
MAX_RATING = Decimal("5")


def rating_window(rating) -> Tuple[Decimal, Decimal]:
    """
    Inclusive rating range considered "similar" to `rating`.

    >>> rating_window(Decimal("4.9"))
    (Decimal('4.4'), Decimal('5'))
    """
    value = Decimal(str(rating))
    return max(MIN_RATING, value - RATING_WINDOW), min(MAX_RATING, value + RATING_WINDOW)


def rank_similar_books(db: Session, source: Book, limit: int) -> List[Book]:
    """
    Returns up to `limit` books similar to `source`, never including it.

    Args:
        db (Session): Database session.
        source (Book): Book the recommendations are based on.
        limit (int): Maximum number of books returned.

    Returns:
        List[Book]: Ranked books; empty when nothing qualifies.
    """
    source_rating = Decimal(str(source.rating))
    low, high = rating_window(source_rating)

    genre_bucket = case((Book.genre == source.genre, 1), else_=2)
    # Ratings carry two decimals; SQLite stores them as REAL.
    source_hundredths = int((source_rating * 100).to_integral_value())
    rating_distance = func.abs(func.round(Book.rating * 100) - source_hundredths)

    stmt = (
        select(Book)
        .where(
            Book.id != source.id,
            or_(Book.genre == source.genre, Book.rating.between(low, high)),
        )
        .order_by(genre_bucket, rating_distance.asc(), Book.review_count.desc(), Book.id.asc())
        .limit(limit)
    )
    books = db.execute(stmt).scalars().all()
    logger.debug(f"{len(books)} recommendations for book {source.id} (genre='{source.genre}', rating={source_rating})")
    return list(books)


def recommend(db: Session, book_id: int, limit: Optional[int] = None) -> Optional[List[Book]]:
    """
    Recommendations for the book with id `book_id`.

    Args:
        db (Session): Database session.
        book_id (int): Source book ID.
        limit (Optional[int]): Maximum result size; defaults to RECOMMENDATION_LIMIT.

    Returns:
        Optional[List[Book]]: Ranked books, or None if the source book does not exist.
    """
    source = db.get(Book, book_id)
    if source is None:
        return None
    return rank_similar_books(db, source, limit if limit is not None else settings.RECOMMENDATION_LIMIT)
