from typing import List, Optional, Sequence

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import asc, desc, or_
import logging

from ..models.review import Review
from ..models.user import User
from ..models.book import Book
from ..schemas.review import ReviewCreate, ReviewUpdate
from ..services.ratings import recompute_book_rating

logger = logging.getLogger(__name__)

ADMIN_SORT_COLUMNS = {
    "created_at": Review.created_at,
    "updated_at": Review.updated_at,
    "rating": Review.rating,
}


class DuplicateReviewError(Exception):
    """The user already reviewed this book; the existing review must be updated instead."""

    def __init__(self, user_id: int, book_id: int):
        self.user_id = user_id
        self.book_id = book_id
        super().__init__(f"User {user_id} has already reviewed book {book_id}")


def get_review_by_id(db: Session, review_id: int) -> Optional[Review]:
    return db.get(Review, review_id)


def get_user_review_for_book(db: Session, user_id: int, book_id: int) -> Optional[Review]:
    """Returns the review a user wrote for a book, with its author loaded."""
    return db.query(Review).\
            options(joinedload(Review.user)).\
            filter(Review.user_id == user_id, Review.book_id == book_id).\
            first()


def create_review(db: Session, review: ReviewCreate, user_id: int, book_id: int) -> Review:
    """
    Creates a review and refreshes the book's rating in the same transaction.

    Raises:
        DuplicateReviewError: The user already has a review for this book.
    """
    if get_user_review_for_book(db, user_id=user_id, book_id=book_id):
        logger.warning(f"User {user_id} tried to review book {book_id} twice.")
        raise DuplicateReviewError(user_id, book_id)

    db_review = Review(
        **review.model_dump(),
        user_id=user_id,
        book_id=book_id,
    )
    db.add(db_review)

    try:
        db.flush()
        recompute_book_rating(db=db, book_id=book_id)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # Two submissions raced past the check above; the unique constraint decides.
        if get_user_review_for_book(db, user_id=user_id, book_id=book_id):
            logger.warning(f"Concurrent duplicate review by user {user_id} for book {book_id} rejected.")
            raise DuplicateReviewError(user_id, book_id) from e
        logger.exception(f"Integrity error creating review for book {book_id}: {e}")
        raise
    except Exception as e:
        logger.exception(f"Error committing review creation/rating update for book {book_id}: {e}")
        db.rollback()
        raise

    db.refresh(db_review)
    logger.info(f"Review {db_review.id} created for book {book_id} by user {user_id}. Rating updated.")
    return db_review


def update_review(db: Session, review_id: int, book_id: int, user_id: int, review_in: ReviewUpdate) -> Optional[Review]:
    """
    Updates a review owned by `user_id` and refreshes the book's rating.
    Returns None if no such review exists for that book and owner.
    """
    db_review = db.query(Review).\
            filter(Review.id == review_id, Review.book_id == book_id, Review.user_id == user_id).\
            first()
    if not db_review:
        logger.warning(f"Update of review {review_id} on book {book_id} by user {user_id} refused: not found.")
        return None

    changes = review_in.model_dump(exclude_unset=True)
    if changes.get("rating") is None:
        changes.pop("rating", None)
    for field, value in changes.items():
        setattr(db_review, field, value)
    db.add(db_review)

    try:
        db.flush()
        recompute_book_rating(db=db, book_id=book_id)
        db.commit()
    except Exception as e:
        logger.exception(f"Error committing review update/rating update for review {review_id}: {e}")
        db.rollback()
        raise

    db.refresh(db_review)
    logger.info(f"Review {review_id} updated by user {user_id}. Rating for book {book_id} updated.")
    return db_review


def _delete_and_recompute(db: Session, db_review: Review) -> None:
    book_id = db_review.book_id
    try:
        db.delete(db_review)
        db.flush()
        recompute_book_rating(db=db, book_id=book_id)
        db.commit()
    except Exception as e:
        logger.exception(f"Error committing delete/rating update for review {db_review.id}: {e}")
        db.rollback()
        raise


def delete_review(db: Session, review_id: int, book_id: int, user_id: int) -> bool:
    """
    Deletes a review owned by `user_id` and refreshes the book's rating.
    Returns False if no such review exists for that book and owner.
    """
    db_review = db.query(Review).\
            filter(Review.id == review_id, Review.book_id == book_id, Review.user_id == user_id).\
            first()
    if not db_review:
        logger.warning(f"Delete of review {review_id} on book {book_id} by user {user_id} refused: not found.")
        return False

    _delete_and_recompute(db, db_review)
    logger.info(f"Review {review_id} deleted by user {user_id}. Rating for book {book_id} updated.")
    return True


def admin_delete_review(db: Session, review_id: int) -> bool:
    """Deletes any review (moderation). Returns False if it does not exist."""
    db_review = get_review_by_id(db, review_id)
    if not db_review:
        logger.warning(f"Attempted admin delete of non-existent review ID: {review_id}")
        return False

    book_id = db_review.book_id
    _delete_and_recompute(db, db_review)
    logger.info(f"Review {review_id} deleted by admin. Rating for book {book_id} updated.")
    return True


def bulk_delete_reviews(db: Session, review_ids: Sequence[int]) -> int:
    """
    Deletes several reviews at once and refreshes every affected book.
    Unknown IDs are ignored. Returns the number of reviews deleted.
    """
    reviews = db.query(Review).filter(Review.id.in_(list(review_ids))).all()
    if not reviews:
        return 0

    book_ids = sorted({r.book_id for r in reviews})
    try:
        for db_review in reviews:
            db.delete(db_review)
        db.flush()
        # Sorted so concurrent bulk deletes take book locks in the same order.
        for book_id in book_ids:
            recompute_book_rating(db=db, book_id=book_id)
        db.commit()
    except Exception as e:
        logger.exception(f"Error committing bulk review delete for books {book_ids}: {e}")
        db.rollback()
        raise

    logger.info(f"{len(reviews)} reviews deleted by admin. Ratings updated for books {book_ids}.")
    return len(reviews)


def get_reviews_for_book(db: Session, book_id: int, skip: int = 0, limit: int = 10) -> List[Review]:
    """Newest reviews of a book, each with its author loaded."""
    return db.query(Review).\
            options(joinedload(Review.user)).\
            filter(Review.book_id == book_id).\
            order_by(desc(Review.created_at), desc(Review.id)).\
            offset(skip).\
            limit(limit).all()


def count_reviews_for_book(db: Session, book_id: int) -> int:
    return db.query(Review).filter(Review.book_id == book_id).count()


def get_reviews_by_user(db: Session, user_id: int, skip: int = 0, limit: int = 10) -> List[Review]:
    """All reviews written by a user, newest first, each with its book loaded."""
    return db.query(Review).\
            options(joinedload(Review.book)).\
            filter(Review.user_id == user_id).\
            order_by(desc(Review.created_at), desc(Review.id)).\
            offset(skip).\
            limit(limit).all()


def get_all_reviews_admin(
    db: Session,
    search: Optional[str] = None,
    book_id: Optional[int] = None,
    user_id: Optional[int] = None,
    rating: Optional[float] = None,
    min_rating: Optional[float] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> List[Review]:
    """
    All reviews with their user and book, for the moderation view.

    `search` matches book title/author or user name/email. Unknown `sort_by`
    values fall back to created_at.
    """
    query = db.query(Review).\
            join(Book, Review.book_id == Book.id).\
            join(User, Review.user_id == User.id).\
            options(joinedload(Review.user), joinedload(Review.book))

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Book.title.ilike(pattern),
            Book.author.ilike(pattern),
            User.name.ilike(pattern),
            User.email.ilike(pattern),
        ))
    if book_id is not None:
        query = query.filter(Review.book_id == book_id)
    if user_id is not None:
        query = query.filter(Review.user_id == user_id)
    if rating is not None:
        query = query.filter(Review.rating == rating)
    if min_rating is not None:
        query = query.filter(Review.rating >= min_rating)

    column = ADMIN_SORT_COLUMNS.get(sort_by, Review.created_at)
    direction = asc if sort_order == "asc" else desc
    return query.order_by(direction(column), direction(Review.id)).all()
