# tests/models/test_review_model.py
import pytest
from decimal import Decimal
from sqlalchemy.exc import IntegrityError

from bookify.models.review import Review


def test_create_review(db_session, user, book):
    review = Review(rating=Decimal("4.5"), comment="Lovely", user_id=user.id, book_id=book.id)
    db_session.add(review)
    db_session.commit()
    db_session.refresh(review)

    assert review.id is not None
    assert review.rating == Decimal("4.5")
    assert review.user.email == user.email
    assert review.book.title == book.title


@pytest.mark.parametrize("rating", ["0.0", "5.5", "3.3"])
def test_review_rating_constraints(db_session, user, book, rating):
    """Only half-star values between 0.5 and 5.0 are stored."""
    db_session.add(Review(rating=Decimal(rating), user_id=user.id, book_id=book.id))

    with pytest.raises(IntegrityError):
        db_session.commit()


def test_review_unique_per_user_and_book(db_session, user, book):
    db_session.add(Review(rating=Decimal("3.0"), user_id=user.id, book_id=book.id))
    db_session.commit()

    db_session.add(Review(rating=Decimal("2.0"), user_id=user.id, book_id=book.id))
    with pytest.raises(IntegrityError):
        db_session.commit()


def test_review_requires_existing_book(db_session, user):
    db_session.add(Review(rating=Decimal("3.0"), user_id=user.id, book_id=9999))

    with pytest.raises(IntegrityError):
        db_session.commit()
