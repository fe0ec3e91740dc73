# tests/services/test_ratings.py
from decimal import Decimal

from bookify.crud.crud_review import create_review, delete_review, update_review
from bookify.models.review import Review
from bookify.schemas.review import ReviewCreate, ReviewUpdate
from bookify.services.ratings import average_rating, recalculate_all_book_ratings, recompute_book_rating


def test_average_rating_rounds_half_up():
    assert average_rating([Decimal("5.0"), Decimal("4.0"), Decimal("3.5")]) == Decimal("4.17")
    assert average_rating([Decimal("4.5"), Decimal("4.0")]) == Decimal("4.25")
    assert average_rating(["0.5", "1.0"]) == Decimal("0.75")


def test_average_rating_empty():
    assert average_rating([]) == Decimal("0.00")


def test_aggregation_after_create_and_delete(db_session, make_user, make_book):
    book = make_book(title="Book X")
    reviews = []
    for value in ("5.0", "4.0", "3.5"):
        reviewer = make_user()
        reviews.append(create_review(db_session, ReviewCreate(rating=Decimal(value)), reviewer.id, book.id))

    db_session.refresh(book)
    assert book.rating == Decimal("4.17")
    assert book.review_count == 3

    last = reviews[-1]
    assert delete_review(db_session, last.id, book_id=book.id, user_id=last.user_id) is True

    db_session.refresh(book)
    assert book.rating == Decimal("4.50")
    assert book.review_count == 2


def test_aggregation_after_update(db_session, user, book):
    review = create_review(db_session, ReviewCreate(rating=Decimal("2.0")), user.id, book.id)
    update_review(db_session, review.id, book_id=book.id, user_id=user.id, review_in=ReviewUpdate(rating=Decimal("4.5")))

    db_session.refresh(book)
    assert book.rating == Decimal("4.50")
    assert book.review_count == 1


def test_deleting_last_review_resets_rating(db_session, user, book):
    review = create_review(db_session, ReviewCreate(rating=Decimal("3.0")), user.id, book.id)
    delete_review(db_session, review.id, book_id=book.id, user_id=user.id)

    db_session.refresh(book)
    assert book.rating == Decimal("0.00")
    assert book.review_count == 0


def test_recompute_is_idempotent(db_session, user, other_user, book):
    create_review(db_session, ReviewCreate(rating=Decimal("4.0")), user.id, book.id)
    create_review(db_session, ReviewCreate(rating=Decimal("2.5")), other_user.id, book.id)

    first = recompute_book_rating(db_session, book.id)
    first_values = (first.rating, first.review_count)
    second = recompute_book_rating(db_session, book.id)
    db_session.commit()

    assert (second.rating, second.review_count) == first_values == (Decimal("3.25"), 2)


def test_recompute_missing_book(db_session):
    assert recompute_book_rating(db_session, 12345) is None


def test_recalculate_all_repairs_drift(db_session, user, make_book):
    drifted = make_book(title="Drifted", rating="4.90", review_count=7)
    db_session.add(Review(rating=Decimal("3.0"), user_id=user.id, book_id=drifted.id))
    db_session.commit()

    assert recalculate_all_book_ratings(db_session) == 1

    db_session.refresh(drifted)
    assert drifted.rating == Decimal("3.00")
    assert drifted.review_count == 1
