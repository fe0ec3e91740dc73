# tests/crud/test_crud_book.py
import pytest
from decimal import Decimal

from bookify.crud.crud_book import (
    count_books,
    create_book,
    delete_book,
    get_book_by_id,
    get_book_by_title_author,
    list_books,
    list_genres,
    resolve_sort,
    update_book,
)
from bookify.crud.crud_review import create_review
from bookify.models.review import Review
from bookify.schemas.book import BookCreate, BookUpdate
from bookify.schemas.review import ReviewCreate


@pytest.fixture
def catalog(make_book):
    return [
        make_book(title="Brave New World", author="Aldous Huxley", genre="Science Fiction",
                  rating="4.20", review_count=3, publication_year=1932),
        make_book(title="Anna Karenina", author="Leo Tolstoy", genre="Classic",
                  rating="4.80", review_count=1, publication_year=1878),
        make_book(title="Carrie", author="Stephen King", genre="Horror",
                  rating="3.10", review_count=8, publication_year=1974),
    ]


def _titles(books):
    return [b.title for b in books]


def test_resolve_sort():
    assert resolve_sort("popular") == "popular"
    assert resolve_sort("title") == "title_asc"
    assert resolve_sort("rating") == "rating_high"
    assert resolve_sort("banana") == "newest"
    assert resolve_sort(None) == "newest"


def test_unknown_sort_falls_back_to_newest(db_session, catalog):
    assert _titles(list_books(db_session, sort="banana")) == _titles(list_books(db_session, sort="newest"))


def test_newest_and_oldest(db_session, catalog):
    assert _titles(list_books(db_session, sort="newest")) == ["Carrie", "Anna Karenina", "Brave New World"]
    assert _titles(list_books(db_session, sort="oldest")) == ["Brave New World", "Anna Karenina", "Carrie"]


@pytest.mark.parametrize("sort, expected", [
    ("title_asc", ["Anna Karenina", "Brave New World", "Carrie"]),
    ("title", ["Anna Karenina", "Brave New World", "Carrie"]),
    ("title_desc", ["Carrie", "Brave New World", "Anna Karenina"]),
    ("rating_high", ["Anna Karenina", "Brave New World", "Carrie"]),
    ("rating_low", ["Carrie", "Brave New World", "Anna Karenina"]),
    ("popular", ["Carrie", "Brave New World", "Anna Karenina"]),
])
def test_sort_keys(db_session, catalog, sort, expected):
    assert _titles(list_books(db_session, sort=sort)) == expected


def test_filters(db_session, catalog):
    assert _titles(list_books(db_session, search="king")) == ["Carrie"]
    assert _titles(list_books(db_session, search="ANNA")) == ["Anna Karenina"]
    assert _titles(list_books(db_session, genre="Classic")) == ["Anna Karenina"]
    assert _titles(list_books(db_session, min_rating=4.0, sort="title_asc")) == ["Anna Karenina", "Brave New World"]
    assert _titles(list_books(db_session, year=1974)) == ["Carrie"]
    assert count_books(db_session, min_rating=4.0) == 2
    assert count_books(db_session) == 3


def test_pagination(db_session, catalog):
    page = list_books(db_session, sort="title_asc", skip=1, limit=1)
    assert _titles(page) == ["Brave New World"]


def test_list_genres(db_session, catalog):
    assert list_genres(db_session) == ["Classic", "Horror", "Science Fiction"]


def test_create_book_starts_unrated(db_session):
    book = create_book(db_session, BookCreate(
        title="Kindred", author="Octavia E. Butler", publication_year=1979,
        genre="Science Fiction", description="Time travel.", google_books_cover="covers/google_book_abc.jpg",
    ))

    assert book.id is not None
    assert book.rating == Decimal("0.00")
    assert book.review_count == 0
    assert book.cover_image == "covers/google_book_abc.jpg"
    assert get_book_by_title_author(db_session, "Kindred", "Octavia E. Butler").id == book.id


def test_update_book_keeps_aggregates(db_session, user, book):
    create_review(db_session, ReviewCreate(rating=Decimal("4.5")), user.id, book.id)

    updated = update_book(db_session, book, BookUpdate(genre="Classic Fantasy"))

    assert updated.genre == "Classic Fantasy"
    assert updated.title == "The Hobbit"
    assert updated.rating == Decimal("4.50")
    assert updated.review_count == 1


def test_update_book_cover(db_session, book):
    updated = update_book(db_session, book, BookUpdate(google_books_cover="covers/new.png"))
    assert updated.cover_image == "covers/new.png"


def test_delete_book_removes_reviews(db_session, user, book):
    create_review(db_session, ReviewCreate(rating=Decimal("3.0")), user.id, book.id)
    book_id = book.id

    delete_book(db_session, book)

    assert get_book_by_id(db_session, book_id) is None
    assert db_session.query(Review).filter(Review.book_id == book_id).count() == 0
