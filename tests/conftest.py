# tests/conftest.py
import os
import sys

# Settings are read at import time; point them at an in-memory database first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ADMIN_EMAILS", "admin@example.com")

import pytest
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add the src directory to the Python path to allow imports without installing
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
src_path = os.path.join(project_root, 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from bookify.db.session import Base, enable_sqlite_foreign_keys
# Import all models so they are registered with Base
from bookify.models import Book, Review, Favorite, User  # noqa: F401
from bookify.crud.crud_user import create_user
from bookify.schemas.user import UserCreate

TEST_PASSWORD = "password123"


# A fresh in-memory database per test. StaticPool keeps the single connection
# alive so every session (including those opened by the API) sees the same data.
@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session_factory(db_engine):
    """Returns a SQLAlchemy session factory bound to the test engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(db_session_factory):
    session = db_session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db_session):
    """Factory creating users through the CRUD layer."""
    counter = {"n": 0}

    def _make_user(email=None, name=None, password=TEST_PASSWORD, role=None):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        user_in = UserCreate(name=name or f"User {counter['n']}", email=email, password=password)
        return create_user(db_session, user_in, role=role)

    return _make_user


@pytest.fixture
def make_book(db_session):
    """Factory adding books directly, with explicit aggregate values when needed."""

    def _make_book(title="Test Book", author="Test Author", genre="Fantasy", rating="0.00",
                   review_count=0, publication_year=2000, description="A book used in tests."):
        book = Book(
            title=title,
            author=author,
            genre=genre,
            rating=Decimal(str(rating)),
            review_count=review_count,
            publication_year=publication_year,
            description=description,
        )
        db_session.add(book)
        db_session.commit()
        db_session.refresh(book)
        return book

    return _make_book


@pytest.fixture
def user(make_user):
    return make_user(email="reader@example.com", name="Reader")


@pytest.fixture
def other_user(make_user):
    return make_user(email="other@example.com", name="Other Reader")


@pytest.fixture
def admin_user(make_user):
    # Promoted through ADMIN_EMAILS
    return make_user(email="admin@example.com", name="Admin")


@pytest.fixture
def book(make_book):
    return make_book(title="The Hobbit", author="J.R.R. Tolkien", genre="Fantasy", publication_year=1937)
