"""
Fake data generator for the Bookify database.

Creates a demo admin, a demo user and a batch of Faker users, then gives each
user random half-star reviews and favorites on the books already in the
catalog. Reviews go through the CRUD layer so every book's rating and
review_count stay consistent.

Usage:
    python scripts/generate_fake_data.py --users 50

Note:
    - The script does NOT create books; run scripts/import_google_books.py first.
    - Every generated user shares the password in FAKE_PASSWORD.
"""

import argparse
import logging
import random
from decimal import Decimal
from typing import List, Optional

from faker import Faker
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import bookify.models  # noqa: F401
from bookify.core.config import settings
from bookify.crud.crud_favorite import toggle_favorite
from bookify.crud.crud_review import DuplicateReviewError, create_review
from bookify.crud.crud_user import create_user, get_user_by_email
from bookify.db.session import Base, SessionLocal, engine
from bookify.models.book import Book
from bookify.models.user import ROLE_ADMIN, ROLE_USER
from bookify.schemas.review import ReviewCreate
from bookify.schemas.user import UserCreate

logging.basicConfig(level=settings.LOG_LEVEL.upper(), format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

MAX_REVIEWS_PER_USER: int = 15
MIN_REVIEWS_PER_USER: int = 2
MAX_FAVORITES_PER_USER: int = 5
FAKE_PASSWORD: str = "password123"

DEMO_ACCOUNTS = (
    ("Admin", "admin@example.com", ROLE_ADMIN),
    ("Demo User", "demo@example.com", ROLE_USER),
)

# Half-star ratings, skewed towards the upper half like real reviews.
RATINGS: List[Decimal] = [Decimal(n) / 2 for n in range(1, 11)]
RATING_WEIGHTS: List[int] = [1, 1, 2, 2, 4, 5, 8, 9, 7, 5]

fake = Faker(['en_US', 'es_ES'])


def _ensure_user(db: Session, name: str, email: str, role: Optional[str] = None) -> Optional[int]:
    existing = get_user_by_email(db, email)
    if existing:
        logger.info(f"  User found: {existing.email} (ID: {existing.id})")
        return existing.id
    try:
        user = create_user(db, UserCreate(name=name, email=email, password=FAKE_PASSWORD), role=role)
    except IntegrityError:
        logger.warning(f"  Integrity error creating {email}; it probably exists already.")
        existing = get_user_by_email(db, email)
        return existing.id if existing else None
    logger.info(f"  User created: {user.email} (ID: {user.id}, role: {user.role})")
    return user.id


def generate_data(num_users: int) -> None:
    """
    Creates the demo accounts and `num_users` fake users with reviews and favorites.

    Args:
        num_users (int): Number of Faker users to create.
    """
    logger.info("=============================================")
    logger.info(" Starting fake data generation")
    logger.info("=============================================")

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        logger.info("--- Phase 1: demo accounts ---")
        for name, email, role in DEMO_ACCOUNTS:
            _ensure_user(db, name, email, role)

        logger.info(f"--- Phase 2: creating {num_users} fake users ---")
        user_ids: List[int] = []
        for _ in range(num_users):
            user_id = _ensure_user(db, fake.name(), fake.unique.safe_email(), ROLE_USER)
            if user_id is not None:
                user_ids.append(user_id)

        book_ids: List[int] = [row[0] for row in db.query(Book.id).all()]
        if not book_ids:
            logger.error("There are no books in the database. Import some before generating reviews.")
            return
        logger.info(f"{len(book_ids)} books available.")

        logger.info(f"--- Phase 3: reviews ({MIN_REVIEWS_PER_USER}-{MAX_REVIEWS_PER_USER} per user) and favorites ---")
        total_reviews = 0
        total_favorites = 0
        for user_id in user_ids:
            count = random.randint(min(MIN_REVIEWS_PER_USER, len(book_ids)), min(MAX_REVIEWS_PER_USER, len(book_ids)))
            for book_id in random.sample(book_ids, count):
                rating = random.choices(RATINGS, weights=RATING_WEIGHTS)[0]
                comment = fake.paragraph(nb_sentences=random.randint(1, 4)) if random.random() < 0.7 else None
                try:
                    create_review(db, ReviewCreate(rating=rating, comment=comment), user_id=user_id, book_id=book_id)
                    total_reviews += 1
                except DuplicateReviewError:
                    logger.debug(f"  User {user_id} already reviewed book {book_id}.")

            for book_id in random.sample(book_ids, min(random.randint(0, MAX_FAVORITES_PER_USER), len(book_ids))):
                if toggle_favorite(db, user_id, book_id):
                    total_favorites += 1

        logger.info(f"--- Done: {len(user_ids)} users, {total_reviews} reviews, {total_favorites} favorites ---")
    except Exception as e:
        logger.exception(f"Critical error while generating data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the Bookify database with fake users, reviews and favorites.")
    parser.add_argument("--users", type=int, default=50, help="Number of fake users to create (default: 50)")
    args = parser.parse_args()
    generate_data(args.users)
