"""
CRUD operations for favorites.

Favorites never influence book ratings, so nothing here calls the rating
aggregator.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.book import Book
from ..models.favorite import Favorite
from ..models.user import User
from .crud_book import book_summary

logger = logging.getLogger(__name__)


def get_favorite(db: Session, user_id: int, book_id: int) -> Optional[Favorite]:
    return db.query(Favorite).filter(Favorite.user_id == user_id, Favorite.book_id == book_id).first()


def is_favorited(db: Session, user_id: int, book_id: int) -> bool:
    return get_favorite(db, user_id, book_id) is not None


def toggle_favorite(db: Session, user_id: int, book_id: int) -> bool:
    """
    Adds the book to the user's favorites, or removes it if already there.

    Returns:
        bool: True if the book is now a favorite, False if it was removed.
    """
    favorite = get_favorite(db, user_id, book_id)
    if favorite:
        db.delete(favorite)
        db.commit()
        logger.info(f"Book {book_id} removed from favorites of user {user_id}.")
        return False

    db.add(Favorite(user_id=user_id, book_id=book_id))
    try:
        db.commit()
    except IntegrityError:
        # A concurrent toggle already inserted the same pair.
        db.rollback()
        logger.warning(f"Favorite for user {user_id} and book {book_id} already existed.")
        return True
    logger.info(f"Book {book_id} added to favorites of user {user_id}.")
    return True


def remove_favorite(db: Session, user_id: int, book_id: int) -> bool:
    """Removes a favorite. Returns False if the book was not a favorite."""
    favorite = get_favorite(db, user_id, book_id)
    if not favorite:
        return False
    db.delete(favorite)
    db.commit()
    logger.info(f"Book {book_id} removed from favorites of user {user_id}.")
    return True


def _favorite_books_query(db: Session, user_id: int):
    return db.query(Book).\
            join(Favorite, Favorite.book_id == Book.id).\
            filter(Favorite.user_id == user_id)


def list_favorite_books(
    db: Session,
    user_id: int,
    genre: Optional[str] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 12,
) -> List[Book]:
    """A user's favorite books, most recently favorited first."""
    query = _favorite_books_query(db, user_id)
    if genre:
        query = query.filter(Book.genre == genre)
    if search:
        query = query.filter(or_(Book.title.ilike(f"%{search}%"), Book.author.ilike(f"%{search}%")))
    return query.order_by(desc(Favorite.created_at), desc(Favorite.id)).offset(skip).limit(limit).all()


def count_favorite_books(db: Session, user_id: int, genre: Optional[str] = None, search: Optional[str] = None) -> int:
    query = _favorite_books_query(db, user_id)
    if genre:
        query = query.filter(Book.genre == genre)
    if search:
        query = query.filter(or_(Book.title.ilike(f"%{search}%"), Book.author.ilike(f"%{search}%")))
    return query.count()


def favorite_statistics(db: Session, user_id: int) -> Dict[str, Any]:
    """Summary of one user's favorites."""
    genre_count = func.count(Favorite.id).label("count")
    genres = db.query(Book.genre, genre_count).\
            join(Favorite, Favorite.book_id == Book.id).\
            filter(Favorite.user_id == user_id).\
            group_by(Book.genre).\
            order_by(desc(genre_count), Book.genre).all()

    recently_added = _favorite_books_query(db, user_id).\
            order_by(desc(Favorite.created_at), desc(Favorite.id)).limit(5).all()
    top_rated = _favorite_books_query(db, user_id).\
            order_by(desc(Book.rating), desc(Book.review_count), Book.id).limit(5).all()

    return {
        "total_favorites": db.query(Favorite).filter(Favorite.user_id == user_id).count(),
        "favorite_genres": [{"genre": genre, "count": count} for genre, count in genres],
        "recently_added": [book_summary(b) for b in recently_added],
        "top_rated_favorites": [book_summary(b) for b in top_rated],
    }


def admin_favorite_statistics(db: Session) -> Dict[str, Any]:
    """Site-wide favorite statistics for administrators."""
    favorites_count = func.count(Favorite.id).label("favorites_count")
    most_favorited = db.query(Book, favorites_count).\
            outerjoin(Favorite, Favorite.book_id == Book.id).\
            group_by(Book.id).\
            order_by(desc(favorites_count), Book.id).\
            limit(10).all()

    user_count = func.count(Favorite.id).label("count")
    top_users = db.query(User.id, User.name, User.email, user_count).\
            join(Favorite, Favorite.user_id == User.id).\
            group_by(User.id, User.name, User.email).\
            order_by(desc(user_count), User.id).\
            limit(10).all()

    return {
        "total_favorites": db.query(Favorite).count(),
        "most_favorited_books": [
            {**book_summary(book), "favorites_count": count} for book, count in most_favorited
        ],
        "users_with_most_favorites": [
            {"user_id": uid, "name": name, "email": email, "count": count}
            for uid, name, email, count in top_users
        ],
    }
