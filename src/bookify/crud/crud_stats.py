"""
Aggregate queries for the public landing page and the admin dashboards.
All functions are read-only and return JSON-ready dictionaries.
"""

import datetime
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy import desc, func
from sqlalchemy.orm import Session, joinedload

from ..models.book import Book
from ..models.favorite import Favorite
from ..models.review import Review
from ..models.user import User, ROLE_USER
from .crud_book import book_summary

RECENT_ACTIVITY_DAYS = 30


def public_stats(db: Session) -> Dict[str, int]:
    return {
        "books": db.query(Book).count(),
        "users": db.query(User).filter(User.role == ROLE_USER).count(),
        "reviews": db.query(Review).count(),
    }


def _genre_distribution(db: Session, limit: int = None) -> List[Dict[str, Any]]:
    count = func.count(Book.id).label("count")
    query = db.query(Book.genre, count).group_by(Book.genre).order_by(desc(count), Book.genre)
    if limit:
        query = query.limit(limit)
    return [{"genre": genre, "count": n} for genre, n in query.all()]


def _books_by_year(db: Session, limit: int = 10) -> List[Dict[str, Any]]:
    count = func.count(Book.id).label("count")
    rows = db.query(Book.publication_year, count).\
            group_by(Book.publication_year).\
            order_by(desc(Book.publication_year)).\
            limit(limit).all()
    return [{"publication_year": year, "count": n} for year, n in rows]


def _rating_distribution(db: Session) -> Dict[int, int]:
    """Review counts per whole star (0.5 counts as 0, 4.5 as 4, 5.0 as 5)."""
    rows = db.query(Review.rating, func.count(Review.id)).group_by(Review.rating).all()
    distribution: Dict[int, int] = {}
    for rating, n in rows:
        star = int(Decimal(str(rating)))
        distribution[star] = distribution.get(star, 0) + n
    return dict(sorted(distribution.items()))


def book_statistics(db: Session) -> Dict[str, Any]:
    """Catalog statistics for the admin book screen."""
    average = db.query(func.avg(Book.rating)).scalar()
    top_rated = db.query(Book).order_by(desc(Book.rating), desc(Book.review_count), Book.id).limit(5).all()
    most_reviewed = db.query(Book).order_by(desc(Book.review_count), Book.id).limit(5).all()

    return {
        "total_books": db.query(Book).count(),
        "total_reviews": int(db.query(func.coalesce(func.sum(Book.review_count), 0)).scalar()),
        "average_rating": round(float(average), 2) if average is not None else 0.0,
        "top_rated_books": [book_summary(b) for b in top_rated],
        "most_reviewed_books": [book_summary(b) for b in most_reviewed],
        "genre_distribution": _genre_distribution(db),
        "books_by_year": _books_by_year(db),
    }


def dashboard(db: Session) -> Dict[str, Any]:
    """Everything the admin dashboard shows, in one payload."""
    top_rated = db.query(Book).order_by(desc(Book.rating), desc(Book.review_count), Book.id).limit(10).all()
    most_reviewed = db.query(Book).order_by(desc(Book.review_count), Book.id).limit(10).all()

    favorites_count = func.count(Favorite.id).label("favorites_count")
    most_favorited = db.query(Book, favorites_count).\
            outerjoin(Favorite, Favorite.book_id == Book.id).\
            group_by(Book.id).\
            order_by(desc(favorites_count), Book.id).\
            limit(10).all()

    recent_reviews = db.query(Review).\
            options(joinedload(Review.user), joinedload(Review.book)).\
            order_by(desc(Review.created_at), desc(Review.id)).\
            limit(10).all()

    reviews_count = func.count(Review.id).label("reviews_count")
    active_users = db.query(User.id, User.name, User.email, reviews_count).\
            outerjoin(Review, Review.user_id == User.id).\
            filter(User.role == ROLE_USER).\
            group_by(User.id, User.name, User.email).\
            order_by(desc(reviews_count), User.id).\
            limit(10).all()

    since = datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(days=RECENT_ACTIVITY_DAYS)
    day = func.date(Book.created_at).label("day")
    added = db.query(day, func.count(Book.id)).\
            filter(Book.created_at >= since).\
            group_by(day).\
            order_by(day).all()
    activity = OrderedDict((str(d), n) for d, n in added)

    return {
        "totalStats": {
            "books": db.query(Book).count(),
            "users": db.query(User).filter(User.role == ROLE_USER).count(),
            "reviews": db.query(Review).count(),
            "favorites": db.query(Favorite).count(),
        },
        "genreDistribution": _genre_distribution(db, limit=10),
        "topRatedBooks": [book_summary(b) for b in top_rated],
        "mostReviewedBooks": [book_summary(b) for b in most_reviewed],
        "mostFavoritedBooks": [
            {**book_summary(book), "favorites_count": n} for book, n in most_favorited
        ],
        "recentReviews": [
            {
                "id": r.id,
                "rating": float(r.rating),
                "comment": r.comment,
                "created_at": r.created_at,
                "user": {"id": r.user.id, "name": r.user.name, "email": r.user.email},
                "book": {"id": r.book.id, "title": r.book.title},
            }
            for r in recent_reviews
        ],
        "booksByYear": _books_by_year(db),
        "ratingDistribution": _rating_distribution(db),
        "activeUsers": [
            {"id": uid, "name": name, "email": email, "reviews_count": n}
            for uid, name, email, n in active_users
        ],
        "recentActivity": [{"date": d, "books_added": n} for d, n in activity.items()],
    }
