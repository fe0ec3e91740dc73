"""Public catalog endpoints: listing, detail, recommendations and site stats."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from bookify.core.config import settings
from bookify.crud import crud_book, crud_review, crud_stats
from bookify.db.session import get_db
from bookify.schemas.book import BookListResponse, RecommendationsResponse
from bookify.schemas.review import BookDetailResponse
from bookify.services.recommendations import rank_similar_books

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Books"])

DETAIL_REVIEWS = 5


@router.get("/books", response_model=BookListResponse)
def list_books(
    search: Optional[str] = None,
    genre: Optional[str] = None,
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    year: Optional[int] = None,
    sort: Optional[str] = crud_book.DEFAULT_SORT,
    skip: int = Query(0, ge=0),
    limit: int = Query(1000, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    books = crud_book.list_books(
        db, search=search, genre=genre, min_rating=min_rating, year=year, sort=sort, skip=skip, limit=limit
    )
    total = crud_book.count_books(db, search=search, genre=genre, min_rating=min_rating, year=year)
    return {"data": books, "total": total}


@router.get("/books/genres", response_model=List[str])
def list_genres(db: Session = Depends(get_db)):
    return crud_book.list_genres(db)


@router.get("/books/{book_id}", response_model=BookDetailResponse)
def get_book(book_id: int, db: Session = Depends(get_db)):
    book = crud_book.get_book_by_id(db, book_id)
    if book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
    return {
        "book": book,
        "reviews": crud_review.get_reviews_for_book(db, book_id, limit=DETAIL_REVIEWS),
        "similar_books": rank_similar_books(db, book, settings.SIMILAR_BOOKS_LIMIT),
    }


@router.get("/books/{book_id}/recommendations", response_model=RecommendationsResponse)
def get_recommendations(book_id: int, db: Session = Depends(get_db)):
    book = crud_book.get_book_by_id(db, book_id)
    if book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
    return {
        "recommendations": rank_similar_books(db, book, settings.RECOMMENDATION_LIMIT),
        "based_on": {"genre": book.genre, "rating": float(book.rating)},
    }


@router.get("/stats")
def site_stats(db: Session = Depends(get_db)):
    return crud_stats.public_stats(db)
