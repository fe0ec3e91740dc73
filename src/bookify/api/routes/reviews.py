"""Review endpoints for signed-in users. Every mutation refreshes the book's rating."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from bookify.api.deps import get_current_user
from bookify.crud import crud_book, crud_review
from bookify.crud.crud_review import DuplicateReviewError
from bookify.db.session import get_db
from bookify.models.user import User
from bookify.schemas.review import (
    BookReviewsResponse,
    ReviewCreate,
    ReviewSchema,
    ReviewUpdate,
    ReviewWithBook,
    ReviewWithUser,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reviews"])


def _get_book_or_404(db: Session, book_id: int):
    book = crud_book.get_book_by_id(db, book_id)
    if book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
    return book


@router.get("/books/{book_id}/reviews", response_model=BookReviewsResponse)
def list_book_reviews(
    book_id: int,
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    book = _get_book_or_404(db, book_id)
    return {
        "book": book,
        "reviews": crud_review.get_reviews_for_book(db, book_id, skip=skip, limit=limit),
        "total": crud_review.count_reviews_for_book(db, book_id),
    }


@router.post("/books/{book_id}/reviews", response_model=ReviewSchema, status_code=status.HTTP_201_CREATED)
def create_review(
    book_id: int,
    review_in: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_book_or_404(db, book_id)
    try:
        return crud_review.create_review(db, review_in, user_id=current_user.id, book_id=book_id)
    except DuplicateReviewError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You have already reviewed this book. Update your existing review instead.",
        )


@router.get("/books/{book_id}/reviews/my-review", response_model=ReviewWithUser)
def get_my_review(
    book_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    review = crud_review.get_user_review_for_book(db, user_id=current_user.id, book_id=book_id)
    if review is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="You have not reviewed this book")
    return review


@router.put("/books/{book_id}/reviews/{review_id}", response_model=ReviewSchema)
def update_review(
    book_id: int,
    review_id: int,
    review_in: ReviewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    review = crud_review.update_review(db, review_id, book_id=book_id, user_id=current_user.id, review_in=review_in)
    if review is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return review


@router.delete("/books/{book_id}/reviews/{review_id}")
def delete_review(
    book_id: int,
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not crud_review.delete_review(db, review_id, book_id=book_id, user_id=current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return {"success": True, "message": "Review deleted"}


@router.get("/my-reviews", response_model=List[ReviewWithBook])
def my_reviews(
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud_review.get_reviews_by_user(db, current_user.id, skip=skip, limit=limit)
