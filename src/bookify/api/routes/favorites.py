"""Favorites of the signed-in user."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from bookify.api.deps import get_current_user
from bookify.crud import crud_book, crud_favorite
from bookify.db.session import get_db
from bookify.models.user import User
from bookify.schemas.book import BookListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get("", response_model=BookListResponse)
def list_favorites(
    genre: Optional[str] = None,
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(12, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    books = crud_favorite.list_favorite_books(db, current_user.id, genre=genre, search=search, skip=skip, limit=limit)
    total = crud_favorite.count_favorite_books(db, current_user.id, genre=genre, search=search)
    return {"data": books, "total": total}


@router.post("/statistics")
def favorite_statistics(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud_favorite.favorite_statistics(db, current_user.id)


@router.post("/{book_id}/toggle")
def toggle_favorite(
    book_id: int,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if crud_book.get_book_by_id(db, book_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
    favorited = crud_favorite.toggle_favorite(db, current_user.id, book_id)
    response.status_code = status.HTTP_201_CREATED if favorited else status.HTTP_200_OK
    return {
        "success": True,
        "is_favorited": favorited,
        "message": "Book added to favorites" if favorited else "Book removed from favorites",
    }


@router.get("/{book_id}/check")
def check_favorite(
    book_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"is_favorited": crud_favorite.is_favorited(db, current_user.id, book_id)}


@router.delete("/{book_id}")
def remove_favorite(
    book_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not crud_favorite.remove_favorite(db, current_user.id, book_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book is not in your favorites")
    return {"success": True, "message": "Book removed from favorites"}
