"""
Administration endpoints: catalog management, review moderation and the
dashboards. Every route requires an admin user.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from bookify.api.deps import get_current_admin, get_google_books_client
from bookify.clients.google_books import GoogleBooksClient
from bookify.crud import crud_book, crud_favorite, crud_review, crud_stats
from bookify.db.session import get_db
from bookify.schemas.book import BookCreate, BookSchema, BookUpdate
from bookify.schemas.review import BulkDeleteRequest, ReviewAdminSchema
from bookify.services.ratings import recalculate_all_book_ratings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(get_current_admin)])


@router.get("/dashboard")
def get_dashboard(db: Session = Depends(get_db)):
    return crud_stats.dashboard(db)


@router.get("/books/statistics")
def book_statistics(db: Session = Depends(get_db)):
    return crud_stats.book_statistics(db)


@router.post("/books/recompute-ratings")
def recompute_ratings(db: Session = Depends(get_db)):
    processed = recalculate_all_book_ratings(db)
    return {"success": True, "books_processed": processed}


@router.post("/books", response_model=BookSchema, status_code=status.HTTP_201_CREATED)
def create_book(book_in: BookCreate, db: Session = Depends(get_db)):
    return crud_book.create_book(db, book_in)


@router.put("/books/{book_id}", response_model=BookSchema)
async def update_book(
    book_id: int,
    book_in: BookUpdate,
    db: Session = Depends(get_db),
    client: GoogleBooksClient = Depends(get_google_books_client),
):
    book = crud_book.get_book_by_id(db, book_id)
    if book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
    old_cover = book.cover_image
    book = crud_book.update_book(db, book, book_in)
    if old_cover and book.cover_image != old_cover:
        await client.delete_cover(old_cover)
    return book


@router.delete("/books/{book_id}")
async def delete_book(
    book_id: int,
    db: Session = Depends(get_db),
    client: GoogleBooksClient = Depends(get_google_books_client),
):
    book = crud_book.get_book_by_id(db, book_id)
    if book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
    cover = book.cover_image
    crud_book.delete_book(db, book)
    if cover:
        await client.delete_cover(cover)
    return {"success": True, "message": "Book deleted"}


@router.get("/reviews", response_model=List[ReviewAdminSchema])
def list_reviews(
    search: Optional[str] = None,
    book_id: Optional[int] = None,
    user_id: Optional[int] = None,
    rating: Optional[float] = Query(None, ge=0.5, le=5),
    min_rating: Optional[float] = Query(None, ge=0.5, le=5),
    sort_by: str = Query("created_at", pattern="^(created_at|rating|updated_at)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
):
    return crud_review.get_all_reviews_admin(
        db,
        search=search,
        book_id=book_id,
        user_id=user_id,
        rating=rating,
        min_rating=min_rating,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.post("/reviews/bulk-delete")
def bulk_delete_reviews(payload: BulkDeleteRequest, db: Session = Depends(get_db)):
    deleted = crud_review.bulk_delete_reviews(db, payload.review_ids)
    return {"success": True, "deleted": deleted}


@router.delete("/reviews/{review_id}")
def delete_review(review_id: int, db: Session = Depends(get_db)):
    if not crud_review.admin_delete_review(db, review_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return {"success": True, "message": "Review deleted"}


@router.get("/favorites/statistics")
def favorite_statistics(db: Session = Depends(get_db)):
    return crud_favorite.admin_favorite_statistics(db)
