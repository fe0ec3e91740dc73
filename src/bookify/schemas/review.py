"""
Pydantic schemas for the Review entity.
Ratings use a half-star scale from 0.5 to 5.0; comments are capped at 1000 characters.
"""

from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict
import datetime
from typing import List, Optional

from .book import BookSchema, BookSummary
from .user import UserBrief

class ReviewBase(BaseModel):
    """
    Base schema for review input.

    Attributes:
        rating (Decimal): Score between 0.5 and 5.0 in half-star steps.
        comment (Optional[str]): Optional review text.
    """
    rating: Decimal = Field(..., ge=Decimal("0.5"), le=Decimal("5.0"), multiple_of=Decimal("0.5"))
    comment: Optional[str] = Field(None, max_length=1000)

class ReviewCreate(ReviewBase):
    """
    Payload for creating a review.
    user_id and book_id come from the authenticated user and the URL.
    """
    pass

class ReviewUpdate(BaseModel):
    """Partial update of a review; only the fields sent are changed."""
    rating: Optional[Decimal] = Field(None, ge=Decimal("0.5"), le=Decimal("5.0"), multiple_of=Decimal("0.5"))
    comment: Optional[str] = Field(None, max_length=1000)

class ReviewSchema(BaseModel):
    """
    Output schema for a review.

    Attributes:
        id (int): Review ID.
        user_id (int): Author of the review.
        book_id (int): Reviewed book.
        rating (float): Score.
        comment (Optional[str]): Review text.
        created_at (datetime.datetime): Creation time.
        updated_at (datetime.datetime): Last modification time.
    """
    id: int
    user_id: int
    book_id: int
    rating: float
    comment: Optional[str] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)

class ReviewWithUser(ReviewSchema):
    user: UserBrief

class ReviewWithBook(ReviewSchema):
    book: BookSummary

class ReviewAdminSchema(ReviewSchema):
    user: UserBrief
    book: BookSummary

class BulkDeleteRequest(BaseModel):
    review_ids: List[int] = Field(..., min_length=1)

class BookReviewStats(BaseModel):
    id: int
    title: str
    rating: float
    review_count: int

    model_config = ConfigDict(from_attributes=True)

class BookReviewsResponse(BaseModel):
    book: BookReviewStats
    reviews: List[ReviewWithUser]
    total: int

class BookDetailResponse(BaseModel):
    book: BookSchema
    reviews: List[ReviewWithUser]
    similar_books: List[BookSchema]
