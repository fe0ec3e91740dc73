"""
Pydantic schemas for the Book entity.

Catalog payloads never carry `rating` or `review_count`: both are derived from
reviews and are only written by the rating aggregator.
"""

import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Names handed out by the cover download endpoint: covers/<name>.<ext>
COVER_FILENAME_PATTERN = r"^covers/[A-Za-z0-9_-]+\.[A-Za-z0-9]+$"


def _current_year() -> int:
    return datetime.date.today().year


class BookBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    publication_year: int
    genre: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)

    @field_validator("publication_year")
    @classmethod
    def year_not_in_future(cls, value: int) -> int:
        if value > _current_year():
            raise ValueError(f"publication_year cannot be later than {_current_year()}")
        return value


class BookCreate(BookBase):
    """
    Payload for adding a book.

    Attributes:
        google_books_cover (Optional[str]): Filename returned by the cover download
            endpoint; stored as the book's cover_image.
    """
    google_books_cover: Optional[str] = Field(None, max_length=512, pattern=COVER_FILENAME_PATTERN)

    model_config = ConfigDict(extra="forbid")


class BookUpdate(BaseModel):
    """Partial update of the catalog fields of a book."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    author: Optional[str] = Field(None, min_length=1, max_length=255)
    publication_year: Optional[int] = None
    genre: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    google_books_cover: Optional[str] = Field(None, max_length=512, pattern=COVER_FILENAME_PATTERN)

    model_config = ConfigDict(extra="forbid")

    @field_validator("publication_year")
    @classmethod
    def year_not_in_future(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value > _current_year():
            raise ValueError(f"publication_year cannot be later than {_current_year()}")
        return value


class BookSummary(BaseModel):
    id: int
    title: str
    author: str
    genre: str
    rating: float
    cover_image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class BookSchema(BookSummary):
    """
    Output schema for a book.

    Attributes:
        publication_year (int): Year of publication.
        description (str): Synopsis.
        review_count (int): Number of reviews.
        created_at (datetime.datetime): When the book was added.
        updated_at (datetime.datetime): Last catalog edit or rating refresh.
    """
    publication_year: int
    description: str
    review_count: int
    created_at: datetime.datetime
    updated_at: datetime.datetime


class BookListResponse(BaseModel):
    data: List[BookSchema]
    total: int


class RecommendationBasis(BaseModel):
    genre: str
    rating: float


class RecommendationsResponse(BaseModel):
    recommendations: List[BookSchema]
    based_on: RecommendationBasis
