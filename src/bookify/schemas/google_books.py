"""
Pydantic schemas for the Google Books import endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel, HttpUrl


class GoogleBookCandidate(BaseModel):
    """A search result normalised into catalog fields."""
    google_id: Optional[str] = None
    title: str
    author: str
    description: str = ""
    published_year: Optional[int] = None
    genre: str
    cover_image_url: Optional[str] = None
    thumbnail: Optional[str] = None
    page_count: Optional[int] = None
    publisher: Optional[str] = None
    language: str = "en"


class GoogleBooksSearchResponse(BaseModel):
    success: bool = True
    count: int
    results: List[GoogleBookCandidate]


class CoverDownloadRequest(BaseModel):
    url: HttpUrl


class CoverDownloadResponse(BaseModel):
    success: bool
    filename: Optional[str] = None
    url: Optional[str] = None
    message: Optional[str] = None
