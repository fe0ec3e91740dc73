"""
ORM model for the Book entity.
Holds the catalog fields plus the review-derived rating and review count.
"""

from decimal import Decimal

from sqlalchemy import (Column, Integer, String, Text, Numeric, DateTime, func,
                        CheckConstraint)
from sqlalchemy.orm import relationship
from bookify.db.session import Base

class Book(Base):
    """
    A book in the catalog.

    Attributes:
        id (int): Primary key.
        title (str): Book title.
        author (str): Author, or several authors joined by commas.
        publication_year (int): Year of publication; negative for BCE.
        genre (str): Free-text genre label.
        description (str): Synopsis.
        rating (Decimal): Mean of the book's review ratings, 0.00 when unreviewed.
            Only written by the rating aggregator.
        review_count (int): Number of reviews. Only written by the rating aggregator.
        cover_image (str): Storage reference of the cover, e.g. ``covers/<file>.jpg``.
        reviews (List[Review]): Reviews of the book.
        favorites (List[Favorite]): Favorites pointing at the book.
    """
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), index=True, nullable=False)
    author = Column(String(255), index=True, nullable=False)
    publication_year = Column(Integer, nullable=False, index=True)
    genre = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    rating = Column(Numeric(3, 2), nullable=False, default=Decimal("0.00"), server_default="0")
    review_count = Column(Integer, nullable=False, default=0, server_default="0")
    cover_image = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    reviews = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )
    favorites = relationship(
        "Favorite",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint('rating >= 0 AND rating <= 5', name='book_rating_range_check'),
        CheckConstraint('review_count >= 0', name='book_review_count_check'),
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title[:30]}...', genre='{self.genre}', rating={self.rating})>"
