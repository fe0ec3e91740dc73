# src/bookify/models/review.py
from sqlalchemy import (Column, Integer, Text, Numeric, ForeignKey, DateTime,
                        func, CheckConstraint, UniqueConstraint)
from sqlalchemy.orm import relationship
from bookify.db.session import Base

class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True)
    # Half-star scale: 0.5, 1.0, ..., 5.0
    rating = Column(Numeric(2, 1), nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="reviews")
    book = relationship("Book", back_populates="reviews")

    __table_args__ = (
        CheckConstraint('rating >= 0.5 AND rating <= 5', name='review_rating_check'),
        CheckConstraint('rating * 2 = ROUND(rating * 2)', name='review_rating_half_step_check'),
        # One review per user and book
        UniqueConstraint('user_id', 'book_id', name='uq_user_book_review'),
    )

    def __repr__(self):
        return f"<Review(id={self.id}, book_id={self.book_id}, user_id={self.user_id}, rating={self.rating})>"
