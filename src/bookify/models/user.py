"""
ORM model for the User entity.
Users own reviews and favorites; the role column drives admin authorization.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, func, CheckConstraint
from sqlalchemy.orm import relationship
from bookify.db.session import Base

ROLE_ADMIN = "admin"
ROLE_USER = "user"

class User(Base):
    """
    A registered user.

    Attributes:
        id (int): Primary key.
        name (str): Display name.
        email (str): Unique email, used as the login.
        hashed_password (str): Password hash.
        role (str): Either 'admin' or 'user'.
        is_active (bool): Inactive users cannot authenticate.
        created_at (datetime): Creation time.
        updated_at (datetime): Last update time.
        reviews (List[Review]): Reviews written by the user.
        favorites (List[Favorite]): Books the user marked as favorite.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_USER, server_default=ROLE_USER)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    reviews = relationship(
        "Review",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    favorites = relationship(
        "Favorite",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'user')", name='user_role_check'),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
