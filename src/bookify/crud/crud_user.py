"""
CRUD operations for the User model.
Registration, lookup by email or id and credential checks.
"""

import logging
from sqlalchemy.orm import Session
from ..models.user import User, ROLE_ADMIN, ROLE_USER
from ..schemas.user import UserCreate
from ..core.config import settings
from ..core.security import get_password_hash, verify_password, needs_rehash
from typing import Optional

logger = logging.getLogger(__name__)

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """
    Fetches a user by email (case-insensitive).

    Args:
        db (Session): SQLAlchemy session.
        email (str): Email to look up.

    Returns:
        Optional[User]: The user, or None if there is none.
    """
    return db.query(User).filter(User.email == email.strip().lower()).first()

def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)

def create_user(db: Session, user: UserCreate, role: Optional[str] = None) -> User:
    """
    Registers a user. Emails listed in ADMIN_EMAILS get the admin role
    unless `role` is given explicitly.

    Args:
        db (Session): SQLAlchemy session.
        user (UserCreate): Registration data.
        role (Optional[str]): Force 'admin' or 'user'.

    Returns:
        User: The created user.

    Raises:
        IntegrityError: The email is already registered.
    """
    email = user.email.strip().lower()
    if role is None:
        role = ROLE_ADMIN if email in settings.list_admin_emails else ROLE_USER
    hashed_password: str = get_password_hash(user.password)
    db_user: User = User(name=user.name, email=email, hashed_password=hashed_password, role=role)
    db.add(db_user)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_user)
    logger.info(f"User {db_user.id} registered with role '{db_user.role}'.")
    return db_user

def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """
    Returns the active user matching the credentials, or None.
    Hashes with outdated parameters are upgraded on successful login.
    """
    user = get_user_by_email(db, email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    if needs_rehash(user.hashed_password):
        user.hashed_password = get_password_hash(password)
        db.commit()
        logger.info(f"Password hash upgraded for user {user.id}.")
    return user
