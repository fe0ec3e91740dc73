"""
FastAPI dependencies: database session, HTTP Basic authentication, the
admin gate and the Google Books client.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.orm import Session

from bookify.clients.google_books import GoogleBooksClient
from bookify.crud import crud_user
from bookify.db.session import get_db
from bookify.models.user import User

logger = logging.getLogger(__name__)

security = HTTPBasic(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPBasicCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolves Basic credentials (email + password) to an active user, or 401."""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or missing credentials",
        headers={"WWW-Authenticate": "Basic"},
    )
    if credentials is None:
        raise unauthorized
    user = crud_user.authenticate_user(db, credentials.username, credentials.password)
    if user is None:
        logger.warning(f"Failed login for '{credentials.username}'.")
        raise unauthorized
    return user


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        logger.warning(f"User {current_user.id} denied access to an admin route.")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator access required")
    return current_user


def get_google_books_client() -> GoogleBooksClient:
    return GoogleBooksClient()
