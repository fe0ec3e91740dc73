"""
Password hashing utilities for Bookify.

Passwords are hashed and verified through a passlib CryptContext using
PBKDF2-SHA256. `needs_rehash` flags stored hashes whose parameters (such as
the round count) fall behind the context's current settings.

Functions:
    verify_password(plain_password: str, hashed_password: str) -> bool
    get_password_hash(password: str) -> str
    needs_rehash(hashed_password: str) -> bool
"""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Checks a plain-text password against its stored hash.

    Args:
        plain_password (str): Password as typed by the user.
        hashed_password (str): Stored hash to compare against.

    Returns:
        bool: True when the password matches the hash.
    """
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """
    Hashes a password for storage.

    Args:
        password (str): Plain-text password.

    Returns:
        str: The salted hash.
    """
    return pwd_context.hash(password)

def needs_rehash(hashed_password: str) -> bool:
    return pwd_context.needs_update(hashed_password)
