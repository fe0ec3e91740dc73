# tests/crud/test_crud_user.py
import pytest
from sqlalchemy.exc import IntegrityError

from bookify.core.security import verify_password
from bookify.crud.crud_user import authenticate_user, create_user, get_user_by_email, get_user_by_id
from bookify.schemas.user import UserCreate

TEST_PASSWORD = "password123"


def test_create_user_hashes_password(db_session):
    user = create_user(db_session, UserCreate(name="Ana", email="Ana@Example.com", password="secret123"))

    assert user.id is not None
    assert user.email == "ana@example.com"
    assert user.hashed_password != "secret123"
    assert verify_password("secret123", user.hashed_password)
    assert user.role == "user"


def test_create_user_promotes_admin_emails(admin_user):
    assert admin_user.role == "admin"
    assert admin_user.is_admin


def test_create_user_duplicate_email(db_session, user):
    with pytest.raises(IntegrityError):
        create_user(db_session, UserCreate(name="Copy", email=user.email, password="secret123"))


def test_get_user_by_email_and_id(db_session, user):
    assert get_user_by_email(db_session, "READER@example.com").id == user.id
    assert get_user_by_id(db_session, user.id).email == user.email
    assert get_user_by_email(db_session, "nobody@example.com") is None


def test_authenticate_user(db_session, user):
    assert authenticate_user(db_session, user.email, TEST_PASSWORD).id == user.id
    assert authenticate_user(db_session, user.email, "wrong-password") is None
    assert authenticate_user(db_session, "nobody@example.com", TEST_PASSWORD) is None


def test_authenticate_inactive_user(db_session, user):
    user.is_active = False
    db_session.commit()

    assert authenticate_user(db_session, user.email, TEST_PASSWORD) is None
