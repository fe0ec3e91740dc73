# tests/api/conftest.py
import httpx
import pytest
from fastapi.testclient import TestClient

from bookify.api.deps import get_google_books_client
from bookify.api.main import create_app
from bookify.clients.google_books import GoogleBooksClient
from bookify.db.session import get_db

PASSWORD = "password123"


def google_books_handler(request: httpx.Request) -> httpx.Response:
    """Stands in for googleapis.com and the cover host."""
    if request.url.path.endswith("/volumes"):
        return httpx.Response(200, json={"items": [{
            "id": "vol1",
            "volumeInfo": {
                "title": "Solaris",
                "authors": ["Stanislaw Lem"],
                "publishedDate": "1961",
                "categories": ["Fiction"],
                "imageLinks": {"thumbnail": "http://books.google.com/solaris.jpg"},
            },
        }]})
    if "missing" in request.url.path:
        return httpx.Response(404)
    return httpx.Response(200, content=b"image-bytes")


@pytest.fixture
def media_root(tmp_path):
    return tmp_path / "public"


@pytest.fixture
def app(db_session_factory, media_root):
    application = create_app()

    def override_get_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    def override_google_books_client():
        return GoogleBooksClient(
            api_key="test-key",
            media_root=str(media_root),
            transport=httpx.MockTransport(google_books_handler),
        )

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_google_books_client] = override_google_books_client
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def user_auth(user):
    return (user.email, PASSWORD)


@pytest.fixture
def other_auth(other_user):
    return (other_user.email, PASSWORD)


@pytest.fixture
def admin_auth(admin_user):
    return (admin_user.email, PASSWORD)
