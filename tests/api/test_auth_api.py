# tests/api/test_auth_api.py


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_register(client):
    response = client.post("/auth/register", json={"name": "New", "email": "new@example.com", "password": "secret123"})

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "new@example.com"
    assert body["role"] == "user"
    assert "hashed_password" not in body


def test_register_admin_email(client):
    response = client.post("/auth/register", json={"name": "Boss", "email": "admin@example.com", "password": "secret123"})

    assert response.status_code == 201
    assert response.json()["role"] == "admin"


def test_register_duplicate_email(client, user):
    response = client.post("/auth/register", json={"name": "Copy", "email": user.email, "password": "secret123"})
    assert response.status_code == 409


def test_register_validation_errors(client):
    response = client.post("/auth/register", json={"name": "", "email": "not-an-email", "password": "123"})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert {"name", "email", "password"} <= set(body["errors"])


def test_me(client, user, user_auth):
    response = client.get("/auth/me", auth=user_auth)

    assert response.status_code == 200
    assert response.json()["id"] == user.id


def test_me_requires_credentials(client):
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Basic"


def test_me_wrong_password(client, user):
    assert client.get("/auth/me", auth=(user.email, "nope-nope")).status_code == 401
