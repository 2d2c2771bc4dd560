from tests.conftest import PASSWORD, auth


def test_login_returns_bearer_token(client, admin):
    response = client.post("/api/v1/auth/login", json={"email": admin.email, "password": PASSWORD})
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"] == {"id": admin.id, "email": admin.email, "name": "Admin", "isAdmin": True}


def test_login_with_wrong_password(client, admin):
    response = client.post("/api/v1/auth/login", json={"email": admin.email, "password": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_login_unknown_email(client, db):
    response = client.post("/api/v1/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})
    assert response.status_code == 401


def test_token_from_login_authenticates(client, admin):
    login = client.post("/api/v1/auth/login", json={"email": admin.email, "password": PASSWORD})
    token = login.json()["access_token"]
    response = client.get("/api/v1/projects/", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_missing_token_is_unauthorized(client, db):
    response = client.get("/api/v1/projects/")
    assert response.status_code == 401


def test_garbage_token_is_unauthorized(client, db):
    response = client.get("/api/v1/projects/", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Could not validate credentials"


def test_admin_only_route_rejects_technician(client, t1):
    response = client.get("/api/v1/technicians/", headers=auth(t1))
    assert response.status_code == 403
    assert response.json()["detail"] == "Access forbidden. Admin privileges required."


def test_health_and_scheduler_status(client):
    assert client.get("/health").json() == {"status": "ok"}
    status = client.get("/scheduler/status").json()
    assert status["status"] == "disabled"
    assert status["jobs"] == []
