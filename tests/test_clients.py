from projectdesk.models import Client, Project
from tests.conftest import auth


def test_client_crud(client, db, admin):
    created = client.post(
        "/api/v1/clients/", json={"email": "buyer@example.com", "name": "Buyer"}, headers=auth(admin)
    )
    assert created.status_code == 201

    duplicate = client.post(
        "/api/v1/clients/", json={"email": "buyer@example.com", "name": "Again"}, headers=auth(admin)
    )
    assert duplicate.status_code == 409

    fetched = client.get("/api/v1/clients/email/buyer@example.com", headers=auth(admin))
    assert fetched.json()["client"]["name"] == "Buyer"

    updated = client.put(
        "/api/v1/clients/buyer@example.com", json={"email": "owner@example.com"}, headers=auth(admin)
    )
    assert updated.status_code == 200
    assert updated.json()["client"]["email"] == "owner@example.com"

    listed = client.get("/api/v1/clients/", headers=auth(admin))
    assert [c["email"] for c in listed.json()["clients"]] == ["owner@example.com"]

    deleted = client.delete("/api/v1/clients/owner@example.com", headers=auth(admin))
    assert deleted.status_code == 200
    db.expire_all()
    assert db.query(Client).count() == 0


def test_unknown_client_is_not_found(client, admin):
    assert client.get("/api/v1/clients/email/nobody@example.com", headers=auth(admin)).status_code == 404


def test_deleting_client_keeps_projects(client, db, admin, make_project):
    project = make_project(client_email="gone@example.com")
    response = client.delete("/api/v1/clients/gone@example.com", headers=auth(admin))
    assert response.status_code == 200

    db.expire_all()
    assert db.get(Project, project.id).client_id is None


def test_client_routes_are_admin_only(client, t1):
    assert client.get("/api/v1/clients/", headers=auth(t1)).status_code == 403


def test_shared_link_shows_limited_view(client, admin):
    created = client.post(
        "/api/v1/projects/",
        json={
            "name": "Kitchen",
            "description": "New units",
            "startDate": "2024-06-01",
            "dueDate": "2024-07-01",
            "noteToClient": "We will call ahead",
            "clientEmail": "home@example.com",
        },
        headers=auth(admin),
    )
    token = created.json()["project"]["sharedLinkToken"]

    response = client.get(f"/api/v1/clients/{token}")
    assert response.status_code == 200
    assert response.json()["message"] == "Project details retrieved successfully"
    assert response.json()["project"] == {
        "name": "Kitchen",
        "description": "New units",
        "startDate": "2024-06-01",
        "status": "Open",
        "noteToClient": "We will call ahead",
    }


def test_unknown_shared_link(client, db):
    response = client.get("/api/v1/clients/not-a-real-token")
    assert response.status_code == 404
    assert response.json()["detail"] == "Project not found"
