from datetime import date, timedelta

from projectdesk.models import Comment, ProjectAssignment, User
from tests.conftest import auth


def test_create_technician(client, db, admin):
    response = client.post(
        "/api/v1/technicians/",
        json={"email": "new@example.com", "password": "secret123", "name": "New Tech"},
        headers=auth(admin),
    )
    assert response.status_code == 201
    technician = response.json()["technician"]
    assert technician["email"] == "new@example.com"
    assert technician["isAdmin"] is False
    assert "password" not in technician

    login = client.post("/api/v1/auth/login", json={"email": "new@example.com", "password": "secret123"})
    assert login.status_code == 200


def test_duplicate_email_conflicts(client, admin, t1):
    response = client.post(
        "/api/v1/technicians/",
        json={"email": t1.email, "password": "secret123", "name": "Copy"},
        headers=auth(admin),
    )
    assert response.status_code == 409


def test_short_password_is_rejected(client, admin):
    response = client.post(
        "/api/v1/technicians/",
        json={"email": "x@example.com", "password": "123", "name": "X"},
        headers=auth(admin),
    )
    assert response.status_code == 400


def test_list_excludes_admins(client, admin, t1, t2):
    response = client.get("/api/v1/technicians/", headers=auth(admin))
    assert [t["id"] for t in response.json()["technicians"]] == [t1.id, t2.id]


def test_get_technician_with_projects(client, admin, t1, make_project):
    project = make_project(technicians=[t1])
    response = client.get(f"/api/v1/technicians/{t1.id}", headers=auth(admin))
    assert response.status_code == 200
    data = response.json()["technician"]
    assert data["email"] == t1.email
    assert [p["id"] for p in data["projects"]] == [project.id]


def test_get_admin_as_technician_is_not_found(client, admin):
    assert client.get(f"/api/v1/technicians/{admin.id}", headers=auth(admin)).status_code == 404


def test_update_technician(client, admin, t1, t2):
    response = client.put(f"/api/v1/technicians/{t1.id}", json={"name": "Renamed"}, headers=auth(admin))
    assert response.status_code == 200
    assert response.json()["technician"]["name"] == "Renamed"

    taken = client.put(f"/api/v1/technicians/{t1.id}", json={"email": t2.email}, headers=auth(admin))
    assert taken.status_code == 409


def test_delete_technician_keeps_comments(client, db, admin, t1, make_project):
    project = make_project(technicians=[t1])
    db.add(Comment(project_id=project.id, user_id=t1.id, text="Done"))
    db.commit()
    t1_id = t1.id

    response = client.delete(f"/api/v1/technicians/{t1_id}", headers=auth(admin))
    assert response.status_code == 200

    db.expire_all()
    assert db.get(User, t1_id) is None
    assert db.query(ProjectAssignment).count() == 0
    comment = db.query(Comment).one()
    assert comment.user_id == t1_id

    view = client.get(f"/api/v1/projects/{project.id}", headers=auth(admin)).json()["project"]
    assert view["comments"][0]["user"] is None


def test_overdue_technicians(client, admin, t1, t2, t3, make_project):
    today = date.today()
    past = dict(start_date=today - timedelta(days=30), due_date=today - timedelta(days=1))
    late = make_project(name="Late", technicians=[t1], **past)
    make_project(name="Closed late", status="Closed", technicians=[t2], **past)
    make_project(name="On time", technicians=[t3])

    response = client.get("/api/v1/technicians/overdue", headers=auth(admin))
    assert response.status_code == 200
    technicians = response.json()["technicians"]
    assert [t["id"] for t in technicians] == [t1.id]
    assert [p["id"] for p in technicians[0]["projects"]] == [late.id]
