import os

# Configure before the application modules read the environment
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BASE_URL"] = "http://testserver"

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from projectdesk.database import Base, get_db
from projectdesk.errors import EmailDeliveryError
from projectdesk.models import Client, Project, ProjectAssignment, ProjectStatus, User
from projectdesk.services.email_service import EmailSender, get_email_sender
from projectdesk.utils.security import create_user_token, hash_password

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"


class RecordingEmailSender(EmailSender):
    """Keeps sent mail in memory; addresses in ``fail_for`` raise instead"""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send(self, to, subject, body):
        if to in self.fail_for:
            raise EmailDeliveryError(f"Failed to send email to {to}")
        self.sent.append({"to": to, "subject": subject, "body": body})


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture
def client(db, email_sender):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db, email, name, is_admin=False):
    user = User(email=email, name=name, hashed_password=hash_password(PASSWORD), is_admin=is_admin)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", "Admin", is_admin=True)


@pytest.fixture
def t1(db):
    return make_user(db, "t1@example.com", "Tech One")


@pytest.fixture
def t2(db):
    return make_user(db, "t2@example.com", "Tech Two")


@pytest.fixture
def t3(db):
    return make_user(db, "t3@example.com", "Tech Three")


def auth(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def make_project(db):
    """Insert a project directly, bypassing the HTTP workflow"""
    counter = {"n": 0}

    def _make(name=None, status=ProjectStatus.OPEN.value, technicians=(), client_email="client@example.com",
              start_date=None, due_date=None, with_client=True):
        counter["n"] += 1
        client = None
        if with_client:
            client = db.query(Client).filter(Client.email == client_email).first()
            if client is None:
                client = Client(email=client_email, name=client_email.split("@")[0])
                db.add(client)
                db.flush()
        project = Project(
            name=name or f"Project {counter['n']}",
            description="Fit-out works",
            start_date=start_date or date.today(),
            due_date=due_date or date.today() + timedelta(days=30),
            status=status,
            shared_link_token=f"token-{counter['n']}",
            client_id=client.id if client else None,
        )
        for technician in technicians:
            project.assignments.append(ProjectAssignment(user_id=technician.id))
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    return _make
