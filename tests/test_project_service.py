from datetime import date, datetime, timezone

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from projectdesk.database import Base
from projectdesk.errors import InvalidDateFormat
from projectdesk.models import Client, Project, User
from projectdesk.schemas.project import ProjectCreate
from projectdesk.services.project_service import (
    ProjectService,
    default_client_name,
    one_month_before,
    parse_project_date,
)


@pytest.mark.parametrize("value", ["2024-29-31", "2024-02-30", "2024-2-01", "24-02-01", "2024/02/01", "", None])
def test_parse_project_date_rejects(value):
    with pytest.raises(InvalidDateFormat):
        parse_project_date(value)


def test_parse_project_date():
    assert parse_project_date("2024-02-29") == date(2024, 2, 29)


def test_default_client_name():
    assert default_client_name("jane.doe@example.com") == "jane.doe"


def test_one_month_before_clamps_day():
    moment = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)
    assert one_month_before(moment) == datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)
    assert one_month_before(datetime(2024, 1, 15)) == datetime(2023, 12, 15)


def test_create_project_reuses_concurrently_created_client(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'race.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    make_session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session_a = make_session()
    session_b = make_session()
    fired = {"n": 0}

    @event.listens_for(session_a, "before_flush")
    def other_request_wins(session, flush_context, instances):
        # Once: another request commits the same client just before our insert
        if fired["n"]:
            return
        fired["n"] += 1
        session_b.add(Client(email="c@x.com", name="winner"))
        session_b.commit()

    try:
        data = ProjectCreate(
            name="Roof",
            description="Replace tiles",
            start_date="2024-01-01",
            due_date="2024-02-01",
            client_email="c@x.com",
        )
        project = ProjectService(session_a).create_project(User(is_admin=True), data)

        assert fired["n"] == 1
        assert project.client.name == "winner"
        assert session_a.query(Client).count() == 1
        assert session_a.query(Project).count() == 1
    finally:
        session_a.close()
        session_b.close()
        engine.dispose()
