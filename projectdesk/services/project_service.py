# projectdesk/services/project_service.py
"""
Project workflows: creation, technician roster, status changes, search and
comments. Every mutating method runs as one transaction: the policy checks
and the writes are committed together or rolled back together.
"""

import calendar
import logging
import re
import uuid
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from projectdesk.errors import AdminRequired, InvalidDateFormat, NotFound, ProjectNotFound, ValidationError
from projectdesk.models import Client, Comment, Project, ProjectAssignment, ProjectStatus, User
from projectdesk.schemas.project import ProjectCreate, ProjectUpdate
from projectdesk.utils import clock
from projectdesk.utils.pagination import Pagination
from projectdesk.utils.policies import ProjectPolicy

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_project_date(value: Optional[str]) -> date:
    """Parse a strict YYYY-MM-DD calendar date"""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise InvalidDateFormat()
    try:
        return date.fromisoformat(value)
    except ValueError:
        # Right shape, impossible date such as 2024-02-30
        raise InvalidDateFormat()


def default_client_name(email: str) -> str:
    return email.split("@")[0] or "Default Client"


def new_shared_link_token() -> str:
    return str(uuid.uuid4())


def one_month_before(moment: datetime) -> datetime:
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def with_project_details(query):
    return query.options(
        selectinload(Project.assigned_technicians),
        selectinload(Project.comments).selectinload(Comment.user),
    )


class ProjectService:
    def __init__(self, db: Session):
        self.db = db
        self.policy = ProjectPolicy(db)

    @contextmanager
    def transaction(self):
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def get_project(self, project_id: int, lock: bool = False) -> Project:
        query = self.db.query(Project).filter(Project.id == project_id)
        if lock:
            query = query.with_for_update()
        project = query.first()
        if not project:
            raise ProjectNotFound()
        return project

    def get_or_create_client(self, email: str, name: Optional[str] = None) -> Client:
        """
        Find the client by email or create it.

        The unique index on clients.email decides races. Must be the first
        write of the surrounding transaction: losing the race rolls the
        transaction back before re-reading the winner's row.
        """
        client = self.db.query(Client).filter(Client.email == email).first()
        if client:
            return client

        client = Client(email=email, name=name or default_client_name(email))
        self.db.add(client)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            client = self.db.query(Client).filter(Client.email == email).first()
            if client is None:
                raise ValidationError()
            logger.info(f"Client {email} created concurrently, reusing it")
        return client

    def create_project(self, actor: User, data: ProjectCreate) -> Project:
        if not actor.is_admin:
            raise AdminRequired()

        start_date = parse_project_date(data.start_date)
        due_date = parse_project_date(data.due_date)

        try:
            with self.transaction():
                client = self.get_or_create_client(data.client_email, data.client_name)
                project = Project(
                    name=data.name,
                    description=data.description,
                    start_date=start_date,
                    due_date=due_date,
                    note_to_client=data.note_to_client,
                    status=ProjectStatus.OPEN.value,
                    shared_link_token=new_shared_link_token(),
                    client_id=client.id,
                )
                self.db.add(project)
                self.db.flush()
        except IntegrityError:
            raise ValidationError()

        self.db.refresh(project)
        logger.info(f"Project {project.id} created for client {data.client_email}")
        return project

    def _replace_roster(self, project: Project, technicians: Iterable[User]) -> None:
        wanted = {t.id for t in technicians}
        current = {a.user_id: a for a in project.assignments}

        for user_id, assignment in current.items():
            if user_id not in wanted:
                project.assignments.remove(assignment)
        for user_id in sorted(wanted - set(current)):
            project.assignments.append(ProjectAssignment(user_id=user_id))

    def assign_technicians(self, actor: User, project_id: int, user_ids: List[int]) -> Project:
        """Replace the project's technician roster with exactly ``user_ids``"""
        with self.transaction():
            project = self.get_project(project_id, lock=True)
            technicians = self.policy.check_can_assign(actor, project.id, user_ids)
            self._replace_roster(project, technicians)

        logger.info(f"Project {project_id} roster set to {sorted(set(user_ids))}")
        return self.get_project_details(project_id)

    def update_project(self, actor: User, project_id: int, data: ProjectUpdate) -> Project:
        changes = data.model_dump(exclude_unset=True, exclude={"user_ids"})

        with self.transaction():
            project = self.get_project(project_id, lock=True)

            if changes.get("start_date") is not None:
                changes["start_date"] = parse_project_date(changes["start_date"])
            if changes.get("due_date") is not None:
                changes["due_date"] = parse_project_date(changes["due_date"])
            if changes.get("status") is not None:
                changes["status"] = self.policy.check_can_set_status(actor, project, changes["status"]).value

            if data.user_ids is not None:
                technicians = self.policy.check_can_assign(actor, project.id, data.user_ids)
                self._replace_roster(project, technicians)

            for field, value in changes.items():
                if value is None and field != "note_to_client":
                    continue
                setattr(project, field, value)

        return self.get_project_details(project_id)

    def update_status(self, actor: User, project_id: int, new_status: str) -> Project:
        with self.transaction():
            project = self.get_project(project_id, lock=True)
            status = self.policy.check_can_set_status(actor, project, new_status)
            project.status = status.value

        self.db.refresh(project)
        logger.info(f"Project {project_id} status set to '{project.status}' by user {actor.id}")
        return project

    def delete_project(self, project_id: int) -> None:
        with self.transaction():
            project = self.get_project(project_id, lock=True)
            self.db.delete(project)
        logger.info(f"Project {project_id} deleted")

    # Reads

    def get_project_details(self, project_id: int) -> Project:
        project = with_project_details(self.db.query(Project)).filter(Project.id == project_id).first()
        if not project:
            raise ProjectNotFound()
        return project

    def get_visible_project(self, user: User, project_id: int) -> Project:
        project = self.get_project_details(project_id)
        self.policy.check_can_view(user, project)
        return project

    def list_projects(self, user: User, pagination: Pagination) -> List[Project]:
        query = with_project_details(self.policy.visible_projects(user)).order_by(Project.id)
        return pagination.apply(query).all()

    def search_projects(
        self,
        user: User,
        name: Optional[str] = None,
        creation_date: Optional[str] = None,
        due_date: Optional[str] = None,
        date_range_start: Optional[str] = None,
        date_range_end: Optional[str] = None,
        status: Optional[str] = None,
        find_all_overdue: bool = False,
    ) -> List[Project]:
        query = self.policy.visible_projects(user)

        if name:
            query = query.filter(Project.name.ilike(f"%{name}%"))
        if creation_date:
            # Calendar day of the stored (UTC) timestamp
            day = parse_project_date(creation_date).isoformat()
            query = query.filter(func.date(Project.created_at) == day)
        if due_date:
            query = query.filter(Project.due_date == parse_project_date(due_date))
        if date_range_start and date_range_end:
            query = query.filter(Project.start_date.between(
                parse_project_date(date_range_start), parse_project_date(date_range_end)
            ))
        if status:
            query = query.filter(Project.status == status)
        if find_all_overdue:
            # Search's own overdue predicate: past due, whatever the status
            query = query.filter(Project.due_date < clock.local_today())

        projects = with_project_details(query).order_by(Project.id).all()
        if not projects:
            raise NotFound("No projects found")
        return projects

    def export_overdue_last_month(self, now: Optional[datetime] = None) -> List[Project]:
        """Past-due projects created within the last month, any status"""
        now = now or datetime.now(timezone.utc)
        # Due dates use the same local day as search and reminders, created_at is UTC
        query = self.db.query(Project).filter(
            Project.due_date < clock.local_today(),
            Project.status.in_([s.value for s in ProjectStatus]),
            Project.created_at >= one_month_before(now),
        )
        return with_project_details(query).order_by(Project.id).all()

    # Comments

    def post_comment(self, actor: User, project_id: int, text: str) -> Comment:
        with self.transaction():
            project = self.get_project(project_id)
            self.policy.check_can_comment(actor, project)
            comment = Comment(project_id=project.id, user_id=actor.id, text=text)
            self.db.add(comment)

        self.db.refresh(comment)
        return comment
