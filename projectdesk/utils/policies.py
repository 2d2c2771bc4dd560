# projectdesk/utils/policies.py
"""
Authorization rules for projects.

Three policies live here:

- Assignment: who may be put on a project's technician roster.
- Status: which status values an actor may set on a project.
- Visibility: which projects an actor may read.

Each check raises a ``ProjectDeskError`` subclass on rejection and returns
normally otherwise. Checks only read; callers do the writing inside the same
transaction.
"""

from typing import Dict, FrozenSet, Iterable, List

from sqlalchemy.orm import Query, Session

from projectdesk.errors import (
    AdminRequired,
    InvalidStatus,
    InvalidUserIds,
    NotAssigned,
    TechnicianHasOpenProject,
)
from projectdesk.models.user import Role, User
from projectdesk.models.project import Project, ProjectAssignment, ProjectStatus

# Flat permission table: any allowed value may be set from any current value
STATUS_PERMISSIONS: Dict[Role, FrozenSet[ProjectStatus]] = {
    Role.ADMIN: frozenset(ProjectStatus),
    Role.TECHNICIAN: frozenset({
        ProjectStatus.OPEN,
        ProjectStatus.IN_PROGRESS,
        ProjectStatus.COMPLETED,
    }),
}

# Status of another project that keeps a technician from being assigned
BLOCKING_STATUS = ProjectStatus.OPEN


def allowed_statuses(role: Role) -> List[str]:
    """Allowed status values for a role, in declaration order"""
    permitted = STATUS_PERMISSIONS[role]
    return [s.value for s in ProjectStatus if s in permitted]


class ProjectPolicy:
    """Policy checks bound to a database session"""

    def __init__(self, db: Session):
        self.db = db

    # Visibility

    def is_assigned(self, user_id: int, project_id: int) -> bool:
        return self.db.query(ProjectAssignment.id).filter(
            ProjectAssignment.project_id == project_id,
            ProjectAssignment.user_id == user_id,
        ).first() is not None

    def visible_projects(self, user: User) -> Query:
        """Projects the user may read, filtered in SQL"""
        query = self.db.query(Project)
        if user.role is Role.ADMIN:
            return query
        return query.filter(Project.assignments.any(ProjectAssignment.user_id == user.id))

    def check_can_view(self, user: User, project: Project) -> None:
        if user.role is Role.ADMIN:
            return
        if not self.is_assigned(user.id, project.id):
            raise NotAssigned()

    def check_can_comment(self, user: User, project: Project) -> None:
        if user.role is Role.ADMIN:
            return
        if not self.is_assigned(user.id, project.id):
            raise NotAssigned("Forbidden: User not assigned to project")

    # Assignment

    def check_can_assign(self, actor: User, project_id: int, candidate_ids: Iterable[int]) -> List[User]:
        """
        Validate a full roster for ``project_id`` and return the candidate users.

        Every id must be an existing non-admin user, and none of them may hold
        another project whose status is Open. Candidate rows are locked so two
        concurrent rosters cannot both pass the open-project check.
        """
        if actor.role is not Role.ADMIN:
            raise AdminRequired()

        ids = set(candidate_ids)
        if not ids:
            return []

        technicians = (
            self.db.query(User)
            .filter(User.id.in_(ids), User.is_admin.is_(False))
            .order_by(User.id)
            .with_for_update()
            .all()
        )
        if len(technicians) != len(ids):
            raise InvalidUserIds()

        blocked = (
            self.db.query(ProjectAssignment.user_id)
            .join(Project, Project.id == ProjectAssignment.project_id)
            .filter(
                ProjectAssignment.user_id.in_(ids),
                Project.id != project_id,
                Project.status == BLOCKING_STATUS.value,
            )
            .distinct()
            .all()
        )
        if blocked:
            raise TechnicianHasOpenProject(technician_ids=[row.user_id for row in blocked])

        return technicians

    # Status

    def check_can_set_status(self, actor: User, project: Project, new_status: str) -> ProjectStatus:
        """Return the parsed status if ``actor`` may set it on ``project``"""
        if actor.role is not Role.ADMIN and not self.is_assigned(actor.id, project.id):
            raise NotAssigned("You are not assigned to this project")

        permitted = STATUS_PERMISSIONS[actor.role]
        try:
            parsed = ProjectStatus(new_status)
        except ValueError:
            parsed = None

        if parsed is None or parsed not in permitted:
            raise InvalidStatus(
                "Invalid status value for the user role. (Accepted values: "
                + ", ".join(allowed_statuses(actor.role)) + ")"
            )
        return parsed
