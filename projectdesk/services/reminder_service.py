# projectdesk/services/reminder_service.py
"""
Project start reminders: send the email, then append the audit row.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from projectdesk.errors import ProjectNotFound, ValidationError
from projectdesk.models import Client, Project, ProjectStatus, SentEmail
from projectdesk.services.email_service import EmailSender, build_start_reminder
from projectdesk.utils import clock

logger = logging.getLogger(__name__)


def record_sent_email(db: Session, project_id: int, client_email: str, shared_link_token: str) -> SentEmail:
    sent = SentEmail(
        project_id=project_id,
        client_email=client_email,
        shared_link_token=shared_link_token,
    )
    db.add(sent)
    db.commit()
    db.refresh(sent)
    return sent


def send_project_reminder(db: Session, project: Project, email_sender: EmailSender) -> SentEmail:
    """Send the start reminder for one project and record it"""
    if project.client is None or not project.client.email:
        raise ValidationError("Project has no client email")

    to = project.client.email
    subject, body = build_start_reminder(project.name, project.shared_link_token)
    email_sender.send(to, subject, body)
    return record_sent_email(db, project.id, to, project.shared_link_token)


def send_reminder_for_project_id(db: Session, project_id: int, email_sender: EmailSender) -> SentEmail:
    """Manual trigger: ignores start date and status"""
    project = (
        db.query(Project)
        .options(joinedload(Project.client))
        .filter(Project.id == project_id)
        .first()
    )
    if not project:
        raise ProjectNotFound()
    return send_project_reminder(db, project, email_sender)


def find_projects_starting(db: Session, today: date) -> List[Project]:
    """Open projects whose start date has arrived and whose client has an email"""
    return (
        db.query(Project)
        .join(Client, Client.id == Project.client_id)
        .options(joinedload(Project.client))
        .filter(
            Project.start_date <= today,
            Project.status == ProjectStatus.OPEN.value,
            Client.email.isnot(None),
            Client.email != "",
        )
        .order_by(Project.id)
        .all()
    )


def send_start_reminders(db: Session, email_sender: EmailSender, today: Optional[date] = None) -> Dict[str, int]:
    """
    Send reminders for every project returned by ``find_projects_starting``.

    A failure on one project is logged and the loop moves on to the next one.
    """
    today = today or clock.local_today()
    projects = find_projects_starting(db, today)
    logger.info(f"Found {len(projects)} projects due for a start reminder")

    sent = 0
    failed = 0
    for project in projects:
        project_id = project.id
        try:
            send_project_reminder(db, project, email_sender)
            sent += 1
            logger.info(f"Sent start reminder for project {project_id}")
        except Exception:
            db.rollback()
            failed += 1
            logger.error(f"Error sending start reminder for project {project_id}", exc_info=True)

    return {"found": len(projects), "sent": sent, "failed": failed}
