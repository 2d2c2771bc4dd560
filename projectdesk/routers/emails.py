# projectdesk/routers/emails.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from projectdesk.database import get_db
from projectdesk.models import SentEmail, User
from projectdesk.schemas.sent_email import SentEmailResponse, SentEmailListResponse
from projectdesk.services.email_service import EmailSender, get_email_sender
from projectdesk.services.reminder_service import send_reminder_for_project_id
from projectdesk.utils.auth import require_admin
from projectdesk.utils.pagination import Pagination, get_pagination

router = APIRouter()


@router.post("/send-email/{project_id}", response_model=SentEmailResponse)
def send_email_manually(
    project_id: int,
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
    admin: User = Depends(require_admin),
):
    """Send the start reminder for one project now, whatever its dates or status"""
    sent = send_reminder_for_project_id(db, project_id, email_sender)
    return {"message": "Email sent successfully", "sent_email": sent}


@router.get("/project/{project_id}/sent-emails", response_model=SentEmailListResponse)
def get_sent_emails_for_project(
    project_id: int,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    query = db.query(SentEmail).filter(SentEmail.project_id == project_id).order_by(SentEmail.id)
    return {"message": "Sent emails retrieved successfully", "sent_emails": pagination.apply(query).all()}


@router.get("/sent-emails", response_model=SentEmailListResponse)
def get_all_sent_emails(
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    query = db.query(SentEmail).order_by(SentEmail.id)
    return {"message": "All sent emails retrieved successfully", "sent_emails": pagination.apply(query).all()}
