from typing import List
from datetime import datetime
from .base import CamelModel


class SentEmailOut(CamelModel):
    id: int
    project_id: int
    client_email: str
    shared_link_token: str
    created_at: datetime


class SentEmailResponse(CamelModel):
    message: str
    sent_email: SentEmailOut


class SentEmailListResponse(CamelModel):
    message: str
    sent_emails: List[SentEmailOut]
