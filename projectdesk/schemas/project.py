from pydantic import EmailStr, Field
from typing import Optional, List
from datetime import date, datetime
from .base import CamelModel
from .user import UserBrief
from .comment import CommentOut


class ProjectCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    # Kept as strings so the strict YYYY-MM-DD check can report its own error
    start_date: str
    due_date: str
    note_to_client: Optional[str] = None
    client_email: EmailStr
    client_name: Optional[str] = None


class ProjectUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    start_date: Optional[str] = None
    due_date: Optional[str] = None
    note_to_client: Optional[str] = None
    status: Optional[str] = None
    user_ids: Optional[List[int]] = None


class ProjectAssign(CamelModel):
    user_ids: List[int]


class ProjectStatusUpdate(CamelModel):
    status: str


class ProjectBase(CamelModel):
    id: int
    name: str
    description: str
    start_date: date
    due_date: date
    note_to_client: Optional[str] = None
    status: str
    shared_link_token: str
    client_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProjectOut(ProjectBase):
    assigned_technicians: List[UserBrief] = []
    comments: List[CommentOut] = []


class ProjectResponse(CamelModel):
    message: str
    project: ProjectOut


class ProjectBaseResponse(CamelModel):
    message: str
    project: ProjectBase


class ProjectListResponse(CamelModel):
    projects: List[ProjectOut]


class MessageResponse(CamelModel):
    message: str
