from pydantic import Field
from typing import Optional
from datetime import datetime
from .base import CamelModel


class CommentCreate(CamelModel):
    project_id: int
    text: str = Field(min_length=1)


class CommentAuthor(CamelModel):
    name: str
    email: str


class CommentOut(CamelModel):
    id: int
    project_id: int
    user_id: int
    text: str
    created_at: Optional[datetime] = None
    # None once the author has been deleted
    user: Optional[CommentAuthor] = None


class CommentResponse(CamelModel):
    message: str
    comment: CommentOut
