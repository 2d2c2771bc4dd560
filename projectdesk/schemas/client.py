from pydantic import EmailStr, Field
from typing import Optional, List
from datetime import date, datetime
from .base import CamelModel


class ClientCreate(CamelModel):
    email: EmailStr
    name: str = Field(min_length=1)


class ClientUpdate(CamelModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(default=None, min_length=1)


class ClientOut(CamelModel):
    id: int
    email: str
    name: str
    created_at: Optional[datetime] = None


class ClientResponse(CamelModel):
    message: str
    client: ClientOut


class ClientListResponse(CamelModel):
    message: str
    clients: List[ClientOut]


class ClientProjectView(CamelModel):
    """The only project fields a client may see through a shared link"""

    name: str
    description: str
    start_date: date
    status: str
    note_to_client: Optional[str] = None


class ClientProjectViewResponse(CamelModel):
    message: str
    project: ClientProjectView
