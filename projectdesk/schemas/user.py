from pydantic import EmailStr, Field
from typing import Optional, List
from datetime import datetime
from .base import CamelModel


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class UserOut(CamelModel):
    id: int
    email: str
    name: str
    is_admin: bool


class UserBrief(CamelModel):
    id: int
    name: str
    email: str


class TechnicianCreate(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)


class TechnicianUpdate(CamelModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    name: Optional[str] = Field(default=None, min_length=1)


class ProjectBrief(CamelModel):
    id: int
    name: str
    status: str


class TechnicianDetail(CamelModel):
    id: int
    email: str
    name: str
    created_at: Optional[datetime] = None
    projects: List[ProjectBrief] = []


class TechnicianResponse(CamelModel):
    message: str
    technician: UserOut


class TechnicianDetailResponse(CamelModel):
    message: str
    technician: TechnicianDetail


class TechnicianListResponse(CamelModel):
    message: str
    technicians: List[UserBrief]


class OverdueTechnicianListResponse(CamelModel):
    message: str
    technicians: List[TechnicianDetail]
