# projectdesk/routers/technicians.py

from fastapi import APIRouter, Depends, status
from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from projectdesk.database import get_db
from projectdesk.errors import Conflict, NotFound
from projectdesk.models import Project, ProjectStatus, User
from projectdesk.schemas.project import MessageResponse
from projectdesk.schemas.user import (
    TechnicianCreate,
    TechnicianUpdate,
    TechnicianResponse,
    TechnicianDetailResponse,
    TechnicianListResponse,
    OverdueTechnicianListResponse,
)
from projectdesk.utils import clock
from projectdesk.utils.auth import require_admin
from projectdesk.utils.pagination import Pagination, get_pagination
from projectdesk.utils.security import hash_password

router = APIRouter()

EMAIL_IN_USE = "Email is already in use"


def technician_detail(technician: User, projects) -> dict:
    return {
        "id": technician.id,
        "email": technician.email,
        "name": technician.name,
        "created_at": technician.created_at,
        "projects": projects,
    }


@router.post("/", response_model=TechnicianResponse, status_code=status.HTTP_201_CREATED)
def create_technician(data: TechnicianCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Create a technician (non-admin) user"""
    if db.query(User).filter(User.email == data.email).first():
        raise Conflict(EMAIL_IN_USE)

    technician = User(
        email=data.email,
        name=data.name,
        hashed_password=hash_password(data.password),
        is_admin=False,
    )
    db.add(technician)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(EMAIL_IN_USE)
    db.refresh(technician)
    return {"message": "Technician created successfully", "technician": technician}


@router.get("/", response_model=TechnicianListResponse)
def get_all_technicians(
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    query = db.query(User).filter(User.is_admin.is_(False)).order_by(User.id)
    return {"message": "Technicians retrieved successfully", "technicians": pagination.apply(query).all()}


@router.get("/overdue", response_model=OverdueTechnicianListResponse)
def get_technicians_with_overdue_projects(
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Technicians holding at least one past-due project that is not Closed"""
    today = clock.local_today()
    is_overdue = and_(Project.due_date < today, Project.status != ProjectStatus.CLOSED.value)

    query = (
        db.query(User)
        .options(selectinload(User.assigned_projects))
        .filter(User.is_admin.is_(False), User.assigned_projects.any(is_overdue))
        .order_by(User.id)
    )
    technicians = [
        technician_detail(
            technician,
            [p for p in technician.assigned_projects
             if p.due_date < today and p.status != ProjectStatus.CLOSED.value],
        )
        for technician in pagination.apply(query).all()
    ]
    return {
        "message": "Technicians with overdue projects retrieved successfully",
        "technicians": technicians,
    }


@router.get("/{technician_id}", response_model=TechnicianDetailResponse)
def get_technician(technician_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    technician = db.query(User).filter(User.id == technician_id, User.is_admin.is_(False)).first()
    if not technician:
        raise NotFound("Technician not found")
    return {
        "message": "Technician retrieved successfully",
        "technician": technician_detail(technician, technician.assigned_projects),
    }


@router.put("/{technician_id}", response_model=TechnicianResponse)
def update_technician(
    technician_id: int,
    data: TechnicianUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    technician = db.query(User).filter(User.id == technician_id, User.is_admin.is_(False)).first()
    if not technician:
        raise NotFound("Technician not found")

    if data.email and data.email != technician.email:
        if db.query(User).filter(User.email == data.email).first():
            raise Conflict(EMAIL_IN_USE)
        technician.email = data.email
    if data.name:
        technician.name = data.name
    if data.password:
        technician.hashed_password = hash_password(data.password)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(EMAIL_IN_USE)
    db.refresh(technician)
    return {"message": "Technician updated successfully", "technician": technician}


@router.delete("/{technician_id}", response_model=MessageResponse)
def delete_technician(technician_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Delete a technician; assignments go with them, comments stay"""
    technician = db.query(User).filter(User.id == technician_id, User.is_admin.is_(False)).first()
    if not technician:
        raise NotFound("Technician not found")
    db.delete(technician)
    db.commit()
    return {"message": "Technician deleted successfully"}
