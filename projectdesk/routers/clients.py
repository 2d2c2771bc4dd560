# projectdesk/routers/clients.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from projectdesk.database import get_db
from projectdesk.errors import Conflict, NotFound, ProjectNotFound
from projectdesk.models import Client, Project, User
from projectdesk.schemas.client import (
    ClientCreate, ClientUpdate, ClientResponse, ClientListResponse, ClientProjectViewResponse,
)
from projectdesk.schemas.project import MessageResponse
from projectdesk.utils.auth import require_admin
from projectdesk.utils.pagination import Pagination, get_pagination

router = APIRouter()

EMAIL_IN_USE = "Email address is already in use. Please choose a different email."


def get_client_by_email(db: Session, email: str) -> Client:
    client = db.query(Client).filter(Client.email == email).first()
    if not client:
        raise NotFound("Client not found")
    return client


@router.post("/", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(data: ClientCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Create a client - admin only"""
    if db.query(Client).filter(Client.email == data.email).first():
        raise Conflict(EMAIL_IN_USE)

    client = Client(email=data.email, name=data.name)
    db.add(client)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(EMAIL_IN_USE)
    db.refresh(client)
    return {"message": "Client created successfully", "client": client}


@router.get("/", response_model=ClientListResponse)
def get_all_clients(
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    clients = pagination.apply(db.query(Client).order_by(Client.id)).all()
    return {"message": "Clients retrieved successfully", "clients": clients}


@router.get("/email/{email}", response_model=ClientResponse)
def get_client(email: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return {"message": "Client retrieved successfully", "client": get_client_by_email(db, email)}


@router.put("/{current_email}", response_model=ClientResponse)
def update_client(
    current_email: str,
    data: ClientUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    client = get_client_by_email(db, current_email)

    if data.email and data.email != client.email:
        if db.query(Client).filter(Client.email == data.email).first():
            raise Conflict(EMAIL_IN_USE)
        client.email = data.email
    if data.name:
        client.name = data.name

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(EMAIL_IN_USE)
    db.refresh(client)
    return {"message": "Client updated successfully", "client": client}


@router.delete("/{email}", response_model=MessageResponse)
def delete_client(email: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Delete a client; its projects stay, detached from the client"""
    client = get_client_by_email(db, email)
    db.delete(client)
    db.commit()
    return {"message": "Client deleted successfully"}


@router.get("/{shared_link_token}", response_model=ClientProjectViewResponse)
def view_project_by_shared_link(shared_link_token: str, db: Session = Depends(get_db)):
    """Public, unauthenticated project view for clients"""
    project = db.query(Project).filter(Project.shared_link_token == shared_link_token).first()
    if not project:
        raise ProjectNotFound()
    return {"message": "Project details retrieved successfully", "project": project}
