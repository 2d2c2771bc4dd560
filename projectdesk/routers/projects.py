# projectdesk/routers/projects.py
import csv
import io
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from projectdesk.database import get_db
from projectdesk.errors import ValidationError
from projectdesk.models import User
from projectdesk.schemas.comment import CommentCreate, CommentResponse
from projectdesk.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectAssign,
    ProjectStatusUpdate,
    ProjectBaseResponse,
    ProjectResponse,
    ProjectListResponse,
    MessageResponse,
)
from projectdesk.services.project_service import ProjectService
from projectdesk.utils.auth import get_current_user, require_admin
from projectdesk.utils.pagination import Pagination, get_pagination

router = APIRouter()

EXPORT_COLUMNS = ["id", "name", "description", "start_date", "due_date", "status", "client_id", "technicians"]


def get_project_service(db: Session = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


@router.post("/", response_model=ProjectBaseResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    project_data: ProjectCreate,
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(require_admin),
):
    """Create a new project - admin only. The client is found or created by email."""
    project = service.create_project(current_user, project_data)
    return {"message": "Project created successfully", "project": project}


@router.post("/post/comment", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def post_comment(
    comment_data: CommentCreate,
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(get_current_user),
):
    """Admins comment on any project, technicians on their assigned projects only"""
    comment = service.post_comment(current_user, comment_data.project_id, comment_data.text)
    return {"message": "Comment posted successfully", "comment": comment}


@router.get("/", response_model=ProjectListResponse)
def get_all_projects(
    pagination: Pagination = Depends(get_pagination),
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(get_current_user),
):
    """Admins get every project, technicians only the projects assigned to them"""
    return {"projects": service.list_projects(current_user, pagination)}


@router.get("/search", response_model=ProjectListResponse)
def search_projects(
    name: Optional[str] = Query(None),
    creation_date: Optional[str] = Query(None, alias="creationDate"),
    due_date: Optional[str] = Query(None, alias="dueDate"),
    date_range_start: Optional[str] = Query(None, alias="dateRangeStart"),
    date_range_end: Optional[str] = Query(None, alias="dateRangeEnd"),
    status: Optional[str] = Query(None),
    find_all_overdue: bool = Query(False, alias="findAllOverdue"),
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(get_current_user),
):
    projects = service.search_projects(
        current_user,
        name=name,
        creation_date=creation_date,
        due_date=due_date,
        date_range_start=date_range_start,
        date_range_end=date_range_end,
        status=status,
        find_all_overdue=find_all_overdue,
    )
    return {"projects": projects}


@router.get("/export/overdue-last-month", response_model=ProjectListResponse)
def export_overdue_projects(
    format: str = Query("json", description="Export format: json, csv"),
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(require_admin),
):
    """Export past-due projects created during the last month"""
    projects = service.export_overdue_last_month()

    if format.lower() == "json":
        return {"projects": projects}
    if format.lower() != "csv":
        raise ValidationError(f"Unsupported format: {format}. Supported formats: json, csv")

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_COLUMNS)
    for project in projects:
        writer.writerow([
            project.id,
            project.name,
            project.description,
            project.start_date.isoformat(),
            project.due_date.isoformat(),
            project.status,
            project.client_id if project.client_id is not None else "",
            "; ".join(t.email for t in project.assigned_technicians),
        ])

    filename = f"overdue_projects_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: int,
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(get_current_user),
):
    """404 when the project does not exist, 403 when it is not assigned to a technician"""
    project = service.get_visible_project(current_user, project_id)
    return {"message": "Project retrieved successfully", "project": project}


@router.post("/{project_id}/assign", response_model=ProjectResponse)
def assign_technicians(
    project_id: int,
    assignment: ProjectAssign,
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(require_admin),
):
    """Set the project's technician roster to exactly the given users"""
    project = service.assign_technicians(current_user, project_id, assignment.user_ids)
    return {"message": "Technicians assigned to the project successfully", "project": project}


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(require_admin),
):
    project = service.update_project(current_user, project_id, project_update)
    return {"message": "Project updated successfully", "project": project}


@router.put("/{project_id}/status", response_model=ProjectBaseResponse)
def update_project_status(
    project_id: int,
    status_update: ProjectStatusUpdate,
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(get_current_user),
):
    project = service.update_status(current_user, project_id, status_update.status)
    return {"message": "Project status updated successfully", "project": project}


@router.delete("/{project_id}", response_model=MessageResponse)
def delete_project(
    project_id: int,
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(require_admin),
):
    service.delete_project(project_id)
    return {"message": "Project deleted successfully"}
