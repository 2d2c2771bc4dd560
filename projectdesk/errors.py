# projectdesk/errors.py
"""
Error taxonomy shared by services, policies and routers.

Every error carries the HTTP status it maps to and a client-facing detail
message. ``main.py`` renders them as ``{"detail": ...}``.
"""

from fastapi import status


class ProjectDeskError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthorized(ProjectDeskError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class Forbidden(ProjectDeskError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access forbidden."


class NotFound(ProjectDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ValidationError(ProjectDeskError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation error. Please check your input."


class Conflict(ProjectDeskError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class AdminRequired(Forbidden):
    default_detail = "Access forbidden. Admin privileges required."


class NotAssigned(Forbidden):
    default_detail = "Access forbidden. Project not assigned to user."


class ProjectNotFound(NotFound):
    default_detail = "Project not found"


class InvalidDateFormat(ValidationError):
    default_detail = "Invalid date format."


class InvalidStatus(ValidationError):
    default_detail = "Invalid status value."


class InvalidUserIds(ValidationError):
    default_detail = "Invalid user ID(s)"


class TechnicianHasOpenProject(Conflict):
    default_detail = "Technician has open projects. Close them before assigning new projects."

    def __init__(self, technician_ids=None, detail: str = None):
        self.technician_ids = sorted(technician_ids or [])
        super().__init__(detail)


class EmailDeliveryError(ProjectDeskError):
    default_detail = "Failed to send email"
