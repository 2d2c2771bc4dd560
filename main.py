import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from projectdesk.config import settings
from projectdesk.database import SessionLocal, init_db
from projectdesk.errors import ProjectDeskError
from projectdesk.routers import auth, clients, emails, projects, technicians
from projectdesk.services.email_service import SmtpEmailSender
from projectdesk.services.scheduler import ReminderScheduler

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="ProjectDesk API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Route registration
API_PREFIX = "/api/v1"
app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["Authentication"])
app.include_router(projects.router, prefix=f"{API_PREFIX}/projects", tags=["Projects"])
app.include_router(technicians.router, prefix=f"{API_PREFIX}/technicians", tags=["Technicians"])
app.include_router(clients.router, prefix=f"{API_PREFIX}/clients", tags=["Clients"])
app.include_router(emails.router, prefix=f"{API_PREFIX}/emails", tags=["Emails"])


# Error handling
@app.exception_handler(ProjectDeskError)
async def projectdesk_error_handler(request: Request, exc: ProjectDeskError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Validation error. Please check your input.",
            "errors": [
                {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
                for err in exc.errors()
            ],
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    content = {"detail": "Internal server error"}
    if settings.DEBUG:
        content["error"] = repr(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    logger.info("Starting ProjectDesk API...")
    init_db()
    app.state.reminder_scheduler = None
    if settings.SCHEDULER_ENABLED:
        reminder_scheduler = ReminderScheduler(
            session_factory=SessionLocal,
            email_sender_factory=SmtpEmailSender.from_settings,
            hour=settings.REMINDER_HOUR,
            minute=settings.REMINDER_MINUTE,
        )
        reminder_scheduler.start()
        app.state.reminder_scheduler = reminder_scheduler


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down ProjectDesk API...")
    reminder_scheduler = getattr(app.state, "reminder_scheduler", None)
    if reminder_scheduler is not None:
        reminder_scheduler.stop()


# Root route
@app.get("/")
def read_root():
    return {"message": "ProjectDesk API", "docs": "/docs"}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/scheduler/status")
def get_scheduler_status():
    """Get scheduler status and job information"""
    reminder_scheduler = getattr(app.state, "reminder_scheduler", None)
    if reminder_scheduler is None:
        return {"status": "disabled", "jobs": [], "last_result": None}
    return reminder_scheduler.get_status()
