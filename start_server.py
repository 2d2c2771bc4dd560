#!/usr/bin/env python3
"""
Startup script for the ProjectDesk backend.
Creates missing tables, then serves ``main:app`` with uvicorn.
"""

import uvicorn

from projectdesk.config import settings
from projectdesk.database import init_db


def main():
    print("Starting ProjectDesk backend...")
    print(f"Host: {settings.HOST}")
    print(f"Port: {settings.PORT}")
    print(f"Reload: {settings.RELOAD}")
    print(f"Daily reminders: {'on' if settings.SCHEDULER_ENABLED else 'off'} "
          f"({settings.REMINDER_HOUR:02d}:{settings.REMINDER_MINUTE:02d})")
    print("=" * 50)

    init_db()

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )

if __name__ == "__main__":
    main()
