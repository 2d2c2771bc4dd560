# projectdesk/config.py
# Application configuration read from the environment

import os
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Runtime settings, all overridable through environment variables"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./projectdesk.db")

    # JWT
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-change-me")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))

    # Public URL used to build shared links in reminder emails
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000").rstrip("/")

    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ]

    # Mail
    SMTP_HOST: str = os.getenv("SMTP_HOST", "")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", 587))
    SMTP_USERNAME: str = os.getenv("SMTP_USERNAME", "")
    SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
    SMTP_TLS: bool = _as_bool(os.getenv("SMTP_TLS", "true"))
    MAIL_FROM: str = os.getenv("MAIL_FROM", "noreply@projectdesk.local")

    # Daily start reminder, local wall-clock time
    REMINDER_HOUR: int = int(os.getenv("REMINDER_HOUR", 21))
    REMINDER_MINUTE: int = int(os.getenv("REMINDER_MINUTE", 0))
    SCHEDULER_ENABLED: bool = _as_bool(os.getenv("SCHEDULER_ENABLED", "true"))

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 8000))
    RELOAD: bool = _as_bool(os.getenv("RELOAD", "false"))

    DEBUG: bool = _as_bool(os.getenv("DEBUG", "false"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Seed
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@gmail.com")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "123456")
    ADMIN_NAME: str = os.getenv("ADMIN_NAME", "Admin")


settings = Settings()
