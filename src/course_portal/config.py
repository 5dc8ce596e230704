"""Configuration module for the course portal.

This module provides centralized configuration management, including directory
paths, API server settings, authentication, and application defaults.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.parent.resolve()

# Data directory (database file lives here by default)
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / "data")))

# Uploaded files: course materials and notice documents
UPLOADS_DIR = Path(os.getenv("UPLOADS_DIR", str(DATA_DIR / "uploads")))
MATERIALS_DIR_NAME = "materials"
NOTICES_DIR_NAME = "notices"

# Single replaceable documents: the syllabus PDFs and the routine image
SYLLABUS_DIR_NAME = "syllabus"
SYLLABUS_PDF_NAMES = {"default": "syllabus.pdf", "4-1": "syllabus-4-1.pdf"}
ROUTINE_DIR_NAME = "routine"
ROUTINE_IMAGE_NAME = "routine.png"

# --- Database Configuration ---

DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{DATA_DIR / 'course_portal.db'}"
)

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "3001"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7))
)

MIN_PASSWORD_LENGTH: int = int(os.getenv("MIN_PASSWORD_LENGTH", "4"))

# Seeded on startup when the user table holds no admin
DEFAULT_ADMIN_USERNAME: str = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
DEFAULT_ADMIN_PASSWORD: Optional[str] = os.getenv("DEFAULT_ADMIN_PASSWORD")
DEFAULT_ADMIN_NAME: str = os.getenv("DEFAULT_ADMIN_NAME", "Super Admin")

# --- Audit Log Configuration ---

# Only the most recent entries are retained
AUDIT_LOG_LIMIT: int = int(os.getenv("AUDIT_LOG_LIMIT", "1000"))

# --- Site Settings Defaults ---

DEFAULT_VISIBLE_DAYS: List[str] = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
]

DEFAULT_SETTINGS: dict = {
    "visibleDays": DEFAULT_VISIBLE_DAYS,
    "welcomeMessage": "",
    "breakingNews": "",
    "defaultScheduleView": "week",
    "routineSwitchTime": "",
}

# File extensions stored as images; everything else is treated as a pdf
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".bmp"}

