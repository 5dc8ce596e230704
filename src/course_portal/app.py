"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from course_portal.api.errors import register_exception_handlers
from course_portal.api.routes import (
    admin,
    auth,
    courses,
    deletion_requests,
    feedback,
    holidays,
    notices,
    schedule,
    settings,
    syllabus,
    users,
)
from course_portal.config import API_HOST, API_PORT, CORS_ALLOWED_ORIGINS
from course_portal.core.database import init_db
from course_portal.core.logging_config import setup_logging

# Setup logging
setup_logging()

# Initialize FastAPI application
app = FastAPI(
    title="Course Portal API",
    description="Backend API for the course materials portal.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register route handlers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(courses.router)
app.include_router(schedule.router)
app.include_router(syllabus.router)
app.include_router(notices.router)
app.include_router(holidays.router)
app.include_router(settings.router)
app.include_router(feedback.router)
app.include_router(deletion_requests.router)
app.include_router(admin.router)


@app.on_event("startup")
def startup_tasks() -> None:
    """Create tables and seed the first admin."""
    init_db()


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """Return API information and documentation links."""
    return {
        "name": "Course Portal API",
        "version": "1.0.0",
        "description": "Backend API for the course materials portal.",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    print(f"Course Portal API: {server_url}")
    print(f"API docs: {server_url}/docs")

    uvicorn.run("course_portal.app:app", host=API_HOST, port=API_PORT, reload=True)
