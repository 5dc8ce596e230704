"""Translation of manager exceptions into HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm.exc import StaleDataError

from course_portal.core.exceptions import (
    ConflictError,
    CoursePortalError,
    InvariantViolationError,
    NotFoundError,
    PermissionDeniedError,
    StoreFailureError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; the first matching class wins
_STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvariantViolationError, status.HTTP_400_BAD_REQUEST),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (StoreFailureError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_code_for(exc: CoursePortalError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    """Map uncaught manager errors to their HTTP status codes."""

    @app.exception_handler(CoursePortalError)
    async def handle_course_portal_error(
        request: Request, exc: CoursePortalError
    ) -> JSONResponse:
        code = status_code_for(exc)
        if code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=code, content={"detail": str(exc)})

    @app.exception_handler(StaleDataError)
    async def handle_stale_data(request: Request, exc: StaleDataError) -> JSONResponse:
        logger.warning("Stale write on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": "The record was modified concurrently."},
        )
