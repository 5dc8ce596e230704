"""Admin routes: activity log and upload store maintenance."""

import logging

from fastapi import APIRouter, Depends

from course_portal.api.routes.auth import get_auth_context
from course_portal.core.dependencies import (
    AuditLogManagerDep,
    DbSessionDep,
    FileStoreDep,
)
from course_portal.core.permissions import AuthContext
from course_portal.schemas.moderation import (
    AuditLogListResponse,
    BatchDeleteLogsRequest,
    CleanupResponse,
)
from course_portal.utils.converters import audit_log_to_schema
from course_portal.utils.maintenance import cleanup_orphaned_files

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/logs", response_model=AuditLogListResponse, summary="List activity logs")
def list_logs(
    audit: AuditLogManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> AuditLogListResponse:
    ctx.require_admin()
    return AuditLogListResponse(logs=[audit_log_to_schema(m) for m in audit.list_logs()])


@router.delete("/logs/{log_id}", summary="Delete activity log")
def delete_log(
    log_id: str,
    audit: AuditLogManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    ctx.require_admin()
    audit.delete_log(log_id)
    audit.append("DELETE_LOG", ctx.username, f"Deleted activity log {log_id}")
    return {"success": True, "message": "Log deleted"}


@router.post("/logs/batch-delete", summary="Delete several activity logs")
def batch_delete_logs(
    req: BatchDeleteLogsRequest,
    audit: AuditLogManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    ctx.require_admin()
    deleted = audit.batch_delete(req.ids)
    audit.append("BATCH_DELETE_LOGS", ctx.username, f"Deleted {deleted} activity logs")
    return {"success": True, "message": f"Deleted {deleted} logs", "deleted_count": deleted}


@router.delete("/logs", summary="Clear activity logs")
def clear_logs(
    audit: AuditLogManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    ctx.require_admin()
    deleted = audit.clear_logs(ctx.username)
    return {"success": True, "message": "All logs cleared", "deleted_count": deleted}


@router.post("/cleanup", response_model=CleanupResponse, summary="Remove orphaned files")
def cleanup(
    db: DbSessionDep,
    audit: AuditLogManagerDep,
    file_store: FileStoreDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> CleanupResponse:
    """Delete stored uploads that no course file or notice references."""
    ctx.require_admin()
    removed = cleanup_orphaned_files(
        db, actor=ctx.username, audit=audit, file_store=file_store
    )
    return CleanupResponse(
        message=f"Cleanup complete. Removed {len(removed)} orphaned files.",
        deleted_count=len(removed),
        deleted_files=removed,
    )
