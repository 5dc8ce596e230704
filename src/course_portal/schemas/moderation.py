"""Deletion request and audit log schemas."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class DeletionRequest(BaseModel):
    id: str
    type: str = Field(description="Kind of resource to delete.")
    resource_id: str
    details: Dict[str, Any] = {}
    requested_by: str
    date: str
    status: str = "pending"


class SubmitDeletionRequest(BaseModel):
    type: str
    resource_id: str = Field(min_length=1)
    details: Dict[str, Any] = {}


class DeletionRequestListResponse(BaseModel):
    requests: List[DeletionRequest]


class AuditLogEntry(BaseModel):
    id: str
    date: str
    action: str
    username: str
    details: str = ""


class AuditLogListResponse(BaseModel):
    logs: List[AuditLogEntry]


class BatchDeleteLogsRequest(BaseModel):
    # Left untyped so a non-list is reported by the manager, not the parser
    ids: Optional[Any] = None


class CleanupResponse(BaseModel):
    success: bool = True
    message: str
    deleted_count: int
    deleted_files: List[str]
