"""Deletion request routes."""

from fastapi import APIRouter, Depends, status

from course_portal.api.routes.auth import get_auth_context
from course_portal.core.dependencies import DeletionRequestManagerDep
from course_portal.core.permissions import AuthContext
from course_portal.schemas.moderation import (
    DeletionRequest,
    DeletionRequestListResponse,
    SubmitDeletionRequest,
)
from course_portal.utils.converters import deletion_request_to_schema
from course_portal.utils.deletion_request_manager import supported_types

router = APIRouter(prefix="/api/deletion-requests", tags=["Deletion Requests"])


@router.get("", response_model=DeletionRequestListResponse, summary="List pending requests")
def list_requests(
    requests: DeletionRequestManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> DeletionRequestListResponse:
    ctx.require_admin()
    return DeletionRequestListResponse(
        requests=[deletion_request_to_schema(r) for r in requests.list_requests()]
    )


@router.get("/types", summary="Deletable resource types")
def list_types(ctx: AuthContext = Depends(get_auth_context)) -> dict:
    return {"types": supported_types()}


@router.post(
    "",
    response_model=DeletionRequest,
    status_code=status.HTTP_201_CREATED,
    summary="Submit deletion request",
)
def submit_request(
    req: SubmitDeletionRequest,
    requests: DeletionRequestManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> DeletionRequest:
    """File a request on behalf of the caller. The requester is never client-supplied."""
    request = requests.submit_request(
        req.type, req.resource_id, req.details, requested_by=ctx.username
    )
    return deletion_request_to_schema(request)


@router.post("/{request_id}/approve", summary="Approve deletion request")
def approve_request(
    request_id: str,
    requests: DeletionRequestManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    ctx.require_admin()
    request = requests.approve_request(request_id, ctx.user)
    return {
        "success": True,
        "message": f"Approved deletion of {request.type} {request.resource_id}",
    }


@router.post("/{request_id}/reject", summary="Reject deletion request")
def reject_request(
    request_id: str,
    requests: DeletionRequestManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    ctx.require_admin()
    requests.reject_request(request_id, ctx.user)
    return {"success": True, "message": "Deletion request rejected"}
