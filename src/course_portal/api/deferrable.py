"""Deletes that fall back to a deletion request.

Callers holding the capability for a resource delete it at once. Any other
authenticated caller files a pending deletion request instead and the
resource is left untouched until an admin decides.
"""

import logging
from typing import Any, Callable, Dict, Optional, Union

from fastapi import status
from fastapi.responses import JSONResponse

from course_portal.core.permissions import AuthContext
from course_portal.utils.converters import deletion_request_to_schema
from course_portal.utils.deletion_request_manager import DeletionRequestManager

logger = logging.getLogger(__name__)


def delete_or_request(
    ctx: AuthContext,
    requests: DeletionRequestManager,
    resource_type: str,
    resource_id: str,
    delete: Callable[[], None],
    details: Optional[Dict[str, Any]] = None,
) -> Union[dict, JSONResponse]:
    """Run ``delete`` or file a deletion request, depending on the caller.

    The target must already have been looked up by the route, so a missing
    resource is a 404 on both branches.

    Returns:
        The 200 body of a direct delete, or a 202 response carrying the
        pending request.
    """
    if ctx.can_mutate(resource_type):
        delete()
        return {"success": True, "message": f"{resource_type.capitalize()} deleted"}

    request = requests.submit_request(
        resource_type, resource_id, details, requested_by=ctx.username
    )
    logger.info(
        "%s lacks permission to delete %s %s; filed request %s",
        ctx.username,
        resource_type,
        resource_id,
        request.id,
    )
    body = {
        "success": True,
        "message": "Deletion request submitted for admin approval",
        "pending_approval": True,
        "request": deletion_request_to_schema(request).model_dump(),
    }
    return JSONResponse(status_code=status.HTTP_202_ACCEPTED, content=body)
