"""Site settings routes."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from course_portal.api.routes.auth import get_auth_context
from course_portal.core.dependencies import SettingsManagerDep
from course_portal.core.exceptions import PermissionDeniedError
from course_portal.core.permissions import SETTING_CAPABILITIES, AuthContext
from course_portal.schemas.settings import SiteSettings

router = APIRouter(prefix="/api/settings", tags=["Settings"])


@router.get("", summary="Get settings")
def get_settings(settings_manager: SettingsManagerDep) -> Dict[str, Any]:
    return settings_manager.get_settings()


@router.put("", summary="Update settings")
def update_settings(
    req: SiteSettings,
    settings_manager: SettingsManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> Dict[str, Any]:
    """Partially update settings. Each provided key needs its own capability.

    Nothing is stored if any key is not permitted.
    """
    changes = req.model_dump(exclude_unset=True)
    denied = sorted(
        key for key in changes if not ctx.has_permission(SETTING_CAPABILITIES[key])
    )
    if denied:
        raise PermissionDeniedError(
            f"Missing permission to change settings: {', '.join(denied)}"
        )
    return settings_manager.update_settings(changes, actor=ctx.username)
