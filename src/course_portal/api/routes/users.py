"""User management routes."""

from fastapi import APIRouter, Depends

from course_portal.api.routes.auth import get_auth_context
from course_portal.core.dependencies import UserManagerDep
from course_portal.core.exceptions import PermissionDeniedError
from course_portal.core.permissions import AuthContext
from course_portal.schemas.user import (
    ChangePasswordRequest,
    CreateUserRequest,
    PublicUser,
    UpdatePermissionsRequest,
    UpdateUserRequest,
    UserListResponse,
)
from course_portal.utils.converters import to_public_user

router = APIRouter(prefix="/api/users", tags=["Users"])


def _require_self_or_admin(ctx: AuthContext, user_id: str) -> None:
    if not ctx.is_admin and ctx.user.user_id != user_id:
        raise PermissionDeniedError("You can only modify your own account.")


@router.get("", response_model=UserListResponse, summary="List users")
def list_users(
    user_manager: UserManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> UserListResponse:
    ctx.require_admin()
    return UserListResponse(users=[to_public_user(u) for u in user_manager.list_users()])


@router.post("", response_model=PublicUser, summary="Create user")
def create_user(
    req: CreateUserRequest,
    user_manager: UserManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> PublicUser:
    """Create an editor or admin account. Admin only.

    A duplicate username is rejected with 400.
    """
    ctx.require_admin()
    user = user_manager.create_user(
        username=req.username,
        password=req.password,
        name=req.name,
        role=req.role,
        permissions=req.permissions,
        actor=ctx.username,
    )
    return to_public_user(user)


@router.put("/{user_id}", response_model=PublicUser, summary="Update user")
def update_user(
    user_id: str,
    req: UpdateUserRequest,
    user_manager: UserManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> PublicUser:
    """Update name, username or password of oneself, or of anyone as admin.

    Only admins may change roles.
    """
    _require_self_or_admin(ctx, user_id)
    if req.role is not None and not ctx.is_admin:
        raise PermissionDeniedError("Only admins can change roles.")
    user = user_manager.update_user(
        user_id,
        name=req.name,
        username=req.username,
        password=req.password,
        role=req.role,
        actor=ctx.username,
    )
    return to_public_user(user)


@router.put("/{user_id}/password", summary="Change password")
def change_password(
    user_id: str,
    req: ChangePasswordRequest,
    user_manager: UserManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    _require_self_or_admin(ctx, user_id)
    user_manager.change_password(user_id, req.new_password, actor=ctx.username)
    return {"success": True, "message": "Password updated successfully"}


@router.put(
    "/{user_id}/permissions", response_model=PublicUser, summary="Set permissions"
)
def update_permissions(
    user_id: str,
    req: UpdatePermissionsRequest,
    user_manager: UserManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> PublicUser:
    """Merge capability grants into a user's permission map. Admin only."""
    ctx.require_admin()
    user = user_manager.set_permissions(user_id, req.permissions, actor=ctx.username)
    return to_public_user(user)


@router.delete("/{user_id}", summary="Delete user")
def delete_user(
    user_id: str,
    user_manager: UserManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    ctx.require_admin()
    user_manager.delete_user(user_id, actor=ctx.username)
    return {"success": True, "message": "User deleted successfully"}
