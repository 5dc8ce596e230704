"""User schema definitions.

This module defines the User data model and the request/response bodies of
the authentication and user-management endpoints.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytz
from pydantic import BaseModel, Field

ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
VALID_ROLES = (ROLE_ADMIN, ROLE_EDITOR)


class User(BaseModel):
    """User data model."""

    user_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Opaque stable identifier.",
    )
    username: str = Field(description="Unique, case-sensitive login name.")
    password_hash: str = Field(description="Bcrypt hash of the password.")
    name: Optional[str] = Field(default=None, description="Display name.")
    role: str = Field(default=ROLE_EDITOR, description="'admin' or 'editor'.")
    permissions: Dict[str, bool] = Field(
        default_factory=dict,
        description="Capability name -> granted. Absent keys are not granted.",
    )
    create_at: str = Field(
        default_factory=lambda: datetime.now(pytz.utc).isoformat(),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class PublicUser(BaseModel):
    """User as returned to clients, without the password hash."""

    user_id: str
    username: str
    name: Optional[str] = None
    role: str
    permissions: Dict[str, bool] = {}
    create_at: str


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    success: bool = True
    user: PublicUser
    token: str


class CurrentUserResponse(BaseModel):
    user: PublicUser


class CreateUserRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str
    name: Optional[str] = None
    role: str = ROLE_EDITOR
    permissions: Optional[Dict[str, Any]] = None


class UpdateUserRequest(BaseModel):
    """Profile update; only provided fields change."""

    name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    new_password: str


class UpdatePermissionsRequest(BaseModel):
    permissions: Dict[str, Any] = Field(
        description="Capability name -> granted. Non-boolean values are dropped."
    )


class UserListResponse(BaseModel):
    users: List[PublicUser]
