"""User management utilities.

This module provides user management functionality including user storage,
password hashing, permission maps, and the last-admin invariant.
"""

import logging
from typing import Any, Dict, List, Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from course_portal import config
from course_portal.core.exceptions import (
    InvariantViolationError,
    NotFoundError,
    ValidationError,
)
from course_portal.core.permissions import default_permissions, normalize_permissions
from course_portal.models.user import UserModel
from course_portal.schemas.user import ROLE_ADMIN, ROLE_EDITOR, VALID_ROLES, User
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.converters import model_to_user, user_to_model
from course_portal.utils.store import commit

logger = logging.getLogger(__name__)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS = 12

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


class UserAlreadyExistsError(ValidationError):
    """Exception raised when trying to create a user that already exists."""

    pass


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session, audit: Optional[AuditLogManager] = None):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
            audit: Audit log writer; one is created on ``db`` if omitted.
        """
        self.db = db
        self.audit = audit or AuditLogManager(db)

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > BCRYPT_MAX_BYTES:
            logger.warning(
                "Password exceeds %d bytes (%d bytes), truncating",
                BCRYPT_MAX_BYTES,
                len(password_bytes),
            )
            password_bytes = password_bytes[:BCRYPT_MAX_BYTES]

        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        password_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def _validate_password(self, password: Optional[str]) -> None:
        if not password or len(password) < config.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters."
            )

    def _get_model(self, user_id: str) -> UserModel:
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if model is None:
            raise NotFoundError("User", user_id)
        return model

    def _admin_count(self) -> int:
        return self.db.query(UserModel).filter(UserModel.role == ROLE_ADMIN).count()

    def create_user(
        self,
        username: str,
        password: str,
        name: Optional[str] = None,
        role: str = ROLE_EDITOR,
        permissions: Optional[Dict[str, Any]] = None,
        actor: Optional[str] = None,
    ) -> User:
        """Create a new user.

        Args:
            username: Username for the new user.
            password: Plain text password.
            name: Optional display name.
            role: 'admin' or 'editor'.
            permissions: Capability map; every capability off if omitted.
            actor: Username recorded in the audit log.

        Returns:
            Created User object.

        Raises:
            UserAlreadyExistsError: If username already exists.
            ValidationError: If role or password is invalid.
        """
        if role not in VALID_ROLES:
            raise ValidationError(f"Invalid role: {role}. Must be 'admin' or 'editor'.")
        self._validate_password(password)

        existing = self.db.query(UserModel).filter(UserModel.username == username).first()
        if existing:
            raise UserAlreadyExistsError(f"Username '{username}' already exists")

        granted = default_permissions()
        if permissions:
            granted.update(normalize_permissions(permissions))

        user = User(
            username=username,
            password_hash=self.hash_password(password),
            name=name,
            role=role,
            permissions=granted,
        )

        # The unique constraint still catches a concurrent insert of the same name
        try:
            self.db.add(user_to_model(user))
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError(f"Username '{username}' already exists") from e

        logger.info("Created user: %s (%s)", username, role)
        self.audit.append("CREATE_USER", actor, f"Created {role} user {username}")
        return user

    def ensure_default_admin(self) -> Optional[User]:
        """Seed an admin account when none exists.

        Returns:
            The seeded user, or None if an admin already existed or no
            default password is configured.
        """
        if self._admin_count() > 0:
            return None
        if not config.DEFAULT_ADMIN_PASSWORD:
            logger.warning(
                "No admin user exists and DEFAULT_ADMIN_PASSWORD is not set; "
                "skipping admin seeding"
            )
            return None
        if self.get_user_by_username(config.DEFAULT_ADMIN_USERNAME):
            logger.warning(
                "Default admin username '%s' is taken by a non-admin; skipping seeding",
                config.DEFAULT_ADMIN_USERNAME,
            )
            return None
        logger.info("Seeding default admin '%s'", config.DEFAULT_ADMIN_USERNAME)
        return self.create_user(
            username=config.DEFAULT_ADMIN_USERNAME,
            password=config.DEFAULT_ADMIN_PASSWORD,
            name=config.DEFAULT_ADMIN_NAME,
            role=ROLE_ADMIN,
            actor="System",
        )

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user when the credentials match, None otherwise."""
        user = self.get_user_by_username(username)
        if user is None:
            return None
        if not self.verify_password(password, user.password_hash):
            return None
        return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by username.

        Args:
            username: Username to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.username == username).first()
        if model:
            return model_to_user(model)
        return None

    def get_user_by_id(self, user_id: str) -> User:
        """Get a user by user ID.

        Raises:
            NotFoundError: If no user has this id.
        """
        return model_to_user(self._get_model(user_id))

    def list_users(self) -> List[User]:
        """List all users, oldest first."""
        models = self.db.query(UserModel).order_by(UserModel.create_at).all()
        return [model_to_user(m) for m in models]

    def update_user(
        self,
        user_id: str,
        name: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        role: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> User:
        """Update profile fields; only non-empty arguments change.

        Raises:
            NotFoundError: If the user does not exist.
            UserAlreadyExistsError: If the new username is taken.
            InvariantViolationError: If the last admin would be demoted.
        """
        model = self._get_model(user_id)

        if username and username != model.username:
            taken = (
                self.db.query(UserModel).filter(UserModel.username == username).first()
            )
            if taken:
                raise UserAlreadyExistsError(f"Username '{username}' already taken")
        if password:
            self._validate_password(password)
        if role and role != model.role:
            if role not in VALID_ROLES:
                raise ValidationError(
                    f"Invalid role: {role}. Must be 'admin' or 'editor'."
                )
            if model.role == ROLE_ADMIN and self._admin_count() <= 1:
                raise InvariantViolationError("Cannot demote the last admin")

        if name:
            model.name = name
        if username:
            model.username = username
        if password:
            model.password_hash = self.hash_password(password)
        if role:
            model.role = role
        commit(self.db, "update user")

        logger.info("Updated user %s (%s)", model.username, user_id)
        self.audit.append(
            "UPDATE_USER", actor, f"Updated user {model.username} ({user_id})"
        )
        return model_to_user(model)

    def change_password(
        self, user_id: str, new_password: str, actor: Optional[str] = None
    ) -> None:
        """Replace a user's password.

        Raises:
            NotFoundError: If the user does not exist.
            ValidationError: If the password is too short.
        """
        model = self._get_model(user_id)
        self._validate_password(new_password)
        model.password_hash = self.hash_password(new_password)
        commit(self.db, "change password")
        logger.info("Changed password for %s", model.username)
        self.audit.append(
            "CHANGE_PASSWORD", actor, f"Changed password for {model.username}"
        )

    def set_permissions(
        self, user_id: str, permissions: Dict[str, Any], actor: Optional[str] = None
    ) -> User:
        """Merge a capability map into a user's permissions.

        Unknown capability names and non-boolean values are dropped.

        Raises:
            NotFoundError: If the user does not exist.
        """
        model = self._get_model(user_id)
        merged = dict(model.permissions or {})
        merged.update(normalize_permissions(permissions))
        # Reassign so the JSON column is flagged dirty
        model.permissions = merged
        commit(self.db, "update permissions")
        logger.info("Updated permissions for %s", model.username)
        self.audit.append(
            "UPDATE_PERMISSIONS", actor, f"Updated permissions for {model.username}"
        )
        return model_to_user(model)

    def delete_user(self, user_id: str, actor: Optional[str] = None) -> None:
        """Delete a user.

        Raises:
            NotFoundError: If the user does not exist.
            InvariantViolationError: If this is the last admin.
        """
        model = self._get_model(user_id)
        if model.role == ROLE_ADMIN and self._admin_count() <= 1:
            raise InvariantViolationError("Cannot delete the last admin")
        username = model.username
        self.db.delete(model)
        commit(self.db, "delete user")
        logger.info("Deleted user %s (%s)", username, user_id)
        self.audit.append("DELETE_USER", actor, f"Deleted user {username} ({user_id})")
