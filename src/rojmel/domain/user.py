"""User and project access administration.

Users carry an application role (``superadmin`` or ``user``) and a role on
each project they are assigned to (``viewer`` or ``editor``). The first user
created becomes the superadmin. Credentials and sessions are not handled
here.
"""

import logging
from typing import Optional

from rojmel.database.base import Database
from rojmel.domain.entities import ProjectAssignment, ProjectRole, User as UserEntity, UserRole
from rojmel.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    duplicate_username,
    last_superadmin,
    project_not_found,
    user_not_found,
)

logger = logging.getLogger(__name__)

DEFAULT_ASSIGNMENT_ROLE = ProjectRole.EDITOR.value


def normalize_user_role(value: str) -> str:
    """Validate an application role."""
    try:
        return UserRole(value.strip().lower()).value
    except ValueError:
        raise ValidationError(
            f"Invalid user role '{value}'. Expected one of: {', '.join(r.value for r in UserRole)}"
        )


def normalize_project_role(value: str) -> str:
    """Validate a per-project role."""
    try:
        return ProjectRole(value.strip().lower()).value
    except ValueError:
        raise ValidationError(
            f"Invalid project role '{value}'. Expected one of: {', '.join(r.value for r in ProjectRole)}"
        )


class UserService:
    """Service for managing users and their project assignments."""

    def __init__(self, db: Database):
        """Initialize user service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_user(self, user_id: int) -> UserEntity:
        user = self.db.get_user(user_id)
        if user is None:
            raise NotFoundError(user_not_found(user_id))
        return user

    def _check_email_free(self, email: str, exclude_id: Optional[int] = None) -> None:
        existing = self.db.get_user_by_email(email)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(f"Email '{email}' is already used by '{existing.username}'")

    def _is_last_superadmin(self, user: UserEntity) -> bool:
        if user.role != UserRole.SUPERADMIN.value or not user.is_active:
            return False
        others = [
            u
            for u in self.db.list_users()
            if u.id != user.id and u.is_active and u.role == UserRole.SUPERADMIN.value
        ]
        return not others

    def create_user(
        self,
        username: str,
        name: str,
        email: Optional[str] = None,
        role: Optional[str] = None,
    ) -> int:
        """Create a user.

        Args:
            username: Unique login name
            name: Display name
            email: Optional unique email address
            role: superadmin or user; defaults to superadmin for the first
                user and user afterwards

        Returns:
            User ID

        Raises:
            ValidationError: If username or name is empty, or the role unknown
            ConflictError: If the username or email is taken
        """
        username = (username or "").strip()
        name = (name or "").strip()
        if not username or not name:
            raise ValidationError("Username and name are required")
        email = (email or "").strip() or None

        if role is None:
            role = UserRole.USER.value if self.db.list_users() else UserRole.SUPERADMIN.value
        else:
            role = normalize_user_role(role)

        if self.db.get_user_by_username(username) is not None:
            raise ConflictError(duplicate_username(username))
        if email is not None:
            self._check_email_free(email)

        user_id = self.db.create_user(username=username, name=name, email=email, role=role)
        logger.info("Created user %s '%s' (%s)", user_id, username, role)
        return user_id

    def get_user(self, user_id: int) -> Optional[UserEntity]:
        """Get user by ID, or None if not found."""
        return self.db.get_user(user_id)

    def get_user_by_username(self, username: str) -> Optional[UserEntity]:
        """Get user by username, or None if not found."""
        return self.db.get_user_by_username(username)

    def list_users(self) -> list[UserEntity]:
        """List all users ordered by username."""
        return self.db.list_users()

    def update_user(
        self,
        user_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> UserEntity:
        """Update a user. Only the provided values change.

        An empty email clears it.

        Returns:
            The updated user

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the email is used by another user
            DependencyError: If the change would leave no active superadmin
            ValidationError: If the name is empty or the role unknown
        """
        user = self._require_user(user_id)

        fields: dict = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Name cannot be empty")
            fields["name"] = name
        if email is not None:
            email = email.strip() or None
            if email is not None:
                self._check_email_free(email, exclude_id=user_id)
            fields["email"] = email
        if role is not None:
            fields["role"] = normalize_user_role(role)
        if is_active is not None:
            fields["is_active"] = is_active

        demoted = fields.get("role", user.role) != UserRole.SUPERADMIN.value
        deactivated = not fields.get("is_active", user.is_active)
        if (demoted or deactivated) and self._is_last_superadmin(user):
            logger.warning("Refusing to demote or deactivate last superadmin %s", user_id)
            raise DependencyError(last_superadmin(user.username))

        if fields:
            self.db.update_user(user_id, **fields)
            logger.info("Updated user %s (%s)", user_id, ", ".join(sorted(fields)))
        return self._require_user(user_id)

    def delete_user(self, user_id: int) -> None:
        """Delete a user and their project assignments.

        Raises:
            NotFoundError: If the user does not exist
            DependencyError: If the user is the last active superadmin
        """
        user = self._require_user(user_id)
        if self._is_last_superadmin(user):
            logger.warning("Refusing to delete last superadmin %s", user_id)
            raise DependencyError(last_superadmin(user.username))

        self.db.delete_user(user_id)
        logger.info("Deleted user %s '%s'", user_id, user.username)

    def assign_project(self, user_id: int, project_id: int, role: str = DEFAULT_ASSIGNMENT_ROLE) -> None:
        """Give a user access to a project.

        Assigning an already assigned project changes the role.

        Raises:
            NotFoundError: If the user or project does not exist
            ValidationError: If the role is unknown
        """
        self._require_user(user_id)
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))
        role = normalize_project_role(role)

        self.db.assign_project(user_id, project_id, role)
        logger.info("Assigned project %s to user %s as %s", project_id, user_id, role)

    def unassign_project(self, user_id: int, project_id: int) -> None:
        """Remove a user's access to a project.

        Raises:
            NotFoundError: If the user does not exist or is not assigned
        """
        user = self._require_user(user_id)
        if not self.db.unassign_project(user_id, project_id):
            raise NotFoundError(f"User '{user.username}' is not assigned to project {project_id}")
        logger.info("Removed project %s from user %s", project_id, user_id)

    def list_user_projects(self, user_id: int) -> list[ProjectAssignment]:
        """List the projects assigned to a user with the user's role on each.

        Raises:
            NotFoundError: If the user does not exist
        """
        self._require_user(user_id)
        return self.db.list_user_projects(user_id)
