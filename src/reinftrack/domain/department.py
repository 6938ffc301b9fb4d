"""Department domain service."""

import logging
from typing import Optional

from reinftrack.database.base import Database
from reinftrack.domain.entities import Department, StageAuthority, UserAccount
from reinftrack.domain.errors import (
    DependencyError,
    NotFoundError,
    ValidationError,
    department_delete_blocked,
    department_not_found,
)
from reinftrack.domain.permissions import (
    classify_department_name,
    parse_authority,
    resolve_user_authority,
)

logger = logging.getLogger(__name__)


class DepartmentService:
    """Service for managing departments and their stage authority."""

    def __init__(self, db: Database):
        """Initialize department service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_department(
        self, name: str, authority: Optional[str | StageAuthority] = None
    ) -> int:
        """Create a department.

        Args:
            name: Department name (unique)
            authority: Stage the department may act on. If None, it is
                guessed once from the name and stored.

        Returns:
            Department ID

        Raises:
            ValidationError: If the name is blank or the authority is invalid
            ConflictError: If a department with that name exists
        """
        if not name or not name.strip():
            raise ValidationError("Department name cannot be empty")
        name = name.strip()
        if authority is None:
            resolved = classify_department_name(name)
        else:
            resolved = parse_authority(authority)
        if resolved == StageAuthority.ALL:
            raise ValidationError("Departments cannot hold 'all' authority; use an administrator account")

        department_id = self.db.create_department(name, resolved)
        logger.info(
            "department_created",
            extra={"department_id": department_id, "authority": resolved.value},
        )
        return department_id

    def get_department(self, department_id: int) -> Department:
        """Get department by ID.

        Raises:
            NotFoundError: If the department does not exist
        """
        department = self.db.get_department(department_id)
        if department is None:
            raise NotFoundError(department_not_found(department_id))
        return department

    def list_departments(self) -> list[Department]:
        return self.db.list_departments()

    def set_authority(self, department_id: int, authority: str | StageAuthority) -> None:
        """Assign a different stage authority to a department."""
        resolved = parse_authority(authority)
        if resolved == StageAuthority.ALL:
            raise ValidationError("Departments cannot hold 'all' authority; use an administrator account")
        self.get_department(department_id)
        self.db.update_department_authority(department_id, resolved)
        logger.info(
            "department_authority_changed",
            extra={"department_id": department_id, "authority": resolved.value},
        )

    def delete_department(self, department_id: int) -> None:
        """Delete a department that has no users.

        Raises:
            NotFoundError: If the department does not exist
            DependencyError: If users are still assigned to it
        """
        self.get_department(department_id)
        user_count = self.db.get_department_user_count(department_id)
        if user_count > 0:
            raise DependencyError(department_delete_blocked(department_id, user_count))
        self.db.delete_department(department_id)

    def authority_for_user(self, user: UserAccount) -> StageAuthority:
        """Resolve the stage authority of a user from their department."""
        department = None
        if user.department_id is not None:
            department = self.db.get_department(user.department_id)
        return resolve_user_authority(user, department)
