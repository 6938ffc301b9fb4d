"""Privileged user provisioning.

Creating a user takes two steps against two stores: an account in the
identity provider, then a profile in the application database. When the
profile insert fails the account is deleted again (compensation). Compensation
is best effort; if the process dies between the two steps the account is left
without a profile, and the next create_user call for the same email picks that
account up instead of failing on the duplicate.
"""

import logging
from typing import Optional

from reinftrack.database.base import Database
from reinftrack.domain.entities import UserAccount
from reinftrack.domain.errors import (
    ConflictError,
    DomainError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    SelfDeletionError,
    UnauthorizedError,
    ValidationError,
    department_not_found,
    user_not_found,
)
from reinftrack.identity.base import IdentityProvider

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from an "Authorization: Bearer <token>" value.

    The "Bearer " prefix is optional so raw tokens are accepted too.

    Raises:
        UnauthorizedError: If no credential was supplied
    """
    value = (authorization or "").strip()
    if value.lower().startswith(BEARER_PREFIX):
        value = value[len(BEARER_PREFIX):].strip()
    if not value:
        raise UnauthorizedError("Not authenticated")
    return value


class ProvisioningService:
    """Administrator-only account management."""

    def __init__(self, db: Database, identity: IdentityProvider):
        """Initialize provisioning service.

        Args:
            db: Database instance holding user profiles
            identity: Identity provider holding credentials
        """
        self.db = db
        self.identity = identity

    def login(self, email: str, password: str) -> str:
        """Exchange email and password for a bearer token.

        Raises:
            UnauthorizedError: If the credentials are wrong or the account has no profile
        """
        email = normalize_email(email)
        account_id = self.identity.verify_password(email, password or "")
        if account_id is None or self.db.get_profile(account_id) is None:
            logger.info("login_failed")
            raise UnauthorizedError("Invalid email or password")
        logger.info("login_succeeded", extra={"user_id": account_id})
        return self.identity.issue_token(account_id)

    def authenticate(self, authorization: Optional[str]) -> UserAccount:
        """Resolve a bearer credential to the caller's profile.

        Raises:
            UnauthorizedError: If the credential is missing, invalid or expired
        """
        token = extract_bearer_token(authorization)
        account_id = self.identity.verify_token(token)
        if account_id is None:
            raise UnauthorizedError("Not authenticated")
        profile = self.db.get_profile(account_id)
        if profile is None:
            raise UnauthorizedError("Not authenticated")
        return profile

    def authenticate_admin(self, authorization: Optional[str]) -> UserAccount:
        """Resolve a bearer credential and require the administrator flag.

        Raises:
            UnauthorizedError: If the credential is missing or invalid (401)
            ForbiddenError: If the caller is not an administrator (403)
        """
        caller = self.authenticate(authorization)
        if not caller.is_admin:
            logger.warning("admin_access_denied", extra={"user_id": caller.id})
            raise ForbiddenError("Access denied. Administrators only.")
        return caller

    def create_user(
        self,
        authorization: Optional[str],
        email: str,
        password: str,
        full_name: str,
        department_id: Optional[int] = None,
    ) -> str:
        """Create a login account and its profile.

        Returns:
            ID of the new user

        Raises:
            UnauthorizedError, ForbiddenError: If the caller is not an administrator
            ValidationError: If email, password or full name is missing
            NotFoundError: If the department does not exist
            ConflictError: If a user with that email already exists
            InternalError: If the profile could not be stored
        """
        caller = self.authenticate_admin(authorization)

        email = normalize_email(email)
        full_name = (full_name or "").strip()
        if not email or not password or not full_name:
            raise ValidationError("Email, password and name are required.")
        if department_id is not None and self.db.get_department(department_id) is None:
            raise NotFoundError(department_not_found(department_id))

        user_id = self._provision(email, password, full_name, department_id, is_admin=False)
        logger.info("user_created", extra={"user_id": user_id, "created_by": caller.id})
        return user_id

    def _provision(
        self,
        email: str,
        password: str,
        full_name: str,
        department_id: Optional[int],
        is_admin: bool,
    ) -> str:
        if self.db.get_profile_by_email(email) is not None:
            raise ConflictError(f"A user with email '{email}' already exists")

        # Step 1: identity account. An account without a profile is left over
        # from an interrupted earlier attempt and is reused.
        existing = self.identity.get_account_by_email(email)
        if existing is not None and self.db.get_profile(existing.id) is None:
            logger.warning("orphan_account_reused", extra={"user_id": existing.id})
            self.identity.set_password(existing.id, password)
            account_id = existing.id
        else:
            account_id = self.identity.create_account(email, password)

        # Step 2: profile, compensating step 1 on failure
        try:
            self.db.create_profile(
                user_id=account_id,
                full_name=full_name,
                email=email,
                department_id=department_id,
                is_admin=is_admin,
            )
        except DomainError as e:
            self._compensate(account_id)
            raise InternalError(f"Failed to create profile: {e}") from e
        return account_id

    def _compensate(self, account_id: str) -> None:
        """Delete an identity account whose profile could not be created."""
        try:
            self.identity.delete_account(account_id)
        except DomainError:
            logger.exception("user_profile_compensation_failed", extra={"user_id": account_id})
        else:
            logger.warning("user_profile_compensated", extra={"user_id": account_id})

    def reset_password(self, authorization: Optional[str], user_id: str, password: str) -> None:
        """Set a new password for a user.

        Raises:
            ValidationError: If user_id or password is missing
            NotFoundError: If the user does not exist
        """
        caller = self.authenticate_admin(authorization)
        if not user_id or not password:
            raise ValidationError("User ID and new password are required.")
        if self.db.get_profile(user_id) is None:
            raise NotFoundError(user_not_found(user_id))
        self.identity.set_password(user_id, password)
        logger.info("password_reset", extra={"user_id": user_id, "reset_by": caller.id})

    def delete_user(self, authorization: Optional[str], user_id: str) -> None:
        """Delete a user's profile and login account.

        Raises:
            ValidationError: If user_id is missing
            SelfDeletionError: If administrators try to delete themselves
            NotFoundError: If neither a profile nor an account exists
        """
        caller = self.authenticate_admin(authorization)
        if not user_id:
            raise ValidationError("User ID is required.")
        if user_id == caller.id:
            raise SelfDeletionError("You cannot delete your own account.")

        profile_deleted = self.db.delete_profile(user_id)
        account_deleted = self.identity.delete_account(user_id)
        if not profile_deleted and not account_deleted:
            raise NotFoundError(user_not_found(user_id))
        logger.info("user_deleted", extra={"user_id": user_id, "deleted_by": caller.id})

    def set_user_department(
        self, authorization: Optional[str], user_id: str, department_id: Optional[int]
    ) -> None:
        """Move a user to another department, or to none."""
        self.authenticate_admin(authorization)
        if self.db.get_profile(user_id) is None:
            raise NotFoundError(user_not_found(user_id))
        if department_id is not None and self.db.get_department(department_id) is None:
            raise NotFoundError(department_not_found(department_id))
        self.db.update_profile_department(user_id, department_id)

    def list_users(self, authorization: Optional[str]) -> list[UserAccount]:
        self.authenticate_admin(authorization)
        return self.db.list_profiles()

    def bootstrap_admin(self, email: str, password: str, full_name: str) -> tuple[str, bool]:
        """Make sure an administrator account exists.

        Safe to run any number of times: an existing profile with the email
        is returned (and promoted to administrator if needed) instead of
        creating a second one.

        Returns:
            Tuple of (user ID, whether this call created it)
        """
        email = normalize_email(email)
        full_name = (full_name or "").strip()
        if not email or not password or not full_name:
            raise ValidationError("Email, password and name are required.")

        existing = self.db.get_profile_by_email(email)
        if existing is not None:
            if not existing.is_admin:
                self.db.set_profile_admin(existing.id, True)
                logger.warning("admin_promoted", extra={"user_id": existing.id})
            return existing.id, False

        user_id = self._provision(email, password, full_name, department_id=None, is_admin=True)
        logger.info("admin_bootstrapped", extra={"user_id": user_id})
        return user_id, True
