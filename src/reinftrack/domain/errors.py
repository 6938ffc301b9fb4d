"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``status_code`` is the
    HTTP-style class a transport layer should map the error to.
    """

    status_code = 400


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    status_code = 409


class DuplicateEntryError(ConflictError):
    """A declaration entry already exists for the company and quarter."""


class ConcurrentModificationError(ConflictError):
    """The entry changed between the caller's read and the conditional write."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""

    status_code = 409


class WorkflowError(DomainError):
    """A workflow guard rejected the requested operation."""

    status_code = 422


class TerminalStateError(WorkflowError):
    """The entry has already reached its final stage."""


class InvalidStateError(WorkflowError):
    """The operation is not allowed in the entry's current stage."""


class IncompleteDataError(WorkflowError):
    """Profit data is required before the entry can leave accounting."""


class UnauthorizedError(DomainError):
    """Missing credential or insufficient stage authority."""

    status_code = 401


class ForbiddenError(DomainError):
    """Authenticated, but not allowed to perform a privileged operation."""

    status_code = 403


class SelfDeletionError(ValidationError):
    """An administrator attempted to delete their own account."""


class InternalError(DomainError):
    """Unexpected failure in the backing store."""

    status_code = 500


def entry_not_found(entry_id: int) -> str:
    """Return message for missing declaration entry."""
    return f"Declaration entry {entry_id} not found"


def company_not_found(company_id: int) -> str:
    """Return message for missing company."""
    return f"Company {company_id} not found"


def department_not_found(department_id: int) -> str:
    """Return message for missing department."""
    return f"Department {department_id} not found"


def regime_not_found(regime: str) -> str:
    """Return message for missing tax regime."""
    return f"Tax regime '{regime}' not found"


def user_not_found(user_id: str) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def duplicate_entry(company_id: int, year: int, quarter: int) -> str:
    """Return message for a second entry in the same company quarter."""
    return f"An entry already exists for company {company_id} in Q{quarter}/{year}"


def concurrent_modification(entry_id: int, expected_status: str) -> str:
    """Return message when a conditional write lost a race."""
    return (
        f"Declaration entry {entry_id} is no longer '{expected_status}'; "
        "it was changed by another user. Reload it and try again."
    )


def department_delete_blocked(department_id: int, user_count: int) -> str:
    """Return message when a department still has users."""
    return (
        f"Cannot delete department {department_id}: it has "
        f"{user_count} user{'s' if user_count != 1 else ''}. "
        "Please move them to another department first."
    )


def company_delete_blocked(company_id: int, entry_count: int) -> str:
    """Return message when a company still has declaration entries."""
    return (
        f"Cannot delete company {company_id}: it has "
        f"{entry_count} declaration entr{'ies' if entry_count != 1 else 'y'}."
    )


def regime_delete_blocked(regime: str, company_count: int) -> str:
    """Return message when a regime is still referenced by companies."""
    return (
        f"Cannot delete tax regime '{regime}': it is used by "
        f"{company_count} compan{'ies' if company_count != 1 else 'y'}."
    )
