"""Utilities for resolving names and emails to IDs."""

from reinftrack.database.base import Database
from reinftrack.domain.entities import UserAccount
from reinftrack.domain.errors import NotFoundError


def resolve_company(db: Database, company: str | int) -> int:
    """Resolve company name or ID to company ID.

    Args:
        db: Database instance
        company: Company name (str) or ID (int or string representation of int)

    Returns:
        Company ID

    Raises:
        NotFoundError: If company is not found
    """
    if isinstance(company, int):
        if db.get_company(company) is None:
            raise NotFoundError(f"Company ID {company} not found")
        return company

    # Try to parse as integer (handles string IDs like "1")
    try:
        company_id = int(company)
    except (ValueError, TypeError):
        company_id = None
    if company_id is not None:
        if db.get_company(company_id) is None:
            raise NotFoundError(f"Company ID {company_id} not found")
        return company_id

    matches = [c for c in db.list_companies() if c.name == company or c.legal_name == company]
    if len(matches) == 1:
        return matches[0].id
    if len(matches) > 1:
        raise NotFoundError(f"Company name '{company}' is ambiguous; use the ID")
    raise NotFoundError(f"Company '{company}' not found")


def resolve_user(db: Database, user: str) -> UserAccount:
    """Resolve a user ID or email to the user's profile.

    Raises:
        NotFoundError: If the user is not found
    """
    value = user.strip()
    profile = db.get_profile(value)
    if profile is None:
        profile = db.get_profile_by_email(value.lower())
    if profile is None:
        raise NotFoundError(f"User '{user}' not found")
    return profile
