"""Identity provider factory functions."""

import os
from typing import Optional

from reinftrack.database.base import Database
from reinftrack.domain.errors import ValidationError
from reinftrack.identity.local import LocalIdentityProvider

DEFAULT_TOKEN_MINUTES = 60


def create_identity_provider(
    db: Database,
    secret_key: Optional[str] = None,
    token_minutes: Optional[int] = None,
) -> LocalIdentityProvider:
    """Create the local identity provider.

    Args:
        db: Database instance
        secret_key: Token signing key. If None, checks REINFTRACK_SECRET_KEY.
        token_minutes: Token lifetime. If None, checks REINFTRACK_TOKEN_MINUTES,
            then defaults to 60.

    Raises:
        ValidationError: If no secret key is configured
    """
    if secret_key is None:
        secret_key = os.environ.get("REINFTRACK_SECRET_KEY")
    if not secret_key:
        raise ValidationError(
            "No token signing key configured. Set REINFTRACK_SECRET_KEY."
        )

    if token_minutes is None:
        raw = os.environ.get("REINFTRACK_TOKEN_MINUTES")
        try:
            token_minutes = int(raw) if raw else DEFAULT_TOKEN_MINUTES
        except ValueError:
            raise ValidationError(f"REINFTRACK_TOKEN_MINUTES must be an integer, got '{raw}'") from None

    return LocalIdentityProvider(db, secret_key=secret_key, token_minutes=token_minutes)
