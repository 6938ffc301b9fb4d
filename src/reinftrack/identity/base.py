"""Abstract identity provider interface."""

from abc import ABC, abstractmethod
from typing import Optional

from reinftrack.domain.entities import Credential


class IdentityProvider(ABC):
    """Holds login credentials and issues bearer tokens.

    Profiles (name, department, admin flag) live in the application database;
    the identity provider only knows account IDs, emails and passwords.
    """

    @abstractmethod
    def create_account(self, email: str, password: str) -> str:
        """Create an account. Returns the account ID."""
        pass

    @abstractmethod
    def get_account_by_email(self, email: str) -> Optional[Credential]:
        """Find an account by email."""
        pass

    @abstractmethod
    def set_password(self, account_id: str, password: str) -> None:
        """Replace an account's password."""
        pass

    @abstractmethod
    def delete_account(self, account_id: str) -> bool:
        """Delete an account. Returns False if it did not exist."""
        pass

    @abstractmethod
    def verify_password(self, email: str, password: str) -> Optional[str]:
        """Return the account ID if the password matches, else None."""
        pass

    @abstractmethod
    def issue_token(self, account_id: str) -> str:
        """Issue a bearer token for an account."""
        pass

    @abstractmethod
    def verify_token(self, token: str) -> Optional[str]:
        """Return the account ID a valid token belongs to, else None."""
        pass
