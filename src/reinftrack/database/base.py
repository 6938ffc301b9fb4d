"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from reinftrack.domain.entities import (
    Company,
    Credential,
    DeclarationEntry,
    Department,
    EntryStatus,
    PeriodType,
    StageAuthority,
    TaxRegime,
    UserAccount,
)


class Database(ABC):
    """Abstract database interface for reinftrack.

    The declaration entry section is the store the workflow relies on.
    Implementations must enforce the (company, year, quarter) uniqueness and
    the status compare-and-swap atomically inside the store itself.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Tax regime operations
    @abstractmethod
    def create_regime(self, regime: str, period_type: PeriodType) -> int:
        """Create a tax regime with its default period. Returns regime ID."""
        pass

    @abstractmethod
    def get_regime(self, regime: str) -> Optional[TaxRegime]:
        """Get tax regime by name."""
        pass

    @abstractmethod
    def list_regimes(self) -> list[TaxRegime]:
        """List all tax regimes."""
        pass

    @abstractmethod
    def update_regime_period(self, regime: str, period_type: PeriodType) -> None:
        """Change the default period of a regime."""
        pass

    @abstractmethod
    def delete_regime(self, regime: str) -> None:
        """Delete a tax regime."""
        pass

    @abstractmethod
    def get_regime_company_count(self, regime: str) -> int:
        """Get count of companies using a regime."""
        pass

    # Company operations
    @abstractmethod
    def create_company(
        self,
        name: str,
        legal_name: str,
        cnpj: str,
        regime: str,
        period_type: Optional[PeriodType] = None,
    ) -> int:
        """Create a company. Returns company ID."""
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def list_companies(self) -> list[Company]:
        """List all companies ordered by name."""
        pass

    @abstractmethod
    def update_company(
        self,
        company_id: int,
        name: str,
        legal_name: str,
        cnpj: str,
        regime: str,
        period_type: Optional[PeriodType],
    ) -> None:
        """Replace the editable fields of a company."""
        pass

    @abstractmethod
    def delete_company(self, company_id: int) -> None:
        """Delete a company."""
        pass

    @abstractmethod
    def get_company_entry_count(self, company_id: int) -> int:
        """Get count of declaration entries for a company."""
        pass

    # Department operations
    @abstractmethod
    def create_department(self, name: str, authority: StageAuthority) -> int:
        """Create a department. Returns department ID."""
        pass

    @abstractmethod
    def get_department(self, department_id: int) -> Optional[Department]:
        """Get department by ID."""
        pass

    @abstractmethod
    def get_department_by_name(self, name: str) -> Optional[Department]:
        """Get department by name."""
        pass

    @abstractmethod
    def list_departments(self) -> list[Department]:
        """List all departments ordered by name."""
        pass

    @abstractmethod
    def update_department_authority(self, department_id: int, authority: StageAuthority) -> None:
        """Change the stage authority assigned to a department."""
        pass

    @abstractmethod
    def delete_department(self, department_id: int) -> None:
        """Delete a department."""
        pass

    @abstractmethod
    def get_department_user_count(self, department_id: int) -> int:
        """Get count of users assigned to a department."""
        pass

    # User profile operations
    @abstractmethod
    def create_profile(
        self,
        user_id: str,
        full_name: str,
        email: str,
        department_id: Optional[int] = None,
        is_admin: bool = False,
    ) -> None:
        """Create the profile for an identity account."""
        pass

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[UserAccount]:
        """Get user profile by ID."""
        pass

    @abstractmethod
    def get_profile_by_email(self, email: str) -> Optional[UserAccount]:
        """Get user profile by email."""
        pass

    @abstractmethod
    def list_profiles(self) -> list[UserAccount]:
        """List all user profiles ordered by name."""
        pass

    @abstractmethod
    def update_profile_department(self, user_id: str, department_id: Optional[int]) -> None:
        """Move a user to another department (or none)."""
        pass

    @abstractmethod
    def set_profile_admin(self, user_id: str, is_admin: bool) -> None:
        """Grant or revoke the administrator flag."""
        pass

    @abstractmethod
    def delete_profile(self, user_id: str) -> bool:
        """Delete a profile. Returns False if it did not exist."""
        pass

    # Credential operations (identity provider storage)
    @abstractmethod
    def create_credential(self, email: str, password_hash: str) -> str:
        """Create a login credential. Returns the account ID."""
        pass

    @abstractmethod
    def get_credential(self, account_id: str) -> Optional[Credential]:
        """Get credential by account ID."""
        pass

    @abstractmethod
    def get_credential_by_email(self, email: str) -> Optional[Credential]:
        """Get credential by email."""
        pass

    @abstractmethod
    def update_credential_password(self, account_id: str, password_hash: str) -> None:
        """Replace the stored password hash."""
        pass

    @abstractmethod
    def delete_credential(self, account_id: str) -> bool:
        """Delete a credential. Returns False if it did not exist."""
        pass

    # Declaration entry operations
    @abstractmethod
    def insert_entry_if_absent(self, company_id: int, year: int, quarter: int) -> DeclarationEntry:
        """Create an entry unless one exists for the company and quarter.

        Raises:
            DuplicateEntryError: If the (company, year, quarter) row already exists
        """
        pass

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[DeclarationEntry]:
        """Get declaration entry by ID."""
        pass

    @abstractmethod
    def list_entries(
        self,
        year: Optional[int] = None,
        quarter: Optional[int] = None,
        company_id: Optional[int] = None,
        status: Optional[EntryStatus] = None,
    ) -> list[DeclarationEntry]:
        """List declaration entries with optional filters, ordered by company name."""
        pass

    @abstractmethod
    def update_entry_amounts(
        self,
        entry_id: int,
        amounts: Sequence[Decimal],
        expected_status: Optional[EntryStatus] = None,
    ) -> None:
        """Overwrite the three monthly profit amounts.

        Raises:
            NotFoundError: If the entry does not exist
            ConcurrentModificationError: If expected_status is given and the
                stored status no longer matches
        """
        pass

    @abstractmethod
    def compare_and_update_status(
        self,
        entry_id: int,
        expected_status: EntryStatus,
        new_status: EntryStatus,
        actor_field: str,
        actor_id: str,
        timestamp_field: str,
        stamped_at: datetime,
    ) -> None:
        """Move an entry to new_status only if it is still in expected_status.

        ``actor_field`` and ``timestamp_field`` name the DeclarationEntry
        attributes stamped by this transition.

        Raises:
            NotFoundError: If the entry does not exist
            ConcurrentModificationError: If the stored status differs from
                expected_status at write time
        """
        pass
