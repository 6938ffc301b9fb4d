"""Company domain service."""

import logging
from typing import Optional

from reinftrack.database.base import Database
from reinftrack.domain.entities import Company, PeriodType
from reinftrack.domain.errors import (
    DependencyError,
    NotFoundError,
    ValidationError,
    company_delete_blocked,
    company_not_found,
    regime_not_found,
)
from reinftrack.domain.period import parse_period_type, resolve_period_type
from reinftrack.utils.cnpj import parse_cnpj

logger = logging.getLogger(__name__)


class CompanyService:
    """Service for managing companies."""

    def __init__(self, db: Database):
        """Initialize company service.

        Args:
            db: Database instance
        """
        self.db = db

    def _validate(
        self,
        name: str,
        legal_name: str,
        cnpj: str,
        regime: str,
        period_type: Optional[str | PeriodType],
    ) -> tuple[str, str, str, str, Optional[PeriodType]]:
        if not name or not name.strip():
            raise ValidationError("Company name cannot be empty")
        if not legal_name or not legal_name.strip():
            raise ValidationError("Legal name cannot be empty")
        if not regime:
            raise ValidationError("Tax regime is required")
        try:
            digits = parse_cnpj(cnpj)
        except ValueError as e:
            raise ValidationError(str(e)) from None
        if self.db.get_regime(regime) is None:
            raise NotFoundError(regime_not_found(regime))
        override = parse_period_type(period_type) if period_type else None
        return name.strip(), legal_name.strip(), digits, regime, override

    def create_company(
        self,
        name: str,
        legal_name: str,
        cnpj: str,
        regime: str,
        period_type: Optional[str | PeriodType] = None,
    ) -> int:
        """Create a company.

        Args:
            name: Display name
            legal_name: Registered legal name (razao social)
            cnpj: CNPJ, formatted or digits only
            regime: Name of an existing tax regime
            period_type: Optional override of the regime's default period

        Returns:
            Company ID

        Raises:
            ValidationError: If a field is blank or the CNPJ is malformed
            NotFoundError: If the regime does not exist
        """
        values = self._validate(name, legal_name, cnpj, regime, period_type)
        company_id = self.db.create_company(*values)
        logger.info("company_created", extra={"company_id": company_id, "regime": regime})
        return company_id

    def update_company(
        self,
        company_id: int,
        name: str,
        legal_name: str,
        cnpj: str,
        regime: str,
        period_type: Optional[str | PeriodType] = None,
    ) -> None:
        """Replace a company's fields. Passing no period_type clears the override."""
        self.get_company(company_id)
        values = self._validate(name, legal_name, cnpj, regime, period_type)
        self.db.update_company(company_id, *values)

    def get_company(self, company_id: int) -> Company:
        """Get company by ID.

        Raises:
            NotFoundError: If the company does not exist
        """
        company = self.db.get_company(company_id)
        if company is None:
            raise NotFoundError(company_not_found(company_id))
        return company

    def list_companies(self) -> list[Company]:
        return self.db.list_companies()

    def delete_company(self, company_id: int) -> None:
        """Delete a company without declaration entries.

        Raises:
            NotFoundError: If the company does not exist
            DependencyError: If the company has declaration entries
        """
        self.get_company(company_id)
        entry_count = self.db.get_company_entry_count(company_id)
        if entry_count > 0:
            raise DependencyError(company_delete_blocked(company_id, entry_count))
        self.db.delete_company(company_id)
        logger.info("company_deleted", extra={"company_id": company_id})

    def effective_period_type(self, company_id: int) -> PeriodType:
        """Return whether the company is due monthly or quarterly."""
        company = self.get_company(company_id)
        config = self.db.get_regime(company.regime)
        if config is None:
            raise NotFoundError(regime_not_found(company.regime))
        return resolve_period_type(config.period_type, company.period_type)
