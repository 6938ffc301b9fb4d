"""Period granularity resolution and tax regime configuration."""

import logging
from typing import Optional

from reinftrack.database.base import Database
from reinftrack.domain.entities import PeriodType, TaxRegime
from reinftrack.domain.errors import (
    DependencyError,
    NotFoundError,
    ValidationError,
    regime_delete_blocked,
    regime_not_found,
)

logger = logging.getLogger(__name__)

DEFAULT_REGIMES = (
    "Simples Nacional",
    "Lucro Presumido",
    "Lucro Real",
    "MEI",
)


def parse_period_type(value: str | PeriodType) -> PeriodType:
    """Parse "trimestral"/"mensal" (case-insensitive) into a PeriodType.

    Raises:
        ValidationError: If the value is not a known period type
    """
    if isinstance(value, PeriodType):
        return value
    try:
        return PeriodType(value.strip().lower())
    except (ValueError, AttributeError):
        raise ValidationError(
            f"Invalid period type '{value}'. Expected 'trimestral' or 'mensal'"
        ) from None


def resolve_period_type(
    regime_default: str | PeriodType, override: Optional[str | PeriodType]
) -> PeriodType:
    """Return the effective period type of a company.

    A non-empty per-company override wins over the regime default.

    Examples:
        resolve_period_type("trimestral", "mensal") -> PeriodType.MENSAL
        resolve_period_type("trimestral", "") -> PeriodType.TRIMESTRAL
    """
    if override:
        return parse_period_type(override)
    return parse_period_type(regime_default)


class RegimeService:
    """Service for managing tax regimes and their default periods."""

    def __init__(self, db: Database):
        """Initialize regime service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_regime(self, regime: str, period_type: str | PeriodType = PeriodType.TRIMESTRAL) -> int:
        """Create a tax regime.

        Raises:
            ValidationError: If the name is blank or the period type is invalid
            ConflictError: If the regime already exists
        """
        if not regime or not regime.strip():
            raise ValidationError("Regime name cannot be empty")
        regime_id = self.db.create_regime(regime.strip(), parse_period_type(period_type))
        logger.info("regime_created", extra={"regime": regime.strip()})
        return regime_id

    def get_regime(self, regime: str) -> TaxRegime:
        """Get a regime by name.

        Raises:
            NotFoundError: If the regime does not exist
        """
        config = self.db.get_regime(regime)
        if config is None:
            raise NotFoundError(regime_not_found(regime))
        return config

    def list_regimes(self) -> list[TaxRegime]:
        return self.db.list_regimes()

    def set_regime_period(self, regime: str, period_type: str | PeriodType) -> None:
        """Change the default period type of a regime."""
        parsed = parse_period_type(period_type)
        self.get_regime(regime)
        self.db.update_regime_period(regime, parsed)
        logger.info("regime_period_changed", extra={"regime": regime, "period_type": parsed.value})

    def delete_regime(self, regime: str) -> None:
        """Delete a regime that no company uses.

        Raises:
            NotFoundError: If the regime does not exist
            DependencyError: If companies still reference it
        """
        self.get_regime(regime)
        company_count = self.db.get_regime_company_count(regime)
        if company_count > 0:
            raise DependencyError(regime_delete_blocked(regime, company_count))
        self.db.delete_regime(regime)

    def seed_default_regimes(self) -> list[str]:
        """Create the standard Brazilian regimes that are missing.

        Returns:
            Names of the regimes created by this call (empty when all exist)
        """
        created = []
        for regime in DEFAULT_REGIMES:
            if self.db.get_regime(regime) is None:
                self.db.create_regime(regime, PeriodType.TRIMESTRAL)
                created.append(regime)
        if created:
            logger.info("regimes_seeded", extra={"regimes": created})
        return created
