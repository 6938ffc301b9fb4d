"""Domain model entities for reinftrack.

These are pure data classes representing business concepts, independent of
database schema. The persisted column names follow the original Portuguese
schema; the mappers translate them into the names used here.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from reinftrack.domain.errors import ValidationError


class PeriodType(str, Enum):
    """How often a company's profits are due."""

    TRIMESTRAL = "trimestral"
    MENSAL = "mensal"


class EntryStatus(str, Enum):
    """Workflow stages of a declaration entry, in forward order."""

    PENDING_ACCOUNTING = "pendente_contabil"
    ACCOUNTING_DONE = "contabil_ok"
    HR_APPROVED = "dp_aprovado"
    SENT = "enviado"


class StageAuthority(str, Enum):
    """Workflow stage a user's department may act on."""

    ALL = "all"
    ACCOUNTING = "contabil"
    HR = "dp"
    FISCAL = "fiscal"
    NONE = "none"


QUARTER_MONTHS = {
    1: (1, 2, 3),
    2: (4, 5, 6),
    3: (7, 8, 9),
    4: (10, 11, 12),
}


@dataclass(frozen=True, order=True)
class DeclarationPeriod:
    """A calendar quarter."""

    year: int
    quarter: int

    def __post_init__(self):
        if not isinstance(self.year, int) or not 1900 <= self.year <= 9999:
            raise ValidationError(f"Invalid year: {self.year!r}")
        if self.quarter not in QUARTER_MONTHS:
            raise ValidationError(f"Quarter must be 1, 2, 3 or 4, got {self.quarter!r}")

    @classmethod
    def containing(cls, day: date) -> "DeclarationPeriod":
        """Return the quarter that contains the given date."""
        return cls(year=day.year, quarter=(day.month - 1) // 3 + 1)

    @property
    def months(self) -> tuple[int, int, int]:
        """Calendar months (1-12) covered by this quarter."""
        return QUARTER_MONTHS[self.quarter]

    def __str__(self) -> str:
        return f"{self.year}-Q{self.quarter}"


@dataclass(frozen=True)
class TaxRegime:
    """Tax regime with its default period granularity."""

    id: int
    regime: str
    period_type: PeriodType
    created_at: datetime


@dataclass(frozen=True)
class Company:
    """Company (taxpayer) domain entity."""

    id: int
    name: str
    legal_name: str
    cnpj: str
    regime: str
    period_type: Optional[PeriodType]
    created_at: datetime


@dataclass(frozen=True)
class Department:
    """Department (sector) used to authorize workflow stages."""

    id: int
    name: str
    authority: StageAuthority
    created_at: datetime


@dataclass(frozen=True)
class UserAccount:
    """User profile domain entity."""

    id: str
    full_name: str
    email: str
    department_id: Optional[int]
    is_admin: bool
    created_at: datetime


@dataclass(frozen=True)
class Credential:
    """Login credential held by the identity provider."""

    id: str
    email: str
    password_hash: str
    created_at: datetime


@dataclass(frozen=True)
class DeclarationEntry:
    """Quarterly profit declaration for one company."""

    id: int
    company_id: int
    year: int
    quarter: int
    profit_month1: Decimal
    profit_month2: Decimal
    profit_month3: Decimal
    status: EntryStatus
    accounting_user_id: Optional[str]
    accounting_done_at: Optional[datetime]
    hr_user_id: Optional[str]
    hr_approved_at: Optional[datetime]
    fiscal_user_id: Optional[str]
    fiscal_sent_at: Optional[datetime]
    created_at: datetime

    @property
    def period(self) -> DeclarationPeriod:
        return DeclarationPeriod(year=self.year, quarter=self.quarter)

    @property
    def amounts(self) -> tuple[Decimal, Decimal, Decimal]:
        return (self.profit_month1, self.profit_month2, self.profit_month3)

    @property
    def total_profit(self) -> Decimal:
        return sum(self.amounts, Decimal("0"))

    @property
    def has_profit_data(self) -> bool:
        """True once at least one monthly amount is non-zero."""
        return any(amount != 0 for amount in self.amounts)
