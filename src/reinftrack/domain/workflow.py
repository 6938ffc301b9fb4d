"""Declaration entry workflow.

An entry moves strictly forward through four stages, each transition owned by
one department::

    pendente_contabil --(accounting)--> contabil_ok --(HR)--> dp_aprovado
        --(fiscal)--> enviado

Every transition is written with a compare-and-swap on ``status`` so two users
acting on the same stale read cannot both win. The service never retries; the
loser gets ConcurrentModificationError and must reload the entry.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional

from reinftrack.database.base import Database
from reinftrack.domain.department import DepartmentService
from reinftrack.domain.entities import (
    DeclarationEntry,
    DeclarationPeriod,
    EntryStatus,
    StageAuthority,
    UserAccount,
)
from reinftrack.domain.errors import (
    ConcurrentModificationError,
    IncompleteDataError,
    InvalidStateError,
    NotFoundError,
    TerminalStateError,
    UnauthorizedError,
    ValidationError,
    company_not_found,
    entry_not_found,
)
from reinftrack.domain.permissions import authority_allows

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("999999999999.99")


@dataclass(frozen=True)
class Transition:
    """A forward step of the workflow."""

    source: EntryStatus
    target: EntryStatus
    required_authority: StageAuthority
    actor_field: str
    timestamp_field: str
    requires_profit_data: bool = False


TRANSITIONS: dict[EntryStatus, Transition] = {
    EntryStatus.PENDING_ACCOUNTING: Transition(
        source=EntryStatus.PENDING_ACCOUNTING,
        target=EntryStatus.ACCOUNTING_DONE,
        required_authority=StageAuthority.ACCOUNTING,
        actor_field="accounting_user_id",
        timestamp_field="accounting_done_at",
        requires_profit_data=True,
    ),
    EntryStatus.ACCOUNTING_DONE: Transition(
        source=EntryStatus.ACCOUNTING_DONE,
        target=EntryStatus.HR_APPROVED,
        required_authority=StageAuthority.HR,
        actor_field="hr_user_id",
        timestamp_field="hr_approved_at",
    ),
    EntryStatus.HR_APPROVED: Transition(
        source=EntryStatus.HR_APPROVED,
        target=EntryStatus.SENT,
        required_authority=StageAuthority.FISCAL,
        actor_field="fiscal_user_id",
        timestamp_field="fiscal_sent_at",
    ),
}

STATUS_LABELS = {
    EntryStatus.PENDING_ACCOUNTING: "Pending accounting",
    EntryStatus.ACCOUNTING_DONE: "Awaiting HR",
    EntryStatus.HR_APPROVED: "Awaiting fiscal",
    EntryStatus.SENT: "Sent",
}


def next_transition(status: EntryStatus) -> Optional[Transition]:
    """Return the single transition leaving ``status``, or None if terminal."""
    return TRANSITIONS.get(EntryStatus(status))


def normalize_amounts(amounts: Iterable) -> tuple[Decimal, Decimal, Decimal]:
    """Validate three monthly profit amounts and round them to cents.

    Raises:
        ValidationError: If there are not exactly three amounts, or one is
            negative, not a number, or too large
    """
    values = list(amounts)
    if len(values) != 3:
        raise ValidationError(f"Expected 3 monthly amounts, got {len(values)}")

    result = []
    for month, value in enumerate(values, start=1):
        try:
            amount = Decimal(str(value)) if not isinstance(value, Decimal) else value
        except InvalidOperation:
            raise ValidationError(f"Month {month}: '{value}' is not a number") from None
        if not amount.is_finite():
            raise ValidationError(f"Month {month}: '{value}' is not a number")
        if amount < 0:
            raise ValidationError(f"Month {month}: profit cannot be negative ({amount})")
        if amount > MAX_AMOUNT:
            raise ValidationError(f"Month {month}: amount {amount} is too large")
        result.append(amount.quantize(CENT, rounding=ROUND_HALF_UP))
    return result[0], result[1], result[2]


class WorkflowService:
    """Service driving declaration entries through the approval workflow."""

    def __init__(self, db: Database):
        """Initialize workflow service.

        Args:
            db: Database instance
        """
        self.db = db
        self.departments = DepartmentService(db)

    def authority_for(self, user: UserAccount) -> StageAuthority:
        """Resolve the stage authority of a requester."""
        return self.departments.authority_for_user(user)

    def create_entry(self, company_id: int, period: DeclarationPeriod) -> DeclarationEntry:
        """Open the declaration entry of a company for a quarter.

        Args:
            company_id: Company ID
            period: Declaration quarter

        Returns:
            The new entry, in pending_accounting with zeroed amounts

        Raises:
            NotFoundError: If the company does not exist
            DuplicateEntryError: If the company already has an entry for the quarter
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        entry = self.db.insert_entry_if_absent(company_id, period.year, period.quarter)
        logger.info(
            "entry_created",
            extra={"entry_id": entry.id, "company_id": company_id, "period": str(period)},
        )
        return entry

    def get_entry(self, entry_id: int) -> DeclarationEntry:
        """Get entry by ID.

        Raises:
            NotFoundError: If the entry does not exist
        """
        entry = self.db.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def list_entries(
        self,
        period: Optional[DeclarationPeriod] = None,
        company_id: Optional[int] = None,
        status: Optional[EntryStatus] = None,
        year: Optional[int] = None,
    ) -> list[DeclarationEntry]:
        """List entries, optionally for one quarter (or year), company or status."""
        if period is not None:
            return self.db.list_entries(
                year=period.year, quarter=period.quarter, company_id=company_id, status=status
            )
        return self.db.list_entries(year=year, company_id=company_id, status=status)

    def fill_profits(
        self,
        entry: DeclarationEntry,
        amounts: Iterable,
        requester: Optional[UserAccount] = None,
    ) -> DeclarationEntry:
        """Overwrite the three monthly profit amounts of an entry.

        Args:
            entry: Entry as last read by the caller
            amounts: Profit of each month of the quarter
            requester: Acting user; when given, must hold accounting authority

        Returns:
            The refreshed entry

        Raises:
            InvalidStateError: If the entry already left pending_accounting
            UnauthorizedError: If the requester may not edit profits
            ValidationError: If the amounts are invalid
            ConcurrentModificationError: If the entry was advanced meanwhile
        """
        if entry.status != EntryStatus.PENDING_ACCOUNTING:
            raise InvalidStateError(
                f"Profits of entry {entry.id} can only be changed while pending accounting "
                f"(current status: {entry.status.value})"
            )
        if requester is not None:
            authority = self.authority_for(requester)
            if not authority_allows(authority, StageAuthority.ACCOUNTING):
                raise UnauthorizedError(
                    f"User {requester.email} is not allowed to fill profits "
                    f"(authority: {authority.value})"
                )

        values = normalize_amounts(amounts)
        self.db.update_entry_amounts(
            entry.id, values, expected_status=EntryStatus.PENDING_ACCOUNTING
        )
        logger.info("entry_profits_filled", extra={"entry_id": entry.id})
        return self.get_entry(entry.id)

    def advance(self, entry: DeclarationEntry, requester: UserAccount) -> DeclarationEntry:
        """Move an entry to its next stage.

        Args:
            entry: Entry as last read by the caller; its status is the value
                compared at write time
            requester: Acting user, stamped on the transition

        Returns:
            The refreshed entry

        Raises:
            TerminalStateError: If the entry was already sent
            UnauthorizedError: If the requester's department does not own this step
            IncompleteDataError: If leaving accounting with all amounts zero
            ConcurrentModificationError: If another user moved the entry first
        """
        transition = next_transition(entry.status)
        if transition is None:
            raise TerminalStateError(f"Declaration entry {entry.id} was already sent")

        authority = self.authority_for(requester)
        if not authority_allows(authority, transition.required_authority):
            raise UnauthorizedError(
                f"User {requester.email} cannot move entry {entry.id} from "
                f"'{transition.source.value}': requires "
                f"'{transition.required_authority.value}' authority"
            )

        # Amounts are checked against the stored row, not the caller's copy.
        if transition.requires_profit_data and not self.get_entry(entry.id).has_profit_data:
            raise IncompleteDataError(
                f"Fill in at least one monthly profit before completing accounting "
                f"for entry {entry.id}"
            )

        try:
            self.db.compare_and_update_status(
                entry.id,
                expected_status=transition.source,
                new_status=transition.target,
                actor_field=transition.actor_field,
                actor_id=requester.id,
                timestamp_field=transition.timestamp_field,
                stamped_at=datetime.now(UTC),
            )
        except ConcurrentModificationError:
            logger.warning(
                "entry_advance_conflict",
                extra={"entry_id": entry.id, "from_status": transition.source.value},
            )
            raise

        logger.info(
            "entry_advanced",
            extra={
                "entry_id": entry.id,
                "from_status": transition.source.value,
                "to_status": transition.target.value,
                "actor_id": requester.id,
            },
        )
        return self.get_entry(entry.id)

    def available_actions(self, entry: DeclarationEntry, authority: StageAuthority) -> list[str]:
        """Return which of "fill" and "advance" the authority may perform now."""
        actions = []
        transition = next_transition(entry.status)
        if transition is None:
            return actions
        if not authority_allows(authority, transition.required_authority):
            return actions
        if entry.status == EntryStatus.PENDING_ACCOUNTING:
            actions.append("fill")
        if not transition.requires_profit_data or entry.has_profit_data:
            actions.append("advance")
        return actions
