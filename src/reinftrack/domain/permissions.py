"""Department-to-stage permission resolution.

Each department stores an explicit ``StageAuthority``. The keyword
classification below exists to pick a sensible authority when a department is
created without one and to backfill databases that predate the stored column;
the workflow itself only reads the stored value.
"""

import re
import unicodedata
from typing import Optional

from reinftrack.domain.entities import Department, StageAuthority, UserAccount
from reinftrack.domain.errors import ValidationError

# Checked in order, first match wins. The longer keywords match anywhere in
# the name; "dp" and "rh" only count as whole words ("Setor DP", not "DPX").
ACCOUNTING_KEYWORDS = ("contab",)
HR_KEYWORDS = ("folha", "pessoal")
HR_WORDS = ("dp", "rh")
FISCAL_KEYWORDS = ("fiscal", "tribut")


def normalize_label(label: str) -> str:
    """Case-fold a label and strip diacritics ("Contábil" -> "contabil")."""
    decomposed = unicodedata.normalize("NFD", label.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def classify_department_name(label: str) -> StageAuthority:
    """Guess the stage authority of a department from its name.

    Args:
        label: Department name, e.g. "Contabilidade" or "Folha de Pagamento"

    Returns:
        Matching StageAuthority, or StageAuthority.NONE if no keyword matches
    """
    name = normalize_label(label)
    words = set(re.findall(r"[a-z0-9]+", name))

    if any(keyword in name for keyword in ACCOUNTING_KEYWORDS):
        return StageAuthority.ACCOUNTING
    if any(keyword in name for keyword in HR_KEYWORDS) or words & set(HR_WORDS):
        return StageAuthority.HR
    if any(keyword in name for keyword in FISCAL_KEYWORDS):
        return StageAuthority.FISCAL
    return StageAuthority.NONE


def resolve_permission(department_label: Optional[str], is_administrator: bool) -> StageAuthority:
    """Resolve the stage authority for a department label.

    Administrators get ``ALL`` regardless of department. A missing label
    resolves to ``NONE``.
    """
    if is_administrator:
        return StageAuthority.ALL
    if not department_label:
        return StageAuthority.NONE
    return classify_department_name(department_label)


def resolve_user_authority(user: UserAccount, department: Optional[Department]) -> StageAuthority:
    """Resolve a user's authority from their department's stored authority."""
    if user.is_admin:
        return StageAuthority.ALL
    if department is None:
        return StageAuthority.NONE
    return department.authority


def authority_allows(authority: StageAuthority, required: StageAuthority) -> bool:
    """Return True if ``authority`` may perform a step requiring ``required``."""
    if authority == StageAuthority.NONE:
        return False
    return authority == StageAuthority.ALL or authority == required


def parse_authority(value: str | StageAuthority) -> StageAuthority:
    """Parse an authority from its value or name ("contabil", "ACCOUNTING")."""
    if isinstance(value, StageAuthority):
        return value
    text = value.strip()
    for authority in StageAuthority:
        if text.lower() == authority.value or text.upper() == authority.name:
            return authority
    choices = ", ".join(a.value for a in StageAuthority)
    raise ValidationError(f"Invalid authority '{value}'. Expected one of: {choices}")
