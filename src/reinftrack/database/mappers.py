"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the translation from the
Portuguese column names of the persisted schema to domain attribute names.
"""

from decimal import Decimal

from reinftrack.domain import entities as domain
from reinftrack.database.models import (
    AuthAccount as ORMAuthAccount,
    Company as ORMCompany,
    Profile as ORMProfile,
    RegimePeriodConfig as ORMRegimePeriodConfig,
    ReinfEntry as ORMReinfEntry,
    Role as ORMRole,
)

# DeclarationEntry attribute -> reinf_entries column
ENTRY_STAMP_COLUMNS = {
    "accounting_user_id": "contabil_usuario_id",
    "accounting_done_at": "contabil_preenchido_em",
    "hr_user_id": "dp_usuario_id",
    "hr_approved_at": "dp_aprovado_em",
    "fiscal_user_id": "fiscal_usuario_id",
    "fiscal_sent_at": "fiscal_enviado_em",
}

ENTRY_AMOUNT_COLUMNS = ("lucro_mes1", "lucro_mes2", "lucro_mes3")


def regime_to_domain(orm_regime: ORMRegimePeriodConfig) -> domain.TaxRegime:
    """Convert SQLAlchemy RegimePeriodConfig model to domain TaxRegime entity."""
    return domain.TaxRegime(
        id=orm_regime.id,
        regime=orm_regime.regime,
        period_type=domain.PeriodType(orm_regime.periodo_tipo),
        created_at=orm_regime.created_at,
    )


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        name=orm_company.nome,
        legal_name=orm_company.razao_social,
        cnpj=orm_company.cnpj,
        regime=orm_company.regime,
        period_type=domain.PeriodType(orm_company.periodo_tipo) if orm_company.periodo_tipo else None,
        created_at=orm_company.created_at,
    )


def department_to_domain(orm_role: ORMRole) -> domain.Department:
    """Convert SQLAlchemy Role model to domain Department entity."""
    return domain.Department(
        id=orm_role.id,
        name=orm_role.name,
        authority=domain.StageAuthority(orm_role.authority),
        created_at=orm_role.created_at,
    )


def user_to_domain(orm_profile: ORMProfile) -> domain.UserAccount:
    """Convert SQLAlchemy Profile model to domain UserAccount entity."""
    return domain.UserAccount(
        id=orm_profile.id,
        full_name=orm_profile.full_name,
        email=orm_profile.email,
        department_id=orm_profile.role_id,
        is_admin=bool(orm_profile.is_admin),
        created_at=orm_profile.created_at,
    )


def credential_to_domain(orm_account: ORMAuthAccount) -> domain.Credential:
    """Convert SQLAlchemy AuthAccount model to domain Credential entity."""
    return domain.Credential(
        id=orm_account.id,
        email=orm_account.email,
        password_hash=orm_account.password_hash,
        created_at=orm_account.created_at,
    )


def entry_to_domain(orm_entry: ORMReinfEntry) -> domain.DeclarationEntry:
    """Convert SQLAlchemy ReinfEntry model to domain DeclarationEntry entity."""
    return domain.DeclarationEntry(
        id=orm_entry.id,
        company_id=orm_entry.company_id,
        year=orm_entry.ano,
        quarter=orm_entry.trimestre,
        profit_month1=Decimal(orm_entry.lucro_mes1 or 0),
        profit_month2=Decimal(orm_entry.lucro_mes2 or 0),
        profit_month3=Decimal(orm_entry.lucro_mes3 or 0),
        status=domain.EntryStatus(orm_entry.status),
        accounting_user_id=orm_entry.contabil_usuario_id,
        accounting_done_at=orm_entry.contabil_preenchido_em,
        hr_user_id=orm_entry.dp_usuario_id,
        hr_approved_at=orm_entry.dp_aprovado_em,
        fiscal_user_id=orm_entry.fiscal_usuario_id,
        fiscal_sent_at=orm_entry.fiscal_enviado_em,
        created_at=orm_entry.created_at,
    )


def entry_stamp_column(field_name: str) -> str:
    """Return the reinf_entries column for a DeclarationEntry stamp attribute."""
    try:
        return ENTRY_STAMP_COLUMNS[field_name]
    except KeyError:
        raise ValueError(f"'{field_name}' is not a declaration entry stamp field") from None
