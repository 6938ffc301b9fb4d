"""Tests for database mappers."""

import pytest
from datetime import datetime, UTC
from decimal import Decimal

from reinftrack.database.models import (
    Company as ORMCompany,
    Profile as ORMProfile,
    RegimePeriodConfig as ORMRegimePeriodConfig,
    ReinfEntry as ORMReinfEntry,
    Role as ORMRole,
)
from reinftrack.database.mappers import (
    ENTRY_STAMP_COLUMNS,
    company_to_domain,
    department_to_domain,
    entry_stamp_column,
    entry_to_domain,
    regime_to_domain,
    user_to_domain,
)
from reinftrack.domain.entities import (
    Company,
    DeclarationEntry,
    EntryStatus,
    PeriodType,
    StageAuthority,
)


class TestCompanyMapper:
    """Tests for Company and regime mappers."""

    def test_company_to_domain(self):
        orm_company = ORMCompany(
            id=1,
            nome="Acme",
            razao_social="Acme Comercio Ltda",
            cnpj="12345678000190",
            regime="Lucro Real",
            periodo_tipo="mensal",
            created_at=datetime.now(UTC),
        )

        company = company_to_domain(orm_company)

        assert isinstance(company, Company)
        assert company.name == "Acme"
        assert company.legal_name == "Acme Comercio Ltda"
        assert company.period_type == PeriodType.MENSAL

    def test_company_without_override(self):
        orm_company = ORMCompany(
            id=1, nome="Acme", razao_social="Acme", cnpj="12345678000190",
            regime="MEI", periodo_tipo=None, created_at=datetime.now(UTC),
        )
        assert company_to_domain(orm_company).period_type is None

    def test_regime_to_domain(self):
        orm_regime = ORMRegimePeriodConfig(
            id=3, regime="Lucro Presumido", periodo_tipo="trimestral", created_at=datetime.now(UTC)
        )
        assert regime_to_domain(orm_regime).period_type == PeriodType.TRIMESTRAL


class TestUserMappers:
    """Tests for department and profile mappers."""

    def test_department_to_domain(self):
        orm_role = ORMRole(id=2, name="RH", authority="dp", created_at=datetime.now(UTC))
        assert department_to_domain(orm_role).authority == StageAuthority.HR

    def test_user_to_domain(self):
        orm_profile = ORMProfile(
            id="abc", full_name="Ana", email="ana@example.com",
            role_id=None, is_admin=None, created_at=datetime.now(UTC),
        )
        user = user_to_domain(orm_profile)
        assert user.department_id is None
        assert user.is_admin is False


class TestEntryMapper:
    """Tests for ReinfEntry mapper."""

    def test_entry_to_domain(self):
        done_at = datetime(2024, 4, 2, 9, 0, tzinfo=UTC)
        orm_entry = ORMReinfEntry(
            id=7,
            company_id=1,
            ano=2024,
            trimestre=1,
            lucro_mes1=Decimal("100.00"),
            lucro_mes2=Decimal("0.00"),
            lucro_mes3=None,
            status="contabil_ok",
            contabil_usuario_id="u-1",
            contabil_preenchido_em=done_at,
            created_at=datetime.now(UTC),
        )

        entry = entry_to_domain(orm_entry)

        assert isinstance(entry, DeclarationEntry)
        assert entry.status == EntryStatus.ACCOUNTING_DONE
        assert entry.amounts == (Decimal("100.00"), Decimal("0"), Decimal("0"))
        assert entry.total_profit == Decimal("100.00")
        assert entry.accounting_user_id == "u-1"
        assert entry.accounting_done_at == done_at
        assert entry.hr_user_id is None
        assert entry.period.quarter == 1

    def test_entry_stamp_columns_cover_entry_fields(self):
        for field_name, column in ENTRY_STAMP_COLUMNS.items():
            assert field_name in DeclarationEntry.__dataclass_fields__
            assert hasattr(ORMReinfEntry, column)

    def test_entry_stamp_column_rejects_unknown_field(self):
        assert entry_stamp_column("hr_user_id") == "dp_usuario_id"
        with pytest.raises(ValueError):
            entry_stamp_column("status")
