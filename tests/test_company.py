"""Tests for company and department services."""

import pytest

from reinftrack.domain.entities import DeclarationPeriod, PeriodType, StageAuthority
from reinftrack.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from reinftrack.utils.cnpj import format_cnpj, parse_cnpj
from reinftrack.utils.resolvers import resolve_company, resolve_user


class TestCompanyService:
    """Tests for CompanyService."""

    def test_create_company_stores_digits(self, sample_company):
        assert sample_company.cnpj == "12345678000190"
        assert sample_company.regime == "Lucro Presumido"
        assert sample_company.period_type is None

    def test_create_company_with_override(self, company_service, sample_regimes):
        company_id = company_service.create_company(
            "Beta", "Beta SA", "11222333000144", "Simples Nacional", period_type="MENSAL"
        )
        assert company_service.get_company(company_id).period_type == PeriodType.MENSAL

    @pytest.mark.parametrize(
        "name, legal_name, cnpj",
        [
            ("", "Legal", "12345678000190"),
            ("Name", " ", "12345678000190"),
            ("Name", "Legal", "123"),
        ],
    )
    def test_create_company_validation(self, company_service, sample_regimes, name, legal_name, cnpj):
        with pytest.raises(ValidationError):
            company_service.create_company(name, legal_name, cnpj, "MEI")

    def test_create_company_unknown_regime(self, company_service, sample_regimes):
        with pytest.raises(NotFoundError):
            company_service.create_company("Beta", "Beta SA", "11222333000144", "Lucro Imaginario")

    def test_update_company(self, company_service, sample_company):
        company_service.update_company(
            sample_company.id, "Acme Nova", "Acme Nova Ltda", "11.222.333/0001-44", "Lucro Real", "trimestral"
        )
        company = company_service.get_company(sample_company.id)
        assert company.name == "Acme Nova"
        assert company.cnpj == "11222333000144"
        assert company.period_type == PeriodType.TRIMESTRAL

    def test_delete_company(self, company_service, sample_company):
        company_service.delete_company(sample_company.id)
        with pytest.raises(NotFoundError):
            company_service.get_company(sample_company.id)

    def test_delete_company_with_entries(self, company_service, workflow_service, sample_company):
        workflow_service.create_entry(sample_company.id, DeclarationPeriod(2024, 1))
        with pytest.raises(DependencyError):
            company_service.delete_company(sample_company.id)

    def test_resolve_company(self, temp_db, sample_company):
        assert resolve_company(temp_db, sample_company.id) == sample_company.id
        assert resolve_company(temp_db, str(sample_company.id)) == sample_company.id
        assert resolve_company(temp_db, "Acme") == sample_company.id
        assert resolve_company(temp_db, "Acme Comercio Ltda") == sample_company.id
        with pytest.raises(NotFoundError):
            resolve_company(temp_db, "Nope")
        with pytest.raises(NotFoundError):
            resolve_company(temp_db, 999)


class TestDepartmentService:
    """Tests for DepartmentService."""

    def test_authority_guessed_from_name(self, sample_departments):
        assert sample_departments["accounting"].authority == StageAuthority.ACCOUNTING
        assert sample_departments["hr"].authority == StageAuthority.HR
        assert sample_departments["fiscal"].authority == StageAuthority.FISCAL
        assert sample_departments["sales"].authority == StageAuthority.NONE

    def test_explicit_authority_wins_over_name(self, department_service):
        department_id = department_service.create_department("Controladoria", "contabil")
        assert department_service.get_department(department_id).authority == StageAuthority.ACCOUNTING

    def test_departments_cannot_hold_all(self, department_service, sample_departments):
        with pytest.raises(ValidationError):
            department_service.create_department("Diretoria", StageAuthority.ALL)
        with pytest.raises(ValidationError):
            department_service.set_authority(sample_departments["sales"].id, "all")

    def test_duplicate_and_blank_names(self, department_service, sample_departments):
        with pytest.raises(ConflictError):
            department_service.create_department("Fiscal")
        with pytest.raises(ValidationError):
            department_service.create_department("   ")

    def test_renaming_is_not_needed_to_change_authority(self, department_service, workflow_service, sample_users, sample_departments):
        sales = sample_departments["sales"]
        assert workflow_service.authority_for(sample_users["sales"]) == StageAuthority.NONE

        department_service.set_authority(sales.id, "fiscal")

        assert workflow_service.authority_for(sample_users["sales"]) == StageAuthority.FISCAL

    def test_delete_department_with_users(self, department_service, sample_users, sample_departments):
        with pytest.raises(DependencyError):
            department_service.delete_department(sample_departments["hr"].id)

    def test_delete_empty_department(self, department_service):
        department_id = department_service.create_department("Juridico")
        department_service.delete_department(department_id)
        with pytest.raises(NotFoundError):
            department_service.get_department(department_id)

    def test_resolve_user(self, temp_db, sample_users):
        ana = sample_users["accounting"]
        assert resolve_user(temp_db, ana.id).id == ana.id
        assert resolve_user(temp_db, "ANA@example.com").id == ana.id
        with pytest.raises(NotFoundError):
            resolve_user(temp_db, "ghost@example.com")


def test_cnpj_helpers():
    assert parse_cnpj("12.345.678/0001-90") == "12345678000190"
    assert format_cnpj("12345678000190") == "12.345.678/0001-90"
    assert format_cnpj("123") == "123"
    with pytest.raises(ValueError):
        parse_cnpj("12.345.678/0001")
