"""End-to-end tests across provisioning, permissions and the workflow."""

import importlib.util
import os
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

from reinftrack.database.factories import create_sqlite_database
from reinftrack.domain.entities import DeclarationPeriod, EntryStatus, StageAuthority
from reinftrack.domain.errors import UnauthorizedError
from reinftrack.domain.workflow import WorkflowService
from reinftrack.utils.amount_parser import parse_amount

MIGRATIONS_DIR = Path(__file__).parent.parent / "migrations"


def test_provisioned_users_drive_an_entry_to_sent(
    temp_db, provisioning_service, department_service, company_service, sample_regimes
):
    admin_id, _ = provisioning_service.bootstrap_admin("root@example.com", "rootpw", "Root")
    admin_token = f"Bearer {provisioning_service.login('root@example.com', 'rootpw')}"

    departments = {
        name: department_service.create_department(name)
        for name in ("Contabilidade", "RH", "Tributario")
    }
    users = {}
    for email, department in (
        ("c@example.com", "Contabilidade"),
        ("h@example.com", "RH"),
        ("f@example.com", "Tributario"),
    ):
        user_id = provisioning_service.create_user(admin_token, email, "pw", email, departments[department])
        users[department] = temp_db.get_profile(user_id)

    company_id = company_service.create_company("Gama", "Gama Ltda", "99888777000166", "Lucro Real")
    workflow = WorkflowService(temp_db)
    period = DeclarationPeriod(2024, 2)
    entry = workflow.create_entry(company_id, period)

    with pytest.raises(UnauthorizedError):
        workflow.fill_profits(entry, ["1", "2", "3"], requester=users["RH"])
    entry = workflow.fill_profits(entry, [parse_amount("1.000,00"), "0", "0"], requester=users["Contabilidade"])
    entry = workflow.advance(entry, users["Contabilidade"])
    entry = workflow.advance(entry, users["RH"])
    entry = workflow.advance(entry, users["Tributario"])

    assert entry.status == EntryStatus.SENT
    assert entry.total_profit == Decimal("1000.00")
    assert (entry.accounting_user_id, entry.hr_user_id, entry.fiscal_user_id) == (
        users["Contabilidade"].id,
        users["RH"].id,
        users["Tributario"].id,
    )
    assert entry.accounting_done_at <= entry.hr_approved_at <= entry.fiscal_sent_at
    assert admin_id not in (entry.accounting_user_id, entry.hr_user_id, entry.fiscal_user_id)


def test_moving_user_changes_authority(provisioning_service, admin_token, workflow_service, sample_users, sample_departments):
    user = sample_users["sales"]
    assert workflow_service.authority_for(user) == StageAuthority.NONE

    provisioning_service.set_user_department(admin_token, user.id, sample_departments["accounting"].id)

    moved = provisioning_service.db.get_profile(user.id)
    assert workflow_service.authority_for(moved) == StageAuthority.ACCOUNTING


def _load_migration(name):
    spec = importlib.util.spec_from_file_location(name, MIGRATIONS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def legacy_db_path():
    """A database whose roles table predates the authority column."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    engine = create_engine(f"sqlite:///{db_path}")
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE roles (id INTEGER PRIMARY KEY, name VARCHAR NOT NULL UNIQUE, "
            "created_at DATETIME NOT NULL)"
        ))
        for name in ("Contabilidade", "DP", "Fiscal", "Comercial"):
            conn.execute(
                text("INSERT INTO roles (name, created_at) VALUES (:name, '2024-01-01 00:00:00')"),
                {"name": name},
            )
    engine.dispose()

    yield db_path

    if os.path.exists(db_path):
        os.unlink(db_path)


def test_department_authority_migration(legacy_db_path):
    migration = _load_migration("migrate_add_department_authority")

    migration.migrate_database(database_path=legacy_db_path)
    # Running again is a no-op
    migration.migrate_database(database_path=legacy_db_path)

    db = create_sqlite_database(database_path=legacy_db_path)
    try:
        authorities = {d.name: d.authority for d in db.list_departments()}
    finally:
        db.disconnect()
    assert authorities == {
        "Comercial": StageAuthority.NONE,
        "Contabilidade": StageAuthority.ACCOUNTING,
        "DP": StageAuthority.HR,
        "Fiscal": StageAuthority.FISCAL,
    }
