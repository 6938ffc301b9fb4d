"""Shared pytest fixtures for reinftrack tests."""

import tempfile
import os
import pytest

from reinftrack.database.factories import create_sqlite_database
from reinftrack.domain.company import CompanyService
from reinftrack.domain.department import DepartmentService
from reinftrack.domain.period import RegimeService
from reinftrack.domain.provisioning import ProvisioningService
from reinftrack.domain.workflow import WorkflowService
from reinftrack.identity.local import LocalIdentityProvider

TEST_SECRET = "test-secret-key"
SAMPLE_CNPJ = "12.345.678/0001-90"


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def regime_service(temp_db):
    """Create a RegimeService with a temporary database."""
    return RegimeService(temp_db)


@pytest.fixture
def company_service(temp_db):
    """Create a CompanyService with a temporary database."""
    return CompanyService(temp_db)


@pytest.fixture
def department_service(temp_db):
    """Create a DepartmentService with a temporary database."""
    return DepartmentService(temp_db)


@pytest.fixture
def workflow_service(temp_db):
    """Create a WorkflowService with a temporary database."""
    return WorkflowService(temp_db)


@pytest.fixture
def identity(temp_db):
    """Local identity provider with cheap hashing parameters."""
    return LocalIdentityProvider(
        temp_db,
        secret_key=TEST_SECRET,
        token_minutes=5,
        argon2_time_cost=1,
        argon2_memory_cost=1024,
    )


@pytest.fixture
def provisioning_service(temp_db, identity):
    """Create a ProvisioningService with a temporary database."""
    return ProvisioningService(temp_db, identity)


@pytest.fixture
def sample_regimes(regime_service):
    """Seed the default tax regimes; Lucro Real is monthly."""
    regime_service.seed_default_regimes()
    regime_service.set_regime_period("Lucro Real", "mensal")
    return regime_service.list_regimes()


@pytest.fixture
def sample_company(company_service, sample_regimes):
    """Create a sample company under Lucro Presumido."""
    company_id = company_service.create_company(
        name="Acme",
        legal_name="Acme Comercio Ltda",
        cnpj=SAMPLE_CNPJ,
        regime="Lucro Presumido",
    )
    return company_service.get_company(company_id)


@pytest.fixture
def sample_departments(department_service):
    """Create one department per workflow stage plus an unrelated one."""
    return {
        "accounting": department_service.get_department(department_service.create_department("Contabilidade")),
        "hr": department_service.get_department(department_service.create_department("Departamento Pessoal")),
        "fiscal": department_service.get_department(department_service.create_department("Fiscal")),
        "sales": department_service.get_department(department_service.create_department("Vendas")),
    }


def _add_user(db, identity, email, full_name, department_id=None, is_admin=False):
    user_id = identity.create_account(email, "secret123")
    db.create_profile(
        user_id=user_id,
        full_name=full_name,
        email=email,
        department_id=department_id,
        is_admin=is_admin,
    )
    return db.get_profile(user_id)


@pytest.fixture
def sample_users(temp_db, identity, sample_departments):
    """Create one user per department plus an administrator."""
    return {
        "admin": _add_user(temp_db, identity, "admin@example.com", "Admin", is_admin=True),
        "accounting": _add_user(
            temp_db, identity, "ana@example.com", "Ana Contadora", sample_departments["accounting"].id
        ),
        "hr": _add_user(temp_db, identity, "hugo@example.com", "Hugo Pessoal", sample_departments["hr"].id),
        "fiscal": _add_user(temp_db, identity, "fia@example.com", "Fia Fiscal", sample_departments["fiscal"].id),
        "sales": _add_user(temp_db, identity, "vera@example.com", "Vera Vendas", sample_departments["sales"].id),
        "unassigned": _add_user(temp_db, identity, "nina@example.com", "Nina Sem Setor"),
    }


@pytest.fixture
def admin_token(identity, sample_users):
    """Bearer header value for the sample administrator."""
    return f"Bearer {identity.issue_token(sample_users['admin'].id)}"


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def enforce_foreign_keys(temp_db):
    """Turn on SQLite foreign key enforcement, as server databases do."""
    from sqlalchemy import event

    engine = temp_db.session_factory.kw["bind"]

    def enable(dbapi_connection, connection_record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    event.listen(engine, "connect", enable)
    # Drop pooled connections opened before the listener existed
    temp_db.disconnect()
    engine.dispose()

    yield engine

    event.remove(engine, "connect", enable)
