"""Tests for CLI commands."""

import pytest

from reinftrack.cli.main import cli
from reinftrack.domain.entities import DeclarationPeriod, EntryStatus, StageAuthority

TEST_SECRET = "cli-test-secret"


def run(cli_runner, temp_db, *args, env=None):
    """Invoke the CLI against the temporary database."""
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], env=env)


def test_help_does_not_touch_database(cli_runner, tmp_path):
    db_path = tmp_path / "never.db"
    result = cli_runner.invoke(cli, ["--db-path", str(db_path), "--help"])

    assert result.exit_code == 0
    assert "entry" in result.output
    assert not db_path.exists()


class TestRegimeCommands:
    def test_seed_and_list(self, cli_runner, temp_db):
        result = run(cli_runner, temp_db, "regime", "seed")
        assert result.exit_code == 0
        assert "Created tax regime 'Simples Nacional' (trimestral)" in result.output

        result = run(cli_runner, temp_db, "regime", "seed")
        assert "All default regimes already exist." in result.output

        result = run(cli_runner, temp_db, "regime", "list")
        assert "Lucro Real" in result.output

    def test_set_period(self, cli_runner, temp_db, sample_regimes):
        result = run(cli_runner, temp_db, "regime", "set", "MEI", "mensal")
        assert result.exit_code == 0
        assert "Period of regime 'MEI' set to mensal" in result.output

    def test_set_unknown_regime(self, cli_runner, temp_db):
        result = run(cli_runner, temp_db, "regime", "set", "Nope", "mensal")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestCompanyCommands:
    def test_create_and_show(self, cli_runner, temp_db, sample_regimes):
        result = run(
            cli_runner, temp_db, "company", "create", "Beta",
            "--cnpj", "11.222.333/0001-44", "--regime", "Lucro Real",
        )
        assert result.exit_code == 0
        assert "Created company 'Beta'" in result.output

        result = run(cli_runner, temp_db, "company", "show", "Beta")
        assert result.exit_code == 0
        assert "CNPJ:       11.222.333/0001-44" in result.output
        assert "Period:     mensal (regime default)" in result.output

    def test_create_with_bad_cnpj(self, cli_runner, temp_db, sample_regimes):
        result = run(cli_runner, temp_db, "company", "create", "Beta", "--cnpj", "123", "--regime", "MEI")
        assert result.exit_code == 1
        assert "CNPJ must have 14 digits" in result.output

    def test_list(self, cli_runner, temp_db, sample_company):
        result = run(cli_runner, temp_db, "company", "list")
        assert result.exit_code == 0
        assert "Acme" in result.output
        assert "12.345.678/0001-90" in result.output


class TestDepartmentCommands:
    def test_create_guesses_authority(self, cli_runner, temp_db):
        result = run(cli_runner, temp_db, "department", "create", "Folha de Pagamento")
        assert result.exit_code == 0
        assert "with authority 'dp'" in result.output

    def test_set_authority(self, cli_runner, temp_db, sample_departments):
        sales_id = sample_departments["sales"].id
        result = run(cli_runner, temp_db, "department", "set-authority", str(sales_id), "fiscal")
        assert result.exit_code == 0

        temp_db.disconnect()
        assert temp_db.get_department(sales_id).authority == StageAuthority.FISCAL


class TestEntryCommands:
    def test_full_workflow(self, cli_runner, temp_db, sample_company, sample_users):
        result = run(cli_runner, temp_db, "entry", "create", "Acme", "2024-Q1")
        assert result.exit_code == 0
        assert "for 2024-Q1" in result.output
        entry_id = temp_db.list_entries(year=2024, quarter=1)[0].id

        result = run(
            cli_runner, temp_db, "entry", "fill", str(entry_id), "1.234,56", "0", "100",
            "--user", "ana@example.com",
        )
        assert result.exit_code == 0
        assert "total R$ 1.334,56" in result.output

        for email in ("ana@example.com", "hugo@example.com", "fia@example.com"):
            result = run(cli_runner, temp_db, "entry", "advance", str(entry_id), "--user", email)
            assert result.exit_code == 0, result.output

        assert "to 'Sent'" in result.output
        assert temp_db.get_entry(entry_id).status == EntryStatus.SENT

        result = run(cli_runner, temp_db, "entry", "show", str(entry_id))
        assert "Status: Sent (enviado)" in result.output
        assert sample_users["fiscal"].id in result.output

    def test_duplicate_entry(self, cli_runner, temp_db, workflow_service, sample_company):
        workflow_service.create_entry(sample_company.id, DeclarationPeriod(2024, 1))

        result = run(cli_runner, temp_db, "entry", "create", "Acme", "Q1/2024")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_wrong_department_cannot_advance(self, cli_runner, temp_db, workflow_service, sample_company, sample_users):
        entry = workflow_service.create_entry(sample_company.id, DeclarationPeriod(2024, 1))
        workflow_service.fill_profits(entry, [10, 0, 0])

        result = run(cli_runner, temp_db, "entry", "advance", str(entry.id), "--user", "hugo@example.com")
        assert result.exit_code == 1
        assert "requires 'contabil' authority" in result.output
        assert temp_db.get_entry(entry.id).status == EntryStatus.PENDING_ACCOUNTING

    def test_advance_without_profits(self, cli_runner, temp_db, workflow_service, sample_company, sample_users):
        entry = workflow_service.create_entry(sample_company.id, DeclarationPeriod(2024, 1))

        result = run(cli_runner, temp_db, "entry", "advance", str(entry.id), "--user", "ana@example.com")
        assert result.exit_code == 1
        assert "Fill in at least one monthly profit" in result.output

    def test_show_available_actions(self, cli_runner, temp_db, workflow_service, sample_company, sample_users):
        entry = workflow_service.create_entry(sample_company.id, DeclarationPeriod(2024, 1))

        result = run(cli_runner, temp_db, "entry", "show", str(entry.id), "--user", "ana@example.com")
        assert "Available actions: fill" in result.output

        result = run(cli_runner, temp_db, "entry", "show", str(entry.id), "--user", "vera@example.com")
        assert "Available actions: none" in result.output

    def test_list_filters(self, cli_runner, temp_db, workflow_service, sample_company):
        workflow_service.create_entry(sample_company.id, DeclarationPeriod(2024, 1))

        result = run(cli_runner, temp_db, "entry", "list", "--period", "2024-Q1")
        assert "Acme" in result.output
        assert "Pending accounting" in result.output

        result = run(cli_runner, temp_db, "entry", "list", "--status", "enviado")
        assert "No entries found." in result.output


class TestUserCommands:
    @pytest.fixture
    def env(self):
        return {"REINFTRACK_SECRET_KEY": TEST_SECRET}

    @pytest.fixture
    def token(self, cli_runner, temp_db, env):
        result = run(
            cli_runner, temp_db, "user", "bootstrap-admin", "root@example.com",
            "--name", "Root", "--password", "rootpw", env=env,
        )
        assert result.exit_code == 0, result.output
        result = run(cli_runner, temp_db, "user", "login", "root@example.com", "--password", "rootpw", env=env)
        assert result.exit_code == 0, result.output
        return result.output.strip()

    def test_bootstrap_admin_twice(self, cli_runner, temp_db, env, token):
        result = run(
            cli_runner, temp_db, "user", "bootstrap-admin", "root@example.com",
            "--name", "Root", "--password", "rootpw", env=env,
        )
        assert result.exit_code == 0
        assert "already exists" in result.output

    def test_missing_secret_key(self, cli_runner, temp_db):
        result = run(
            cli_runner, temp_db, "user", "login", "a@example.com", "--password", "x",
            env={"REINFTRACK_SECRET_KEY": ""},
        )
        assert result.exit_code == 1
        assert "REINFTRACK_SECRET_KEY" in result.output

    def test_create_and_delete_user(self, cli_runner, temp_db, env, token, sample_departments):
        result = run(
            cli_runner, temp_db, "user", "create", "new@example.com",
            "--name", "Novo", "--password", "pw", "--department", str(sample_departments["fiscal"].id),
            "--token", token, env=env,
        )
        assert result.exit_code == 0, result.output
        user_id = temp_db.get_profile_by_email("new@example.com").id

        result = run(cli_runner, temp_db, "user", "list", env={**env, "REINFTRACK_TOKEN": token})
        assert "new@example.com" in result.output
        assert "Fiscal" in result.output

        result = run(cli_runner, temp_db, "user", "delete", user_id, "--token", token, env=env)
        assert result.exit_code == 0
        assert f"Deleted user {user_id}" in result.output

    def test_create_user_without_token(self, cli_runner, temp_db, env):
        result = run(
            cli_runner, temp_db, "user", "create", "new@example.com", "--name", "Novo", "--password", "pw",
            env={**env, "REINFTRACK_TOKEN": ""},
        )
        assert result.exit_code == 1
        assert "Not authenticated" in result.output

    def test_admin_cannot_delete_self(self, cli_runner, temp_db, env, token):
        user_id = temp_db.get_profile_by_email("root@example.com").id
        result = run(cli_runner, temp_db, "user", "delete", user_id, "--token", token, env=env)
        assert result.exit_code == 1
        assert "You cannot delete your own account." in result.output

    def test_wrong_password(self, cli_runner, temp_db, env, token):
        result = run(cli_runner, temp_db, "user", "login", "root@example.com", "--password", "nope", env=env)
        assert result.exit_code == 1
        assert "Invalid email or password" in result.output
