import json

import pytest
from click.testing import CliRunner

from taskforge import cli as cli_module
from taskforge.cli import cli
from taskforge.config import get_settings
from taskforge.errors import PrerequisiteMissing

pytestmark = pytest.mark.integration


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'cli.db'}"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_bootstrap_roles_twice(runner, db_url):
    first = runner.invoke(cli, ["--database-url", db_url, "bootstrap-roles"])
    second = runner.invoke(cli, ["--database-url", db_url, "bootstrap-roles"])

    assert first.exit_code == 0, first.output
    assert "OWNER, ADMIN, MEMBER" in first.output
    assert second.exit_code == 0
    assert "Roles created: none" in second.output


def test_seed_demo_then_skip(runner, db_url):
    result = runner.invoke(cli, ["--database-url", db_url, "seed-demo", "--count", "10", "--seed", "1"])
    again = runner.invoke(cli, ["--database-url", db_url, "seed-demo", "--count", "10", "--seed", "1"])

    assert result.exit_code == 0, result.output
    assert "Seeded demo dataset" in result.output
    assert again.exit_code == 0
    assert "Skipped" in again.output


def test_seed_multi_with_fixtures_then_migrate(runner, db_url, tmp_path):
    fixtures = tmp_path / "fixtures"
    result = runner.invoke(
        cli,
        ["--database-url", db_url, "seed-multi", "--users", "4", "--tasks", "30",
         "--export-fixtures", "--fixtures-dir", str(fixtures), "--seed", "3"],
    )
    assert result.exit_code == 0, result.output
    assert len(json.loads((fixtures / "tasks.json").read_text(encoding="utf-8"))) == 30

    migrated = runner.invoke(cli, ["--database-url", db_url, "migrate-realnames", "--seed", "3"])
    assert migrated.exit_code == 0, migrated.output
    assert "Users changed: 0" in migrated.output


def test_fatal_error_exits_non_zero(runner, db_url, monkeypatch):
    def fail(*args, **kwargs):
        raise PrerequisiteMissing(["OWNER"])

    monkeypatch.setattr(cli_module, "seed_demo_data", fail)

    result = runner.invoke(cli, ["--database-url", db_url, "seed-demo"])

    assert result.exit_code == 1
    assert "Required roles missing: OWNER" in result.output


def test_init_db_creates_tables(runner, db_url, tmp_path):
    result = runner.invoke(cli, ["--database-url", db_url, "init-db"])

    assert result.exit_code == 0, result.output
    assert "Tables ready." in result.output
    assert (tmp_path / "cli.db").exists()


def test_export_fixtures_defaults_to_configured_directory(runner, db_url, tmp_path, monkeypatch, fresh_settings):
    fixtures = tmp_path / "from-env"
    monkeypatch.setenv("SEED_FIXTURES_DIR", str(fixtures))
    get_settings.cache_clear()

    result = runner.invoke(
        cli, ["--database-url", db_url, "seed-multi", "--users", "3", "--tasks", "12", "--export-fixtures"]
    )

    assert result.exit_code == 0, result.output
    assert len(json.loads((fixtures / "tasks.json").read_text(encoding="utf-8"))) == 12


def test_seed_multi_without_flag_writes_no_fixtures(runner, db_url, tmp_path, monkeypatch, fresh_settings):
    fixtures = tmp_path / "from-env"
    monkeypatch.setenv("SEED_FIXTURES_DIR", str(fixtures))
    get_settings.cache_clear()

    result = runner.invoke(cli, ["--database-url", db_url, "seed-multi", "--users", "2", "--tasks", "4"])

    assert result.exit_code == 0, result.output
    assert not fixtures.exists()


def test_invalid_seed_config_exits_non_zero(runner, db_url, monkeypatch, fresh_settings):
    monkeypatch.setenv("SEED_WORKSPACES_PER_USER_MIN", "3")
    monkeypatch.setenv("SEED_WORKSPACES_PER_USER_MAX", "1")
    get_settings.cache_clear()

    result = runner.invoke(cli, ["--database-url", db_url, "seed-multi"])

    assert result.exit_code == 1
    assert "Error" in result.output
    assert "workspaces_per_user_min must not exceed workspaces_per_user_max" in result.output.replace("\n", " ")
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_negative_demo_count_exits_non_zero(runner, db_url):
    result = runner.invoke(cli, ["--database-url", db_url, "seed-demo", "--count", "-1"])

    assert result.exit_code == 1
    assert "Error" in result.output
