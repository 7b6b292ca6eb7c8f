"""Tests for the operator CLI."""

import pytest
from click.testing import CliRunner

from extreg.auth.provider import IdentityProvider
from extreg.cli import main


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("EXTREG_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("EXTREG_TOKEN_SECRET", "cli-secret")
    monkeypatch.setenv("EXTREG_CONFIG", str(tmp_path / "absent.yaml"))
    return tmp_path / "data"


def test_bootstrap_first_admin(data_dir):
    runner = CliRunner()
    result = runner.invoke(main, ["accounts", "create", "boss@example.com"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(main, ["grant-admin", "boss@example.com"])
    assert result.exit_code == 0, result.output
    assert "Admin claim granted" in result.output

    result = runner.invoke(main, ["token", "boss@example.com"])
    assert result.exit_code == 0, result.output
    provider = IdentityProvider(data_dir / "auth", secret="cli-secret")
    assert provider.verify_token(result.stdout.strip()).is_admin


def test_grant_admin_unknown_account(data_dir):
    result = CliRunner().invoke(main, ["grant-admin", "ghost@example.com"])
    assert result.exit_code != 0
    assert "No account found" in result.output


def test_empty_listings(data_dir):
    runner = CliRunner()
    assert "No submissions" in runner.invoke(main, ["submissions"]).output
    assert runner.invoke(main, ["registry", "list"]).exit_code == 0
    assert runner.invoke(main, ["audit", "--json"]).stdout.strip() == "[]"


def test_validate_unknown_submission(data_dir):
    result = CliRunner().invoke(main, ["validate", "missing"])
    assert result.exit_code != 0
