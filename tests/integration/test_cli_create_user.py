"""Integration tests for the create-user CLI command."""

import pytest
from click.testing import CliRunner

from userhub.cli import cli
from userhub.core.config import get_settings
from userhub.infrastructure.persistence import database


@pytest.fixture
def runner(tmp_path, monkeypatch):
    """CliRunner against a fresh SQLite file with the schema created."""
    monkeypatch.setenv("USERHUB_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/cli.db")
    monkeypatch.setenv("USERHUB_ENVIRONMENT", "development")
    monkeypatch.setattr(database, "_db_manager", None)
    get_settings.cache_clear()

    runner = CliRunner()
    result = runner.invoke(cli, ["init-db", "--force"])
    assert result.exit_code == 0, result.output

    yield runner

    get_settings.cache_clear()


def create_args(email: str = "ada@example.com") -> list[str]:
    return [
        "create-user",
        "--first-name", "Ada",
        "--last-name", "Lovelace",
        "--email", email,
        "--password", "secret1",
    ]


def test_create_user_success(runner):
    """Creates a user with the default role."""
    result = runner.invoke(cli, create_args(" Ada@Example.com "))

    assert result.exit_code == 0, result.output
    assert "User created successfully!" in result.output
    assert "Email:   ada@example.com" in result.output
    assert "Role ID: 4" in result.output


def test_create_user_prompts_for_password(runner):
    """Prompts for a hidden, confirmed password when none is given."""
    args = [arg for arg in create_args() if arg not in ("--password", "secret1")]

    result = runner.invoke(cli, args, input="secret1\nsecret1\n")

    assert result.exit_code == 0, result.output
    assert "Repeat for confirmation" in result.output
    assert "secret1" not in result.output


def test_create_user_invalid_email(runner):
    """Exits 1 when the request does not validate."""
    result = runner.invoke(cli, create_args("not-an-email"))

    assert result.exit_code == 1
    assert "Error: email" in result.output


def test_create_user_duplicate_email(runner):
    """Exits 1 when the email is already in use."""
    first = runner.invoke(cli, create_args())
    assert first.exit_code == 0, first.output

    second = runner.invoke(cli, create_args("ADA@example.com"))

    assert second.exit_code == 1
    assert "already exists" in second.output
