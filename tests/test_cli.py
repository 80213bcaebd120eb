from typer.testing import CliRunner

from ilo_cli.cli import app


def test_help_shows_available_commands(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("test-connection", "exec", "power", "uid", "network", "users", "system"):
        assert command in result.stdout


def test_users_help_shows_expected_subcommands(runner: CliRunner) -> None:
    result = runner.invoke(app, ["users", "--help"])

    assert result.exit_code == 0
    for command in ("list", "get", "add", "update", "delete", "add-many"):
        assert command in result.stdout


def test_system_help_shows_expected_subcommands(runner: CliRunner) -> None:
    result = runner.invoke(app, ["system", "--help"])

    assert result.exit_code == 0
    for command in ("firmware", "host", "health", "set-name", "settings", "set-settings"):
        assert command in result.stdout


def test_users_add_many_help_shows_input_examples(runner: CliRunner) -> None:
    result = runner.invoke(app, ["users", "add-many", "--help"])

    assert result.exit_code == 0
    assert "Input examples:" in result.stdout
    assert '"user_login": "ops"' in result.stdout
    assert "user_login,user_name,password" in result.stdout


def test_version_command(runner: CliRunner) -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert result.stdout.startswith("ilo-cli ")
