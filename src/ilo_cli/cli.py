"""Typer-based command line interface for HP iLO management processors."""

from pathlib import Path
from typing import Annotated

import typer
from rich.json import JSON

from ilo_cli import __version__
from ilo_cli.commands.common import build_client, console, handle_ilo_error
from ilo_cli.commands.network import network_app
from ilo_cli.commands.power import power_app, uid_app
from ilo_cli.commands.system import system_app
from ilo_cli.commands.users import users_app
from ilo_cli.config import Settings
from ilo_cli.connection import (
    DialectOption,
    HostOption,
    InsecureOption,
    PasswordOption,
    PortOption,
    UsernameOption,
)
from ilo_cli.errors import IloError
from ilo_cli.protocol.nodes import DecodedNode
from ilo_cli.protocol.result import Failed
from ilo_cli.services.system_service import SystemService

app = typer.Typer(
    no_args_is_help=True,
    help="Manage HP iLO management processors over the RIBCL XML interface.",
)
app.add_typer(power_app, name="power")
app.add_typer(uid_app, name="uid")
app.add_typer(network_app, name="network")
app.add_typer(users_app, name="users")
app.add_typer(system_app, name="system")


def _parse_assignments(assignments: list[str]) -> dict[str, object]:
    params: dict[str, object] = {}
    for assignment in assignments:
        key, separator, value = assignment.partition("=")
        if not separator or not key.strip():
            raise typer.BadParameter(f"Expected KEY=VALUE, got '{assignment}'.")
        params[key.strip()] = value
    return params


@app.callback()
def common_options(
    ctx: typer.Context,
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Optional .env file with ILO_CLI_* variables.",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Log exchanges to stderr; repeat to include request and response documents.",
    ),
) -> None:
    """Load shared configuration for all commands."""

    ctx.obj = {
        "settings": Settings.from_env_file(env_file),
        "verbosity": verbose or None,
    }


@app.command("version")
def show_version() -> None:
    """Show the installed ilo-cli version."""

    console.print(f"ilo-cli {__version__}")


@app.command("test-connection")
def test_connection(
    ctx: typer.Context,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Log in, detect the RIBCL dialect and show the firmware version."""

    payload: dict[str, object] = {}
    try:
        client = build_client(ctx, host, username, password, port, insecure, dialect)
        resolved = client.dialect()
        firmware = SystemService(client).firmware()
        payload = {"dialect": resolved.value, **firmware.model_dump()}
    except IloError as exc:
        handle_ilo_error(exc)

    console.print(JSON.from_data(payload))


@app.command("exec")
def exec_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Logical command name, e.g. power_status.")],
    assignments: Annotated[
        list[str] | None,
        typer.Argument(help="Command parameters as KEY=VALUE pairs."),
    ] = None,
    xml: Annotated[
        bool,
        typer.Option("--xml", help="Print the decoded response as XML instead of JSON."),
    ] = False,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Run any logical command and print the decoded response."""

    params = _parse_assignments(assignments or [])
    node = DecodedNode(tag="")
    try:
        client = build_client(ctx, host, username, password, port, insecure, dialect)
        result = client.execute(name, params)
        if isinstance(result, Failed):
            result.raise_for_status()
        node = result.node
    except IloError as exc:
        handle_ilo_error(exc)

    if xml:
        console.print(node.to_xml(), markup=False, highlight=False)
    else:
        console.print(JSON.from_data(node.to_dict()))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
