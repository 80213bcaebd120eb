"""Firmware, host identity, health and global settings command group."""

from __future__ import annotations

from typing import Annotated

import typer
from pydantic import ValidationError
from rich.json import JSON
from rich.table import Table

from ilo_cli.commands.common import OutputFormat, build_client, console, handle_ilo_error
from ilo_cli.config import DialectName
from ilo_cli.connection import (
    DialectOption,
    HostOption,
    InsecureOption,
    PasswordOption,
    PortOption,
    UsernameOption,
)
from ilo_cli.errors import IloError
from ilo_cli.models.system import GlobalSettings, GlobalSettingsUpdate, HealthSummary
from ilo_cli.services.system_service import SystemService

system_app = typer.Typer(no_args_is_help=True, help="Query server identity, health and settings.")

OutputOption = Annotated[
    OutputFormat,
    typer.Option("--output", help="Response format: table or json."),
]


def _build_service(
    ctx: typer.Context,
    host: str | None,
    username: str | None,
    password: str | None,
    port: int | None,
    insecure: bool,
    dialect: DialectName | None,
) -> SystemService:
    client = build_client(ctx, host, username, password, port, insecure, dialect)
    return SystemService(client)


def _render_mapping(title: str, payload: dict[str, object], output: OutputFormat) -> None:
    if output == "json":
        console.print(JSON.from_data(payload))
        return

    table = Table(title=title)
    table.add_column("Field")
    table.add_column("Value")
    for name, value in payload.items():
        if isinstance(value, bool):
            value = "Yes" if value else "No"
        table.add_row(name, str(value))
    console.print(table)


def _render_health(summary: HealthSummary, output: OutputFormat) -> None:
    if output == "json":
        console.print(JSON.from_data(summary.model_dump()))
        return

    if summary.at_a_glance:
        _render_mapping("Health At A Glance", dict(summary.at_a_glance), "table")

    for title, readings in (
        ("Fans", summary.fans),
        ("Temperatures", summary.temperatures),
        ("Power Supplies", summary.power_supplies),
    ):
        if not readings:
            continue
        table = Table(title=title)
        table.add_column("Label")
        table.add_column("Status")
        table.add_column("Reading")
        table.add_column("Location")
        for reading in readings:
            value = f"{reading.reading} {reading.unit}".strip()
            table.add_row(reading.label, reading.status, value, reading.location)
        console.print(table)


@system_app.command("firmware")
def system_firmware(
    ctx: typer.Context,
    output: OutputOption = "table",
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Show management processor firmware details."""

    payload: dict[str, object] = {}
    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        payload = service.firmware().model_dump()
    except IloError as exc:
        handle_ilo_error(exc)

    _render_mapping("Firmware", payload, output)


@system_app.command("host")
def system_host(
    ctx: typer.Context,
    output: OutputOption = "table",
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Show product name, serial number and BIOS of the host."""

    payload: dict[str, object] = {}
    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        payload = service.host_info().model_dump()
    except IloError as exc:
        handle_ilo_error(exc)

    _render_mapping("Host", payload, output)


@system_app.command("name")
def system_name(
    ctx: typer.Context,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Show the server name."""

    name = ""
    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        name = service.server_name()
    except IloError as exc:
        handle_ilo_error(exc)

    console.print(name)


@system_app.command("set-name")
def system_set_name(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="New server name.")],
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Change the server name."""

    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        service.set_server_name(name)
    except IloError as exc:
        handle_ilo_error(exc)

    console.print(f"Server name set to '{name}'")


@system_app.command("health")
def system_health(
    ctx: typer.Context,
    output: OutputOption = "table",
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Show fans, temperatures and power supplies."""

    summary = HealthSummary()
    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        summary = service.health()
    except IloError as exc:
        handle_ilo_error(exc)

    _render_health(summary, output)


@system_app.command("settings")
def system_settings(
    ctx: typer.Context,
    output: OutputOption = "table",
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Show global iLO settings."""

    settings = GlobalSettings()
    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        settings = service.global_settings()
    except IloError as exc:
        handle_ilo_error(exc)

    _render_mapping("Global Settings", settings.model_dump(), output)


@system_app.command("set-settings")
def system_set_settings(
    ctx: typer.Context,
    session_timeout: Annotated[
        int | None,
        typer.Option("--session-timeout", help="Idle session timeout in minutes (0-120)."),
    ] = None,
    http_port: Annotated[int | None, typer.Option("--http-port", help="HTTP port.")] = None,
    https_port: Annotated[int | None, typer.Option("--https-port", help="HTTPS port.")] = None,
    ssh_port: Annotated[int | None, typer.Option("--ssh-port", help="SSH port.")] = None,
    remote_console_port: Annotated[
        int | None,
        typer.Option("--remote-console-port", help="Remote console port."),
    ] = None,
    ssh_status: Annotated[
        bool | None,
        typer.Option("--ssh/--no-ssh", help="Enable or disable SSH access."),
    ] = None,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Change global iLO settings; options left out are not touched."""

    try:
        update = GlobalSettingsUpdate(
            session_timeout=session_timeout,
            http_port=http_port,
            https_port=https_port,
            ssh_port=ssh_port,
            remote_console_port=remote_console_port,
            ssh_status=ssh_status,
        )
    except ValidationError as exc:
        console.print(f"Invalid settings: {exc}", style="bold red")
        raise typer.Exit(code=1) from exc

    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        service.update_global_settings(update)
    except IloError as exc:
        handle_ilo_error(exc)

    console.print("Global settings updated")
