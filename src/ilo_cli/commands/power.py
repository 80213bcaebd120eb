"""Power and UID command groups."""

from __future__ import annotations

import typer

from ilo_cli.commands.common import build_client, console, handle_ilo_error
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
from ilo_cli.models.system import PowerAction, PowerState
from ilo_cli.services.power_service import PowerService

power_app = typer.Typer(no_args_is_help=True, help="Query and control server power.")
uid_app = typer.Typer(no_args_is_help=True, help="Query and control the UID light.")


def _build_service(
    ctx: typer.Context,
    host: str | None,
    username: str | None,
    password: str | None,
    port: int | None,
    insecure: bool,
    dialect: DialectName | None,
) -> PowerService:
    client = build_client(ctx, host, username, password, port, insecure, dialect)
    return PowerService(client)


def _set_power(
    ctx: typer.Context,
    action: PowerAction,
    host: str | None,
    username: str | None,
    password: str | None,
    port: int | None,
    insecure: bool,
    dialect: DialectName | None,
) -> None:
    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        service.set_power(action)
    except IloError as exc:
        handle_ilo_error(exc)
    console.print(f"Power {action} requested")


def _set_uid(
    ctx: typer.Context,
    state: PowerState,
    host: str | None,
    username: str | None,
    password: str | None,
    port: int | None,
    insecure: bool,
    dialect: DialectName | None,
) -> None:
    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        service.set_uid(state)
    except IloError as exc:
        handle_ilo_error(exc)
    console.print(f"UID light {state}")


@power_app.command("status")
def power_status(
    ctx: typer.Context,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Show whether the server is powered on."""

    state: PowerState = "off"
    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        state = service.power_status()
    except IloError as exc:
        handle_ilo_error(exc)
    console.print(state)


@power_app.command("on")
def power_on(
    ctx: typer.Context,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Power the server on."""

    _set_power(ctx, "on", host, username, password, port, insecure, dialect)


@power_app.command("off")
def power_off(
    ctx: typer.Context,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Power the server off."""

    _set_power(ctx, "off", host, username, password, port, insecure, dialect)


@power_app.command("reset")
def power_reset(
    ctx: typer.Context,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Power cycle the server."""

    _set_power(ctx, "reset", host, username, password, port, insecure, dialect)


@uid_app.command("status")
def uid_status(
    ctx: typer.Context,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Show whether the UID light is lit."""

    state: PowerState = "off"
    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        state = service.uid_status()
    except IloError as exc:
        handle_ilo_error(exc)
    console.print(state)


@uid_app.command("on")
def uid_on(
    ctx: typer.Context,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Light the UID indicator."""

    _set_uid(ctx, "on", host, username, password, port, insecure, dialect)


@uid_app.command("off")
def uid_off(
    ctx: typer.Context,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Switch the UID indicator off."""

    _set_uid(ctx, "off", host, username, password, port, insecure, dialect)
