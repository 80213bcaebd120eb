"""Network settings command group."""

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
from ilo_cli.models.network import NetworkSettings, NetworkUpdate
from ilo_cli.services.network_service import NetworkService

network_app = typer.Typer(no_args_is_help=True, help="Show and change iLO network settings.")


def _build_service(
    ctx: typer.Context,
    host: str | None,
    username: str | None,
    password: str | None,
    port: int | None,
    insecure: bool,
    dialect: DialectName | None,
) -> NetworkService:
    client = build_client(ctx, host, username, password, port, insecure, dialect)
    return NetworkService(client)


def _render_settings(settings: NetworkSettings, output: OutputFormat) -> None:
    if output == "json":
        console.print(JSON.from_data(settings.model_dump()))
        return

    table = Table(title="Network Settings")
    table.add_column("Setting")
    table.add_column("Value")
    for name, value in settings.model_dump().items():
        if isinstance(value, bool):
            value = "Yes" if value else "No"
        table.add_row(name, str(value))
    console.print(table)


@network_app.command("show")
def network_show(
    ctx: typer.Context,
    output: Annotated[
        OutputFormat,
        typer.Option("--output", help="Response format: table or json."),
    ] = "table",
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Show the current network settings."""

    settings = NetworkSettings()
    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        settings = service.get_settings()
    except IloError as exc:
        handle_ilo_error(exc)

    _render_settings(settings, output)


@network_app.command("set")
def network_set(
    ctx: typer.Context,
    enable_nic: Annotated[
        bool | None,
        typer.Option("--enable-nic/--disable-nic", help="Enable or disable the iLO NIC."),
    ] = None,
    dhcp: Annotated[
        bool | None,
        typer.Option("--dhcp/--no-dhcp", help="Use DHCP for addressing."),
    ] = None,
    speed_autoselect: Annotated[
        bool | None,
        typer.Option("--speed-autoselect/--no-speed-autoselect", help="Negotiate link speed."),
    ] = None,
    ip_address: Annotated[
        str | None,
        typer.Option("--ip-address", help="Static IPv4 address."),
    ] = None,
    subnet_mask: Annotated[str | None, typer.Option("--subnet-mask", help="Subnet mask.")] = None,
    gateway: Annotated[str | None, typer.Option("--gateway", help="Default gateway.")] = None,
    dns_name: Annotated[str | None, typer.Option("--dns-name", help="iLO host name.")] = None,
    domain_name: Annotated[str | None, typer.Option("--domain-name", help="DNS domain.")] = None,
    dns_server: Annotated[
        str | None,
        typer.Option("--dns-server", help="Primary DNS server."),
    ] = None,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Change network settings; options left out are not touched."""

    try:
        update = NetworkUpdate(
            enable_nic=enable_nic,
            dhcp_enable=dhcp,
            speed_autoselect=speed_autoselect,
            ip_address=ip_address,
            subnet_mask=subnet_mask,
            gateway_ip_address=gateway,
            dns_name=dns_name,
            domain_name=domain_name,
            prim_dns_server=dns_server,
        )
    except ValidationError as exc:
        console.print(f"Invalid settings: {exc}", style="bold red")
        raise typer.Exit(code=1) from exc

    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        service.update_settings(update)
    except IloError as exc:
        handle_ilo_error(exc)

    console.print("Network settings updated")
