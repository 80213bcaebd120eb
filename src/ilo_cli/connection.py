"""Shared connection option resolution for CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

import typer

from ilo_cli.config import DialectName, Settings

HostOption = Annotated[str | None, typer.Option(help="iLO hostname or IP.")]
UsernameOption = Annotated[str | None, typer.Option(help="iLO login name.")]
PasswordOption = Annotated[str | None, typer.Option(help="iLO password.")]
PortOption = Annotated[int | None, typer.Option(min=1, max=65535, help="iLO TLS port.")]
InsecureOption = Annotated[
    bool,
    typer.Option(help="Disable TLS certificate verification."),
]
DialectOption = Annotated[
    DialectName | None,
    typer.Option(help="RIBCL dialect: unknown (probe), legacy or current."),
]


@dataclass(frozen=True, slots=True)
class ConnectionParams:
    """Resolved connection parameters for one management processor."""

    host: str
    username: str
    password: str
    port: int
    verify_ssl: bool
    timeout: float = 60.0
    dialect: DialectName = "unknown"
    verbosity: int = 0


def _resolve(value: str | None, default: str | None, option_name: str) -> str:
    if value:
        return value
    if default:
        return default
    raise typer.BadParameter(
        f"Provide --{option_name} or set ILO_CLI_{option_name.upper().replace('-', '_')}."
    )


def connection_params(
    settings: Settings,
    host: str | None,
    username: str | None,
    password: str | None,
    port: int | None,
    insecure: bool,
    dialect: DialectName | None = None,
    verbosity: int | None = None,
) -> ConnectionParams:
    """Resolve command options and settings into client parameters."""

    return ConnectionParams(
        host=_resolve(host, settings.host, "host"),
        username=_resolve(username, settings.username, "username"),
        password=_resolve(password, settings.password, "password"),
        port=port if port is not None else settings.port,
        verify_ssl=False if insecure else settings.verify_ssl,
        timeout=settings.timeout,
        dialect=dialect if dialect is not None else settings.dialect,
        verbosity=verbosity if verbosity is not None else settings.verbosity,
    )
