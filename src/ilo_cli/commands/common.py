"""Shared plumbing for command groups."""

from __future__ import annotations

import logging
from typing import Literal, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from ilo_cli.config import DialectName, Settings
from ilo_cli.connection import connection_params
from ilo_cli.errors import IloError
from ilo_cli.ilo_client import IloClientProtocol
from ilo_cli.sdk import create_client

console = Console()
err_console = Console(stderr=True)

OutputFormat = Literal["table", "json"]


def configure_logging(verbosity: int) -> None:
    """Send engine diagnostics to stderr when verbosity is requested."""

    if verbosity <= 0:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def build_client(
    ctx: typer.Context,
    host: str | None,
    username: str | None,
    password: str | None,
    port: int | None,
    insecure: bool,
    dialect: DialectName | None = None,
) -> IloClientProtocol:
    settings: Settings = ctx.obj["settings"]
    verbosity: int | None = ctx.obj.get("verbosity")
    params = connection_params(
        settings, host, username, password, port, insecure, dialect, verbosity
    )
    configure_logging(params.verbosity)
    return create_client(params)


def handle_ilo_error(exc: IloError) -> NoReturn:
    console.print(f"{exc.kind.value} error: {exc}", style="bold red")
    raise typer.Exit(code=1) from exc
