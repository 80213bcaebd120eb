"""User account command group."""

from __future__ import annotations

from typing import Annotated

import typer
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
from ilo_cli.io.bulk_input import BulkInputFormat, load_user_add_entries
from ilo_cli.models.users import PRIVILEGES, UserAccount, UserCreate, UserUpdate
from ilo_cli.services.user_service import UserBulkMutationResult, UserService

users_app = typer.Typer(no_args_is_help=True, help="Manage local iLO user accounts.")

AdminOption = Annotated[
    bool | None,
    typer.Option("--admin/--no-admin", help="Administer user accounts."),
]
RemoteConsoleOption = Annotated[
    bool | None,
    typer.Option("--remote-console/--no-remote-console", help="Use the remote console."),
]
ResetServerOption = Annotated[
    bool | None,
    typer.Option("--reset-server/--no-reset-server", help="Control server power."),
]
VirtualMediaOption = Annotated[
    bool | None,
    typer.Option("--virtual-media/--no-virtual-media", help="Attach virtual media."),
]
ConfigIloOption = Annotated[
    bool | None,
    typer.Option("--config-ilo/--no-config-ilo", help="Change iLO settings."),
]


def _build_service(
    ctx: typer.Context,
    host: str | None,
    username: str | None,
    password: str | None,
    port: int | None,
    insecure: bool,
    dialect: DialectName | None,
) -> UserService:
    client = build_client(ctx, host, username, password, port, insecure, dialect)
    return UserService(client)


def _render_users(users: list[UserAccount], output: OutputFormat) -> None:
    if output == "json":
        console.print(JSON.from_data([user.model_dump() for user in users]))
        return

    table = Table(title="iLO Users")
    table.add_column("Login")
    table.add_column("Name")
    table.add_column("Privileges")
    for user in users:
        granted = [name.removesuffix("_priv") for name in PRIVILEGES if getattr(user, name)]
        table.add_row(user.user_login, user.user_name, ", ".join(granted) or "-")
    console.print(table)


def _render_bulk_summary(action: str, result: UserBulkMutationResult) -> None:
    console.print(
        f"{action} summary: total={result.total} created={result.created} "
        f"updated={result.updated} failed={result.failed}"
    )
    for error in result.errors:
        console.print(f"- {error}", style="red")


@users_app.command("list")
def users_list(
    ctx: typer.Context,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """List user login names."""

    logins: list[str] = []
    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        logins = service.list_logins()
    except IloError as exc:
        handle_ilo_error(exc)

    for login in logins:
        console.print(login)


@users_app.command("get")
def users_get(
    ctx: typer.Context,
    user_login: Annotated[str, typer.Argument(help="Login name of the account.")],
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
    """Show one user account."""

    user: UserAccount | None = None
    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        user = service.get_user(user_login)
    except IloError as exc:
        handle_ilo_error(exc)

    if user is None:
        console.print(f"User '{user_login}' not found", style="bold red")
        raise typer.Exit(code=1)

    _render_users([user], output)


@users_app.command("add")
def users_add(
    ctx: typer.Context,
    user_login: Annotated[str, typer.Argument(help="Login name of the new account.")],
    user_name: Annotated[str, typer.Option("--user-name", help="Display name.")],
    user_password: Annotated[
        str,
        typer.Option("--user-password", prompt=True, hide_input=True, help="Account password."),
    ],
    admin: AdminOption = None,
    remote_console: RemoteConsoleOption = None,
    reset_server: ResetServerOption = None,
    virtual_media: VirtualMediaOption = None,
    config_ilo: ConfigIloOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Update the account instead of failing if it exists."),
    ] = False,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Add a user account."""

    action = ""
    try:
        privileges = {
            "admin_priv": admin,
            "remote_cons_priv": remote_console,
            "reset_server_priv": reset_server,
            "virtual_media_priv": virtual_media,
            "config_ilo_priv": config_ilo,
        }
        user = UserCreate(
            user_login=user_login,
            user_name=user_name,
            password=user_password,
            **{key: value for key, value in privileges.items() if value is not None},
        )
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        action = service.add_user(user, force=force)
    except ValueError as exc:
        console.print(str(exc), style="bold red")
        raise typer.Exit(code=1) from exc
    except IloError as exc:
        handle_ilo_error(exc)

    console.print(f"User '{user_login}' {action}")


@users_app.command("update")
def users_update(
    ctx: typer.Context,
    user_login: Annotated[str, typer.Argument(help="Login name of the account.")],
    user_name: Annotated[str | None, typer.Option("--user-name", help="New display name.")] = None,
    user_password: Annotated[
        str | None,
        typer.Option("--user-password", help="New account password."),
    ] = None,
    admin: AdminOption = None,
    remote_console: RemoteConsoleOption = None,
    reset_server: ResetServerOption = None,
    virtual_media: VirtualMediaOption = None,
    config_ilo: ConfigIloOption = None,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Update a user account; options left out are not touched."""

    try:
        update = UserUpdate(
            user_login=user_login,
            user_name=user_name,
            password=user_password,
            admin_priv=admin,
            remote_cons_priv=remote_console,
            reset_server_priv=reset_server,
            virtual_media_priv=virtual_media,
            config_ilo_priv=config_ilo,
        )
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        service.update_user(update)
    except ValueError as exc:
        console.print(str(exc), style="bold red")
        raise typer.Exit(code=1) from exc
    except IloError as exc:
        handle_ilo_error(exc)

    console.print(f"User '{user_login}' updated")


@users_app.command("delete")
def users_delete(
    ctx: typer.Context,
    user_login: Annotated[str, typer.Argument(help="Login name of the account.")],
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Delete a user account."""

    try:
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        service.delete_user(user_login)
    except IloError as exc:
        handle_ilo_error(exc)

    console.print(f"User '{user_login}' deleted")


@users_app.command("add-many")
def users_add_many(
    ctx: typer.Context,
    file_path: Annotated[
        str,
        typer.Option("--file", "-f", help="Path to JSON/CSV file, or '-' for stdin."),
    ],
    input_format: Annotated[
        BulkInputFormat,
        typer.Option("--format", help="Input format: auto, json, csv."),
    ] = "auto",
    force: Annotated[
        bool,
        typer.Option("--force", help="Update existing accounts instead of failing on duplicates."),
    ] = False,
    continue_on_error: Annotated[
        bool,
        typer.Option("--continue-on-error", help="Continue processing after an account error."),
    ] = False,
    host: HostOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    port: PortOption = None,
    insecure: InsecureOption = False,
    dialect: DialectOption = None,
) -> None:
    """Add multiple user accounts from file/stdin.

    Input examples:

    JSON list:
    [
      {
        "user_login": "ops",
        "user_name": "Operations",
        "password": "change-me",
        "reset_server_priv": true
      }
    ]

    CSV:
    user_login,user_name,password,admin_priv,remote_cons_priv
    ops,Operations,change-me,false,true
    """

    result = UserBulkMutationResult(total=0)
    try:
        users = load_user_add_entries(file_path, input_format=input_format)
        service = _build_service(ctx, host, username, password, port, insecure, dialect)
        result = service.add_many(users, force=force, continue_on_error=continue_on_error)
    except (ValueError, OSError) as exc:
        console.print(f"Invalid input: {exc}", style="bold red")
        raise typer.Exit(code=1) from exc
    except IloError as exc:
        handle_ilo_error(exc)

    _render_bulk_summary("add-many", result)
    if result.failed > 0:
        raise typer.Exit(code=2)
