"""Business logic for iLO user account commands."""

from __future__ import annotations

from dataclasses import dataclass, field

from ilo_cli.errors import ErrorKind, IloError
from ilo_cli.ilo_client import IloClientProtocol
from ilo_cli.models.users import PRIVILEGES, UserAccount, UserCreate, UserUpdate
from ilo_cli.protocol.nodes import DecodedNode
from ilo_cli.protocol.result import Failed
from ilo_cli.services.projection import coerce_flag, coerce_str, require_node

USER_NOT_FOUND = 0x000A


def _new_error_list() -> list[str]:
    return []


@dataclass(slots=True)
class UserBulkMutationResult:
    """Summary of a bulk add operation."""

    total: int
    created: int = 0
    updated: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=_new_error_list)


class UserService:
    """Service wrapper for managing local iLO user accounts."""

    def __init__(self, client: IloClientProtocol):
        self._client = client

    def list_logins(self) -> list[str]:
        node = require_node(self._client.fetch("all_users"), "GET_ALL_USERS")
        logins = [coerce_str(child.get("VALUE")) for child in node.find_all("USER_LOGIN")]
        return [login for login in logins if login]

    def get_user(self, user_login: str) -> UserAccount | None:
        result = self._client.execute("user", {"user_login": user_login})
        if isinstance(result, Failed):
            if result.kind == ErrorKind.REMOTE_ERROR and result.status == USER_NOT_FOUND:
                return None
            result.raise_for_status()
        return self._parse_user(require_node(result.node, "GET_USER"))

    def add_user(self, user: UserCreate, force: bool = False) -> str:
        existing = self.get_user(user.user_login)
        if existing and not force:
            raise ValueError(f"User '{user.user_login}' already exists")

        if existing:
            self._client.fetch("mod_user", user.as_params())
            return "updated"

        self._client.fetch("add_user", user.as_params())
        return "created"

    def update_user(self, update: UserUpdate) -> None:
        if self.get_user(update.user_login) is None:
            raise ValueError(f"User '{update.user_login}' does not exist")
        self._client.fetch("mod_user", update.as_params())

    def delete_user(self, user_login: str) -> None:
        self._client.fetch("delete_user", {"user_login": user_login})

    def add_many(
        self,
        users: list[UserCreate],
        *,
        force: bool,
        continue_on_error: bool,
    ) -> UserBulkMutationResult:
        result = UserBulkMutationResult(total=len(users))

        for user in users:
            try:
                action = self.add_user(user, force=force)
                if action == "created":
                    result.created += 1
                else:
                    result.updated += 1
            except (IloError, ValueError) as exc:
                result.failed += 1
                result.errors.append(f"{user.user_login}: {exc}")
                if not continue_on_error:
                    break

        return result

    @staticmethod
    def _parse_user(node: DecodedNode) -> UserAccount:
        privileges = {name: coerce_flag(node.get(name.upper())) for name in PRIVILEGES}
        return UserAccount(
            user_login=coerce_str(node.get("USER_LOGIN")),
            user_name=coerce_str(node.get("USER_NAME")),
            **privileges,
        )
