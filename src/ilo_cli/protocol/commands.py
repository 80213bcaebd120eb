"""Logical RIBCL commands and their per-dialect encodings."""

from __future__ import annotations

import ipaddress
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal

from ilo_cli.errors import InvalidParameterError


class Dialect(StrEnum):
    UNKNOWN = "unknown"
    LEGACY = "legacy"
    CURRENT = "current"


RIBCL_VERSIONS: dict[Dialect, str] = {
    Dialect.LEGACY: "2.0",
    Dialect.CURRENT: "2.22",
}

Section = Literal["SERVER_INFO", "RIB_INFO", "USER_INFO"]
Mode = Literal["read", "write"]
ParamKind = Literal["text", "flag", "state", "port", "integer", "address"]

_FLAG_WORDS = {
    "y": True,
    "yes": True,
    "true": True,
    "n": False,
    "no": False,
    "false": False,
}


@dataclass(frozen=True, slots=True)
class Param:
    """Domain of one command parameter."""

    key: str
    kind: ParamKind = "text"
    required: bool = False
    choices: tuple[str, ...] = ()
    minimum: int = 0
    maximum: int = 65535

    def render(self, value: object) -> str:
        """Validate ``value`` against this parameter's domain and render it."""

        match self.kind:
            case "text":
                return self._render_text(value)
            case "flag":
                return "Y" if self._coerce_flag(value) else "N"
            case "state":
                return self._render_state(value)
            case "port" | "integer":
                return str(self._coerce_int(value))
            case "address":
                return self._render_address(value)

    def _render_text(self, value: object) -> str:
        if not isinstance(value, str):
            raise self._invalid(value, "expected a string")
        if self.required and not value:
            raise self._invalid(value, "must not be empty")
        return value

    def _coerce_flag(self, value: object) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in _FLAG_WORDS:
            return _FLAG_WORDS[value.strip().lower()]
        raise self._invalid(value, "expected a boolean")

    def _render_state(self, value: object) -> str:
        word = value.strip().lower() if isinstance(value, str) else None
        if word not in self.choices:
            raise self._invalid(value, f"expected one of {', '.join(self.choices)}")
        return word

    def _coerce_int(self, value: object) -> int:
        if isinstance(value, bool):
            raise self._invalid(value, "expected an integer")
        if isinstance(value, int):
            number = value
        elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
            number = int(value.strip())
        else:
            raise self._invalid(value, "expected an integer")
        if not self.minimum <= number <= self.maximum:
            raise self._invalid(value, f"expected {self.minimum}-{self.maximum}")
        return number

    def _render_address(self, value: object) -> str:
        if not isinstance(value, str):
            raise self._invalid(value, "expected an IPv4 address")
        try:
            return str(ipaddress.IPv4Address(value.strip()))
        except ValueError as exc:
            raise self._invalid(value, "expected an IPv4 address") from exc

    def _invalid(self, value: object, reason: str) -> InvalidParameterError:
        return InvalidParameterError(f"Invalid value {value!r} for '{self.key}': {reason}")


@dataclass(frozen=True, slots=True)
class Encoding:
    """Element tag and parameter attribute names used by one dialect."""

    tag: str
    attributes: Mapping[str, str] = field(default_factory=dict)

    def attribute(self, key: str) -> str:
        return self.attributes.get(key, key.upper())


@dataclass(frozen=True, slots=True)
class CommandDefinition:
    name: str
    section: Section
    mode: Mode
    encodings: Mapping[Dialect, Encoding]
    params: tuple[Param, ...] = ()
    resource: str | None = None
    invalidates: tuple[str, ...] = ()
    privileged: bool = False

    @property
    def mutating(self) -> bool:
        return self.mode == "write"

    def encoding(self, dialect: Dialect) -> Encoding:
        try:
            return self.encodings[dialect]
        except KeyError as exc:
            raise InvalidParameterError(
                f"Command '{self.name}' has no encoding for dialect '{dialect}'"
            ) from exc


@dataclass(frozen=True, slots=True)
class Command:
    """A logical command bound to validated parameter values.

    ``values`` keeps the table's declared parameter order, which is the order
    the attributes are written in.
    """

    definition: CommandDefinition
    values: tuple[tuple[str, str], ...]
    arguments: Mapping[str, object]

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def privileged(self) -> bool:
        return self.definition.privileged

    @property
    def resource_key(self) -> str | None:
        if self.definition.resource is None:
            return None
        return self.definition.resource.format_map(self.arguments)

    @property
    def invalidated_keys(self) -> tuple[str, ...]:
        return tuple(key.format_map(self.arguments) for key in self.definition.invalidates)

    def tag(self, dialect: Dialect) -> str:
        return self.definition.encoding(dialect).tag

    def attributes(self, dialect: Dialect) -> list[tuple[str, str]]:
        encoding = self.definition.encoding(dialect)
        return [(encoding.attribute(key), value) for key, value in self.values]


def _both(tag: str, **attributes: str) -> dict[Dialect, Encoding]:
    encoding = Encoding(tag, attributes)
    return {Dialect.LEGACY: encoding, Dialect.CURRENT: encoding}


_PRIVILEGES = (
    Param("admin_priv", "flag"),
    Param("remote_cons_priv", "flag"),
    Param("reset_server_priv", "flag"),
    Param("virtual_media_priv", "flag"),
    Param("config_ilo_priv", "flag"),
)

_USER_KEYS = ("users", "users:{user_login}")

COMMANDS: dict[str, CommandDefinition] = {
    definition.name: definition
    for definition in (
        CommandDefinition(
            "firmware", "RIB_INFO", "read", _both("GET_FW_VERSION"), resource="firmware"
        ),
        CommandDefinition(
            "host_data", "SERVER_INFO", "read", _both("GET_HOST_DATA"), resource="host_data"
        ),
        CommandDefinition(
            "health", "SERVER_INFO", "read", _both("GET_EMBEDDED_HEALTH"), resource="health"
        ),
        CommandDefinition(
            "server_name",
            "SERVER_INFO",
            "read",
            _both("GET_SERVER_NAME"),
            resource="server_name",
        ),
        CommandDefinition(
            "set_server_name",
            "SERVER_INFO",
            "write",
            # RIBCL 2.0 firmware only accepts the lower-case attribute here.
            {
                Dialect.LEGACY: Encoding("SERVER_NAME", {"name": "value"}),
                Dialect.CURRENT: Encoding("SERVER_NAME", {"name": "VALUE"}),
            },
            params=(Param("name", required=True),),
            invalidates=("server_name",),
        ),
        CommandDefinition(
            "power_status",
            "SERVER_INFO",
            "read",
            _both("GET_HOST_POWER_STATUS"),
            resource="power",
        ),
        CommandDefinition(
            "set_power",
            "SERVER_INFO",
            "write",
            _both("SET_HOST_POWER", state="HOST_POWER"),
            params=(Param("state", "state", required=True, choices=("on", "off", "reset")),),
            invalidates=("power",),
        ),
        CommandDefinition(
            "uid_status", "SERVER_INFO", "read", _both("GET_UID_STATUS"), resource="uid"
        ),
        CommandDefinition(
            "set_uid",
            "SERVER_INFO",
            "write",
            _both("UID_CONTROL", state="UID"),
            params=(Param("state", "state", required=True, choices=("on", "off")),),
            invalidates=("uid",),
        ),
        CommandDefinition(
            "network", "RIB_INFO", "read", _both("GET_NETWORK_SETTINGS"), resource="network"
        ),
        CommandDefinition(
            "set_network",
            "RIB_INFO",
            "write",
            _both("MOD_NETWORK_SETTINGS"),
            params=(
                Param("enable_nic", "flag"),
                Param("dhcp_enable", "flag"),
                Param("speed_autoselect", "flag"),
                Param("ip_address", "address"),
                Param("subnet_mask", "address"),
                Param("gateway_ip_address", "address"),
                Param("dns_name"),
                Param("domain_name"),
                Param("prim_dns_server", "address"),
            ),
            invalidates=("network",),
        ),
        CommandDefinition(
            "global_settings",
            "RIB_INFO",
            "read",
            _both("GET_GLOBAL_SETTINGS"),
            resource="global_settings",
        ),
        CommandDefinition(
            "set_global_settings",
            "RIB_INFO",
            "write",
            _both("MOD_GLOBAL_SETTINGS"),
            params=(
                Param("session_timeout", "integer", maximum=120),
                Param("http_port", "port"),
                Param("https_port", "port"),
                Param("ssh_port", "port"),
                Param("remote_console_port", "port"),
                Param("ssh_status", "flag"),
            ),
            invalidates=("global_settings",),
        ),
        CommandDefinition(
            "all_users", "USER_INFO", "read", _both("GET_ALL_USERS"), resource="users"
        ),
        CommandDefinition(
            "user",
            "USER_INFO",
            "read",
            _both("GET_USER"),
            params=(Param("user_login", required=True),),
            resource="users:{user_login}",
        ),
        CommandDefinition(
            "add_user",
            "USER_INFO",
            "write",
            _both("ADD_USER"),
            params=(
                Param("user_name", required=True),
                Param("user_login", required=True),
                Param("password", required=True),
                *_PRIVILEGES,
            ),
            invalidates=_USER_KEYS,
            privileged=True,
        ),
        CommandDefinition(
            "mod_user",
            "USER_INFO",
            "write",
            _both("MOD_USER"),
            params=(
                Param("user_login", required=True),
                Param("user_name"),
                Param("password"),
                *_PRIVILEGES,
            ),
            invalidates=_USER_KEYS,
            privileged=True,
        ),
        CommandDefinition(
            "delete_user",
            "USER_INFO",
            "write",
            _both("DELETE_USER"),
            params=(Param("user_login", required=True),),
            invalidates=_USER_KEYS,
            privileged=True,
        ),
    )
}

PROBE_COMMAND = "firmware"


def bind_command(name: str, params: Mapping[str, object] | None = None) -> Command:
    """Look up ``name`` and validate ``params`` against its table entry.

    Raises InvalidParameterError for unknown commands, unknown or missing
    parameters and out-of-domain values. No network activity happens here.
    """

    definition = COMMANDS.get(name)
    if definition is None:
        raise InvalidParameterError(f"Unknown command '{name}'")

    arguments = dict(params or {})
    known = {param.key for param in definition.params}
    unknown = sorted(key for key in arguments if key not in known)
    if unknown:
        raise InvalidParameterError(
            f"Unknown parameter(s) for '{name}': {', '.join(unknown)}"
        )

    values: list[tuple[str, str]] = []
    for param in definition.params:
        value = arguments.get(param.key)
        if value is None:
            if param.required:
                raise InvalidParameterError(f"Missing required parameter '{param.key}'")
            continue
        values.append((param.key, param.render(value)))

    return Command(definition=definition, values=tuple(values), arguments=arguments)
