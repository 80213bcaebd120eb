from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

import pytest
from typer.testing import CliRunner

from ilo_cli.connection import ConnectionParams
from ilo_cli.errors import IloError
from ilo_cli.ilo_client import IloClient
from ilo_cli.protocol.engine import ProtocolEngine
from ilo_cli.protocol.target import Target

LEGACY_VERSION = "2.0"
CURRENT_VERSION = "2.22"


def response_document(status: int = 0, message: str = "No error", body: str = "") -> str:
    return (
        '<?xml version="1.0"?>\n'
        f'<RIBCL VERSION="{CURRENT_VERSION}">\n'
        f'<RESPONSE STATUS="0x{status:04X}" MESSAGE="{message}" />\n'
        f"{body}"
        "</RIBCL>\n"
    )


def ribcl_response(body: str = "", status: int = 0, message: str = "No error") -> bytes:
    """One acknowledgement document for the login followed by the command's own answer."""

    return (response_document() + response_document(status, message, body)).encode("utf-8")


@dataclass
class SentRequest:
    version: str
    user_login: str
    password: str
    section: str
    mode: str
    tag: str
    attrs: dict[str, str]


@dataclass
class FakeIloDevice:
    """In-memory management processor speaking RIBCL over a fake transport."""

    versions: tuple[str, ...] = (LEGACY_VERSION, CURRENT_VERSION)
    username: str = "Administrator"
    password: str = "secret"
    power: str = "ON"
    uid: str = "OFF"
    server_name: str = "web-01"
    network: dict[str, str] = field(
        default_factory=lambda: {
            "ENABLE_NIC": "Y",
            "DHCP_ENABLE": "N",
            "SPEED_AUTOSELECT": "Y",
            "IP_ADDRESS": "192.0.2.20",
            "SUBNET_MASK": "255.255.255.0",
            "GATEWAY_IP_ADDRESS": "192.0.2.1",
            "DNS_NAME": "ilo-web-01",
            "DOMAIN_NAME": "example.com",
            "PRIM_DNS_SERVER": "192.0.2.53",
            "MAC_ADDRESS": "9c:8e:99:00:00:01",
        }
    )
    global_settings: dict[str, str] = field(
        default_factory=lambda: {
            "SESSION_TIMEOUT": "30",
            "HTTP_PORT": "80",
            "HTTPS_PORT": "443",
            "SSH_PORT": "22",
            "REMOTE_CONSOLE_PORT": "17990",
            "SSH_STATUS": "Y",
        }
    )
    users: dict[str, dict[str, str]] = field(
        default_factory=lambda: {
            "Administrator": {
                "USER_NAME": "Administrator",
                "ADMIN_PRIV": "Y",
                "REMOTE_CONS_PRIV": "Y",
                "RESET_SERVER_PRIV": "Y",
                "VIRTUAL_MEDIA_PRIV": "Y",
                "CONFIG_ILO_PRIV": "Y",
            }
        }
    )
    requests: list[SentRequest] = field(default_factory=list)
    documents: list[str] = field(default_factory=list)
    queued: list[bytes | IloError] = field(default_factory=list)

    def send(self, document: str, host: str, port: int, timeout: float) -> bytes:
        del host, port, timeout
        self.documents.append(document)
        request = _parse_request(document)
        self.requests.append(request)

        if self.queued:
            reply = self.queued.pop(0)
            if isinstance(reply, IloError):
                raise reply
            return reply

        if request.version not in self.versions:
            return ribcl_response(
                status=0x0001,
                message="Syntax error: Line #1: syntax error near RIBCL in the line",
            )
        if request.user_login != self.username or request.password != self.password:
            return ribcl_response(status=0x005F, message="Login failed.")
        return self._handle(request)

    @property
    def tags(self) -> list[str]:
        return [request.tag for request in self.requests]

    def _handle(self, request: SentRequest) -> bytes:
        attrs = dict(request.attrs)
        match request.tag:
            case "GET_FW_VERSION":
                return ribcl_response(
                    '<GET_FW_VERSION FIRMWARE_VERSION="2.55" FIRMWARE_DATE="Aug 16 2017" '
                    'MANAGEMENT_PROCESSOR="iLO4" LICENSE_TYPE="iLO Advanced" />\n'
                )
            case "GET_HOST_DATA":
                return ribcl_response(
                    "<GET_HOST_DATA>\n"
                    '<SMBIOS_RECORD TYPE="1" B64_DATA="AQ==">\n'
                    '<FIELD NAME="Product Name" VALUE="ProLiant DL360 Gen9" />\n'
                    '<FIELD NAME="Serial Number" VALUE="CZJ0000001" />\n'
                    '<FIELD NAME="UUID" VALUE="00000000-0000-0000-0000-000000000001" />\n'
                    "</SMBIOS_RECORD>\n"
                    '<SMBIOS_RECORD TYPE="0">\n'
                    '<FIELD NAME="BIOS Version" VALUE="P89 v2.60" />\n'
                    "</SMBIOS_RECORD>\n"
                    "</GET_HOST_DATA>\n"
                )
            case "GET_EMBEDDED_HEALTH":
                return ribcl_response(
                    "<GET_EMBEDDED_HEALTH_DATA>\n"
                    "<FANS>\n"
                    '<FAN><LABEL VALUE="Fan 1" /><ZONE VALUE="System" /><STATUS VALUE="OK" />'
                    '<SPEED VALUE="23" UNIT="Percentage" /></FAN>\n'
                    "</FANS>\n"
                    "<TEMPERATURE>\n"
                    '<TEMP><LABEL VALUE="01-Inlet Ambient" /><LOCATION VALUE="Ambient" />'
                    '<STATUS VALUE="OK" /><CURRENTREADING VALUE="21" UNIT="Celsius" /></TEMP>\n'
                    "</TEMPERATURE>\n"
                    "<POWER_SUPPLIES>\n"
                    '<SUPPLY><LABEL VALUE="Power Supply 1" /><STATUS VALUE="Good, In Use" />'
                    '<CAPACITY VALUE="500 Watts" /></SUPPLY>\n'
                    "</POWER_SUPPLIES>\n"
                    "<HEALTH_AT_A_GLANCE>\n"
                    '<BIOS_HARDWARE STATUS="OK" />\n'
                    '<FANS STATUS="OK" />\n'
                    '<FANS REDUNDANCY="Redundant" />\n'
                    '<TEMPERATURE STATUS="OK" />\n'
                    "</HEALTH_AT_A_GLANCE>\n"
                    "</GET_EMBEDDED_HEALTH_DATA>\n"
                )
            case "GET_SERVER_NAME":
                return ribcl_response(f'<SERVER_NAME VALUE="{self.server_name}" />\n')
            case "SERVER_NAME":
                value = attrs.get("value" if request.version == LEGACY_VERSION else "VALUE")
                if value is None:
                    return ribcl_response(status=0x0004, message="Syntax error: missing value")
                self.server_name = value
                return ribcl_response()
            case "GET_HOST_POWER_STATUS":
                return ribcl_response(f'<GET_HOST_POWER HOST_POWER="{self.power}" />\n')
            case "SET_HOST_POWER":
                state = attrs["HOST_POWER"]
                self.power = "ON" if state in {"on", "reset"} else "OFF"
                return ribcl_response()
            case "GET_UID_STATUS":
                return ribcl_response(f'<GET_UID_STATUS UID="{self.uid}" />\n')
            case "UID_CONTROL":
                self.uid = attrs["UID"].upper()
                return ribcl_response()
            case "GET_NETWORK_SETTINGS":
                return ribcl_response(_settings_body("GET_NETWORK_SETTINGS", self.network))
            case "MOD_NETWORK_SETTINGS":
                self.network.update(attrs)
                return ribcl_response()
            case "GET_GLOBAL_SETTINGS":
                return ribcl_response(_settings_body("GET_GLOBAL_SETTINGS", self.global_settings))
            case "MOD_GLOBAL_SETTINGS":
                self.global_settings.update(attrs)
                return ribcl_response()
            case "GET_ALL_USERS":
                logins = "".join(f'<USER_LOGIN VALUE="{login}" />\n' for login in self.users)
                return ribcl_response(f"<GET_ALL_USERS>\n{logins}</GET_ALL_USERS>\n")
            case "GET_USER":
                login = attrs["USER_LOGIN"]
                user = self.users.get(login)
                if user is None:
                    return ribcl_response(
                        status=0x000A, message="User login name was not found."
                    )
                rendered = " ".join(f'{key}="{value}"' for key, value in user.items())
                return ribcl_response(f'<GET_USER USER_LOGIN="{login}" {rendered} />\n')
            case "ADD_USER":
                login = attrs.pop("USER_LOGIN")
                attrs.pop("PASSWORD", None)
                self.users[login] = attrs
                return ribcl_response()
            case "MOD_USER":
                login = attrs.pop("USER_LOGIN")
                attrs.pop("PASSWORD", None)
                if login not in self.users:
                    return ribcl_response(
                        status=0x000A, message="User login name was not found."
                    )
                self.users[login].update(attrs)
                return ribcl_response()
            case "DELETE_USER":
                login = attrs["USER_LOGIN"]
                if self.users.pop(login, None) is None:
                    return ribcl_response(
                        status=0x000A, message="User login name was not found."
                    )
                return ribcl_response()
        return ribcl_response(status=0x0001, message=f"Syntax error: unknown command {request.tag}")


def _settings_body(tag: str, values: dict[str, str]) -> str:
    children = "".join(f'<{key} VALUE="{value}" />\n' for key, value in values.items())
    return f"<{tag}>\n{children}</{tag}>\n"


def _parse_request(document: str) -> SentRequest:
    root = ET.fromstring(document.strip())
    login = root.find("LOGIN")
    assert login is not None
    section = login[0]
    command = section[0]
    return SentRequest(
        version=root.get("VERSION", ""),
        user_login=login.get("USER_LOGIN", ""),
        password=login.get("PASSWORD", ""),
        section=section.tag,
        mode=section.get("MODE", ""),
        tag=command.tag,
        attrs=dict(command.attrib),
    )


@pytest.fixture
def device() -> FakeIloDevice:
    return FakeIloDevice()


@pytest.fixture
def target() -> Target:
    return Target("ilo.example.com", "Administrator", "secret")


@pytest.fixture
def engine(device: FakeIloDevice) -> ProtocolEngine:
    return ProtocolEngine(device)


@pytest.fixture
def client(engine: ProtocolEngine, target: Target) -> IloClient:
    return IloClient(engine, target)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def connection_args() -> list[str]:
    return [
        "--host",
        "ilo.example.com",
        "--username",
        "Administrator",
        "--password",
        "secret",
    ]


@pytest.fixture
def cli_device(monkeypatch: pytest.MonkeyPatch, device: FakeIloDevice) -> FakeIloDevice:
    def _create_client(params: ConnectionParams) -> IloClient:
        target = Target(
            address=params.host,
            username=params.username,
            password=params.password,
            port=params.port,
            dialect=params.dialect,
        )
        return IloClient(ProtocolEngine(device), target)

    monkeypatch.setattr("ilo_cli.commands.common.create_client", _create_client)
    return device
