import logging

import pytest
from conftest import CURRENT_VERSION, LEGACY_VERSION, FakeIloDevice, ribcl_response

from ilo_cli.errors import ErrorKind, IloConnectionError, InvalidParameterError
from ilo_cli.protocol.commands import Dialect
from ilo_cli.protocol.engine import ProtocolEngine
from ilo_cli.protocol.result import Failed, Ok
from ilo_cli.protocol.target import Target


def test_invalid_parameter_never_reaches_transport(
    engine: ProtocolEngine,
    device: FakeIloDevice,
    target: Target,
) -> None:
    result = engine.execute(target, "set_power", {"state": "sideways"})

    assert isinstance(result, Failed)
    assert result.kind == ErrorKind.INVALID_PARAMETER
    assert device.requests == []


@pytest.mark.parametrize("port", ["²", "١٢"])
def test_non_ascii_digits_are_invalid_parameter(
    engine: ProtocolEngine,
    device: FakeIloDevice,
    target: Target,
    port: str,
) -> None:
    result = engine.execute(target, "set_global_settings", {"http_port": port})

    assert isinstance(result, Failed)
    assert result.kind == ErrorKind.INVALID_PARAMETER
    assert device.requests == []


def test_unknown_command_is_invalid_parameter(
    engine: ProtocolEngine,
    device: FakeIloDevice,
    target: Target,
) -> None:
    result = engine.execute(target, "reboot_everything")

    assert isinstance(result, Failed)
    assert result.kind == ErrorKind.INVALID_PARAMETER
    assert device.requests == []


def test_power_status_round_trip(
    engine: ProtocolEngine,
    device: FakeIloDevice,
    target: Target,
) -> None:
    result = engine.execute(target, "power_status")

    assert isinstance(result, Ok)
    node = result.node.find("GET_HOST_POWER")
    assert node is not None
    assert node.get("HOST_POWER") == "ON"
    assert device.tags == ["GET_FW_VERSION", "GET_HOST_POWER_STATUS"]
    assert device.requests[-1].version == LEGACY_VERSION


def test_current_device_commands_use_current_envelope(target: Target) -> None:
    device = FakeIloDevice(versions=(CURRENT_VERSION,))
    engine = ProtocolEngine(device)

    result = engine.execute(target, "set_server_name", {"name": "web-02"})

    assert isinstance(result, Ok)
    assert device.server_name == "web-02"
    assert device.requests[-1].attrs == {"VALUE": "web-02"}
    assert target.dialect == Dialect.CURRENT


def test_cacheable_queries_hit_the_wire_once(
    engine: ProtocolEngine,
    device: FakeIloDevice,
    target: Target,
) -> None:
    first = engine.execute(target, "network")
    second = engine.execute(target, "network")

    assert isinstance(first, Ok) and isinstance(second, Ok)
    assert device.tags.count("GET_NETWORK_SETTINGS") == 1


def test_volatile_queries_are_never_cached(
    engine: ProtocolEngine,
    device: FakeIloDevice,
    target: Target,
) -> None:
    engine.execute(target, "power_status")
    device.power = "OFF"
    result = engine.execute(target, "power_status")

    assert isinstance(result, Ok)
    node = result.node.find("GET_HOST_POWER")
    assert node is not None and node.get("HOST_POWER") == "OFF"
    assert device.tags.count("GET_HOST_POWER_STATUS") == 2


def test_successful_mutation_invalidates_cached_resource(
    engine: ProtocolEngine,
    device: FakeIloDevice,
    target: Target,
) -> None:
    engine.execute(target, "server_name")
    engine.execute(target, "set_server_name", {"name": "web-02"})
    result = engine.execute(target, "server_name")

    assert isinstance(result, Ok)
    node = result.node.find("SERVER_NAME")
    assert node is not None and node.get("VALUE") == "web-02"
    assert device.tags.count("GET_SERVER_NAME") == 2


def test_network_mutation_forces_a_fresh_read(
    engine: ProtocolEngine,
    device: FakeIloDevice,
    target: Target,
) -> None:
    engine.execute(target, "network")
    changed = engine.execute(target, "set_network", {"ip_address": "192.0.2.21"})
    result = engine.execute(target, "network")

    assert isinstance(changed, Ok) and isinstance(result, Ok)
    node = result.node.find("IP_ADDRESS")
    assert node is not None and node.get("VALUE") == "192.0.2.21"
    assert device.tags.count("GET_NETWORK_SETTINGS") == 2


def test_failed_mutation_keeps_cache(
    engine: ProtocolEngine,
    device: FakeIloDevice,
    target: Target,
) -> None:
    engine.execute(target, "all_users")
    result = engine.execute(target, "delete_user", {"user_login": "missing"})

    assert isinstance(result, Failed)
    assert result.kind == ErrorKind.REMOTE_ERROR
    assert result.status == 0x000A
    assert "users" in target.cache.keys(target)
    assert device.tags.count("DELETE_USER") == 1


def test_user_mutation_invalidates_list_and_single_user(
    engine: ProtocolEngine,
    target: Target,
) -> None:
    engine.execute(target, "all_users")
    engine.execute(target, "user", {"user_login": "Administrator"})
    assert sorted(target.cache.keys(target)) == ["users", "users:Administrator"]

    result = engine.execute(target, "mod_user", {"user_login": "Administrator", "user_name": "A"})

    assert isinstance(result, Ok)
    assert target.cache.keys(target) == []


def test_address_change_drops_cache_and_detected_dialect(
    engine: ProtocolEngine,
    device: FakeIloDevice,
    target: Target,
) -> None:
    engine.execute(target, "network")
    assert target.dialect == Dialect.LEGACY

    target.address = "ilo-2.example.com"

    assert target.dialect == Dialect.UNKNOWN
    assert target.cache.keys(target) == []
    engine.execute(target, "network")
    assert device.tags == [
        "GET_FW_VERSION",
        "GET_NETWORK_SETTINGS",
        "GET_FW_VERSION",
        "GET_NETWORK_SETTINGS",
    ]


def test_username_change_keeps_explicit_dialect(
    engine: ProtocolEngine,
    device: FakeIloDevice,
    target: Target,
) -> None:
    target.dialect = Dialect.CURRENT
    engine.execute(target, "network")

    target.username = "ops"

    assert target.dialect == Dialect.CURRENT
    assert target.cache.keys(target) == []
    assert device.tags == ["GET_NETWORK_SETTINGS"]


def test_setting_same_address_keeps_cache(engine: ProtocolEngine, target: Target) -> None:
    engine.execute(target, "network")

    target.address = "ilo.example.com"

    assert "network" in target.cache.keys(target)


@pytest.mark.parametrize("port", [0, 65536, True])
def test_target_rejects_out_of_range_port(port: int) -> None:
    with pytest.raises(InvalidParameterError):
        Target("ilo.example.com", "Administrator", "secret", port=port)


def test_transport_failure_is_returned_not_raised(target: Target) -> None:
    target.dialect = Dialect.LEGACY
    device = FakeIloDevice(queued=[IloConnectionError("Error connecting to ilo port 443")])

    result = ProtocolEngine(device).execute(target, "network")

    assert isinstance(result, Failed)
    assert result.kind == ErrorKind.CONNECTION_ERROR


def test_login_failure_after_detection_is_auth_error(target: Target) -> None:
    target.dialect = Dialect.LEGACY
    device = FakeIloDevice(queued=[ribcl_response(status=0x005F, message="Login failed.")])

    result = ProtocolEngine(device).execute(target, "power_status")

    assert isinstance(result, Failed)
    assert result.kind == ErrorKind.AUTH_ERROR
    assert result.status == 0x005F


def test_probe_failure_is_returned_as_failed(target: Target) -> None:
    device = FakeIloDevice(versions=())

    result = ProtocolEngine(device).execute(target, "network")

    assert isinstance(result, Failed)
    assert result.kind == ErrorKind.UNSUPPORTED_DEVICE
    assert device.tags == ["GET_FW_VERSION", "GET_FW_VERSION"]


def test_engine_is_silent_without_verbosity(
    engine: ProtocolEngine,
    target: Target,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.DEBUG, logger="ilo_cli.protocol.engine"):
        engine.execute(target, "firmware")

    assert caplog.records == []


def test_verbose_logging_masks_password(
    engine: ProtocolEngine,
    target: Target,
    caplog: pytest.LogCaptureFixture,
) -> None:
    target.verbosity = 2

    with caplog.at_level(logging.DEBUG, logger="ilo_cli.protocol.engine"):
        engine.execute(target, "firmware")

    assert any("Sending firmware" in record.getMessage() for record in caplog.records)
    assert all('PASSWORD="secret"' not in record.getMessage() for record in caplog.records)
    assert any('PASSWORD="********"' in record.getMessage() for record in caplog.records)
