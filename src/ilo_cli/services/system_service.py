"""Firmware, host identity, health and global settings accessors."""

from __future__ import annotations

from ilo_cli.ilo_client import IloClientProtocol
from ilo_cli.models.system import (
    FirmwareInfo,
    GlobalSettings,
    GlobalSettingsUpdate,
    HealthReading,
    HealthSummary,
    HostInfo,
)
from ilo_cli.protocol.nodes import DecodedNode
from ilo_cli.services.projection import coerce_flag, coerce_int, coerce_str, require_node

_HOST_FIELDS = {
    "Product Name": "product_name",
    "Serial Number": "serial_number",
    "UUID": "uuid",
    "BIOS Version": "bios_version",
}


class SystemService:
    def __init__(self, client: IloClientProtocol):
        self._client = client

    def firmware(self) -> FirmwareInfo:
        node = require_node(self._client.fetch("firmware"), "GET_FW_VERSION")
        return FirmwareInfo(
            firmware_version=coerce_str(node.get("FIRMWARE_VERSION")),
            firmware_date=coerce_str(node.get("FIRMWARE_DATE")),
            management_processor=coerce_str(node.get("MANAGEMENT_PROCESSOR")),
            license_type=coerce_str(node.get("LICENSE_TYPE")),
        )

    def host_info(self) -> HostInfo:
        node = require_node(self._client.fetch("host_data"), "GET_HOST_DATA")
        fields: dict[str, str] = {}
        for field_node in node.find_all("FIELD"):
            name = _HOST_FIELDS.get(coerce_str(field_node.get("NAME")))
            if name is not None and name not in fields:
                fields[name] = coerce_str(field_node.get("VALUE"))
        return HostInfo(**fields)

    def server_name(self) -> str:
        node = require_node(self._client.fetch("server_name"), "SERVER_NAME")
        return coerce_str(node.get("VALUE", node.get("value")))

    def set_server_name(self, name: str) -> None:
        self._client.fetch("set_server_name", {"name": name})

    def health(self) -> HealthSummary:
        node = require_node(self._client.fetch("health"), "GET_EMBEDDED_HEALTH_DATA")
        summary = HealthSummary()
        for section in node.children:
            match section.tag:
                case "FANS":
                    summary.fans = [
                        self._parse_reading(fan, "SPEED") for fan in section.find_all("FAN")
                    ]
                case "TEMPERATURE":
                    summary.temperatures = [
                        self._parse_reading(temp, "CURRENTREADING")
                        for temp in section.find_all("TEMP")
                    ]
                case "POWER_SUPPLIES":
                    summary.power_supplies = [
                        self._parse_reading(supply, "CAPACITY")
                        for supply in section.find_all("SUPPLY")
                    ]
                case "HEALTH_AT_A_GLANCE":
                    summary.at_a_glance = {
                        child.tag.lower(): coerce_str(child.get("STATUS"))
                        for child in section.children
                        if child.get("STATUS") is not None
                    }
        return summary

    def global_settings(self) -> GlobalSettings:
        node = require_node(self._client.fetch("global_settings"), "GET_GLOBAL_SETTINGS")
        values = node.child_values()
        return GlobalSettings(
            session_timeout=coerce_int(values.get("SESSION_TIMEOUT"), default=0),
            http_port=coerce_int(values.get("HTTP_PORT"), default=80),
            https_port=coerce_int(values.get("HTTPS_PORT"), default=443),
            ssh_port=coerce_int(values.get("SSH_PORT"), default=22),
            remote_console_port=coerce_int(values.get("REMOTE_CONSOLE_PORT"), default=17990),
            ssh_status=coerce_flag(values.get("SSH_STATUS"), default=True),
        )

    def update_global_settings(self, update: GlobalSettingsUpdate) -> None:
        self._client.fetch("set_global_settings", update.as_params())

    @staticmethod
    def _parse_reading(node: DecodedNode, reading_tag: str) -> HealthReading:
        values = node.child_values()
        reading = node.find(reading_tag)
        return HealthReading(
            label=coerce_str(values.get("LABEL")),
            status=coerce_str(values.get("STATUS")),
            reading=coerce_str(values.get(reading_tag)),
            unit=coerce_str(reading.get("UNIT")) if reading is not None else "",
            location=coerce_str(values.get("LOCATION") or values.get("ZONE")),
        )
