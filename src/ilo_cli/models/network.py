"""Models for iLO network settings."""

from __future__ import annotations

import ipaddress
import re

from pydantic import BaseModel, field_validator, model_validator

_DNS_LABEL_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?$")


def _validate_ipv4(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        return str(ipaddress.IPv4Address(value.strip()))
    except ValueError as exc:
        raise ValueError(f"Invalid IPv4 address: {value}") from exc


class NetworkSettings(BaseModel):
    """Current network configuration of the management processor."""

    enable_nic: bool = True
    dhcp_enable: bool = False
    speed_autoselect: bool = True
    ip_address: str = ""
    subnet_mask: str = ""
    gateway_ip_address: str = ""
    dns_name: str = ""
    domain_name: str = ""
    prim_dns_server: str = ""
    mac_address: str = ""


class NetworkUpdate(BaseModel):
    """Request model for changing network settings; unset fields are left alone."""

    enable_nic: bool | None = None
    dhcp_enable: bool | None = None
    speed_autoselect: bool | None = None
    ip_address: str | None = None
    subnet_mask: str | None = None
    gateway_ip_address: str | None = None
    dns_name: str | None = None
    domain_name: str | None = None
    prim_dns_server: str | None = None

    @field_validator("ip_address", "subnet_mask", "gateway_ip_address", "prim_dns_server")
    @classmethod
    def validate_addresses(cls, value: str | None) -> str | None:
        return _validate_ipv4(value)

    @field_validator("dns_name")
    @classmethod
    def validate_dns_name(cls, value: str | None) -> str | None:
        if value is not None and not _DNS_LABEL_RE.match(value):
            raise ValueError(f"Invalid DNS name: {value}")
        return value

    @model_validator(mode="after")
    def validate_update_fields(self) -> NetworkUpdate:
        if not self.as_params():
            raise ValueError("At least one network setting must be provided")
        return self

    def as_params(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)
