"""Models for firmware, host and health information."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

PowerState = Literal["on", "off"]
PowerAction = Literal["on", "off", "reset"]


class FirmwareInfo(BaseModel):
    firmware_version: str = ""
    firmware_date: str = ""
    management_processor: str = ""
    license_type: str = ""


class HostInfo(BaseModel):
    product_name: str = ""
    serial_number: str = ""
    uuid: str = ""
    bios_version: str = ""


class HealthReading(BaseModel):
    """One fan, temperature sensor or power supply."""

    label: str
    status: str = ""
    reading: str = ""
    unit: str = ""
    location: str = ""


class HealthSummary(BaseModel):
    at_a_glance: dict[str, str] = Field(default_factory=dict)
    fans: list[HealthReading] = Field(default_factory=list)
    temperatures: list[HealthReading] = Field(default_factory=list)
    power_supplies: list[HealthReading] = Field(default_factory=list)


class GlobalSettings(BaseModel):
    session_timeout: int = 0
    http_port: int = 80
    https_port: int = 443
    ssh_port: int = 22
    remote_console_port: int = 17990
    ssh_status: bool = True


class GlobalSettingsUpdate(BaseModel):
    session_timeout: int | None = Field(default=None, ge=0, le=120)
    http_port: int | None = Field(default=None, ge=0, le=65535)
    https_port: int | None = Field(default=None, ge=0, le=65535)
    ssh_port: int | None = Field(default=None, ge=0, le=65535)
    remote_console_port: int | None = Field(default=None, ge=0, le=65535)
    ssh_status: bool | None = None

    @model_validator(mode="after")
    def validate_update_fields(self) -> GlobalSettingsUpdate:
        if not self.as_params():
            raise ValueError("At least one global setting must be provided")
        return self

    def as_params(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)
