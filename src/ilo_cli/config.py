"""Configuration loading for the iLO CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DialectName = Literal["unknown", "legacy", "current"]


class Settings(BaseSettings):
    """Connection settings loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(
        env_prefix="ILO_CLI_",
        extra="ignore",
    )

    host: str | None = None
    username: str | None = None
    password: str | None = None
    port: int = Field(default=443, ge=1, le=65535)
    verify_ssl: bool = True
    timeout: float = Field(default=60.0, gt=0)
    dialect: DialectName = "unknown"
    verbosity: int = Field(default=0, ge=0)

    @classmethod
    def from_env_file(cls, env_file: Path | None = None) -> Settings:
        kwargs: dict[str, Path] = {}
        if env_file is not None:
            kwargs["_env_file"] = env_file
        return cls(**kwargs)
