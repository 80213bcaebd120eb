"""Models for iLO user accounts."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

PRIVILEGES = (
    "admin_priv",
    "remote_cons_priv",
    "reset_server_priv",
    "virtual_media_priv",
    "config_ilo_priv",
)


class UserAccount(BaseModel):
    """A local user account as reported by the processor."""

    user_login: str
    user_name: str = ""
    admin_priv: bool = False
    remote_cons_priv: bool = False
    reset_server_priv: bool = False
    virtual_media_priv: bool = False
    config_ilo_priv: bool = False


class UserCreate(BaseModel):
    """Request model for creating a user account."""

    user_login: str = Field(min_length=1, max_length=39)
    user_name: str = Field(min_length=1, max_length=39)
    password: str = Field(min_length=1, max_length=39)
    admin_priv: bool = False
    remote_cons_priv: bool = True
    reset_server_priv: bool = False
    virtual_media_priv: bool = False
    config_ilo_priv: bool = False

    def as_params(self) -> dict[str, object]:
        return self.model_dump()


class UserUpdate(BaseModel):
    """Request model for changing an existing account; unset fields are left alone."""

    user_login: str = Field(min_length=1, max_length=39)
    user_name: str | None = Field(default=None, min_length=1, max_length=39)
    password: str | None = Field(default=None, min_length=1, max_length=39)
    admin_priv: bool | None = None
    remote_cons_priv: bool | None = None
    reset_server_priv: bool | None = None
    virtual_media_priv: bool | None = None
    config_ilo_priv: bool | None = None

    @model_validator(mode="after")
    def validate_update_fields(self) -> UserUpdate:
        if len(self.as_params()) < 2:
            raise ValueError("At least one field besides 'user_login' must be provided")
        return self

    def as_params(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)
