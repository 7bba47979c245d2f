# app/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

# "guest" = no token, so it is never stored
Role = Literal["user", "admin"]

_PHONE_CHARS = set("0123456789+-() ")


class UserRead(SQLModel):
    """Profile as shown on the account page and in the admin list."""

    id: uuid.UUID
    email: EmailStr
    name: str
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str
    avatar_url: str | None = None
    role: Role
    is_active: bool
    has_shipping_address: bool
    created_at: datetime


class ProfileUpdate(SQLModel):
    """
    Edit of the caller's own profile. Only the fields sent are changed;
    blank strings clear optional fields.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=50)
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=200)
    city: str | None = Field(default=None, max_length=80)
    state: str | None = Field(default=None, max_length=80)
    country: str | None = Field(default=None, max_length=80)
    avatar_url: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("name", "country")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v:
            raise ValueError("cannot be empty")
        return v

    @field_validator("phone")
    @classmethod
    def phone_chars(cls, v: str | None) -> str | None:
        if v and not set(v) <= _PHONE_CHARS:
            raise ValueError("phone may only contain digits, spaces and + - ( )")
        return v


class UserRoleUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")
    role: Role


class UserStatusUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")
    is_active: bool
