from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from zingmedia.auth.passwords import MAX_PASSWORD_BYTES
from zingmedia.db.enums import UserRoleEnum

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1)
    role: UserRoleEnum
    tenantId: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class BrandingUpdate(BaseModel):
    primaryColor: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    secondaryColor: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    companyName: Optional[str] = Field(default=None, min_length=1)
    logo: Optional[str] = None
    domain: Optional[str] = None
