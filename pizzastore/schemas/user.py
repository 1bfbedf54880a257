"""
User schemas.
"""
from enum import Enum

from pydantic import BaseModel, field_validator


class ProfileField(str, Enum):
    """Fields a user (or a manager on their behalf) may replace"""
    favorite_items = "favorite_items"
    phone_num = "phone_num"
    role = "role"


class UserBase(BaseModel):
    login: str
    phone_num: str = ""

    @field_validator("login")
    @classmethod
    def login_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("login must not be blank")
        return value


class UserCreate(UserBase):
    password: str
    # Plain string: UserService rejects unknown roles with InvalidRole
    role: str
    favorite_items: str = ""

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("password must not be blank")
        return value

    @field_validator("role", "phone_num", "favorite_items")
    @classmethod
    def strip(cls, value: str) -> str:
        return value.strip()


class UserFieldUpdate(BaseModel):
    """Single field replacement, always applied when the field is chosen"""
    field: ProfileField
    value: str

    @field_validator("value")
    @classmethod
    def strip(cls, value: str) -> str:
        return value.strip()
