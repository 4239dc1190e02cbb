# app/schemas/user.py
from datetime import datetime

from pydantic import BaseModel, EmailStr, field_validator

from app.models.enums import Role


def _not_blank(value: str | None) -> str | None:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value.strip() if value is not None else value


class UserBase(BaseModel):
    student_id: str
    first_name: str
    last_name: str
    email: EmailStr
    department: str
    program: str

    @field_validator("student_id", "first_name", "last_name", "department", "program")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _not_blank(v)


class UserCreate(UserBase):
    password: str
    roles: set[Role] | None = None  # defaults to {STUDENT}

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class UserUpdate(BaseModel):
    """Self-service profile update; email and student_id stay fixed."""
    first_name: str | None = None
    last_name: str | None = None
    department: str | None = None
    program: str | None = None
    password: str | None = None

    @field_validator("first_name", "last_name", "department", "program", "password")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        return _not_blank(v)


class UserRolesUpdate(BaseModel):
    roles: set[Role]


class UserPublic(UserBase):
    id: int
    roles: set[Role]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("roles", mode="before")
    @classmethod
    def roles_as_set(cls, v):
        # user.roles is an association proxy, not a plain set
        return set(v or ())
