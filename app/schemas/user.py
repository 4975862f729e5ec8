"""Pydantic schemas for users: create/update payloads and the self/admin read views."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from app.models.user import User, UserRole

# Read privilege of the caller; selects which view a row is projected to.
Privilege = Literal["admin", "user"]


class UserGroupRef(BaseModel):
    """Group to attach a new user to; created when no group has this name."""

    name: str = Field(..., min_length=1, max_length=255)


class UserGroupView(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    name: str


class UserCreateFields(BaseModel):
    """Admin-settable fields of a new user (the password is sent separately)."""

    model_config = {"extra": "forbid"}

    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=320)
    role: UserRole = UserRole.USER
    is_active: bool = True


class UserCreateRequest(BaseModel):
    user: UserCreateFields
    group: UserGroupRef
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class UserUpdateSelfRequest(BaseModel):
    """Fields a user may change on their own record. Anything else is rejected."""

    model_config = {"extra": "forbid"}

    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=320)


class UserPasswordChangeRequest(BaseModel):
    id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class UserLookup(BaseModel):
    """Unique filter for an exact-match user lookup: exactly one of id or username."""

    id: str | None = None
    username: str | None = None

    @model_validator(mode="after")
    def exactly_one_key(self) -> "UserLookup":
        if (self.id is None) == (self.username is None):
            raise ValueError("Provide exactly one of 'id' or 'username'")
        return self


class UserSelfView(BaseModel):
    """What a user sees of their own record."""

    model_config = {"from_attributes": True}

    id: str
    username: str
    name: str | None = None
    email: str | None = None
    role: UserRole


class UserAdminView(BaseModel):
    """What an admin sees of any user record. Never includes the password hash."""

    model_config = {"from_attributes": True}

    id: str
    username: str
    name: str | None = None
    email: str | None = None
    role: UserRole
    is_active: bool
    group_id: str | None = None
    group: UserGroupView | None = None
    created_at: datetime | None = None


def project_user(user: User, privilege: Privilege) -> UserSelfView | UserAdminView:
    """Shape a user row for a caller with the given read privilege."""
    if privilege == "admin":
        return UserAdminView.model_validate(user)
    return UserSelfView.model_validate(user)
