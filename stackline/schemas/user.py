"""User schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, EmailStr, Field

from stackline.schemas.base import BaseSchema


class UserCreate(BaseSchema):
    """Schema for registering a user."""

    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str | None = Field(
        None, max_length=100, validation_alias=AliasChoices("first_name", "firstName")
    )
    last_name: str | None = Field(
        None, max_length=100, validation_alias=AliasChoices("last_name", "lastName")
    )


class UserSummary(BaseSchema):
    """Public view of a user, embedded in other resources."""

    id: UUID
    email: str
    username: str
    first_name: str | None
    last_name: str | None


class UserRead(UserSummary):
    """Schema for reading user data."""

    created_at: datetime
    updated_at: datetime


class UserUpdate(BaseSchema):
    """Schema for updating user profile. All fields optional."""

    email: EmailStr | None = None
    username: str | None = Field(None, min_length=3, max_length=50)
    first_name: str | None = Field(
        None, max_length=100, validation_alias=AliasChoices("first_name", "firstName")
    )
    last_name: str | None = Field(
        None, max_length=100, validation_alias=AliasChoices("last_name", "lastName")
    )


class PasswordChange(BaseSchema):
    """Schema for changing the current user's password."""

    current_password: str = Field(
        ..., validation_alias=AliasChoices("current_password", "currentPassword")
    )
    new_password: str = Field(
        ..., min_length=8, max_length=128, validation_alias=AliasChoices("new_password", "newPassword")
    )
