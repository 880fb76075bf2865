"""Authentication schemas."""

from pydantic import AliasChoices, Field

from stackline.schemas.base import BaseSchema
from stackline.schemas.user import UserRead


class LoginRequest(BaseSchema):
    """Login with either email or username."""

    identifier: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("identifier", "email", "username"),
        description="Email address or username",
    )
    password: str = Field(..., min_length=1)


class TokenResponse(BaseSchema):
    """Response schema for successful authentication."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token expiry in seconds")
    user: UserRead
