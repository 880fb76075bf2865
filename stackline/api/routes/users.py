"""
User Routes

Endpoints:
- POST /users/register - Create an account
- POST /users/login - Exchange credentials for a session
- POST /users/logout - Clear session
- GET /users/profile - Current user's profile
- PUT /users/profile - Update profile fields
- PUT /users/password - Change password

The JWT is returned in the response body and set as an HttpOnly cookie;
the web client relies on the cookie, the mobile client on the header.
"""

from fastapi import APIRouter, Response, status

from stackline.api.deps import CurrentUser, Users, create_access_token
from stackline.api.responses import success
from stackline.config import get_settings
from stackline.schemas.auth import LoginRequest, TokenResponse
from stackline.schemas.base import ApiResponse
from stackline.schemas.user import PasswordChange, UserCreate, UserRead, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


def _cookie_options() -> dict:
    settings = get_settings()
    return {
        "httponly": True,
        "secure": settings.cookie_cross_domain or settings.environment != "development",
        "samesite": "none" if settings.cookie_cross_domain else "lax",
    }


@router.post("/register", response_model=ApiResponse[UserRead], status_code=status.HTTP_201_CREATED)
async def register(data: UserCreate, users: Users):
    """Register a new account. Email and username must both be unused."""
    user = await users.register(data)
    return success(UserRead.model_validate(user), "User registered successfully")


@router.post("/login", response_model=ApiResponse[TokenResponse])
async def login(data: LoginRequest, response: Response, users: Users):
    """
    Log in with email or username.

    Sets the access_token cookie and also returns the token for clients
    that send it as a Bearer header.
    """
    user = await users.authenticate(data.identifier, data.password)

    expires_in = get_settings().jwt_expire_minutes * 60
    access_token = create_access_token(user.id)
    response.set_cookie(key="access_token", value=access_token, max_age=expires_in, **_cookie_options())

    token = TokenResponse(
        access_token=access_token,
        expires_in=expires_in,
        user=UserRead.model_validate(user),
    )
    return success(token, "Login successful")


@router.post("/logout", response_model=ApiResponse[None])
async def logout(response: Response):
    """Clear the session cookie."""
    response.delete_cookie(key="access_token", **_cookie_options())
    return success(message="Logged out successfully")


@router.get("/profile", response_model=ApiResponse[UserRead])
async def get_profile(current_user: CurrentUser, users: Users):
    user = await users.get_profile(current_user.id)
    return success(UserRead.model_validate(user))


@router.put("/profile", response_model=ApiResponse[UserRead])
async def update_profile(data: UserUpdate, current_user: CurrentUser, users: Users):
    user = await users.update_profile(current_user.id, data)
    return success(UserRead.model_validate(user), "Profile updated successfully")


@router.put("/password", response_model=ApiResponse[None])
async def change_password(data: PasswordChange, current_user: CurrentUser, users: Users):
    await users.change_password(current_user.id, data.current_password, data.new_password)
    return success(message="Password updated successfully")
