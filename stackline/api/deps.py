"""
FastAPI Dependencies for Authentication and Service Construction.

Key patterns:
1. get_current_user: Extracts and validates JWT, returns User object
2. Services are built per request from the request's session
3. No global "current user" state - always pass user_id explicitly

Security model:
- JWT stored in HttpOnly cookie (web) or Authorization header (mobile)
- Project access is checked in the service layer, not middleware
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated
from uuid import UUID

from fastapi import Cookie, Depends, Header, HTTPException, status
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from stackline.config import get_settings
from stackline.db.models import User
from stackline.db.session import get_db
from stackline.services import (
    ChatService,
    DocumentService,
    ImageService,
    InsightService,
    ProjectService,
    StackService,
    TagService,
    UserService,
)

# =============================================================================
# JWT UTILITIES
# =============================================================================


def create_access_token(user_id: UUID) -> str:
    """
    Create a JWT access token for a user.

    Token payload contains:
    - sub: user_id as string (standard JWT subject claim)
    - exp: expiration timestamp

    No profile data goes into the token; it is looked up per request.
    """
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {
        "sub": str(user_id),
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID | None:
    """
    Decode and validate a JWT access token.

    Returns user_id if valid, None if invalid/expired.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        user_id_str = payload.get("sub")
        if user_id_str is None:
            return None
        return UUID(user_id_str)
    except (JWTError, ValueError):
        return None


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


async def get_token_from_request(
    authorization: Annotated[str | None, Header()] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> str:
    """
    Extract JWT token from request.

    Supports two methods (in order of preference):
    1. HttpOnly cookie named 'access_token' (web client)
    2. Authorization header: 'Bearer <token>' (mobile client)
    """
    # Try cookie first
    if access_token:
        return access_token

    # Fall back to Authorization header
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: Annotated[str, Depends(get_token_from_request)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Validate JWT and return the current authenticated user.

    Raises 401 if:
    - Token is missing, invalid, or expired
    - User no longer exists in database
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = decode_access_token(token)
    if user_id is None:
        raise credentials_exception

    user = await db.get(User, user_id)
    if user is None:
        raise credentials_exception

    return user


# Type alias for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]


# =============================================================================
# SERVICES (one per request, bound to the request's session)
# =============================================================================


def get_user_service(db: DbSession) -> UserService:
    return UserService(db)


def get_project_service(db: DbSession) -> ProjectService:
    return ProjectService(db)


def get_stack_service(db: DbSession) -> StackService:
    return StackService(db)


def get_insight_service(db: DbSession) -> InsightService:
    return InsightService(db)


def get_image_service(db: DbSession) -> ImageService:
    return ImageService(db)


def get_document_service(db: DbSession) -> DocumentService:
    return DocumentService(db)


def get_tag_service(db: DbSession) -> TagService:
    return TagService(db)


def get_chat_service(db: DbSession) -> ChatService:
    return ChatService(db)


Users = Annotated[UserService, Depends(get_user_service)]
Projects = Annotated[ProjectService, Depends(get_project_service)]
Stacks = Annotated[StackService, Depends(get_stack_service)]
Insights = Annotated[InsightService, Depends(get_insight_service)]
Images = Annotated[ImageService, Depends(get_image_service)]
Documents = Annotated[DocumentService, Depends(get_document_service)]
Tags = Annotated[TagService, Depends(get_tag_service)]
Chat = Annotated[ChatService, Depends(get_chat_service)]
