"""Pydantic schemas for API request/response validation."""

from stackline.schemas.auth import LoginRequest, TokenResponse
from stackline.schemas.base import ApiResponse, ErrorResponse
from stackline.schemas.chat import ChatMessageCreate, ChatMessageRead, ChatResult, ImageUploadRequest
from stackline.schemas.documents import (
    DocumentRead,
    DocumentReferenceCreate,
    DocumentReferenceRead,
    DocumentUpdate,
)
from stackline.schemas.images import ImageRead
from stackline.schemas.insights import InsightCreate, InsightRead, InsightUpdate
from stackline.schemas.projects import (
    CollaboratorCreate,
    CollaboratorRead,
    ProjectCreate,
    ProjectDetail,
    ProjectRead,
    ProjectUpdate,
)
from stackline.schemas.stacks import StackCreate, StackDetail, StackRead
from stackline.schemas.tags import TagCreate, TagRead, TagUpdate
from stackline.schemas.user import PasswordChange, UserCreate, UserRead, UserSummary, UserUpdate

__all__ = [
    # Envelope
    "ApiResponse",
    "ErrorResponse",
    # User / Auth
    "LoginRequest",
    "PasswordChange",
    "TokenResponse",
    "UserCreate",
    "UserRead",
    "UserSummary",
    "UserUpdate",
    # Projects
    "CollaboratorCreate",
    "CollaboratorRead",
    "ProjectCreate",
    "ProjectDetail",
    "ProjectRead",
    "ProjectUpdate",
    # Stacks / Insights
    "InsightCreate",
    "InsightRead",
    "InsightUpdate",
    "StackCreate",
    "StackDetail",
    "StackRead",
    # Tags
    "TagCreate",
    "TagRead",
    "TagUpdate",
    # Images / Documents
    "DocumentRead",
    "DocumentReferenceCreate",
    "DocumentReferenceRead",
    "DocumentUpdate",
    "ImageRead",
    # Chat
    "ChatMessageCreate",
    "ChatMessageRead",
    "ChatResult",
    "ImageUploadRequest",
]
