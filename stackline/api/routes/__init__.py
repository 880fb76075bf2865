"""API routes package."""

from stackline.api.routes import (
    chat,
    documents,
    images,
    insights,
    projects,
    stacks,
    tags,
    users,
)

__all__ = [
    "chat",
    "documents",
    "images",
    "insights",
    "projects",
    "stacks",
    "tags",
    "users",
]
