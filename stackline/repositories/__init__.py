"""Data access layer: one repository per aggregate."""

from stackline.repositories.base import BaseRepository
from stackline.repositories.chat_messages import ChatMessageRepository
from stackline.repositories.documents import DocumentRepository
from stackline.repositories.images import ImageRepository
from stackline.repositories.insights import InsightRepository
from stackline.repositories.projects import ProjectRepository
from stackline.repositories.stacks import StackRepository
from stackline.repositories.tags import TagRepository
from stackline.repositories.users import UserRepository

__all__ = [
    "BaseRepository",
    "ChatMessageRepository",
    "DocumentRepository",
    "ImageRepository",
    "InsightRepository",
    "ProjectRepository",
    "StackRepository",
    "TagRepository",
    "UserRepository",
]
