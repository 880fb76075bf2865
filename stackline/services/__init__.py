"""Business logic: access checks, validation and invariants on top of the repositories."""

from stackline.services.access import AccessControl
from stackline.services.base import FileUpload
from stackline.services.chat import ChatService
from stackline.services.commands import parse_command
from stackline.services.documents import DocumentService
from stackline.services.images import ImageService
from stackline.services.insights import InsightService
from stackline.services.projects import ProjectService
from stackline.services.stacks import StackService
from stackline.services.tags import TagService
from stackline.services.users import UserService

__all__ = [
    "AccessControl",
    "ChatService",
    "DocumentService",
    "FileUpload",
    "ImageService",
    "InsightService",
    "ProjectService",
    "StackService",
    "TagService",
    "UserService",
    "parse_command",
]
