"""User lookups."""

from sqlalchemy import func, or_

from stackline.db.models import User
from stackline.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def find_by_email(self, email: str) -> User | None:
        return await self.find_one(func.lower(User.email) == email.lower())

    async def find_by_username(self, username: str) -> User | None:
        return await self.find_one(User.username == username)

    async def find_by_identifier(self, identifier: str) -> User | None:
        """Login accepts either the email or the username."""
        return await self.find_one(
            or_(func.lower(User.email) == identifier.lower(), User.username == identifier)
        )

    async def email_or_username_taken(self, email: str, username: str) -> bool:
        return await self.exists(
            or_(func.lower(User.email) == email.lower(), User.username == username)
        )
