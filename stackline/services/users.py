"""Registration, login and profile management."""

import asyncio
import logging
from functools import lru_cache
from uuid import UUID

from passlib.context import CryptContext

from stackline.config import get_settings
from stackline.db.models import User
from stackline.db.session import transaction
from stackline.errors import AuthenticationError, ConflictError, DuplicateRecordError, NotFoundError
from stackline.repositories import UserRepository
from stackline.schemas.user import UserCreate, UserUpdate
from stackline.services.base import BaseService

logger = logging.getLogger(__name__)


@lru_cache
def get_password_context() -> CryptContext:
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=get_settings().bcrypt_rounds,
    )


async def hash_password(password: str) -> str:
    # bcrypt blocks, so it runs in a worker thread
    return await asyncio.to_thread(get_password_context().hash, password)


async def verify_password(password: str, password_hash: str) -> bool:
    return await asyncio.to_thread(get_password_context().verify, password, password_hash)


class UserService(BaseService):
    def __init__(self, session):
        super().__init__(session)
        self.users = UserRepository(session)

    async def register(self, data: UserCreate) -> User:
        conflict = "User with this email or username already exists"
        if await self.users.email_or_username_taken(data.email, data.username):
            raise ConflictError(conflict)

        password_hash = await hash_password(data.password)
        async with transaction(self.session):
            try:
                user = await self.users.insert(
                    email=data.email.lower(),
                    username=data.username,
                    password_hash=password_hash,
                    first_name=data.first_name,
                    last_name=data.last_name,
                )
            except DuplicateRecordError as exc:
                raise ConflictError(conflict) from exc
        logger.info("Registered user %s", user.id)
        return user

    async def authenticate(self, identifier: str, password: str) -> User:
        """The user for an email-or-username and password. Any mismatch is 401."""
        user = await self.users.find_by_identifier(identifier.strip())
        if user is None or not await verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        return user

    async def get_profile(self, user_id: UUID) -> User:
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_profile(self, user_id: UUID, data: UserUpdate) -> User:
        user = await self.get_profile(user_id)
        patch = data.model_dump(exclude_unset=True)

        username = patch.get("username")
        if username and username != user.username:
            if await self.users.find_by_username(username):
                raise ConflictError("Username already taken")
        email = patch.get("email")
        if email:
            patch["email"] = email = email.lower()
            if email != user.email and await self.users.find_by_email(email):
                raise ConflictError("Email already taken")

        # username and email cannot be cleared
        patch = {
            key: value
            for key, value in patch.items()
            if value is not None or key in ("first_name", "last_name")
        }
        async with transaction(self.session):
            try:
                user = await self.users.update(user, **patch)
            except DuplicateRecordError as exc:
                raise ConflictError("Username or email already taken") from exc
        logger.info("Updated profile of user %s", user_id)
        return user

    async def change_password(self, user_id: UUID, current_password: str, new_password: str) -> None:
        user = await self.get_profile(user_id)
        if not await verify_password(current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")

        password_hash = await hash_password(new_password)
        async with transaction(self.session):
            await self.users.update(user, password_hash=password_hash)
        logger.info("Changed password of user %s", user_id)
