import logging
from datetime import datetime

from portal.auth.exceptions import (
    InvalidCredentialsException,
    UserAlreadyExistsException,
    UserNotFoundException,
    UserStateException,
    UserValidationException,
)
from portal.auth.models import User
from portal.auth.repositories import UserRepository
from portal.auth.schemas import LoginResponse, UserCreate, UserUpdate
from portal.auth.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 3
# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72


def _validate_password(password: str | None, label: str = "Password") -> str:
    if password is None or not password.strip():
        raise UserValidationException(f"{label} cannot be empty")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise UserValidationException(f"{label} must be at least {PASSWORD_MIN_LENGTH} characters long")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise UserValidationException(f"{label} must be at most {PASSWORD_MAX_BYTES} bytes long")
    return password


class UserService:
    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def get_user(self, user_id: str) -> User:
        user = await self.user_repo.get(pk=user_id)
        if not user:
            raise UserNotFoundException("User not found")
        return user

    async def get_active_user_by_username(self, username: str) -> User:
        user = await self.user_repo.get_active_by_username(username)
        if not user:
            raise UserNotFoundException("User not found")
        return user

    async def list_users(self, include_deleted: bool = False) -> list[User]:
        return await self.user_repo.list_all(include_deleted=include_deleted)

    async def has_users(self) -> bool:
        return await self.user_repo.count() > 0

    async def create_user(self, username: str | None, password: str | None, is_admin: bool = False) -> User:
        username = (username or "").strip()
        if not username:
            raise UserValidationException("Username cannot be empty")
        if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
            raise UserValidationException(
                f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
            )
        if await self.user_repo.exists_active_username(username):
            raise UserAlreadyExistsException("A user with this username already exists")
        _validate_password(password)

        user = await self.user_repo.create(
            obj_in=UserCreate(username=username, password_hash=hash_password(password), is_admin=bool(is_admin))
        )
        logger.info(f"Created user {user.username} (admin: {user.is_admin})")
        return user

    async def soft_delete_user(self, user_id: str) -> User:
        user = await self.user_repo.get_active(user_id)
        if not user:
            raise UserNotFoundException("Active user not found")
        user = await self.user_repo.update(db_obj=user, obj_in=UserUpdate(deleted_at=datetime.now()))
        logger.info(f"User soft-deleted: {user.username} (id: {user_id})")
        return user

    async def restore_user(self, user_id: str) -> User:
        user = await self.get_user(user_id)
        if not user.is_deleted:
            raise UserStateException("User is not deleted")
        if await self.user_repo.exists_active_username(user.username):
            raise UserAlreadyExistsException("An active user with this username already exists")
        user = await self.user_repo.update(db_obj=user, obj_in=UserUpdate(deleted_at=None))
        logger.info(f"User restored: {user.username} (id: {user_id})")
        return user

    async def change_password(self, user_id: str, old_password: str, new_password: str) -> None:
        user = await self.get_user(user_id)
        if not verify_password(old_password or "", user.password_hash):
            raise UserValidationException("Old password is incorrect")
        _validate_password(new_password, label="New password")
        await self.user_repo.update(db_obj=user, obj_in=UserUpdate(password_hash=hash_password(new_password)))
        logger.info(f"Password changed for user {user.username}")


class AuthService:
    def __init__(self, user_service: UserService):
        self.user_service = user_service

    async def login(self, username: str, password: str) -> LoginResponse:
        user = await self.authenticate(username, password)
        token = create_access_token(username=user.username, user_id=user.id, is_admin=user.is_admin)
        logger.info(f"User {user.username} logged in")
        return LoginResponse(token=token, username=user.username, is_admin=user.is_admin)

    async def authenticate(self, username: str, password: str) -> User:
        try:
            user = await self.user_service.get_active_user_by_username((username or "").strip())
        except UserNotFoundException:
            raise InvalidCredentialsException("Invalid username or password")
        if not user.enabled or not verify_password(password or "", user.password_hash):
            raise InvalidCredentialsException("Invalid username or password")
        return user
