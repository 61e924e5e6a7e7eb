from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.repositories import UserRepository
from portal.auth.services import AuthService, UserService


async def build_user_service(db: AsyncSession) -> UserService:
    return UserService(user_repo=UserRepository(db=db))


async def build_auth_service(db: AsyncSession) -> AuthService:
    user_service = await build_user_service(db)
    return AuthService(user_service=user_service)
