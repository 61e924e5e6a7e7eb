from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.exceptions import InvalidTokenException, UserNotFoundException
from portal.auth.factories import build_auth_service, build_user_service
from portal.auth.models import User
from portal.auth.security import decode_access_token
from portal.auth.services import AuthService, UserService
from portal.commons.dependencies import get_db

bearer_scheme = HTTPBearer(auto_error=False)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return await build_user_service(db)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return await build_auth_service(db)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """
    Resolves the bearer token to an active, enabled user. Anything else is a 401.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    try:
        payload = decode_access_token(credentials.credentials)
        user = await user_service.get_active_user_by_username(payload.sub)
    except (InvalidTokenException, UserNotFoundException):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    if not user.enabled or user.id != payload.uid:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return current_user
