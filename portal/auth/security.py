from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from pydantic import ValidationError

from portal.auth.exceptions import InvalidTokenException
from portal.auth.schemas import TokenPayload
from portal.core.config import settings


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash or password over the bcrypt input limit
        return False


def create_access_token(*, username: str, user_id: str, is_admin: bool) -> str:
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload = {"sub": username, "uid": user_id, "admin": is_admin, "exp": expires_at}
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenPayload:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return TokenPayload.model_validate(payload)
    except (jwt.PyJWTError, ValidationError) as e:
        raise InvalidTokenException(f"Invalid token: {e}") from e
