from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from portal.commons.schemas import CamelModel, format_timestamp


class UserCreate(BaseModel):
    username: str
    password_hash: str
    is_admin: bool = False
    enabled: bool = True


class UserUpdate(BaseModel):
    password_hash: str | None = None
    enabled: bool | None = None
    deleted_at: datetime | None = None


class UserRead(CamelModel):
    id: str
    username: str
    is_admin: bool
    enabled: bool
    created_at: datetime | None = None
    deleted_at: datetime | None = None

    @field_serializer("created_at", "deleted_at")
    def serialize_timestamp(self, value: datetime | None) -> str:
        return format_timestamp(value)


class UserCreateRequest(CamelModel):
    username: str = ""
    password: str = ""
    is_admin: bool = False


class LoginRequest(CamelModel):
    username: str = ""
    password: str = ""


class LoginResponse(CamelModel):
    token: str
    username: str
    is_admin: bool


class CurrentUserRead(CamelModel):
    username: str
    is_admin: bool
    enabled: bool


class ChangePasswordRequest(CamelModel):
    old_password: str = ""
    new_password: str = ""


class TokenPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sub: str
    uid: str
    admin: bool = False
    exp: int | None = Field(default=None)
