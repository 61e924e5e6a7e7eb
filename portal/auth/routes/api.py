from fastapi import APIRouter, Depends, HTTPException, Query, status

from portal.auth.dependencies import get_auth_service, get_current_user, get_user_service, require_admin
from portal.auth.exceptions import AuthException, InvalidCredentialsException
from portal.auth.models import User
from portal.auth.schemas import (
    ChangePasswordRequest,
    CurrentUserRead,
    LoginRequest,
    LoginResponse,
    UserCreateRequest,
    UserRead,
)
from portal.auth.services import AuthService, UserService
from portal.commons.schemas import MessageResponse

auth_router = APIRouter()
users_router = APIRouter(dependencies=[Depends(require_admin)])


@auth_router.post("/login", response_model=LoginResponse)
async def login(
    login_in: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    try:
        return await service.login(login_in.username, login_in.password)
    except InvalidCredentialsException as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))


@auth_router.get("/me", response_model=CurrentUserRead)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@auth_router.put("/password", response_model=MessageResponse)
async def change_password(
    password_in: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    try:
        await service.change_password(current_user.id, password_in.old_password, password_in.new_password)
    except AuthException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return MessageResponse(message="Password changed successfully")


@users_router.get("", response_model=list[UserRead])
async def list_users(
    include_deleted: bool = Query(False, alias="includeDeleted"),
    service: UserService = Depends(get_user_service),
):
    return await service.list_users(include_deleted=include_deleted)


@users_router.post("", response_model=UserRead)
async def create_user(
    user_in: UserCreateRequest,
    service: UserService = Depends(get_user_service),
):
    try:
        return await service.create_user(user_in.username, user_in.password, user_in.is_admin)
    except AuthException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@users_router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    try:
        await service.soft_delete_user(user_id)
    except AuthException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return MessageResponse(message="User deleted")


@users_router.put("/{user_id}/restore", response_model=MessageResponse)
async def restore_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    try:
        await service.restore_user(user_id)
    except AuthException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return MessageResponse(message="User restored")
