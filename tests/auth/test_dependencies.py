from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from portal.auth.dependencies import get_auth_service, get_current_user, get_user_service, require_admin
from portal.auth.exceptions import UserNotFoundException
from portal.auth.models import User
from portal.auth.security import create_access_token


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


async def test_get_user_service__delegates_to_factory(mocker, db_session_mock):
    service = MagicMock()
    build_mock = mocker.patch("portal.auth.dependencies.build_user_service", new=AsyncMock(return_value=service))

    result = await get_user_service(db=db_session_mock)

    build_mock.assert_awaited_once_with(db_session_mock)
    assert result is service


async def test_get_auth_service__delegates_to_factory(mocker, db_session_mock):
    service = MagicMock()
    build_mock = mocker.patch("portal.auth.dependencies.build_auth_service", new=AsyncMock(return_value=service))

    result = await get_auth_service(db=db_session_mock)

    build_mock.assert_awaited_once_with(db_session_mock)
    assert result is service


async def test_get_current_user__returns_user_for_valid_token(user_service_mock: MagicMock, analyst_user: User):
    user_service_mock.get_active_user_by_username.return_value = analyst_user
    token = create_access_token(username="analyst", user_id="analyst-id", is_admin=False)

    user = await get_current_user(credentials=_bearer(token), user_service=user_service_mock)

    assert user is analyst_user
    user_service_mock.get_active_user_by_username.assert_awaited_once_with("analyst")


async def test_get_current_user__missing_credentials(user_service_mock: MagicMock):
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(credentials=None, user_service=user_service_mock)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Unauthorized"


async def test_get_current_user__invalid_token(user_service_mock: MagicMock):
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(credentials=_bearer("garbage"), user_service=user_service_mock)

    assert exc_info.value.status_code == 401
    user_service_mock.get_active_user_by_username.assert_not_awaited()


async def test_get_current_user__deleted_user(user_service_mock: MagicMock):
    user_service_mock.get_active_user_by_username.side_effect = UserNotFoundException("User not found")
    token = create_access_token(username="gone", user_id="gone-id", is_admin=False)

    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(credentials=_bearer(token), user_service=user_service_mock)

    assert exc_info.value.status_code == 401


async def test_get_current_user__disabled_user(user_service_mock: MagicMock, analyst_user: User):
    analyst_user.enabled = False
    user_service_mock.get_active_user_by_username.return_value = analyst_user
    token = create_access_token(username="analyst", user_id="analyst-id", is_admin=False)

    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(credentials=_bearer(token), user_service=user_service_mock)

    assert exc_info.value.status_code == 401


async def test_get_current_user__token_of_recreated_username(user_service_mock: MagicMock, analyst_user: User):
    """
    Scenario: the token was issued to a user that was deleted and its username reused.
    Asserts: the new owner of the username is not impersonated.
    """
    user_service_mock.get_active_user_by_username.return_value = analyst_user
    token = create_access_token(username="analyst", user_id="old-id", is_admin=False)

    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(credentials=_bearer(token), user_service=user_service_mock)

    assert exc_info.value.status_code == 401


async def test_require_admin__rejects_analyst(analyst_user: User):
    with pytest.raises(HTTPException) as exc_info:
        await require_admin(current_user=analyst_user)

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Access denied"


async def test_require_admin__passes_admin(admin_user: User):
    assert await require_admin(current_user=admin_user) is admin_user
