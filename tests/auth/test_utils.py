from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.utils import initialize_default_admin
from portal.core.config import settings


async def test_initialize_default_admin__creates_admin_on_empty_table(
    db_session_mock: AsyncSession, user_service_mock: MagicMock, mocker
):
    user_service_mock.has_users.return_value = False
    mocker.patch("portal.auth.utils.build_user_service", new=AsyncMock(return_value=user_service_mock))

    await initialize_default_admin(db_session_mock)

    user_service_mock.create_user.assert_awaited_once_with(
        settings.DEFAULT_ADMIN_USERNAME, settings.DEFAULT_ADMIN_PASSWORD, is_admin=True
    )
    db_session_mock.commit.assert_awaited_once()


async def test_initialize_default_admin__skips_when_users_exist(
    db_session_mock: AsyncSession, user_service_mock: MagicMock, mocker
):
    user_service_mock.has_users.return_value = True
    mocker.patch("portal.auth.utils.build_user_service", new=AsyncMock(return_value=user_service_mock))

    await initialize_default_admin(db_session_mock)

    user_service_mock.create_user.assert_not_called()
    db_session_mock.commit.assert_not_called()
