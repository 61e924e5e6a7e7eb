from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_auth_service, get_current_user, get_user_service
from portal.auth.models import User
from portal.auth.repositories import UserRepository
from portal.auth.services import AuthService, UserService


@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db=db_session)


@pytest.fixture
def user_repository_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(UserRepository, instance=True)


@pytest.fixture
def user_service(user_repository_mock: MagicMock) -> UserService:
    return UserService(user_repo=user_repository_mock)


@pytest.fixture
def user_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(UserService, instance=True)


@pytest.fixture
def auth_service(user_service_mock: MagicMock) -> AuthService:
    return AuthService(user_service=user_service_mock)


@pytest.fixture
def auth_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(AuthService, instance=True)


@pytest.fixture
def admin_user() -> User:
    return User(id="admin-id", username="admin", password_hash="x", enabled=True, is_admin=True)


@pytest.fixture
def analyst_user() -> User:
    return User(id="analyst-id", username="analyst", password_hash="x", enabled=True, is_admin=False)


@pytest.fixture
def override_current_user_admin(admin_user: User):
    from portal.main import app

    app.dependency_overrides[get_current_user] = lambda: admin_user
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def override_current_user_analyst(analyst_user: User):
    from portal.main import app

    app.dependency_overrides[get_current_user] = lambda: analyst_user
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def override_get_user_service(user_service_mock: MagicMock):
    from portal.main import app

    app.dependency_overrides[get_user_service] = lambda: user_service_mock
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def override_get_auth_service(auth_service_mock: MagicMock):
    from portal.main import app

    app.dependency_overrides[get_auth_service] = lambda: auth_service_mock
    yield
    app.dependency_overrides.clear()
