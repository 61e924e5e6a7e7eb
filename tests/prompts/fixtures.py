from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture
from sqlalchemy.ext.asyncio import AsyncSession

from portal.prompts.dependencies import get_prompt_service
from portal.prompts.models import Prompt
from portal.prompts.repositories import PromptHistoryRepository, PromptRepository
from portal.prompts.services import PromptService


@pytest.fixture(autouse=True)
def clear_prompt_cache():
    PromptService.clear_cache()
    yield
    PromptService.clear_cache()


@pytest.fixture
def prompt_repository(db_session: AsyncSession) -> PromptRepository:
    return PromptRepository(db=db_session)


@pytest.fixture
def prompt_history_repository(db_session: AsyncSession) -> PromptHistoryRepository:
    return PromptHistoryRepository(db=db_session)


@pytest.fixture
def prompt_repository_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(PromptRepository, instance=True)


@pytest.fixture
def prompt_history_repository_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(PromptHistoryRepository, instance=True)


@pytest.fixture
def prompt_service(prompt_repository_mock: MagicMock, prompt_history_repository_mock: MagicMock) -> PromptService:
    return PromptService(prompt_repo=prompt_repository_mock, history_repo=prompt_history_repository_mock)


@pytest.fixture
def prompt_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(PromptService, instance=True)


@pytest.fixture
def prompt() -> Prompt:
    return Prompt(id=1, code="narrative_writer", name="Narrative writer", content="Goal: $goal")


@pytest.fixture
def override_get_prompt_service(prompt_service_mock: MagicMock):
    from portal.main import app

    app.dependency_overrides[get_prompt_service] = lambda: prompt_service_mock
    yield
    app.dependency_overrides.clear()
