from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from portal.core.config import Settings
from portal.llms.factories import build_llm_factory_instance
from portal.llms.registry import LLMFactory
from portal.llms.services import LLMService


@pytest.fixture(autouse=True)
async def _clear_llm_caches():
    build_llm_factory_instance.cache_clear()
    LLMFactory.get_client.cache_clear()
    LLMFactory.get_embedding_client.cache_clear()
    yield
    build_llm_factory_instance.cache_clear()
    LLMFactory.get_client.cache_clear()
    LLMFactory.get_embedding_client.cache_clear()


@pytest.fixture
def llm_settings() -> Settings:
    return Settings(
        _env_file=None,
        LLM_MODEL="gpt-4.1-mini",
        LLM_TEMPERATURE=0.5,
        OPENAI_API_KEY="sk-openai",
        ANTHROPIC_API_KEY=None,
        GOOGLE_API_KEY=None,
    )


@pytest.fixture
def llm_factory_instance_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(LLMFactory, instance=True)


@pytest.fixture
def llm_service(llm_settings: Settings) -> LLMService:
    return LLMService(settings=llm_settings, llm_factory=LLMFactory())


@pytest.fixture
def llm_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(LLMService, instance=True)
