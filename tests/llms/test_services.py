from unittest.mock import AsyncMock, MagicMock

import pytest
from llama_index.core.llms import MessageRole
from llama_index.llms.anthropic import Anthropic
from llama_index.llms.openai import OpenAI

from portal.llms.enums import LLMModel, LLMProvider
from portal.llms.exceptions import MissingAPIKeyException, UnsupportedLLMModelException
from portal.llms.services import LLMService


async def test_get_model_metadata__defaults_to_configured_model(llm_service: LLMService):
    llm = await llm_service.get_model_metadata()

    assert llm.model_name == LLMModel.GPT_4_1_MINI
    assert llm.provider == LLMProvider.OPENAI


async def test_get_model_metadata__unknown_model(llm_service: LLMService):
    with pytest.raises(UnsupportedLLMModelException):
        await llm_service.get_model_metadata("not-a-model")


async def test_get_client__builds_openai_client_with_settings(llm_service: LLMService):
    client = await llm_service.get_client()

    assert isinstance(client, OpenAI)
    assert client.model == "gpt-4.1-mini"
    assert client.temperature == 0.5


async def test_get_client__reuses_cached_instance(llm_service: LLMService):
    """Scenario: the same model and temperature are requested twice.

    Asserts:
        - the client instance is reused
        - a different temperature hydrates a new client
    """
    first = await llm_service.get_client()
    second = await llm_service.get_client()
    colder = await llm_service.get_client(temperature=0.0)

    assert first is second
    assert colder is not first
    assert colder.temperature == 0.0


async def test_get_client__missing_provider_key(llm_service: LLMService):
    with pytest.raises(MissingAPIKeyException, match="No API key configured for provider Anthropic."):
        await llm_service.get_client(LLMModel.CLAUDE_SONNET_4_5)


async def test_get_client__anthropic_with_key(llm_service: LLMService):
    llm_service.settings.ANTHROPIC_API_KEY = "sk-anthropic"

    client = await llm_service.get_client(LLMModel.CLAUDE_SONNET_4_5)

    assert isinstance(client, Anthropic)


async def test_complete__sends_system_and_user_messages(llm_service: LLMService, mocker):
    client = MagicMock()
    client.achat = AsyncMock(return_value=MagicMock(message=MagicMock(content="answer")))
    mocker.patch.object(llm_service, "get_client", new=AsyncMock(return_value=client))

    result = await llm_service.complete("question", system_prompt="be brief")

    assert result == "answer"
    messages = client.achat.await_args.args[0]
    assert [message.role for message in messages] == [MessageRole.SYSTEM, MessageRole.USER]
    assert messages[1].content == "question"


async def test_complete__returns_empty_string_for_empty_answer(llm_service: LLMService, mocker):
    client = MagicMock()
    client.achat = AsyncMock(return_value=MagicMock(message=MagicMock(content=None)))
    mocker.patch.object(llm_service, "get_client", new=AsyncMock(return_value=client))

    assert await llm_service.complete("question") == ""
    assert len(client.achat.await_args.args[0]) == 1


async def test_get_embedding_model__requires_openai_key(llm_service: LLMService):
    llm_service.settings.OPENAI_API_KEY = None

    with pytest.raises(MissingAPIKeyException):
        await llm_service.get_embedding_model()


async def test_get_embedding_model__uses_configured_model(llm_service: LLMService):
    model = await llm_service.get_embedding_model()

    assert model.model_name == "text-embedding-3-small"
