from unittest.mock import AsyncMock, MagicMock

import pytest
from llama_index.core.llms import ChatMessage as LLMChatMessage
from llama_index.core.llms import ChatResponse as LLMChatResponse
from llama_index.core.tools import FunctionTool
from pytest_mock import MockerFixture
from sqlalchemy.ext.asyncio import AsyncSession

from portal.chat.dependencies import get_chat_history_service, get_tool_calling_chat_service
from portal.chat.repositories import ChatMessageRepository
from portal.chat.services import ChatHistoryService, ToolCallingChatService
from portal.rag.schemas import ContextResult

DOMAIN_MODEL_RESULT = "```plantuml\n@startuml\nclass Ticket\n@enduml\n```"


def llm_reply(content: str = "") -> LLMChatResponse:
    return LLMChatResponse(message=LLMChatMessage(role="assistant", content=content))


@pytest.fixture
def chat_message_repository(db_session: AsyncSession) -> ChatMessageRepository:
    return ChatMessageRepository(db=db_session)


@pytest.fixture
def chat_message_repository_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(ChatMessageRepository, instance=True)


@pytest.fixture
def chat_history_service(chat_message_repository_mock: MagicMock) -> ChatHistoryService:
    return ChatHistoryService(message_repo=chat_message_repository_mock)


@pytest.fixture
def chat_history_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(ChatHistoryService, instance=True)


@pytest.fixture
def llm_client_mock() -> MagicMock:
    """LLM client double; tests script achat_with_tools and get_tool_calls_from_response."""
    client = MagicMock()
    client.achat_with_tools = AsyncMock(return_value=llm_reply("Hello analyst"))
    client.get_tool_calls_from_response = MagicMock(return_value=[])
    return client


@pytest.fixture
def domain_model_tool() -> FunctionTool:
    async def generate_domain_model(narrative: str) -> str:
        """Builds the domain model."""
        return DOMAIN_MODEL_RESULT

    return FunctionTool.from_defaults(async_fn=generate_domain_model, name="generate_domain_model")


@pytest.fixture
def failing_tool() -> FunctionTool:
    async def get_workflow_sessions() -> str:
        """Lists sessions."""
        raise RuntimeError("database is down")

    return FunctionTool.from_defaults(async_fn=get_workflow_sessions, name="get_workflow_sessions")


@pytest.fixture
def tool_calling_chat_service(
    db_sessionmanager_mock,
    llm_service_mock: MagicMock,
    llm_client_mock: MagicMock,
    chat_history_service_mock: MagicMock,
    prompt_service_mock: MagicMock,
    rag_service_mock: MagicMock,
    workflow_session_service_mock: MagicMock,
    domain_model_tool: FunctionTool,
    failing_tool: FunctionTool,
) -> ToolCallingChatService:
    llm_service_mock.get_client.return_value = llm_client_mock
    prompt_service_mock.get_by_code.return_value = "You are the portal assistant."
    rag_service_mock.retrieve_context.return_value = ContextResult()
    return ToolCallingChatService(
        db=db_sessionmanager_mock,
        llm_service=llm_service_mock,
        tools=[domain_model_tool, failing_tool],
        history_service_factory=AsyncMock(return_value=chat_history_service_mock),
        prompt_service_factory=AsyncMock(return_value=prompt_service_mock),
        rag_service_factory=AsyncMock(return_value=rag_service_mock),
        session_service_factory=AsyncMock(return_value=workflow_session_service_mock),
    )


@pytest.fixture
def tool_calling_chat_service_mock(mocker: MockerFixture) -> MagicMock:
    return mocker.create_autospec(ToolCallingChatService, instance=True)


@pytest.fixture
def override_chat_services(chat_history_service_mock: MagicMock, tool_calling_chat_service_mock: MagicMock):
    from portal.main import app

    app.dependency_overrides[get_chat_history_service] = lambda: chat_history_service_mock
    app.dependency_overrides[get_tool_calling_chat_service] = lambda: tool_calling_chat_service_mock
    yield
    app.dependency_overrides.clear()
