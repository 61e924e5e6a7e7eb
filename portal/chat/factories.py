from sqlalchemy.ext.asyncio import AsyncSession

from portal.chat.repositories import ChatMessageRepository
from portal.chat.services import ChatHistoryService, ToolCallingChatService
from portal.chat.tools import IconixTools, SessionTools
from portal.core.db import sessionmanager
from portal.llms.factories import build_llm_service
from portal.prompts.factories import build_prompt_service
from portal.rag.factories import build_rag_service
from portal.workflow.factories import build_workers_registry, build_workflow_session_service


async def build_chat_history_service(db: AsyncSession) -> ChatHistoryService:
    return ChatHistoryService(message_repo=ChatMessageRepository(db=db))


async def build_chat_tools() -> list:
    session_tools = SessionTools(db=sessionmanager)
    iconix_tools = IconixTools(db=sessionmanager, workers_registry=await build_workers_registry())
    return [*session_tools.to_tool_list(), *iconix_tools.to_tool_list()]


async def build_tool_calling_chat_service() -> ToolCallingChatService:
    return ToolCallingChatService(
        db=sessionmanager,
        llm_service=await build_llm_service(),
        tools=await build_chat_tools(),
        history_service_factory=build_chat_history_service,
        prompt_service_factory=build_prompt_service,
        rag_service_factory=build_rag_service,
        session_service_factory=build_workflow_session_service,
    )
