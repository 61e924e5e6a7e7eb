from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portal.chat.factories import build_chat_history_service, build_tool_calling_chat_service
from portal.chat.services import ChatHistoryService, ToolCallingChatService
from portal.commons.dependencies import get_db


async def get_chat_history_service(db: AsyncSession = Depends(get_db)) -> ChatHistoryService:
    return await build_chat_history_service(db)


async def get_tool_calling_chat_service() -> ToolCallingChatService:
    return await build_tool_calling_chat_service()
