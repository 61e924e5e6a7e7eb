import logging

from fastapi import APIRouter, Depends, HTTPException, status

from portal.chat.dependencies import get_chat_history_service, get_tool_calling_chat_service
from portal.chat.schemas import ChatHistoryResponse, ChatRequest, ChatResponse
from portal.chat.services import ChatHistoryService, ToolCallingChatService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ChatResponse)
async def chat(
    request_in: ChatRequest,
    service: ToolCallingChatService = Depends(get_tool_calling_chat_service),
):
    if not request_in.message or not request_in.message.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")
    try:
        return await service.process_message(request_in)
    except Exception as e:
        logger.error(f"Chat request failed: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Chat failed: {e}")


@router.get("/history", response_model=ChatHistoryResponse)
async def get_history(service: ChatHistoryService = Depends(get_chat_history_service)):
    return ChatHistoryResponse(messages=await service.get_recent_messages())
