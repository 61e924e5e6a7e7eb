from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_serializer

from portal.chat.enums import MessageRole
from portal.commons.schemas import CamelModel, format_timestamp


class ChatMessageCreate(BaseModel):
    role: MessageRole
    content: str = ""
    tool_calls: list[dict[str, Any]] | None = None
    tool_call_id: str | None = None
    tool_name: str | None = None
    conversation_id: str | None = None


class HistoryMessage(CamelModel):
    role: str
    content: str = ""


class ChatRequest(CamelModel):
    message: str = ""
    history: list[HistoryMessage] | None = None
    workflow_session_id: str | None = None
    conversation_id: str | None = None


class ToolCallInfo(CamelModel):
    id: str
    name: str
    arguments: str
    result: str


class DiagramInfo(CamelModel):
    title: str
    code: str
    type: str = "plantuml"


class ChatResponse(CamelModel):
    response: str
    tool_calls: list[ToolCallInfo] = Field(default_factory=list)
    diagrams: list[DiagramInfo] = Field(default_factory=list)
    conversation_id: str


class ChatHistoryMessage(CamelModel):
    role: str
    content: str
    timestamp: datetime | None = None

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime | None) -> str:
        return format_timestamp(value)


class ChatHistoryResponse(CamelModel):
    messages: list[ChatHistoryMessage]
