from sqlalchemy import JSON, Column, DateTime, Enum, Integer, String, Text, func

from portal.chat.enums import MessageRole
from portal.core.db import Base


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True)
    role = Column(Enum(MessageRole), nullable=False)
    content = Column(Text, nullable=False, default="")
    # [{"id": ..., "name": ..., "arguments": ...}] on assistant messages that call tools
    tool_calls = Column(JSON, nullable=True)
    tool_call_id = Column(String(100), nullable=True)
    tool_name = Column(String(100), nullable=True)
    conversation_id = Column(String(36), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
