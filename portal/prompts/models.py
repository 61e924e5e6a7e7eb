from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from portal.core.db import Base


class Prompt(Base):
    __tablename__ = "prompts"

    id = Column(Integer, primary_key=True)
    code = Column(String(100), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_by = Column(String(36), nullable=True)


class PromptHistory(Base):
    __tablename__ = "prompts_history"

    id = Column(Integer, primary_key=True)
    prompt_id = Column(Integer, ForeignKey("prompts.id", ondelete="CASCADE"), nullable=False, index=True)
    # content as it was before the change
    content = Column(Text, nullable=False)
    changed_at = Column(DateTime, nullable=False, server_default=func.now())
    changed_by = Column(String(36), nullable=True)
    change_reason = Column(String(500), nullable=True)
