from sqlalchemy import JSON, Column, DateTime, Enum, Integer, String, Text, func

from portal.core.db import Base
from portal.workflow.enums import WorkflowStatus


class WorkflowSession(Base):
    __tablename__ = "workflow_sessions"

    request_id = Column(String(64), primary_key=True)
    narrative = Column(Text, nullable=True)
    goal = Column(Text, nullable=True)
    task = Column(Text, nullable=True)
    context_state = Column(JSON, nullable=False, default=dict)
    logs = Column(JSON, nullable=False, default=list)
    plan = Column(JSON, nullable=True)
    current_step_index = Column(Integer, nullable=False, default=0)
    status = Column(Enum(WorkflowStatus), nullable=False, default=WorkflowStatus.RUNNING, index=True)
    user_review_data = Column(JSON, nullable=True)
    documentation_folder_name = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
