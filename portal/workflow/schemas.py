from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from portal.commons.schemas import CamelModel, format_timestamp
from portal.workflow.enums import WorkflowStatus


class PlanStep(BaseModel):
    tool: str
    args: dict[str, Any] = Field(default_factory=dict)


class OrchestratorPlan(BaseModel):
    description: str
    plan: list[PlanStep]


class Issue(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = ""
    title: str = ""
    severity: str = "minor"
    suggestion: str = ""

    @field_validator("id", "title", "severity", "suggestion", mode="before")
    @classmethod
    def null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class WorkflowRunRequest(CamelModel):
    request_id: str | None = None
    goal: str | None = None
    task: str | None = None
    narrative: str | None = None


class WorkflowResumeRequest(CamelModel):
    request_id: str = Field(..., min_length=1)
    narrative: str | None = None
    domain_model: str | None = None


class WorkflowResponse(CamelModel):
    request_id: str
    orchestrator: OrchestratorPlan | None = None
    artifacts: dict[str, Any] = Field(default_factory=dict)
    logs: list[str] = Field(default_factory=list)


class WorkflowSessionSummary(CamelModel):
    request_id: str
    status: WorkflowStatus
    author: str = "System"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime | None) -> str:
        return format_timestamp(value)


class WorkflowSessionCreate(BaseModel):
    request_id: str
    narrative: str | None = None
    goal: str | None = None
    task: str | None = None
    context_state: dict[str, Any] = Field(default_factory=dict)
    logs: list[str] = Field(default_factory=list)
    plan: dict[str, Any] | None = None
    current_step_index: int = 0
    status: WorkflowStatus = WorkflowStatus.RUNNING
    user_review_data: dict[str, Any] | None = None


class WorkflowSessionUpdate(BaseModel):
    narrative: str | None = None
    goal: str | None = None
    task: str | None = None
    context_state: dict[str, Any] | None = None
    logs: list[str] | None = None
    plan: dict[str, Any] | None = None
    current_step_index: int | None = None
    status: WorkflowStatus | None = None
    user_review_data: dict[str, Any] | None = None
    documentation_folder_name: str | None = None
