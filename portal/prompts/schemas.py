from datetime import datetime

from pydantic import BaseModel, field_serializer

from portal.commons.schemas import CamelModel, format_timestamp


class PromptCreate(BaseModel):
    code: str
    name: str
    description: str | None = None
    content: str


class PromptUpdate(BaseModel):
    content: str
    updated_at: datetime
    updated_by: str | None = None


class PromptHistoryCreate(BaseModel):
    prompt_id: int
    content: str
    changed_at: datetime
    changed_by: str | None = None
    change_reason: str | None = None


class PromptSummaryRead(CamelModel):
    code: str
    name: str
    description: str | None = None
    updated_at: datetime | None = None
    content_length: int

    @field_serializer("updated_at")
    def serialize_timestamp(self, value: datetime | None) -> str:
        return format_timestamp(value)


class PromptRead(CamelModel):
    code: str
    name: str
    description: str | None = None
    content: str
    updated_at: datetime | None = None
    updated_by: str | None = None

    @field_serializer("updated_at")
    def serialize_timestamp(self, value: datetime | None) -> str:
        return format_timestamp(value)


class PromptUpdateRequest(CamelModel):
    content: str = ""
    reason: str | None = None


class PromptUpdateResponse(CamelModel):
    code: str
    name: str
    content: str
    updated_at: datetime | None = None
    message: str

    @field_serializer("updated_at")
    def serialize_timestamp(self, value: datetime | None) -> str:
        return format_timestamp(value)


class PromptHistoryRead(CamelModel):
    id: int
    content: str
    changed_at: datetime | None = None
    changed_by: str | None = None
    change_reason: str | None = None

    @field_serializer("changed_at")
    def serialize_timestamp(self, value: datetime | None) -> str:
        return format_timestamp(value)
