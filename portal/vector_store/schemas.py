from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_serializer

from portal.commons.schemas import CamelModel, format_timestamp

CONTENT_PREVIEW_LENGTH = 200


class DocumentCreate(BaseModel):
    content: str
    doc_metadata: dict[str, Any] | None = None
    embedding: list[float]


class SimilarDocument(CamelModel):
    id: str
    content: str
    similarity: float
    metadata: dict[str, Any] = Field(default_factory=dict)


class DocumentListItem(CamelModel):
    id: str
    content_preview: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None

    @field_serializer("created_at")
    def serialize_timestamp(self, value: datetime | None) -> str:
        return format_timestamp(value)


class DocumentListResponse(CamelModel):
    documents: list[DocumentListItem]
    total: int


class AddDocumentRequest(CamelModel):
    content: str = ""
    metadata: dict[str, Any] | None = None


class AddDocumentResponse(CamelModel):
    id: str
    message: str


class BatchAddRequest(CamelModel):
    documents: list[str] = Field(default_factory=list)


class DocumentIdsResponse(CamelModel):
    ids: list[str]
    count: int
    message: str


class SearchRequest(CamelModel):
    query: str = ""
    top_k: int | None = 5


class SearchResponse(CamelModel):
    results: list[SimilarDocument]
    count: int


class DeleteDocumentResponse(CamelModel):
    message: str
    id: str
