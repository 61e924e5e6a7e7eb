from datetime import datetime

from pydantic import BaseModel, Field, field_serializer

from portal.commons.schemas import CamelModel, format_timestamp


class UseCaseScenarioCreate(BaseModel):
    request_id: str
    use_case_alias: str | None = None
    use_case_name: str | None = None
    scenario_content: str = ""


class UseCaseMvcCreate(BaseModel):
    request_id: str
    use_case_alias: str | None = None
    use_case_name: str | None = None
    mvc_plantuml: str = ""


class UseCaseInfo(CamelModel):
    alias: str = Field(..., min_length=1)
    name: str = ""


class DecompositionRequest(CamelModel):
    request_id: str = Field(..., min_length=1)
    use_cases: list[UseCaseInfo] = Field(default_factory=list)


class DecompositionResult(CamelModel):
    use_case_alias: str
    use_case_name: str
    scenario: str | None = None
    success: bool
    error: str | None = None


class DecompositionResponse(CamelModel):
    results: list[DecompositionResult]


class _TimestampedRead(CamelModel):
    id: str
    use_case_alias: str | None = None
    use_case_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime | None) -> str:
        return format_timestamp(value)


class ScenarioRead(_TimestampedRead):
    scenario_content: str


class MvcDiagramRead(_TimestampedRead):
    mvc_plantuml: str


class ScenariosResponse(CamelModel):
    scenarios: list[ScenarioRead]


class DecompositionArtifactsResponse(CamelModel):
    scenarios: list[ScenarioRead]
    mvc_diagrams: list[MvcDiagramRead]


class DocumentationGenerateRequest(CamelModel):
    request_id: str | None = None
    folder_name: str | None = None


class DocumentationGenerateResponse(CamelModel):
    folder_path: str
    created_files: list[str]
    updated: bool


class DocumentationExistsResponse(CamelModel):
    exists: bool


class DocumentationFile(CamelModel):
    name: str
    # puml, adoc or text
    type: str


class DocumentationFilesResponse(CamelModel):
    files: list[DocumentationFile]
