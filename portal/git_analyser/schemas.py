import re

from pydantic import Field, field_validator

from portal.commons.schemas import CamelModel

ALLOWED_URL_SCHEMES = ("http://", "https://", "ssh://")
SCP_LIKE_URL = re.compile(r"^[\w.-]+@[\w.-]+:[^-]")


class GitAnalysisRequest(CamelModel):
    repository_url: str = Field(..., min_length=1)
    branch: str = Field(..., min_length=1)
    access_token: str | None = None

    @field_validator("repository_url")
    @classmethod
    def validate_repository_url(cls, value: str) -> str:
        value = value.strip()
        if value.lower().startswith(ALLOWED_URL_SCHEMES) or SCP_LIKE_URL.match(value):
            return value
        raise ValueError("Repository URL must use http, https or ssh")

    @field_validator("branch")
    @classmethod
    def validate_branch(cls, value: str) -> str:
        if value.startswith("-"):
            raise ValueError("Branch name cannot start with '-'")
        return value


class UnusedFile(CamelModel):
    file_path: str
    reason: str
    file_size: int


class BrokenReference(CamelModel):
    source_file: str
    referenced_path: str
    line_number: int
    # import, require, include, link or path
    reference_type: str


class AnalysisResult(CamelModel):
    unused_files: list[UnusedFile] = Field(default_factory=list)
    broken_references: list[BrokenReference] = Field(default_factory=list)
    total_files: int = 0
    analyzed_files: int = 0


class GitAnalysisResponse(CamelModel):
    request_id: str
    repository_url: str
    branch: str
    result: AnalysisResult
