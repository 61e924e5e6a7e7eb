from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from portal.core.enums import LogLevel

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    DATABASE_URL: str = "sqlite+aiosqlite:///workspace/database.db"
    DOCUMENTATION_OUTPUT_DIR: str = "workspace/generated-docs"
    LOG_LEVEL: LogLevel = LogLevel.INFO
    OBSERVABILITY_ENABLED: bool = False

    # auth
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 24
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin"

    # llm
    LLM_MODEL: str = "gpt-4.1-mini"
    LLM_TEMPERATURE: float = 1.0
    OPENAI_API_KEY: str | None = None
    OPENAI_API_BASE: str | None = None
    ANTHROPIC_API_KEY: str | None = None
    GOOGLE_API_KEY: str | None = None
    EMBEDDING_MODEL: str = "text-embedding-3-small"

    # rendering
    PLANTUML_SERVER_URL: str = "https://www.plantuml.com/plantuml"

    @field_validator("DOCUMENTATION_OUTPUT_DIR")
    def make_absolute(cls, v: str) -> str: # noqa
        if not Path(v).is_absolute():
            return str(BASE_DIR / v)
        return v

settings = Settings()
