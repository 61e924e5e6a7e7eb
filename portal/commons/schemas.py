from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    API payload base. The browser client speaks camelCase while
    the rest of the codebase stays snake_case.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageResponse(CamelModel):
    message: str


def format_timestamp(value: datetime | None) -> str:
    return value.isoformat() if value else ""
