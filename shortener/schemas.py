from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from typing import Annotated, List, Optional


def as_utc(value: datetime) -> datetime:
    """Naive-время из БД считается UTC (SQLite не хранит смещение)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class LinkCreate(CamelModel):
    url: Optional[str] = None
    custom_slug: Optional[str] = None


class LinkResponse(CamelModel):
    id: int
    short_code: str
    original_url: str
    created_at: UtcDatetime


class LinkSummary(LinkResponse):
    clicks: int


class LinkList(BaseModel):
    links: List[LinkSummary]


class DeleteResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
