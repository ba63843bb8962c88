from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from links.utils import validate_and_fix_url

T = TypeVar('T')


class LinkCreate(BaseModel):
    url: str
    protected: bool = False

    @field_validator('url')
    @classmethod
    def check_url(cls, value: str) -> str:
        return validate_and_fix_url(value)


class LinkUpdate(BaseModel):
    url: str
    active: bool | None = None
    protected: bool | None = None

    @field_validator('url')
    @classmethod
    def check_url(cls, value: str) -> str:
        return validate_and_fix_url(value)


class LinkPasswordIn(BaseModel):
    password: str = Field(min_length=1)


class LinkRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    url: str
    short_code: str
    active: bool
    created_at: datetime


class LinkWithPassword(LinkRead):
    """One-time disclosure of a freshly generated link password."""

    password: str | None = None


class PageMeta(BaseModel):
    total: int
    page: int
    last_page: int


class Paginated(BaseModel, Generic[T]):
    data: list[T]
    meta: PageMeta
