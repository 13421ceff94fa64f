from pydantic import BaseModel, Field, computed_field, ConfigDict
from typing import Any, List
from datetime import datetime
from shortlink_app.config import settings


class URLCreate(BaseModel):
    """Request body for POST /api/url.

    long_url is validated by the allocator (not here) so a bad, missing or
    non-string URL is reported as a 400 with the same error body as every
    other failure.
    """
    long_url: Any = Field(None, description="The original URL to be shortened")


class URLResponse(BaseModel):
    """Response schema that serializes a SQLAlchemy Mapping.

    - from_attributes=True reads straight from the model
    - short_code is read but not emitted; short_url is derived from it
    """
    id: int
    long_url: str
    short_code: str = Field(exclude=True)
    click_count: int
    created_at: datetime

    @computed_field
    @property
    def short_url(self) -> str:
        """Computed field - public URL of the short code"""
        return f"{settings.base_url.rstrip('/')}/{self.short_code}"

    model_config = ConfigDict(from_attributes=True)


class URLList(BaseModel):
    urls: List[URLResponse]


class ErrorResponse(BaseModel):
    error: str
    timestamp: str
