"""Proxy response envelope model."""

from pydantic import BaseModel, Field


class FeedResponse(BaseModel):
    """JSON envelope returned by the fetch proxy."""

    success: bool
    data: str | None = None
    content_type: str | None = Field(default=None, alias="contentType")
    error: str | None = None
    details: str | None = None
    upstream_status: int | None = Field(default=None, alias="upstreamStatus")

    class Config:
        """Pydantic config."""

        populate_by_name = True
