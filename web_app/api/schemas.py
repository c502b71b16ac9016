"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from shortlinks.common.validators import MAX_URL_LENGTH, is_valid_url


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON keys."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class ShortenRequest(CamelModel):
    """Request to shorten a URL."""

    long_url: str = Field(..., description="The URL to shorten", min_length=1, max_length=MAX_URL_LENGTH)
    expiry_days: Optional[int] = Field(
        None,
        description="Lifetime in days; zero, negative or missing uses the default",
        le=3650,
    )

    @field_validator("long_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format."""
        is_valid, error = is_valid_url(v)
        if not is_valid:
            raise ValueError(error)
        return v

    model_config = {
        **CamelModel.model_config,
        "json_schema_extra": {
            "examples": [
                {"longUrl": "https://example.com/very/long/path/to/resource"},
                {"longUrl": "https://github.com/user/repo", "expiryDays": 7},
            ]
        },
    }


class ShortenResponse(CamelModel):
    """Response after shortening a URL."""

    code: str = Field(..., description="The short code")
    short_url: str = Field(..., description="The complete short URL")

    model_config = {
        **CamelModel.model_config,
        "json_schema_extra": {
            "examples": [
                {"code": "Ab3xQ9", "shortUrl": "https://short.link/r/Ab3xQ9"}
            ]
        },
    }


class URLMetadataResponse(CamelModel):
    """Metadata of a short URL."""

    code: str
    long_url: str
    short_url: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    hit_count: int
    expired: bool


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    rate_limiter: str = Field(..., description="Rate limiter status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    title: str = Field(..., description="Error category")
    status: int = Field(..., description="HTTP status code")
    message: str = Field(..., description="Error message")
    instance: str = Field(..., description="Request path")
    timestamp: str = Field(..., description="UTC time of the error")
