"""
Pydantic schemas for relayed requests.

Defines the request description accepted by the relay and the
response envelope it produces.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# HTTP methods offered by the request composer; any other verb token is accepted too
STANDARD_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")


class ProxyRequest(BaseModel):
    """Schema describing an outbound HTTP request to relay."""
    method: str = Field(examples=list(STANDARD_METHODS))
    url: str = Field(min_length=1)
    headers: dict[str, str] = {}
    params: dict[str, str] = {}
    body: Any | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("method")
    @classmethod
    def normalize_method(cls, value: str) -> str:
        method = value.strip().upper()
        if not method or any(ch.isspace() for ch in method):
            raise ValueError("method must be a single HTTP verb token")
        return method

    @field_validator("url")
    @classmethod
    def strip_url(cls, value: str) -> str:
        url = value.strip()
        if not url:
            raise ValueError("url must not be empty")
        return url


class ProxyResponse(BaseModel):
    """
    Schema for the relayed response envelope.

    Covers both upstream responses (any status code) and transport
    failures, which are reported with status 500 and an error body.
    """
    status: int
    status_text: str = Field(alias="statusText")
    headers: dict[str, Any] = {}
    data: Any = None
    response_time: int = Field(alias="responseTime")
    size: int

    model_config = ConfigDict(frozen=True, populate_by_name=True)
