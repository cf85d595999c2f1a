"""
Pydantic schemas for request history.

Defines schemas for recording an exchange and returning history records.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from .proxy import ProxyRequest, ProxyResponse


class HistoryCreate(BaseModel):
    """Schema for recording a relayed exchange."""
    request: ProxyRequest
    response: ProxyResponse | None = None


class HistoryRecord(BaseModel):
    """Schema for a stored history record."""
    id: str
    method: str
    url: str
    headers: dict[str, str] = {}
    body: Any | None = None
    params: dict[str, str] = {}
    response: ProxyResponse | None = None
    timestamp: datetime

    model_config = ConfigDict(frozen=True)
