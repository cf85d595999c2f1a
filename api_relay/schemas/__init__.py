"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .proxy import (
    STANDARD_METHODS,
    ProxyRequest,
    ProxyResponse,
)

from .history import (
    HistoryCreate,
    HistoryRecord,
)

__all__ = [
    # Proxy schemas
    "STANDARD_METHODS",
    "ProxyRequest",
    "ProxyResponse",
    # History schemas
    "HistoryCreate",
    "HistoryRecord",
]
