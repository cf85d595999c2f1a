"""
History store for relayed request records.

Keeps the most recent exchanges in memory, newest first, bounded to a
fixed capacity. Records are lost when the process exits.
"""

import copy
import logging
import threading
import uuid
from collections import deque
from datetime import datetime, timezone

from ..config import settings
from ..schemas.history import HistoryRecord
from ..schemas.proxy import ProxyRequest, ProxyResponse


logger = logging.getLogger(__name__)


class HistoryStore:
    """
    Bounded, most-recent-first collection of history records.

    Every operation runs under one lock, so concurrent endpoint calls
    never observe a partially applied insert, delete or clear. Lookups
    and deletes are linear scans; the collection never grows past
    ``capacity`` records.

    Attributes:
        capacity: Maximum number of records kept before the oldest is evicted
    """

    def __init__(self, capacity: int = 100):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._records: deque[HistoryRecord] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._records.maxlen

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def add(
        self,
        request: ProxyRequest,
        response: ProxyResponse | None = None
    ) -> HistoryRecord:
        """
        Record an exchange at the front of the history.

        The record holds its own copies of the request and response, so
        later changes to the caller's objects do not reach it.

        Args:
            request: The request description that was relayed
            response: The envelope the relay returned, if any

        Returns:
            The created history record
        """
        record = HistoryRecord(
            id=str(uuid.uuid4()),
            method=request.method,
            url=request.url,
            headers=dict(request.headers),
            body=copy.deepcopy(request.body),
            params=dict(request.params),
            response=response.model_copy(deep=True) if response is not None else None,
            timestamp=datetime.now(timezone.utc)
        )
        with self._lock:
            if len(self._records) == self._records.maxlen:
                logger.debug("History full, evicting %s", self._records[-1].id)
            self._records.appendleft(record)
        return record

    def list(self) -> list[HistoryRecord]:
        """Return a snapshot of all records, most recent first."""
        with self._lock:
            return list(self._records)

    def get_by_id(self, record_id: str) -> HistoryRecord | None:
        with self._lock:
            for record in self._records:
                if record.id == record_id:
                    return record
        return None

    def delete_by_id(self, record_id: str) -> bool:
        """
        Remove the record with the given id.

        Returns:
            True if a record was removed, False if none matched
        """
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id == record_id:
                    del self._records[index]
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            logger.debug("Clearing %d history records", len(self._records))
            self._records.clear()


# Process-wide store shared by all requests
history_store = HistoryStore(capacity=settings.history_capacity)


def get_history_store() -> HistoryStore:
    """
    Dependency function for FastAPI to get the history store.

    Usage:
        @router.get("/history")
        def list_history(store: HistoryStore = Depends(get_history_store)):
            ...
    """
    return history_store
