"""
History record API routes.

Provides endpoints for recording, viewing and removing relayed exchanges.
"""

from fastapi import APIRouter, Depends, status

from ..schemas.history import HistoryCreate, HistoryRecord
from ..services.history_store import HistoryStore, get_history_store


router = APIRouter(prefix="/history", tags=["history"])


@router.post("", response_model=HistoryRecord, status_code=status.HTTP_201_CREATED)
def add_history(
    exchange: HistoryCreate,
    store: HistoryStore = Depends(get_history_store)
):
    """
    Record a relayed request and its response.

    Args:
        exchange: The request description and the envelope it produced
        store: History store

    Returns:
        The created history record
    """
    return store.add(exchange.request, exchange.response)


@router.get("", response_model=list[HistoryRecord])
def list_history(store: HistoryStore = Depends(get_history_store)):
    """
    Get all history records, most recent first.
    """
    return store.list()


@router.get("/{history_id}", response_model=HistoryRecord | None)
def get_history(history_id: str, store: HistoryStore = Depends(get_history_store)):
    """
    Get a single history record by ID.

    Args:
        history_id: The identifier of the history record
        store: History store

    Returns:
        The history record, or null if no record has that ID
    """
    return store.get_by_id(history_id)


@router.delete("/{history_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_history(history_id: str, store: HistoryStore = Depends(get_history_store)):
    """
    Delete a single history record by ID.

    Succeeds whether or not the record existed.
    """
    store.delete_by_id(history_id)
    return None


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_all_history(store: HistoryStore = Depends(get_history_store)):
    """
    Clear all history records.
    """
    store.clear()
    return None
