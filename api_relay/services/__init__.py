# Services package

from .relay import build_url, execute, measure_size
from .history_store import HistoryStore, get_history_store, history_store

__all__ = [
    "build_url",
    "execute",
    "measure_size",
    "HistoryStore",
    "get_history_store",
    "history_store",
]
