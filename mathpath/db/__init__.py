"""Progress persistence."""

from .database import create_db_engine, init_db, session_scope
from .store import InMemoryProgressStore, ProgressStore, SqlProgressStore, open_store

__all__ = [
    "create_db_engine",
    "init_db",
    "session_scope",
    "InMemoryProgressStore",
    "ProgressStore",
    "SqlProgressStore",
    "open_store",
]
