"""API services."""

from .save_store import FileSnapshotStore
from .session_service import SessionService

__all__ = [
    "FileSnapshotStore",
    "SessionService",
]
