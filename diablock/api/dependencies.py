"""
Dependency injection for API services.
"""

from functools import lru_cache

from fastapi import Depends, HTTPException

from diablock.core.session import GameSession

from .config import get_settings
from .services.save_store import FileSnapshotStore
from .services.session_service import SessionService


@lru_cache()
def get_snapshot_store() -> FileSnapshotStore:
    """Get FileSnapshotStore singleton."""
    return FileSnapshotStore(get_settings().SAVE_DIR)


@lru_cache()
def get_session_service() -> SessionService:
    """Get SessionService singleton."""
    return SessionService(get_settings(), get_snapshot_store())


def get_session(
    session_id: str,
    service: SessionService = Depends(get_session_service),
) -> GameSession:
    """Resolve a session from the path or fail with 404."""
    session = service.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session
