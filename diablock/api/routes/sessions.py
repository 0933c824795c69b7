"""
Session lifecycle, ticking and persistence API routes.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.encoders import jsonable_encoder

from diablock.core.session import GameSession

from ..dependencies import get_session, get_session_service
from ..schemas.common import BaseResponse, CommandResponse
from ..schemas.session import (
    CreateSessionRequest,
    EventsResponse,
    SaveFileRequest,
    SessionCreatedResponse,
    TickRequest,
    TickResponse,
)
from ..services.session_service import SessionService

router = APIRouter()


# === Lifecycle ===


@router.post("", response_model=SessionCreatedResponse)
async def create_session(
    request: Optional[CreateSessionRequest] = None,
    service: SessionService = Depends(get_session_service),
):
    """Create a new session."""
    request = request or CreateSessionRequest()
    try:
        session = service.create_session(request.seed)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SessionCreatedResponse(
        session_id=session.id,
        seed=session.seed,
        state=jsonable_encoder(session.to_dict()),
    )


@router.get("/{session_id}")
async def get_session_state(session: GameSession = Depends(get_session)) -> Dict[str, Any]:
    """Get the full session state."""
    return jsonable_encoder(session.to_dict())


@router.delete("/{session_id}", response_model=BaseResponse)
async def delete_session(
    session_id: str,
    service: SessionService = Depends(get_session_service),
):
    """Delete a session."""
    if not service.delete_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return BaseResponse(message="Session deleted")


# === Ticking ===


@router.post("/{session_id}/tick", response_model=TickResponse)
async def tick_session(
    request: Optional[TickRequest] = None,
    session: GameSession = Depends(get_session),
    service: SessionService = Depends(get_session_service),
):
    """Advance the simulation by up to ``count`` ticks."""
    request = request or TickRequest()
    return jsonable_encoder(service.tick(session, request.count))


@router.get("/{session_id}/events", response_model=EventsResponse)
async def drain_events(session: GameSession = Depends(get_session)):
    """Return and clear the battle log and event feeds."""
    return jsonable_encoder(session.feed.drain())


# === Persistence ===


@router.get("/{session_id}/save")
async def save_session(session: GameSession = Depends(get_session)) -> Dict[str, Any]:
    """Get a snapshot of the session."""
    return session.snapshot().model_dump(mode="json")


@router.post("/{session_id}/load", response_model=CommandResponse)
async def load_session(
    snapshot: Dict[str, Any] = Body(...),
    session: GameSession = Depends(get_session),
):
    """Replace the session state with a snapshot. Bad fields fall back to defaults."""
    result = session.load(snapshot)
    return CommandResponse(message=result.message)


@router.post("/{session_id}/save-file", response_model=CommandResponse)
async def save_session_file(
    request: Optional[SaveFileRequest] = None,
    session: GameSession = Depends(get_session),
    service: SessionService = Depends(get_session_service),
):
    """Write a snapshot to the save directory."""
    request = request or SaveFileRequest()
    try:
        slot = service.save_to_file(session, request.name)
    except (ValueError, OSError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CommandResponse(message=f"Saved to slot {slot}", data={"slot": slot})


@router.post("/{session_id}/load-file", response_model=CommandResponse)
async def load_session_file(
    request: Optional[SaveFileRequest] = None,
    session: GameSession = Depends(get_session),
    service: SessionService = Depends(get_session_service),
):
    """Load a snapshot from the save directory."""
    request = request or SaveFileRequest()
    try:
        result = service.load_from_file(session, request.name)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return CommandResponse(message=result.message)
