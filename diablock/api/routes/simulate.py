"""
Monte Carlo simulation API routes.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_session_service
from ..schemas.session import SimulateRequest
from ..services.session_service import SessionService

router = APIRouter()


@router.post("")
def simulate_runs(
    request: SimulateRequest,
    service: SessionService = Depends(get_session_service),
) -> Dict[str, Any]:
    """Play several headless runs and summarize how far they get."""
    try:
        stats = service.simulate(request.num_runs, request.max_ticks, request.seed)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return stats.to_dict(include_outcomes=request.include_outcomes)
