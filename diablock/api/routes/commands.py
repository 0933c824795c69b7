"""
Player command API routes.

Rejected commands answer 400 with the rejection reason; nothing changes.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder

from diablock.core.results import CommandResult
from diablock.core.session import GameSession

from ..dependencies import get_session
from ..schemas.common import CommandResponse
from ..schemas.session import (
    AutomationRequest,
    BuyRequest,
    EnhanceRequest,
    EquipRequest,
    LearnSkillRequest,
    SellRequest,
    UnequipRequest,
    UpgradeRequest,
)

router = APIRouter()


def _respond(result: CommandResult) -> CommandResponse:
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)
    return CommandResponse(message=result.message, data=jsonable_encoder(result.data))


# === Equipment ===


@router.post("/{session_id}/equip", response_model=CommandResponse)
async def equip_item(request: EquipRequest, session: GameSession = Depends(get_session)):
    """Equip the item at an inventory index."""
    return _respond(session.equip(request.inventory_index))


@router.post("/{session_id}/unequip", response_model=CommandResponse)
async def unequip_item(request: UnequipRequest, session: GameSession = Depends(get_session)):
    """Unequip the item in a slot."""
    return _respond(session.unequip(request.slot))


@router.post("/{session_id}/enhance", response_model=CommandResponse)
async def enhance_item(request: EnhanceRequest, session: GameSession = Depends(get_session)):
    """Enhance an item with gold and enhancement stones."""
    return _respond(session.enhance_item(request.item_id, request.location))


# === Skills ===


@router.post("/{session_id}/skills/learn", response_model=CommandResponse)
async def learn_skill(request: LearnSkillRequest, session: GameSession = Depends(get_session)):
    """Learn or level up a skill."""
    return _respond(session.learn_skill(request.skill_id))


# === Shop ===


@router.post("/{session_id}/shop/buy", response_model=CommandResponse)
async def buy_item(request: BuyRequest, session: GameSession = Depends(get_session)):
    """Buy a shop listing."""
    return _respond(session.buy(request.shop_index))


@router.post("/{session_id}/shop/sell", response_model=CommandResponse)
async def sell_item(request: SellRequest, session: GameSession = Depends(get_session)):
    """Sell an inventory item."""
    return _respond(session.sell(request.inventory_index))


@router.post("/{session_id}/shop/refresh", response_model=CommandResponse)
async def refresh_shop(session: GameSession = Depends(get_session)):
    """Refresh the shop for gold."""
    return _respond(session.refresh_shop())


# === Progression ===


@router.post("/{session_id}/upgrades", response_model=CommandResponse)
async def upgrade_permanent_stat(request: UpgradeRequest, session: GameSession = Depends(get_session)):
    """Spend essence on a permanent upgrade."""
    return _respond(session.upgrade_permanent_stat(request.key))


@router.post("/{session_id}/automation", response_model=CommandResponse)
async def set_automation(request: AutomationRequest, session: GameSession = Depends(get_session)):
    """Toggle auto-equip and auto-learn."""
    return _respond(session.set_automation(request.auto_equip, request.auto_learn))


@router.post("/{session_id}/restart", response_model=CommandResponse)
async def restart_run(session: GameSession = Depends(get_session)):
    """Start a new run after death."""
    return _respond(session.restart_run())


@router.post("/{session_id}/hard-reset", response_model=CommandResponse)
async def hard_reset(session: GameSession = Depends(get_session)):
    """Wipe all progress."""
    return _respond(session.hard_reset())
