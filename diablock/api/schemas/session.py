"""
Session-related API schemas.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from diablock.data.models import ItemSlot


# === Request Schemas ===


class CreateSessionRequest(BaseModel):
    """Session creation request."""

    seed: Optional[int] = None


class TickRequest(BaseModel):
    """Advance the simulation."""

    count: int = Field(default=1, ge=1)


class EquipRequest(BaseModel):
    """Equip an inventory item."""

    inventory_index: int = Field(..., ge=0)


class UnequipRequest(BaseModel):
    """Move an equipped item back to the inventory."""

    slot: ItemSlot


class LearnSkillRequest(BaseModel):
    """Spend skill points on a skill."""

    skill_id: str


class BuyRequest(BaseModel):
    """Buy a shop listing."""

    shop_index: int = Field(..., ge=0)


class SellRequest(BaseModel):
    """Sell an inventory item."""

    inventory_index: int = Field(..., ge=0)


class EnhanceRequest(BaseModel):
    """Enhance an item."""

    item_id: str
    location: Optional[Literal["equipped", "inventory"]] = None


class UpgradeRequest(BaseModel):
    """Buy a permanent upgrade level."""

    key: str


class AutomationRequest(BaseModel):
    """Toggle auto-equip / auto-learn. Omitted fields are left unchanged."""

    auto_equip: Optional[bool] = None
    auto_learn: Optional[bool] = None


class SaveFileRequest(BaseModel):
    """Save slot name; defaults to the session id."""

    name: Optional[str] = Field(default=None, pattern=r"^[A-Za-z0-9_-]{1,64}$")


class SimulateRequest(BaseModel):
    """Monte Carlo run simulation request."""

    num_runs: int = Field(default=10, ge=1)
    max_ticks: int = Field(default=1000, ge=1)
    seed: Optional[int] = None
    include_outcomes: bool = False


# === Response Schemas ===


class SessionCreatedResponse(BaseModel):
    """New session summary."""

    session_id: str
    seed: Optional[int] = None
    state: Dict[str, Any]


class TickResponse(BaseModel):
    """Result of a tick request."""

    tick: int
    ticks_run: int
    wave: int
    is_game_over: bool
    events: List[Dict[str, Any]]


class EventsResponse(BaseModel):
    """Drained event feeds."""

    battle_log: List[str]
    attack_events: List[Dict[str, Any]]
    skill_proc_events: List[Dict[str, Any]]
