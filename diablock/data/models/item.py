"""Item data model for Diablock."""

import uuid
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field


class StatName(StrEnum):
    """Stats that modifiers can target."""
    MAX_HP = "max_hp"
    ATTACK = "attack"
    DEFENSE = "defense"
    CRIT_CHANCE = "crit_chance"
    CRIT_DAMAGE = "crit_damage"
    HEALTH_REGEN = "health_regen"
    ATTACK_SPEED = "attack_speed"
    MOVEMENT_SPEED = "movement_speed"


# Stats whose percent modifiers are taken against the post-flat value
CORE_STATS: tuple[StatName, ...] = (StatName.MAX_HP, StatName.ATTACK, StatName.DEFENSE)


class ModifierType(StrEnum):
    """How a modifier value is applied."""
    FLAT = "flat"
    PERCENT = "percent"


class ItemSlot(StrEnum):
    """Equipment slot."""
    WEAPON = "weapon"
    HEAD = "head"
    CHEST = "chest"
    LEGS = "legs"
    FEET = "feet"
    HANDS = "hands"
    RING = "ring"
    AMULET = "amulet"


class Rarity(StrEnum):
    """Item rarity tiers, lowest first."""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"

    @property
    def index(self) -> int:
        return RARITY_ORDER.index(self)


RARITY_ORDER: list[Rarity] = list(Rarity)


class StatModifier(BaseModel):
    """A single stat bonus."""
    stat: StatName
    value: float
    type: ModifierType = ModifierType.FLAT


class ItemBase(BaseModel):
    """Base template for one equipment slot."""
    slot: ItemSlot
    name: str
    modifiers: list[StatModifier] = Field(default_factory=list)


class Item(BaseModel):
    """A generated equipment piece."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    name: str
    slot: ItemSlot
    rarity: Rarity = Rarity.COMMON
    modifiers: list[StatModifier] = Field(default_factory=list)
    enhancement_level: int = Field(default=0, ge=0)
    level_requirement: Optional[int] = Field(default=None, ge=1)
    gold_value: int = Field(default=0, ge=0)

    @property
    def rarity_index(self) -> int:
        return Rarity(self.rarity).index

    def enhancement_multiplier(self, bonus_per_level: float) -> float:
        """Scale factor applied to every modifier of this item."""
        return 1 + self.enhancement_level * bonus_per_level
