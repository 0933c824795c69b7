# Data Models
from .item import (
    CORE_STATS,
    RARITY_ORDER,
    Item,
    ItemBase,
    ItemSlot,
    ModifierType,
    Rarity,
    StatModifier,
    StatName,
)
from .monster import MonsterDefinition, MonsterEffect
from .skill import SkillDefinition, SkillModifierFormula
from .upgrade import PermanentUpgrade

__all__ = [
    "CORE_STATS",
    "RARITY_ORDER",
    "Item",
    "ItemBase",
    "ItemSlot",
    "ModifierType",
    "Rarity",
    "StatModifier",
    "StatName",
    "MonsterDefinition",
    "MonsterEffect",
    "SkillDefinition",
    "SkillModifierFormula",
    "PermanentUpgrade",
]
