# Combat simulation modules
from .geometry import Position
from .status_effects import StatusEffect, StatusEffectSystem, StatusEffectType
from .entities import BaseStats, Monster, MonsterAIState, PlayerState
from .attack import AttackResult, AttackSystem, CombatStats

__all__ = [
    "Position",
    "StatusEffect",
    "StatusEffectSystem",
    "StatusEffectType",
    "BaseStats",
    "Monster",
    "MonsterAIState",
    "PlayerState",
    "AttackResult",
    "AttackSystem",
    "CombatStats",
]
