"""Combat entities for Diablock.

The player and monsters share health, position and status effects.
Monsters additionally carry AI state; the player carries progression
and the per-run counters that skill procs read and write.
"""

import uuid
from dataclasses import dataclass, field, fields
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple

from diablock.combat.geometry import Position
from diablock.combat.status_effects import StatusEffect
from diablock.core.constants import PLAYER_ID
from diablock.data.models import MonsterEffect, StatName


class MonsterAIState(Enum):
    """Monster behaviour state."""

    PATROLLING = auto()  # Wandering towards a random point
    PURSUING = auto()  # Closing in on the player
    ENGAGED = auto()  # In range, stopped and attacking


@dataclass
class BaseStats:
    """
    Unmodified combat stats.

    For the player these are the initial stats plus permanent upgrades;
    equipment, skills and buffs are layered on by the StatCalculator.
    """

    max_hp: float = 100
    attack: float = 10
    defense: float = 2
    crit_chance: float = 0.05
    crit_damage: float = 1.5
    health_regen: float = 1.0
    attack_speed: float = 1.0
    movement_speed: float = 1.0

    def get(self, stat: StatName) -> float:
        return getattr(self, str(stat))

    def set(self, stat: StatName, value: float) -> None:
        setattr(self, str(stat), value)

    def copy(self) -> "BaseStats":
        return BaseStats(**self.to_dict())

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "BaseStats":
        known = {f.name for f in fields(cls)}
        return cls(**{k: float(v) for k, v in data.items() if k in known})


@dataclass
class AttackCharges:
    """A buff consumed one attack at a time."""

    attacks_remaining: int
    value: float


@dataclass
class PlayerState:
    """The player character for the current run."""

    base: BaseStats
    hp: float
    id: str = PLAYER_ID
    name: str = "Hero"

    # Progression
    level: int = 1
    experience: int = 0
    experience_to_next_level: int = 100
    skill_points: int = 0

    # Currencies
    gold: int = 0
    enhancement_stones: int = 0

    effects: List[StatusEffect] = field(default_factory=list)
    position: Position = field(default_factory=Position)

    # Targeting
    engaged_monster_id: Optional[str] = None

    # Proc state
    power_strike_pending_damage: int = 0
    consecutive_attack_count: int = 0
    last_attack_tick: int = -1
    unstoppable_force: Optional[AttackCharges] = None
    retribution: Optional[AttackCharges] = None
    dodged_this_tick: bool = False
    recent_kill_ticks: List[int] = field(default_factory=list)
    master_tactician_applied_wave: int = 0

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    def reset_engagement(self) -> None:
        """Drop the current target and the consecutive-hit streak."""
        self.engaged_monster_id = None
        self.consecutive_attack_count = 0


@dataclass
class Monster:
    """A spawned monster instance."""

    definition_id: str
    name: str
    hp: float
    max_hp: float
    attack: float
    defense: float
    experience: int
    gold_drop: Tuple[int, int]
    position: Position
    movement_speed: float
    is_boss: bool = False
    size_scale: float = 1.0
    applies_effect: Optional[MonsterEffect] = None
    id: str = field(default_factory=lambda: f"m_{uuid.uuid4().hex[:10]}")

    effects: List[StatusEffect] = field(default_factory=list)

    # AI
    ai_state: MonsterAIState = MonsterAIState.PATROLLING
    movement_target: Optional[Position] = None
    target_update_cooldown: int = 0
    stunned_this_tick: bool = False

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def hp_fraction(self) -> float:
        if self.max_hp <= 0:
            return 0.0
        return self.hp / self.max_hp

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "definition_id": self.definition_id,
            "name": self.name,
            "is_boss": self.is_boss,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "attack": self.attack,
            "defense": self.defense,
            "position": self.position.to_dict(),
            "ai_state": self.ai_state.name,
            "effects": [e.to_dict() for e in self.effects],
        }
