"""Status Effects System for Diablock Combat.

Handles timed buffs, debuffs and crowd control on players and monsters:
- Damage over time (poison, bleed)
- Crowd control (stun, slow)
- Defensive debuffs (defense down, vulnerability)
- Stat buffs (attack speed, movement speed, attack, all stats, gold find)

Effects stack per (type, source): re-applying refreshes the existing
instance instead of adding a second one.
"""

import random
import uuid
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Protocol

from diablock.core.constants import PLAYER_ID
from diablock.core.rounding import round_half_up


class StatusEffectType(Enum):
    """Types of status effects."""

    # Damage Over Time
    POISON = auto()
    BLEED = auto()

    # Crowd Control
    STUN = auto()  # Skips movement and attacks
    SLOW = auto()  # Reduces movement speed

    # Debuffs
    DEFENSE_DOWN = auto()  # Fraction of defense removed
    VULNERABILITY = auto()  # Fraction of extra damage taken

    # Buffs
    ATTACK_SPEED_BUFF = auto()
    MOVEMENT_SPEED_BUFF = auto()
    ATTACK_BUFF = auto()
    ALL_STATS_BUFF = auto()
    GOLD_FIND_BUFF = auto()
    MASTER_TACTICIAN_BUFF = auto()


@dataclass(frozen=True)
class EffectDefinition:
    """Static description of an effect type."""

    name: str
    is_buff: bool
    is_damage_over_time: bool = False


EFFECT_DEFINITIONS: Dict[StatusEffectType, EffectDefinition] = {
    StatusEffectType.POISON: EffectDefinition("Poison", False, True),
    StatusEffectType.BLEED: EffectDefinition("Bleed", False, True),
    StatusEffectType.STUN: EffectDefinition("Stun", False),
    StatusEffectType.SLOW: EffectDefinition("Slow", False),
    StatusEffectType.DEFENSE_DOWN: EffectDefinition("Defense Down", False),
    StatusEffectType.VULNERABILITY: EffectDefinition("Vulnerability", False),
    StatusEffectType.ATTACK_SPEED_BUFF: EffectDefinition("Attack Speed Up", True),
    StatusEffectType.MOVEMENT_SPEED_BUFF: EffectDefinition("Movement Speed Up", True),
    StatusEffectType.ATTACK_BUFF: EffectDefinition("Attack Up", True),
    StatusEffectType.ALL_STATS_BUFF: EffectDefinition("All Stats Up", True),
    StatusEffectType.GOLD_FIND_BUFF: EffectDefinition("Gold Find Up", True),
    StatusEffectType.MASTER_TACTICIAN_BUFF: EffectDefinition("Master Tactician", True),
}


@dataclass
class StatusEffect:
    """
    An active effect instance on one entity.

    Attributes:
        effect_type: Type of the effect.
        potency: Damage per tick for DoTs, fractional multiplier otherwise.
        duration: Remaining duration in ticks.
        source_id: Entity that applied the effect.
        initial_duration: Duration when first applied or last refreshed.
        id: Unique instance id.
    """

    effect_type: StatusEffectType
    potency: float
    duration: int
    source_id: str
    initial_duration: int = 0
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    def __post_init__(self):
        if not self.initial_duration:
            self.initial_duration = self.duration

    @property
    def definition(self) -> EffectDefinition:
        return EFFECT_DEFINITIONS[self.effect_type]

    @property
    def is_buff(self) -> bool:
        return self.definition.is_buff

    @property
    def is_expired(self) -> bool:
        return self.duration <= 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.effect_type.name,
            "name": self.definition.name,
            "potency": self.potency,
            "duration": self.duration,
            "initial_duration": self.initial_duration,
            "source_id": self.source_id,
        }


class EffectTarget(Protocol):
    """Anything that carries status effects and health."""

    id: str
    hp: float
    effects: List[StatusEffect]


@dataclass
class ApplyResult:
    """Outcome of an apply call."""

    effects: List[StatusEffect]
    applied: Optional[StatusEffect] = None
    resisted: bool = False


@dataclass
class EffectTickResult:
    """Outcome of one effect tick on an entity."""

    damage: float = 0.0
    was_stunned: bool = False
    expired: List[StatusEffect] = field(default_factory=list)
    events: List[Dict[str, Any]] = field(default_factory=list)


def find_effect(
    effects: List[StatusEffect],
    effect_type: StatusEffectType,
    source_id: Optional[str] = None,
) -> Optional[StatusEffect]:
    """Find the first instance of a type, optionally from one source."""
    for effect in effects:
        if effect.effect_type == effect_type and (source_id is None or effect.source_id == source_id):
            return effect
    return None


def has_effect(effects: List[StatusEffect], effect_type: StatusEffectType) -> bool:
    return find_effect(effects, effect_type) is not None


def strongest_potency(effects: List[StatusEffect], effect_type: StatusEffectType) -> float:
    """Highest potency among active instances of a type, 0 if none."""
    return max((e.potency for e in effects if e.effect_type == effect_type), default=0.0)


class StatusEffectSystem:
    """
    Applies and ticks status effects.

    Usage:
        effect_system = StatusEffectSystem(rng)
        result = effect_system.apply(target.effects, StatusEffectType.POISON, 5, 3, PLAYER_ID)
        target.effects = result.effects
        tick = effect_system.tick(target)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def apply(
        self,
        effects: List[StatusEffect],
        effect_type: StatusEffectType,
        potency: float,
        duration: int,
        source_id: str,
        debuff_duration_reduction: float = 0.0,
        resist_chance: float = 0.0,
    ) -> ApplyResult:
        """
        Apply an effect to a target's effect list.

        Debuffs from non-player sources may be resisted outright and have
        their duration shortened by the target's defensive skills.

        Args:
            effects: The target's current effects (not mutated).
            effect_type: Type of effect to apply.
            potency: Effect magnitude.
            duration: Duration in ticks.
            source_id: Entity applying the effect.
            debuff_duration_reduction: Fraction of duration removed.
            resist_chance: Chance to ignore the debuff entirely.

        Returns:
            ApplyResult with the new effect list.
        """
        definition = EFFECT_DEFINITIONS[effect_type]
        hostile_debuff = not definition.is_buff and source_id != PLAYER_ID

        if hostile_debuff and resist_chance > 0 and self.rng.random() < resist_chance:
            return ApplyResult(effects=list(effects), resisted=True)

        final_duration = duration
        if hostile_debuff and debuff_duration_reduction > 0:
            final_duration = max(1, round_half_up(duration * (1 - debuff_duration_reduction)))

        new_effects = [self._copy(e) for e in effects]
        existing = find_effect(new_effects, effect_type, source_id)

        if existing:
            # Refresh duration, replace potency
            existing.duration = max(existing.duration, final_duration)
            existing.initial_duration = max(existing.initial_duration, final_duration)
            existing.potency = potency
            return ApplyResult(effects=new_effects, applied=existing)

        effect = StatusEffect(
            effect_type=effect_type,
            potency=potency,
            duration=final_duration,
            source_id=source_id,
        )
        new_effects.append(effect)
        return ApplyResult(effects=new_effects, applied=effect)

    def apply_to(self, target: EffectTarget, *args, **kwargs) -> ApplyResult:
        """Apply an effect and store the result on the target."""
        result = self.apply(target.effects, *args, **kwargs)
        target.effects = result.effects
        return result

    def tick(self, target: EffectTarget) -> EffectTickResult:
        """
        Advance every effect on a target by one tick.

        DoTs deal their potency, stuns flag the tick, durations drop by
        one and finished effects are removed.

        Args:
            target: The entity to update (mutated).

        Returns:
            EffectTickResult with damage, stun flag, expired effects and events.
        """
        result = EffectTickResult()
        remaining = []

        for effect in target.effects:
            if effect.definition.is_damage_over_time:
                damage = min(effect.potency, target.hp)
                target.hp = max(0.0, target.hp - effect.potency)
                result.damage += damage
                result.events.append({
                    "type": "dot_damage",
                    "target_id": target.id,
                    "effect": effect.effect_type.name,
                    "damage": damage,
                    "source_id": effect.source_id,
                })
            elif effect.effect_type == StatusEffectType.STUN:
                result.was_stunned = True

            effect.duration -= 1

            if effect.is_expired:
                result.expired.append(effect)
                result.events.append({
                    "type": "effect_expired",
                    "target_id": target.id,
                    "effect": effect.effect_type.name,
                })
            else:
                remaining.append(effect)

        target.effects = remaining
        return result

    @staticmethod
    def _copy(effect: StatusEffect) -> StatusEffect:
        return StatusEffect(
            effect_type=effect.effect_type,
            potency=effect.potency,
            duration=effect.duration,
            source_id=effect.source_id,
            initial_duration=effect.initial_duration,
            id=effect.id,
        )
