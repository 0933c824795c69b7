"""Attack System for Diablock Combat.

Handles hit resolution:
- Critical strikes
- Defense mitigation (with DefenseDown reduction)
- Vulnerability amplification
"""

import random
from dataclasses import dataclass
from typing import List, Optional

from diablock.combat.status_effects import StatusEffect, StatusEffectType, strongest_potency
from diablock.core.rounding import round_half_up


@dataclass
class CombatStats:
    """The slice of stats a single hit reads."""

    attack: float
    defense: float
    crit_chance: float = 0.0
    crit_damage: float = 1.0


@dataclass
class AttackResult:
    """Result of resolving one hit."""

    damage: int
    is_critical: bool
    raw_damage: float = 0.0
    effective_defense: float = 0.0


class AttackSystem:
    """
    Resolves individual hits.

    Usage:
        attack_system = AttackSystem(rng)
        result = attack_system.resolve_attack(attacker, defender, defender.effects)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize attack system.

        Args:
            rng: Random number generator for deterministic simulation.
        """
        self.rng = rng or random.Random()

    def resolve_attack(
        self,
        attacker: CombatStats,
        defender: CombatStats,
        defender_effects: List[StatusEffect],
        defense_ignore_on_crit: float = 0.0,
    ) -> AttackResult:
        """
        Resolve one hit.

        Args:
            attacker: Attacker stats.
            defender: Defender stats.
            defender_effects: Active effects on the defender.
            defense_ignore_on_crit: Fraction of effective defense ignored
                when the hit is critical.

        Returns:
            AttackResult with final damage (always at least 1).
        """
        is_critical = self.rng.random() < attacker.crit_chance
        return calculate_damage(
            attacker,
            defender,
            defender_effects,
            is_critical,
            defense_ignore_on_crit if is_critical else 0.0,
        )


def calculate_damage(
    attacker: CombatStats,
    defender: CombatStats,
    defender_effects: List[StatusEffect],
    is_critical: bool = False,
    defense_ignore: float = 0.0,
) -> AttackResult:
    """
    Deterministic damage for a hit whose crit outcome is already known.

    Mitigation is subtractive and floored at 1; vulnerability multiplies
    the mitigated damage.
    """
    defense_down = strongest_potency(defender_effects, StatusEffectType.DEFENSE_DOWN)
    effective_defense = max(0.0, defender.defense * (1 - defense_down))
    if defense_ignore > 0:
        effective_defense *= 1 - defense_ignore

    raw_damage = attacker.attack * attacker.crit_damage if is_critical else attacker.attack
    mitigated = max(1.0, raw_damage - effective_defense)

    vulnerability = strongest_potency(defender_effects, StatusEffectType.VULNERABILITY)
    if vulnerability > 0:
        mitigated *= 1 + vulnerability

    return AttackResult(
        damage=max(1, round_half_up(mitigated)),
        is_critical=is_critical,
        raw_damage=raw_damage,
        effective_defense=effective_defense,
    )
