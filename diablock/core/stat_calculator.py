"""Stat Calculator for Diablock.

Calculate derived player stats from base stats, equipment, learned
skills and active buffs.
"""

from dataclasses import dataclass, fields
from typing import Dict, Iterable, List, Mapping, Optional, TYPE_CHECKING

from diablock.combat.status_effects import StatusEffect, StatusEffectType
from diablock.core.rounding import round_half_up
from diablock.data.models import CORE_STATS, ModifierType, StatModifier, StatName

if TYPE_CHECKING:
    from diablock.combat.entities import BaseStats
    from diablock.core.config import GameConfig
    from diablock.data.models import Item, ItemSlot, SkillDefinition


@dataclass
class DerivedStats:
    """Read-only per-tick stats used by combat."""

    hp: float = 0.0
    max_hp: float = 0.0
    attack: float = 0.0
    defense: float = 0.0
    crit_chance: float = 0.0
    crit_damage: float = 0.0
    health_regen: float = 0.0
    attack_speed: float = 0.0
    movement_speed: float = 0.0

    def get(self, stat: StatName) -> float:
        return getattr(self, str(stat))

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def collect_modifiers(
    equipped: Mapping["ItemSlot", "Item"],
    skill_levels: Mapping[str, int],
    skills: Iterable["SkillDefinition"],
    enhancement_bonus_per_level: float,
) -> List[StatModifier]:
    """
    Gather every stat modifier from gear and learned skills.

    Item modifiers are pre-scaled by the item's enhancement multiplier.
    """
    modifiers: List[StatModifier] = []

    for item in equipped.values():
        if item is None:
            continue
        multiplier = item.enhancement_multiplier(enhancement_bonus_per_level)
        for mod in item.modifiers:
            modifiers.append(StatModifier(stat=mod.stat, type=mod.type, value=mod.value * multiplier))

    for skill in skills:
        level = skill_levels.get(skill.id, 0)
        if level > 0:
            modifiers.extend(skill.effects(level))

    return modifiers


class StatCalculator:
    """
    Calculate derived stats from:
    - Base stats (initial stats plus permanent upgrades)
    - Flat modifiers (gear and skills)
    - Percent modifiers (gear and skills)
    - Active buff effects
    """

    def __init__(self, config: "GameConfig"):
        self.config = config

    def calculate(
        self,
        base: "BaseStats",
        hp: float,
        modifiers: Iterable[StatModifier],
        effects: Optional[Iterable[StatusEffect]] = None,
    ) -> DerivedStats:
        """
        Calculate derived stats.

        Args:
            base: Unmodified stats.
            hp: Current health, clamped to the new maximum.
            modifiers: Stat modifiers from gear and skills.
            effects: Active status effects on the entity.

        Returns:
            DerivedStats with all bonuses applied.
        """
        modifiers = list(modifiers)
        stats = DerivedStats(**base.to_dict())

        # 1. Flat modifiers
        flat_totals: Dict[StatName, float] = {}
        for mod in modifiers:
            if mod.type == ModifierType.FLAT:
                self._add(stats, mod.stat, mod.value)
                flat_totals[mod.stat] = flat_totals.get(mod.stat, 0.0) + mod.value

        # 2. Percent modifiers
        for mod in modifiers:
            if mod.type == ModifierType.PERCENT:
                self._apply_percent(stats, base, flat_totals, mod)

        # 3. Buffs
        if effects:
            self._apply_buffs(stats, effects)

        self._finalize(stats)
        stats.hp = max(0.0, min(hp, stats.max_hp))
        return stats

    def _apply_percent(
        self,
        stats: DerivedStats,
        base: "BaseStats",
        flat_totals: Dict[StatName, float],
        mod: StatModifier,
    ) -> None:
        """
        Core stats add a share of their post-flat value, so several percent
        bonuses on the same core stat sum. Every other stat compounds.
        """
        if mod.stat in CORE_STATS:
            post_flat = base.get(mod.stat) + flat_totals.get(mod.stat, 0.0)
            self._add(stats, mod.stat, post_flat * mod.value)
        else:
            current = stats.get(mod.stat)
            setattr(stats, str(mod.stat), current * (1 + mod.value))

    def _apply_buffs(self, stats: DerivedStats, effects: Iterable[StatusEffect]) -> None:
        for effect in effects:
            p = effect.potency
            if effect.effect_type == StatusEffectType.ATTACK_SPEED_BUFF:
                stats.attack_speed *= 1 + p
            elif effect.effect_type == StatusEffectType.MOVEMENT_SPEED_BUFF:
                stats.movement_speed *= 1 + p
            elif effect.effect_type == StatusEffectType.SLOW:
                stats.movement_speed *= max(0.0, 1 - p)
            elif effect.effect_type == StatusEffectType.ATTACK_BUFF:
                stats.attack *= 1 + p
            elif effect.effect_type == StatusEffectType.ALL_STATS_BUFF:
                stats.attack *= 1 + p
                stats.defense *= 1 + p
                stats.max_hp *= 1 + p
            elif effect.effect_type == StatusEffectType.MASTER_TACTICIAN_BUFF:
                stats.crit_chance += self.config.master_tactician_crit_chance
                stats.crit_damage += self.config.master_tactician_crit_damage

    @staticmethod
    def _add(stats: DerivedStats, stat: StatName, value: float) -> None:
        setattr(stats, str(stat), stats.get(stat) + value)

    @staticmethod
    def _finalize(stats: DerivedStats) -> None:
        """Round and clamp."""
        stats.max_hp = max(1, round_half_up(stats.max_hp))
        stats.attack = max(0, round_half_up(stats.attack))
        stats.defense = max(0, round_half_up(stats.defense))
        stats.health_regen = round(stats.health_regen, 1)
        stats.attack_speed = round(stats.attack_speed, 2)
        stats.movement_speed = round(stats.movement_speed, 2)
        stats.crit_chance = round(min(1.0, max(0.0, stats.crit_chance)), 3)
        stats.crit_damage = round(stats.crit_damage, 2)
