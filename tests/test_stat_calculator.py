"""Tests for Stat Calculator."""

import pytest

from diablock.combat.entities import BaseStats
from diablock.combat.status_effects import StatusEffect, StatusEffectType
from diablock.core.config import GameConfig
from diablock.core.constants import PLAYER_ID
from diablock.core.stat_calculator import StatCalculator, collect_modifiers
from diablock.data.models import (
    Item,
    ItemSlot,
    ModifierType,
    SkillDefinition,
    SkillModifierFormula,
    StatModifier,
    StatName,
)


def flat(stat: StatName, value: float) -> StatModifier:
    return StatModifier(stat=stat, type=ModifierType.FLAT, value=value)


def percent(stat: StatName, value: float) -> StatModifier:
    return StatModifier(stat=stat, type=ModifierType.PERCENT, value=value)


class TestStatCalculator:
    """StatCalculator tests."""

    @pytest.fixture
    def calculator(self):
        return StatCalculator(GameConfig())

    def test_no_modifiers(self, calculator):
        """Base stats pass through unchanged."""
        stats = calculator.calculate(BaseStats(), 100, [])

        assert stats.max_hp == 100
        assert stats.attack == 10
        assert stats.defense == 2
        assert stats.hp == 100

    def test_flat_then_percent(self, calculator):
        """+10 flat and +50% on 100 attack gives (100 + 10) * 1.5."""
        mods = [flat(StatName.ATTACK, 10), percent(StatName.ATTACK, 0.5)]
        stats = calculator.calculate(BaseStats(attack=100), 100, mods)

        assert stats.attack == 165

    def test_core_percents_sum(self, calculator):
        """Two +50% bonuses on a core stat add up to +100%."""
        mods = [percent(StatName.ATTACK, 0.5), percent(StatName.ATTACK, 0.5)]
        stats = calculator.calculate(BaseStats(attack=100), 100, mods)

        assert stats.attack == 200

    def test_non_core_percents_compound(self, calculator):
        """Two +50% attack speed bonuses multiply."""
        mods = [percent(StatName.ATTACK_SPEED, 0.5), percent(StatName.ATTACK_SPEED, 0.5)]
        stats = calculator.calculate(BaseStats(attack_speed=1.0), 100, mods)

        assert stats.attack_speed == 2.25

    def test_hp_clamped_to_max(self, calculator):
        stats = calculator.calculate(BaseStats(max_hp=50), 80, [])

        assert stats.hp == 50

    def test_crit_chance_capped(self, calculator):
        stats = calculator.calculate(BaseStats(), 100, [flat(StatName.CRIT_CHANCE, 2.0)])

        assert stats.crit_chance == 1.0

    def test_attack_buff(self, calculator):
        effects = [StatusEffect(StatusEffectType.ATTACK_BUFF, 0.1, 3, PLAYER_ID)]
        stats = calculator.calculate(BaseStats(attack=100), 100, [], effects)

        assert stats.attack == 110

    def test_slow_reduces_movement(self, calculator):
        effects = [StatusEffect(StatusEffectType.SLOW, 0.5, 3, "m_1")]
        stats = calculator.calculate(BaseStats(movement_speed=1.0), 100, [], effects)

        assert stats.movement_speed == 0.5

    def test_master_tactician_buff(self, calculator):
        """Adds flat crit chance and crit damage."""
        effects = [StatusEffect(StatusEffectType.MASTER_TACTICIAN_BUFF, 0, 3, PLAYER_ID)]
        stats = calculator.calculate(BaseStats(crit_chance=0.05, crit_damage=1.5), 100, [], effects)

        assert stats.crit_chance == pytest.approx(0.25)
        assert stats.crit_damage == pytest.approx(1.8)


class TestCollectModifiers:
    """Modifier gathering tests."""

    def test_enhancement_scales_item_modifiers(self):
        item = Item(
            name="Test Sword",
            slot=ItemSlot.WEAPON,
            modifiers=[flat(StatName.ATTACK, 10)],
            enhancement_level=2,
        )
        mods = collect_modifiers({ItemSlot.WEAPON: item}, {}, [], 0.05)

        assert len(mods) == 1
        assert mods[0].value == pytest.approx(11.0)

    def test_skill_modifiers_at_level(self):
        skill = SkillDefinition(
            id="test_skill",
            name="Test",
            max_level=5,
            modifiers=[SkillModifierFormula(stat=StatName.DEFENSE, base=2, per_level=1)],
        )
        mods = collect_modifiers({}, {"test_skill": 3}, [skill], 0.05)

        assert mods[0].stat == StatName.DEFENSE
        assert mods[0].value == 4

    def test_unlearned_skills_ignored(self):
        skill = SkillDefinition(
            id="test_skill",
            name="Test",
            modifiers=[SkillModifierFormula(stat=StatName.DEFENSE, base=2)],
        )
        assert collect_modifiers({}, {}, [skill], 0.05) == []
