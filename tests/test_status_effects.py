"""Tests for Status Effects System."""

import random

import pytest

from diablock.combat.entities import Monster
from diablock.combat.geometry import Position
from diablock.combat.status_effects import (
    StatusEffect,
    StatusEffectSystem,
    StatusEffectType,
    find_effect,
    has_effect,
    strongest_potency,
)
from diablock.core.constants import PLAYER_ID


def create_test_monster(monster_id: str = "m_test", hp: float = 100) -> Monster:
    """Create a test monster."""
    return Monster(
        definition_id="dummy",
        name="Dummy",
        hp=hp,
        max_hp=hp,
        attack=5,
        defense=0,
        experience=10,
        gold_drop=(1, 1),
        position=Position(),
        movement_speed=0.8,
        id=monster_id,
    )


class TestApply:
    """StatusEffectSystem.apply tests."""

    @pytest.fixture
    def system(self):
        return StatusEffectSystem(random.Random(42))

    def test_apply_new_effect(self, system):
        """Applying to an empty list adds one instance."""
        result = system.apply([], StatusEffectType.POISON, 5, 3, PLAYER_ID)

        assert len(result.effects) == 1
        assert result.applied.effect_type == StatusEffectType.POISON
        assert result.applied.duration == 3
        assert not result.resisted

    def test_apply_does_not_mutate_input(self, system):
        """The input list is left untouched."""
        original = [StatusEffect(StatusEffectType.SLOW, 0.2, 2, PLAYER_ID)]
        result = system.apply(original, StatusEffectType.SLOW, 0.5, 5, PLAYER_ID)

        assert original[0].duration == 2
        assert original[0].potency == 0.2
        assert result.effects[0].duration == 5

    def test_reapply_same_source_refreshes(self, system):
        """Same (type, source) keeps a single instance with the longer duration."""
        first = system.apply([], StatusEffectType.BLEED, 2, 5, "m_1")
        second = system.apply(first.effects, StatusEffectType.BLEED, 4, 2, "m_1")

        assert len(second.effects) == 1
        assert second.effects[0].duration == 5
        assert second.effects[0].potency == 4

    def test_reapply_longer_duration_extends(self, system):
        first = system.apply([], StatusEffectType.BLEED, 2, 2, "m_1")
        second = system.apply(first.effects, StatusEffectType.BLEED, 2, 6, "m_1")

        assert second.effects[0].duration == 6

    def test_different_sources_stack(self, system):
        """Different sources get separate instances."""
        first = system.apply([], StatusEffectType.POISON, 2, 3, "m_1")
        second = system.apply(first.effects, StatusEffectType.POISON, 2, 3, "m_2")

        assert len(second.effects) == 2

    def test_hostile_debuff_resisted(self, system):
        """Certain resist leaves the list unchanged."""
        result = system.apply([], StatusEffectType.POISON, 5, 3, "m_1", resist_chance=1.0)

        assert result.resisted
        assert result.applied is None
        assert result.effects == []

    def test_player_debuffs_ignore_resistance(self, system):
        """Debuffs the player applies to monsters are never resisted."""
        result = system.apply([], StatusEffectType.POISON, 5, 3, PLAYER_ID, resist_chance=1.0)

        assert not result.resisted
        assert len(result.effects) == 1

    def test_duration_reduction(self, system):
        result = system.apply(
            [], StatusEffectType.SLOW, 0.3, 10, "m_1", debuff_duration_reduction=0.5
        )
        assert result.applied.duration == 5

    def test_duration_reduction_floor(self, system):
        """Reduced durations never drop below one tick."""
        result = system.apply(
            [], StatusEffectType.STUN, 0, 1, "m_1", debuff_duration_reduction=0.9
        )
        assert result.applied.duration == 1

    def test_buffs_not_reduced(self, system):
        result = system.apply(
            [], StatusEffectType.ATTACK_BUFF, 0.1, 4, "m_1", debuff_duration_reduction=0.5
        )
        assert result.applied.duration == 4

    def test_apply_to_stores_on_target(self, system):
        monster = create_test_monster()
        system.apply_to(monster, StatusEffectType.SLOW, 0.2, 3, PLAYER_ID)

        assert has_effect(monster.effects, StatusEffectType.SLOW)


class TestTick:
    """StatusEffectSystem.tick tests."""

    @pytest.fixture
    def system(self):
        return StatusEffectSystem(random.Random(42))

    def test_poison_deals_total_damage(self, system):
        """3-tick poison at potency 5 deals 15 and expires after the 3rd tick."""
        monster = create_test_monster(hp=100)
        system.apply_to(monster, StatusEffectType.POISON, 5, 3, PLAYER_ID)

        total = 0.0
        for expected_remaining in (1, 1, 0):
            result = system.tick(monster)
            total += result.damage
            assert len(monster.effects) == expected_remaining

        assert total == 15
        assert monster.hp == 85

    def test_dot_clamps_health(self, system):
        monster = create_test_monster(hp=3)
        system.apply_to(monster, StatusEffectType.BLEED, 10, 2, PLAYER_ID)

        result = system.tick(monster)

        assert monster.hp == 0
        assert result.damage == 3

    def test_stun_flags_tick(self, system):
        monster = create_test_monster()
        system.apply_to(monster, StatusEffectType.STUN, 0, 1, PLAYER_ID)

        result = system.tick(monster)

        assert result.was_stunned
        assert monster.effects == []
        assert result.expired[0].effect_type == StatusEffectType.STUN

    def test_tick_emits_events(self, system):
        monster = create_test_monster()
        system.apply_to(monster, StatusEffectType.POISON, 2, 1, PLAYER_ID)

        result = system.tick(monster)
        types = [e["type"] for e in result.events]

        assert "dot_damage" in types
        assert "effect_expired" in types


class TestHelpers:
    """Lookup helper tests."""

    def test_strongest_potency(self):
        effects = [
            StatusEffect(StatusEffectType.DEFENSE_DOWN, 0.1, 3, "a"),
            StatusEffect(StatusEffectType.DEFENSE_DOWN, 0.3, 3, "b"),
        ]
        assert strongest_potency(effects, StatusEffectType.DEFENSE_DOWN) == 0.3
        assert strongest_potency(effects, StatusEffectType.VULNERABILITY) == 0.0

    def test_find_effect_by_source(self):
        effects = [
            StatusEffect(StatusEffectType.POISON, 1, 3, "a"),
            StatusEffect(StatusEffectType.POISON, 2, 3, "b"),
        ]
        assert find_effect(effects, StatusEffectType.POISON, "b").potency == 2
        assert find_effect(effects, StatusEffectType.BLEED) is None

    def test_buff_classification(self):
        assert StatusEffect(StatusEffectType.GOLD_FIND_BUFF, 0.5, 3, PLAYER_ID).is_buff
        assert not StatusEffect(StatusEffectType.SLOW, 0.5, 3, PLAYER_ID).is_buff
