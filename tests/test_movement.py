"""Tests for Monster AI and Movement."""

import random

import pytest

from diablock.combat.entities import BaseStats, Monster, MonsterAIState, PlayerState
from diablock.combat.geometry import Position
from diablock.combat.movement import MonsterDirector
from diablock.combat.status_effects import StatusEffect, StatusEffectType
from diablock.core.config import GameConfig


def create_test_monster(x: float = 0.0, z: float = 0.0, speed: float = 0.8) -> Monster:
    """Create a test monster at a position."""
    return Monster(
        definition_id="dummy",
        name="Dummy",
        hp=50,
        max_hp=50,
        attack=5,
        defense=0,
        experience=10,
        gold_drop=(1, 1),
        position=Position(x, 0.6, z),
        movement_speed=speed,
    )


def create_test_player(hp: float = 100) -> PlayerState:
    """Create a player at the origin."""
    return PlayerState(base=BaseStats(), hp=hp)


class TestMonsterDirector:
    """MonsterDirector tests."""

    @pytest.fixture
    def director(self):
        return MonsterDirector(GameConfig(), random.Random(42))

    def test_decide_state_by_distance(self, director):
        player = create_test_player()

        assert director.decide_state(create_test_monster(x=2.0), player) == MonsterAIState.ENGAGED
        assert director.decide_state(create_test_monster(x=8.0), player) == MonsterAIState.PURSUING
        assert director.decide_state(create_test_monster(x=15.0), player) == MonsterAIState.PATROLLING

    def test_dead_player_means_patrol(self, director):
        player = create_test_player(hp=0)

        assert director.decide_state(create_test_monster(x=1.0), player) == MonsterAIState.PATROLLING

    def test_pursuit_moves_towards_player(self, director):
        monster = create_test_monster(x=8.0)

        state = director.update(monster, create_test_player())

        assert state == MonsterAIState.PURSUING
        assert monster.position.x == pytest.approx(7.2)
        assert monster.position.y == 0.6

    def test_engaged_monster_holds_position(self, director):
        monster = create_test_monster(x=2.0)

        director.update(monster, create_test_player())

        assert monster.ai_state == MonsterAIState.ENGAGED
        assert monster.position.x == 2.0

    def test_stunned_monster_frozen(self, director):
        monster = create_test_monster(x=8.0)
        monster.ai_state = MonsterAIState.PATROLLING

        director.update(monster, create_test_player(), stunned=True)

        assert monster.ai_state == MonsterAIState.PATROLLING
        assert monster.position.x == 8.0

    def test_slow_reduces_speed(self, director):
        monster = create_test_monster(x=8.0)
        monster.effects.append(StatusEffect(StatusEffectType.SLOW, 0.5, 3, "player"))

        director.update(monster, create_test_player())

        assert monster.position.x == pytest.approx(7.6)

    def test_patrol_picks_target_inside_map(self, director):
        config = GameConfig()
        monster = create_test_monster(x=18.0, z=18.0)
        director.update(monster, create_test_player())
        assert monster.movement_target is not None

        for _ in range(20):
            director.update(monster, create_test_player())
            assert config.map_min_x <= monster.position.x <= config.map_max_x
            assert config.map_min_z <= monster.position.z <= config.map_max_z

    def test_dead_monster_ignored(self, director):
        monster = create_test_monster(x=8.0)
        monster.hp = 0

        director.update(monster, create_test_player())

        assert monster.position.x == 8.0
