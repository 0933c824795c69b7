"""Tests for Combat Engine."""

import random

import pytest

from diablock.combat.combat_engine import TICK_PHASES, CombatEngine
from diablock.combat.entities import Monster, MonsterAIState
from diablock.combat.geometry import Position
from diablock.combat.status_effects import StatusEffect, StatusEffectType
from diablock.core import constants as C
from diablock.core.config import GameConfig
from diablock.core.constants import PLAYER_ID
from diablock.core.game_state import WavePhase, new_world, recompute_derived_stats
from diablock.data.content import load_default_content


def create_test_monster(
    monster_id: str = "m_test",
    hp: float = 50,
    attack: float = 5,
    x: float = 1.0,
) -> Monster:
    """Create a test monster on the x axis."""
    return Monster(
        definition_id="dummy",
        name="Dummy",
        hp=hp,
        max_hp=hp,
        attack=attack,
        defense=0,
        experience=10,
        gold_drop=(3, 3),
        position=Position(x, 0.6, 0.0),
        movement_speed=0.8,
        id=monster_id,
    )


def deterministic_config(**overrides) -> GameConfig:
    """No crits, no on-hit effects, no random drops."""
    stats = dict(C.INITIAL_PLAYER_STATS, crit_chance=0.0)
    values = dict(
        initial_player_stats=stats,
        player_base_status_effect=None,
        monster_crit_chance=0.0,
        loot_drop_chance=0.0,
        enhancement_stone_drop_chance=0.0,
    )
    values.update(overrides)
    return GameConfig(**values)


def create_world(config, content, monsters=()):
    """World with an active wave holding the given monsters."""
    world = new_world(config, content)
    world.monsters = list(monsters)
    world.wave.phase = WavePhase.ACTIVE
    world.wave.initialized = True
    recompute_derived_stats(world, config, content)
    return world


@pytest.fixture
def content():
    return load_default_content()


class TestStepWorld:
    """step_world tests."""

    def test_phase_order(self):
        assert TICK_PHASES == ("status_effects", "directors", "combat", "loot", "waves", "stats")

    def test_input_not_mutated(self, content):
        config = GameConfig()
        engine = CombatEngine(config, content, random.Random(1))
        world = create_world(config, content, [create_test_monster()])

        result = engine.step_world(world)

        assert world.tick == 0
        assert world.monsters[0].hp == 50
        assert result.world is not world
        assert result.tick == 1

    def test_first_tick_spawns_wave(self, content):
        config = GameConfig()
        engine = CombatEngine(config, content, random.Random(1))
        world = new_world(config, content)

        result = engine.step_world(world)

        assert len(result.world.monsters) == 3
        assert any(e["type"] == "wave_spawned" for e in result.events)

    def test_every_event_has_tick(self, content):
        config = deterministic_config()
        engine = CombatEngine(config, content, random.Random(1))
        monster = create_test_monster(hp=1, x=15.0)
        monster.effects.append(StatusEffect(StatusEffectType.POISON, 5, 3, PLAYER_ID))
        world = create_world(config, content, [monster])

        result = engine.step_world(world)

        assert result.events
        assert all(e["tick"] == 1 for e in result.events)

    def test_game_over_freezes_world(self, content):
        config = GameConfig()
        engine = CombatEngine(config, content, random.Random(1))
        world = create_world(config, content, [create_test_monster()])
        world.player.hp = 0
        world.is_game_over = True

        result = engine.step_world(world)

        assert result.world is world
        assert result.events == []
        assert world.tick == 0

    def test_unknown_phase(self, content):
        engine = CombatEngine(GameConfig(), content)
        world = new_world(GameConfig(), content)

        with pytest.raises(ValueError):
            engine.run_phase("teleport", world)


class TestCombat:
    """Attack resolution inside a tick."""

    def test_exchange_of_blows(self, content):
        """Player deals 10 against 0 defense; monster deals 5 - 2 = 3; regen heals 1."""
        config = deterministic_config()
        engine = CombatEngine(config, content, random.Random(1))
        world = create_world(config, content, [create_test_monster()])

        result = engine.step_world(world)
        new = result.world
        attack = next(e for e in result.events if e["type"] == "attack")
        hit = next(e for e in result.events if e["type"] == "monster_attack")

        assert new.player.engaged_monster_id == "m_test"
        assert attack["damage"] == 10
        assert new.monsters[0].hp == 40
        assert hit["damage"] == 3
        assert new.player.hp == 98
        assert new.stats.damage_dealt == 10
        assert new.stats.damage_taken == 3

    def test_consecutive_attacks_counted(self, content):
        config = deterministic_config()
        engine = CombatEngine(config, content, random.Random(1))
        world = create_world(config, content, [create_test_monster(hp=500, attack=0)])

        for _ in range(3):
            world = engine.step_world(world).world

        assert world.player.consecutive_attack_count == 3

    def test_stunned_monster_does_not_attack(self, content):
        config = deterministic_config()
        engine = CombatEngine(config, content, random.Random(1))
        monster = create_test_monster(hp=500)
        monster.ai_state = MonsterAIState.ENGAGED
        monster.effects.append(StatusEffect(StatusEffectType.STUN, 0, 1, PLAYER_ID))
        world = create_world(config, content, [monster])

        result = engine.step_world(world)

        assert not any(e["type"] == "monster_attack" for e in result.events)

    def test_dot_kill_rewarded(self, content):
        """A monster killed by poison goes through the normal kill pipeline."""
        config = deterministic_config()
        engine = CombatEngine(config, content, random.Random(1))
        monster = create_test_monster(hp=1, x=15.0)
        monster.effects.append(StatusEffect(StatusEffectType.POISON, 5, 3, PLAYER_ID))
        world = create_world(config, content, [monster, create_test_monster("m_other", x=-15.0)])

        result = engine.step_world(world)

        assert [m.id for m in result.world.monsters] == ["m_other"]
        assert result.world.player.gold == 3
        assert any(e["type"] == "monster_killed" for e in result.events)

    def test_player_death(self, content):
        config = deterministic_config()
        engine = CombatEngine(config, content, random.Random(1))
        world = create_world(config, content, [create_test_monster(hp=500, attack=500)])
        world.wave.number = 5

        result = engine.step_world(world)
        new = result.world

        assert new.is_game_over
        assert new.player.hp == 0
        assert new.player.engaged_monster_id is None
        assert new.progress.highest_wave_achieved == 4
        assert all(m.ai_state == MonsterAIState.PATROLLING for m in new.monsters)
        assert any(e["type"] == "player_died" for e in result.events)

    def test_thorns_reflect(self, content):
        config = deterministic_config()
        engine = CombatEngine(config, content, random.Random(1))
        world = create_world(config, content, [create_test_monster(hp=500)])
        world.skill_levels["thorns_aura"] = 5
        world.player.base.defense = 40
        recompute_derived_stats(world, config, content)

        result = engine.step_world(world)

        assert any(e["type"] == "thorns" for e in result.events)


class TestWaves:
    """Wave progression through the engine."""

    def test_boss_wave_clear(self, content):
        """Killing the boss grants essence, advances the wave and drops the boss."""
        config = deterministic_config(boss_wave_interval=1)
        engine = CombatEngine(config, content, random.Random(3))
        world = engine.step_world(new_world(config, content)).world
        boss_id = world.wave.boss_instance_id
        assert boss_id is not None

        world.get_monster(boss_id).hp = 0
        result = engine.step_world(world)
        new = result.world

        assert new.progress.essence == 10
        assert new.wave.number == 2
        assert new.get_monster(boss_id) is None
        assert new.progress.highest_wave_achieved == 1
        assert new.stats.bosses_defeated == 1

    def test_wave_advances_once(self, content):
        config = deterministic_config()
        engine = CombatEngine(config, content, random.Random(3))
        world = create_world(config, content, [create_test_monster(hp=0, x=15.0)])

        cleared = engine.step_world(world).world
        spawned = engine.step_world(cleared).world

        assert cleared.wave.number == 2
        assert spawned.wave.number == 2
        assert spawned.wave.phase == WavePhase.ACTIVE
        assert len(spawned.monsters) == 3

    def test_health_invariants_hold(self, content):
        config = GameConfig()
        engine = CombatEngine(config, content, random.Random(7))
        world = new_world(config, content)

        for expected_tick in range(1, 301):
            world = engine.step_world(world).world
            assert world.tick == expected_tick or world.is_game_over
            assert 0 <= world.player.hp <= world.derived.max_hp
            for monster in world.monsters:
                assert 0 < monster.hp <= monster.max_hp
            if world.is_game_over:
                break
