"""Tests for Wave Director."""

import random

import pytest

from diablock.combat.waves import WaveDirector
from diablock.core.config import GameConfig
from diablock.core.game_state import WavePhase, new_world
from diablock.core.rounding import round_half_up
from diablock.data.content import GameContent, load_default_content


@pytest.fixture
def content():
    return load_default_content()


@pytest.fixture
def director(content):
    return WaveDirector(GameConfig(), content, random.Random(42))


class TestWaveMath:
    """Wave size and scaling tests."""

    def test_monster_count(self, director):
        assert director.monster_count(1) == 3
        assert director.monster_count(5) == 5
        assert director.monster_count(100) == 15

    def test_count_override(self, content):
        director = WaveDirector(GameConfig(wave_monster_count_overrides={3: 9}), content)

        assert director.monster_count(3) == 9

    def test_scaling_multiplier(self, director):
        assert director.scaling_multiplier(1, False) == 1.0
        assert director.scaling_multiplier(11, False) == pytest.approx(1.7)
        assert director.scaling_multiplier(10, True) == pytest.approx(1.27)

    def test_boss_waves(self, director):
        assert not director.is_boss_wave(9)
        assert director.is_boss_wave(10)
        assert director.is_boss_wave(20)

    def test_boss_round_robin(self, director, content):
        bosses = content.boss_monsters

        assert director.boss_for_wave(10).id == bosses[0].id
        assert director.boss_for_wave(20).id == bosses[1].id
        assert director.boss_for_wave(10 * (len(bosses) + 1)).id == bosses[0].id

    def test_monster_scaled_to_wave(self, director, content):
        definition = content.normal_monsters[0]
        monster = director.create_monster(definition, 11)
        multiplier = director.scaling_multiplier(11, False)

        assert monster.max_hp == round_half_up(definition.hp * multiplier)
        assert monster.hp == monster.max_hp
        assert monster.attack == round_half_up(definition.attack * multiplier)


class TestWaveCycle:
    """Spawn and clear tests."""

    def test_spawn_first_wave(self, director, content):
        world = new_world(GameConfig(), content)

        events = director.update(world)

        assert len(world.monsters) == 3
        assert world.wave.phase == WavePhase.ACTIVE
        assert world.wave.initialized
        assert events[0]["type"] == "wave_spawned"

    def test_boss_wave_spawns_single_boss(self, director, content):
        world = new_world(GameConfig(), content)
        world.wave.number = 10

        director.update(world)

        assert len(world.monsters) == 1
        assert world.monsters[0].is_boss
        assert world.wave.boss_instance_id == world.monsters[0].id

    def test_active_wave_with_live_monsters(self, director, content):
        world = new_world(GameConfig(), content)
        director.update(world)

        assert director.update(world) == []
        assert world.wave.number == 1

    def test_clear_advances_exactly_once(self, director, content):
        """A cleared wave bumps the counter once, then the next wave spawns."""
        world = new_world(GameConfig(), content)
        director.update(world)
        for monster in world.monsters:
            monster.hp = 0
        world.monsters = []

        clear_events = director.update(world)
        spawn_events = director.update(world)

        assert clear_events[0]["type"] == "wave_cleared"
        assert spawn_events[0]["type"] == "wave_spawned"
        assert world.wave.number == 2
        assert world.wave.phase == WavePhase.ACTIVE

    def test_high_water_mark(self, director, content):
        world = new_world(GameConfig(), content)
        world.progress.highest_wave_achieved = 12
        director.update(world)
        world.monsters = []

        director.update(world)

        assert world.progress.highest_wave_achieved == 12
        assert world.stats.highest_wave_reached_this_session == 2

    def test_high_water_mark_rises(self, director, content):
        world = new_world(GameConfig(), content)
        world.wave.number = 4
        director.update(world)
        world.monsters = []

        director.update(world)

        assert world.progress.highest_wave_achieved == 4

    def test_boss_death_clears_wave(self, director, content):
        world = new_world(GameConfig(), content)
        world.wave.number = 10
        director.update(world)
        world.monsters[0].hp = 0

        director.update(world)

        assert world.wave.number == 11

    def test_missing_content_retries(self):
        """Empty tables leave the wave waiting to spawn."""
        director = WaveDirector(GameConfig(), GameContent(), random.Random(1))
        world = new_world(GameConfig(), GameContent())

        assert director.update(world) == []
        assert director.update(world) == []
        assert world.wave.phase == WavePhase.SPAWNING
        assert world.monsters == []

    def test_game_over_stops_waves(self, director, content):
        world = new_world(GameConfig(), content)
        world.is_game_over = True

        assert director.update(world) == []
        assert world.monsters == []
