"""Tests for save snapshots."""

import json

import pytest

from diablock.core.config import GameConfig
from diablock.core.game_state import WavePhase
from diablock.core.save_state import (
    SNAPSHOT_VERSION,
    GameSnapshot,
    parse_snapshot,
    world_from_snapshot,
)
from diablock.data.content import load_default_content


def item_dict(name: str = "Saved Helm", slot: str = "head", **extra) -> dict:
    """Raw item as it appears in a save file."""
    return {"id": f"id_{name.lower().replace(' ', '_')}", "name": name, "slot": slot, **extra}


@pytest.fixture
def content():
    return load_default_content()


@pytest.fixture
def config():
    return GameConfig()


class TestParseSnapshot:
    """Tolerant snapshot parsing."""

    def test_empty_dict_gives_defaults(self):
        snapshot = parse_snapshot({})

        assert snapshot.version == SNAPSHOT_VERSION
        assert snapshot.wave == 1
        assert snapshot.player.level == 1
        assert snapshot.inventory == []

    def test_malformed_fields_fall_back(self):
        """Bad fields take defaults while good neighbours survive."""
        snapshot = parse_snapshot({
            "wave": "abc",
            "play_time": 42.5,
            "player": {"gold": -5, "level": 3, "skill_points": "many"},
        })

        assert snapshot.wave == 1
        assert snapshot.play_time == 42.5
        assert snapshot.player.gold == 0
        assert snapshot.player.level == 3
        assert snapshot.player.skill_points == 0

    def test_json_string(self):
        snapshot = parse_snapshot(json.dumps({"wave": 4, "auto_equip_enabled": False}))

        assert snapshot.wave == 4
        assert snapshot.auto_equip_enabled is False

    def test_invalid_json(self):
        assert parse_snapshot("{not json").wave == 1

    def test_non_object(self):
        assert parse_snapshot([1, 2, 3]).player.level == 1
        assert parse_snapshot(None).wave == 1

    def test_bad_section_type(self):
        snapshot = parse_snapshot({"player": "hero", "progress": 7, "inventory": "bag"})

        assert snapshot.player.level == 1
        assert snapshot.progress.essence == 0
        assert snapshot.inventory == []

    def test_malformed_items_dropped(self):
        snapshot = parse_snapshot({
            "inventory": [item_dict(), {"name": "No Slot"}, None, item_dict("Ring", "ring")],
        })

        assert [i.name if i else None for i in snapshot.inventory] == ["Saved Helm", None, None, "Ring"]

    def test_equipped_keyed_by_item_slot(self):
        snapshot = parse_snapshot({"equipped": {"weapon": item_dict("Boots", "feet")}})

        assert list(snapshot.equipped) == ["feet"]


class TestWorldFromSnapshot:
    """Rebuilding a world from a snapshot."""

    def test_inventory_padded(self, config, content):
        world = world_from_snapshot(parse_snapshot({"inventory": [item_dict()]}), config, content)

        assert len(world.inventory) == config.inventory_slots
        assert world.inventory[0].name == "Saved Helm"
        assert world.inventory[1] is None

    def test_inventory_truncated(self, config, content):
        raw = {"inventory": [item_dict(f"Helm {i}") for i in range(25)]}
        world = world_from_snapshot(parse_snapshot(raw), config, content)

        assert len(world.inventory) == config.inventory_slots

    def test_base_stats_from_progress(self, config, content):
        """Base stats come from upgrade levels, not from the save."""
        raw = {"progress": {"upgrade_levels": {"attack": 2}}}
        world = world_from_snapshot(parse_snapshot(raw), config, content)

        assert world.player.base.attack == 14
        assert world.derived.attack == 14

    def test_unknown_entries_dropped(self, config, content):
        raw = {
            "skill_levels": {"strength_training": 99, "fireball": 3, "iron_skin": 0},
            "progress": {"upgrade_levels": {"luck": 4, "defense": 500}},
        }
        world = world_from_snapshot(parse_snapshot(raw), config, content)

        assert world.skill_levels == {"strength_training": 10}
        assert world.progress.upgrade_levels == {"defense": 30}

    def test_missing_hp_means_full(self, config, content):
        world = world_from_snapshot(GameSnapshot(), config, content)

        assert world.player.hp == world.derived.max_hp

    def test_zero_hp_means_full(self, config, content):
        world = world_from_snapshot(parse_snapshot({"player": {"hp": 0}}), config, content)

        assert world.player.hp == world.derived.max_hp

    def test_partial_hp_kept(self, config, content):
        world = world_from_snapshot(parse_snapshot({"player": {"hp": 40}}), config, content)

        assert world.player.hp == 40

    def test_wave_respawns(self, config, content):
        world = world_from_snapshot(parse_snapshot({"wave": 6}), config, content)

        assert world.wave.number == 6
        assert world.wave.phase == WavePhase.SPAWNING
        assert world.monsters == []
        assert not world.is_game_over

    def test_experience_threshold_derived(self, config, content):
        world = world_from_snapshot(parse_snapshot({"player": {"level": 3}}), config, content)

        assert world.player.level == 3
        assert world.player.experience_to_next_level == 144
