"""Save snapshots for Diablock.

A snapshot holds the run-scoped player state, inventory, equipment, skill
levels, the current wave, play time, the automation toggles and the
persistent progress. Loading is tolerant: every field is validated on its
own and falls back to its default when missing or malformed. Base stats
are always re-derived from the loaded progress, never trusted from disk.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar, TYPE_CHECKING

from pydantic import BaseModel, Field, ValidationError

from diablock.core.economy import EconomyCalculator
from diablock.core.game_state import (
    SessionStats,
    WaveState,
    WorldState,
    create_player,
    recompute_derived_stats,
)
from diablock.core.progression import PersistentProgress
from diablock.data.models import Item, ItemSlot

if TYPE_CHECKING:
    from diablock.core.config import GameConfig
    from diablock.data.content import GameContent

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

ModelT = TypeVar("ModelT", bound=BaseModel)


class PlayerSnapshot(BaseModel):
    """Run-scoped player fields."""
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    experience_to_next_level: Optional[int] = Field(default=None, ge=1)
    gold: int = Field(default=0, ge=0)
    skill_points: int = Field(default=0, ge=0)
    hp: Optional[float] = None
    enhancement_stones: int = Field(default=0, ge=0)


class ProgressSnapshot(BaseModel):
    """Persistent meta-progression."""
    essence: int = Field(default=0, ge=0)
    upgrade_levels: Dict[str, int] = Field(default_factory=dict)
    highest_wave_achieved: int = Field(default=0, ge=0)


class GameSnapshot(BaseModel):
    """Everything needed to resume a session."""
    version: int = SNAPSHOT_VERSION
    player: PlayerSnapshot = Field(default_factory=PlayerSnapshot)
    inventory: List[Optional[Item]] = Field(default_factory=list)
    equipped: Dict[ItemSlot, Item] = Field(default_factory=dict)
    skill_levels: Dict[str, int] = Field(default_factory=dict)
    wave: int = Field(default=1, ge=1)
    play_time: float = Field(default=0.0, ge=0.0)
    auto_equip_enabled: bool = True
    auto_learn_skill_enabled: bool = True
    progress: ProgressSnapshot = Field(default_factory=ProgressSnapshot)


# =========================================================================
# WORLD -> SNAPSHOT
# =========================================================================

def snapshot_from_world(world: WorldState) -> GameSnapshot:
    player = world.player
    return GameSnapshot(
        player=PlayerSnapshot(
            level=player.level,
            experience=player.experience,
            experience_to_next_level=player.experience_to_next_level,
            gold=player.gold,
            skill_points=player.skill_points,
            hp=player.hp,
            enhancement_stones=player.enhancement_stones,
        ),
        inventory=list(world.inventory),
        equipped=dict(world.equipped),
        skill_levels={k: v for k, v in world.skill_levels.items() if v > 0},
        wave=max(1, world.wave.number),
        play_time=world.stats.play_time,
        auto_equip_enabled=world.auto_equip_enabled,
        auto_learn_skill_enabled=world.auto_learn_skill_enabled,
        progress=ProgressSnapshot(**world.progress.to_dict()),
    )


# =========================================================================
# RAW DATA -> SNAPSHOT (tolerant)
# =========================================================================

_NESTED_FIELDS = ("player", "progress", "inventory", "equipped")


def _coerce_fields(
    model: Type[ModelT],
    raw: Any,
    label: str,
    skip: tuple = (),
) -> ModelT:
    """Validate each field of ``raw`` on its own, dropping the bad ones."""
    if raw is None:
        return model()
    if not isinstance(raw, dict):
        logger.warning("Snapshot section %r is not an object, using defaults", label)
        return model()

    values: Dict[str, Any] = {}
    for name in model.model_fields:
        if name in skip or name not in raw:
            continue
        try:
            parsed = model.model_validate({name: raw[name]})
        except ValidationError:
            logger.warning("Ignoring malformed snapshot field %s.%s", label, name)
            continue
        values[name] = getattr(parsed, name)
    return model(**values)


def _parse_item(raw: Any, label: str) -> Optional[Item]:
    if raw is None:
        return None
    try:
        return Item.model_validate(raw)
    except ValidationError:
        logger.warning("Dropping malformed item at %s", label)
        return None


def _parse_inventory(raw: Any) -> List[Optional[Item]]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("Snapshot inventory is not a list, starting empty")
        return []
    return [_parse_item(entry, f"inventory[{index}]") for index, entry in enumerate(raw)]


def _parse_equipped(raw: Any) -> Dict[ItemSlot, Item]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Snapshot equipment is not an object, starting empty")
        return {}

    equipped: Dict[ItemSlot, Item] = {}
    for key, entry in raw.items():
        item = _parse_item(entry, f"equipped.{key}")
        if item is None:
            continue
        # The item's own slot wins over a mislabelled key
        equipped[ItemSlot(item.slot)] = item
    return equipped


def parse_snapshot(raw: Any) -> GameSnapshot:
    """
    Build a snapshot from untrusted data.

    Args:
        raw: A dict, a JSON string, or anything else (treated as empty).

    Returns:
        A GameSnapshot where every unreadable field holds its default.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Snapshot is not valid JSON, using defaults")
            raw = {}
    if not isinstance(raw, dict):
        logger.warning("Snapshot is not an object, using defaults")
        raw = {}

    snapshot = _coerce_fields(GameSnapshot, raw, "snapshot", skip=_NESTED_FIELDS)
    snapshot.player = _coerce_fields(PlayerSnapshot, raw.get("player"), "player")
    snapshot.progress = _coerce_fields(ProgressSnapshot, raw.get("progress"), "progress")
    snapshot.inventory = _parse_inventory(raw.get("inventory"))
    snapshot.equipped = _parse_equipped(raw.get("equipped"))
    return snapshot


# =========================================================================
# SNAPSHOT -> WORLD
# =========================================================================

def world_from_snapshot(
    snapshot: GameSnapshot,
    config: "GameConfig",
    content: "GameContent",
) -> WorldState:
    """
    Rebuild a world from a snapshot.

    Monsters, effects and position are not persisted; the loaded wave
    spawns fresh on the next tick.
    """
    progress = PersistentProgress(
        essence=snapshot.progress.essence,
        upgrade_levels=_valid_upgrade_levels(snapshot.progress.upgrade_levels, content),
        highest_wave_achieved=snapshot.progress.highest_wave_achieved,
    )

    saved = snapshot.player
    player = create_player(config, content, progress, gold=saved.gold)
    player.level = saved.level
    player.experience = saved.experience
    player.experience_to_next_level = (
        saved.experience_to_next_level
        or EconomyCalculator(config).experience_to_next_level(saved.level)
    )
    player.skill_points = saved.skill_points
    player.enhancement_stones = saved.enhancement_stones

    inventory = list(snapshot.inventory[: config.inventory_slots])
    if len(snapshot.inventory) > config.inventory_slots:
        logger.warning(
            "Snapshot inventory has %d slots, keeping the first %d",
            len(snapshot.inventory), config.inventory_slots,
        )
    inventory.extend([None] * (config.inventory_slots - len(inventory)))

    world = WorldState(
        player=player,
        wave=WaveState(number=snapshot.wave),
        inventory=inventory,
        equipped=dict(snapshot.equipped),
        skill_levels=_valid_skill_levels(snapshot.skill_levels, content),
        progress=progress,
        stats=SessionStats(
            play_time=snapshot.play_time,
            highest_wave_reached_this_session=snapshot.wave,
        ),
        game_time=snapshot.play_time,
        auto_equip_enabled=snapshot.auto_equip_enabled,
        auto_learn_skill_enabled=snapshot.auto_learn_skill_enabled,
    )

    recompute_derived_stats(world, config, content)
    if saved.hp is not None and saved.hp > 0:
        world.player.hp = min(saved.hp, world.derived.max_hp)
    else:
        world.player.hp = world.derived.max_hp
    world.derived.hp = world.player.hp
    return world


def _valid_skill_levels(levels: Dict[str, int], content: "GameContent") -> Dict[str, int]:
    valid: Dict[str, int] = {}
    for skill_id, level in levels.items():
        skill = content.get_skill(skill_id)
        if skill is None:
            logger.warning("Dropping unknown skill %r from snapshot", skill_id)
            continue
        level = min(max(0, level), skill.max_level)
        if level > 0:
            valid[skill_id] = level
    return valid


def _valid_upgrade_levels(levels: Dict[str, int], content: "GameContent") -> Dict[str, int]:
    valid: Dict[str, int] = {}
    for key, level in levels.items():
        upgrade = content.get_upgrade(key)
        if upgrade is None:
            logger.warning("Dropping unknown permanent upgrade %r from snapshot", key)
            continue
        valid[key] = min(max(0, level), upgrade.max_level)
    return valid
