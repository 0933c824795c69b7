"""World state for a Diablock session.

WorldState is the single structure a tick reads and produces. It owns the
player, the monster roster, wave progress, inventory, equipment, learned
skills, shop stock, run statistics and persistent progress.
"""

from dataclasses import dataclass, field, fields
from enum import Enum, auto
from typing import Dict, List, Optional, TYPE_CHECKING

from diablock.combat.entities import Monster, PlayerState
from diablock.core.progression import PersistentProgress, base_stats_for_run
from diablock.core.stat_calculator import DerivedStats, StatCalculator, collect_modifiers
from diablock.data.models import Item, ItemSlot

if TYPE_CHECKING:
    from diablock.core.config import GameConfig
    from diablock.data.content import GameContent


class WavePhase(Enum):
    """Wave director state."""

    SPAWNING = auto()  # Roster for the current wave not yet spawned
    ACTIVE = auto()  # Monsters alive
    CLEARED = auto()  # Wave beaten, next wave spawns on the next tick


@dataclass
class WaveState:
    """Progress through the infinite wave sequence."""

    number: int = 1
    phase: WavePhase = WavePhase.SPAWNING
    boss_instance_id: Optional[str] = None
    initialized: bool = False  # A roster has been spawned for this wave


@dataclass
class SessionStats:
    """Run-scoped counters."""

    monsters_killed: int = 0
    bosses_defeated: int = 0
    gold_earned: int = 0
    experience_gained: int = 0
    enhancement_stones_acquired: int = 0
    damage_dealt: int = 0
    damage_taken: int = 0
    items_looted: int = 0
    items_enhanced: int = 0
    skills_learned: int = 0
    play_time: float = 0.0
    highest_wave_reached_this_session: int = 1

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class WorldState:
    """Complete simulation state."""

    player: PlayerState
    derived: DerivedStats = field(default_factory=DerivedStats)
    monsters: List[Monster] = field(default_factory=list)
    wave: WaveState = field(default_factory=WaveState)

    inventory: List[Optional[Item]] = field(default_factory=list)
    equipped: Dict[ItemSlot, Item] = field(default_factory=dict)
    skill_levels: Dict[str, int] = field(default_factory=dict)
    shop: List[Item] = field(default_factory=list)

    progress: PersistentProgress = field(default_factory=PersistentProgress)
    stats: SessionStats = field(default_factory=SessionStats)

    tick: int = 0
    game_time: float = 0.0
    is_game_over: bool = False
    auto_equip_enabled: bool = True
    auto_learn_skill_enabled: bool = True

    def get_monster(self, monster_id: Optional[str]) -> Optional[Monster]:
        if monster_id is None:
            return None
        for monster in self.monsters:
            if monster.id == monster_id:
                return monster
        return None

    @property
    def live_monsters(self) -> List[Monster]:
        return [m for m in self.monsters if m.is_alive]

    def skill_level(self, skill_id: str) -> int:
        return self.skill_levels.get(skill_id, 0)

    def free_inventory_index(self) -> Optional[int]:
        for index, item in enumerate(self.inventory):
            if item is None:
                return index
        return None


def create_player(
    config: "GameConfig",
    content: "GameContent",
    progress: PersistentProgress,
    gold: int = 0,
) -> PlayerState:
    """Fresh level-1 player whose base stats include permanent upgrades."""
    base = base_stats_for_run(config, content, progress)
    return PlayerState(
        base=base,
        hp=base.max_hp,
        gold=gold,
        experience_to_next_level=config.base_experience,
    )


def new_world(
    config: "GameConfig",
    content: "GameContent",
    progress: Optional[PersistentProgress] = None,
) -> WorldState:
    """World for a brand-new game: empty inventory, wave 1, starting gold."""
    progress = progress or PersistentProgress()
    return WorldState(
        player=create_player(config, content, progress, gold=config.initial_gold),
        inventory=[None] * config.inventory_slots,
        progress=progress,
    )


def recompute_derived_stats(
    world: WorldState,
    config: "GameConfig",
    content: "GameContent",
) -> DerivedStats:
    """Refresh the player's derived stats and clamp health to the new maximum."""
    modifiers = collect_modifiers(
        world.equipped,
        world.skill_levels,
        content.skills,
        config.enhancement_bonus_per_level,
    )
    world.derived = StatCalculator(config).calculate(
        world.player.base,
        world.player.hp,
        modifiers,
        world.player.effects,
    )
    world.player.hp = world.derived.hp
    return world.derived
