"""Wave Director for Diablock.

Drives the infinite wave cycle SPAWNING -> ACTIVE -> CLEARED -> SPAWNING.
Every ``boss_wave_interval``-th wave spawns a single boss (round-robin over
the boss table) instead of a group of regular monsters.
"""

import logging
import math
import random
from typing import Any, Dict, List, Optional, Set, TYPE_CHECKING

from diablock.combat.entities import Monster
from diablock.combat.geometry import random_edge_point
from diablock.core.game_state import WavePhase
from diablock.core.rounding import round_half_up

if TYPE_CHECKING:
    from diablock.core.config import GameConfig
    from diablock.core.game_state import WorldState
    from diablock.data.content import GameContent
    from diablock.data.models import MonsterDefinition

logger = logging.getLogger(__name__)


class WaveDirector:
    """Manage wave spawning and clear detection."""

    def __init__(
        self,
        config: "GameConfig",
        content: "GameContent",
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.content = content
        self.rng = rng or random.Random()
        self._warned_waves: Set[int] = set()

    # =========================================================================
    # WAVE MATH
    # =========================================================================

    def is_boss_wave(self, wave: int) -> bool:
        return self.config.is_boss_wave(wave)

    def monster_count(self, wave: int) -> int:
        """Number of regular monsters for a non-boss wave."""
        cfg = self.config
        if wave in cfg.wave_monster_count_overrides:
            count = cfg.wave_monster_count_overrides[wave]
        else:
            count = max(
                cfg.min_monsters_per_wave,
                math.floor(cfg.base_monster_count + max(0, wave - 1) * cfg.monsters_per_wave_increment),
            )
        return max(0, min(count, cfg.max_monsters_on_screen))

    def scaling_multiplier(self, wave: int, is_boss: bool) -> float:
        rate = self.config.boss_wave_scaling_rate if is_boss else self.config.wave_scaling_rate
        return 1 + (wave - 1) * rate

    def boss_for_wave(self, wave: int) -> Optional["MonsterDefinition"]:
        """Round-robin boss choice: first boss wave gets the first boss."""
        bosses = self.content.boss_monsters
        if not bosses:
            return None
        index = (wave // self.config.boss_wave_interval - 1) % len(bosses)
        return bosses[index]

    # =========================================================================
    # SPAWNING
    # =========================================================================

    def create_monster(self, definition: "MonsterDefinition", wave: int) -> Monster:
        """Instantiate a monster scaled to the wave, placed on a map edge."""
        multiplier = self.scaling_multiplier(wave, definition.is_boss)
        hp = round_half_up(definition.hp * multiplier)
        y = self.config.monster_y_scale_factor * definition.size_scale
        return Monster(
            definition_id=definition.id,
            name=definition.name,
            hp=hp,
            max_hp=hp,
            attack=round_half_up(definition.attack * multiplier),
            defense=round_half_up(definition.defense * multiplier),
            experience=definition.experience,
            gold_drop=definition.gold_drop,
            position=random_edge_point(self.rng, self.config, y),
            movement_speed=self.config.monster_movement_speed,
            is_boss=definition.is_boss,
            size_scale=definition.size_scale,
            applies_effect=definition.applies_effect,
            target_update_cooldown=self.rng.randint(1, self.config.movement_target_update_cooldown_ticks),
        )

    def build_roster(self, wave: int) -> List[Monster]:
        if self.is_boss_wave(wave):
            boss = self.boss_for_wave(wave)
            if boss is None:
                self._warn_once(wave, "No boss definitions available for boss wave %d", wave)
                return []
            return [self.create_monster(boss, wave)]

        count = self.monster_count(wave)
        if count <= 0:
            return []
        normals = self.content.normal_monsters
        if not normals:
            self._warn_once(wave, "No monster definitions available for wave %d", wave)
            return []
        return [self.create_monster(self.rng.choice(normals), wave) for _ in range(count)]

    def spawn(self, world: "WorldState") -> List[Dict[str, Any]]:
        """Spawn the roster for the current wave."""
        wave = world.wave
        roster = self.build_roster(wave.number)
        boss_wave = self.is_boss_wave(wave.number)

        if not roster and (boss_wave or self.monster_count(wave.number) > 0):
            # Missing content: stay in SPAWNING and retry next tick
            return []

        world.monsters.extend(roster)
        wave.phase = WavePhase.ACTIVE
        wave.initialized = True
        wave.boss_instance_id = roster[0].id if boss_wave else None

        if boss_wave:
            message = f"Wave {wave.number}: {roster[0].name} appears!"
        else:
            message = f"Wave {wave.number}: {len(roster)} monsters approach"
        logger.info("Tick %d: %s", world.tick, message)
        return [{
            "tick": world.tick,
            "type": "wave_spawned",
            "wave": wave.number,
            "is_boss_wave": boss_wave,
            "count": len(roster),
            "message": message,
        }]

    # =========================================================================
    # CLEAR DETECTION
    # =========================================================================

    def is_cleared(self, world: "WorldState") -> bool:
        wave = world.wave
        if wave.phase != WavePhase.ACTIVE or not wave.initialized:
            return False
        if self.is_boss_wave(wave.number) and wave.boss_instance_id is not None:
            boss = world.get_monster(wave.boss_instance_id)
            return boss is None or not boss.is_alive
        return not world.live_monsters

    def clear(self, world: "WorldState") -> List[Dict[str, Any]]:
        """Advance past the current wave and raise the high-water mark."""
        wave = world.wave
        completed = wave.number
        was_boss = self.is_boss_wave(completed)

        world.progress.record_wave(completed)
        wave.number += 1
        wave.phase = WavePhase.CLEARED
        wave.initialized = False
        wave.boss_instance_id = None
        world.stats.highest_wave_reached_this_session = max(
            world.stats.highest_wave_reached_this_session, wave.number
        )

        message = f"Boss wave {completed} cleared!" if was_boss else f"Wave {completed} cleared"
        logger.info("Tick %d: %s", world.tick, message)
        return [{
            "tick": world.tick,
            "type": "wave_cleared",
            "wave": completed,
            "is_boss_wave": was_boss,
            "message": message,
        }]

    def update(self, world: "WorldState") -> List[Dict[str, Any]]:
        """
        One director step.

        A wave cleared this tick spawns its successor on the next tick.
        """
        if world.is_game_over:
            return []
        if world.wave.phase == WavePhase.ACTIVE:
            if self.is_cleared(world):
                return self.clear(world)
            return []
        return self.spawn(world)

    def _warn_once(self, wave: int, message: str, *args: Any) -> None:
        if wave not in self._warned_waves:
            self._warned_waves.add(wave)
            logger.warning(message, *args)
