"""Game session for Diablock.

A GameSession owns one world together with its random stream, config,
content tables and event feeds. Player commands are applied between
ticks; every command is validated first and changes nothing when it is
rejected.

Usage:
    session = GameSession(seed=42)
    session.tick(10)
    session.learn_skill("strength_training")
    snapshot = session.snapshot()
"""

import logging
import math
import random
import uuid
from typing import Any, Dict, List, Optional, Union

from diablock.combat.combat_engine import CombatEngine
from diablock.core.config import GameConfig
from diablock.core.economy import EconomyCalculator
from diablock.core.events import EventFeed
from diablock.core.game_state import (
    WorldState,
    create_player,
    new_world,
    recompute_derived_stats,
)
from diablock.core.progression import PersistentProgress, base_stats_for_run
from diablock.core.results import CommandResult
from diablock.core.save_state import GameSnapshot, parse_snapshot, snapshot_from_world, world_from_snapshot
from diablock.core.shop import Shop
from diablock.core.skill_tree import SkillTree
from diablock.data.content import GameContent, load_default_content
from diablock.data.models import ItemSlot

logger = logging.getLogger(__name__)


class GameSession:
    """Single-player session: world, commands, ticking and persistence."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        content: Optional[GameContent] = None,
        seed: Optional[int] = None,
        session_id: Optional[str] = None,
    ):
        self.id = session_id or uuid.uuid4().hex[:12]
        self.config = config or GameConfig()
        self.content = content if content is not None else load_default_content()
        self.seed = seed
        self.rng = random.Random(seed)

        self.engine = CombatEngine(self.config, self.content, self.rng)
        self.items = self.engine.item_manager
        self.economy = EconomyCalculator(self.config)
        self.shop = Shop(self.config, self.items)
        self.skill_tree = SkillTree(self.content)
        self.feed = EventFeed(self.config)

        self.world = self._start_world(new_world(self.config, self.content))
        logger.info("Session %s created (seed=%s)", self.id, seed)

    def _start_world(self, world: WorldState) -> WorldState:
        recompute_derived_stats(world, self.config, self.content)
        self.shop.refresh(world, self.rng, free=True)
        return world

    # =========================================================================
    # TICKING
    # =========================================================================

    def tick(self, count: int = 1) -> List[Dict[str, Any]]:
        """
        Advance the simulation.

        Stops early once the player dies; a finished run stays frozen
        until ``restart_run``.

        Returns:
            Every event produced, in order.
        """
        events: List[Dict[str, Any]] = []
        for _ in range(max(0, count)):
            if self.world.is_game_over:
                break
            result = self.engine.step_world(self.world)
            self.world = result.world
            events.extend(result.events)
            events.extend(self._run_automation())
        self.feed.publish(events)
        return events

    def _run_automation(self) -> List[Dict[str, Any]]:
        world = self.world
        if world.is_game_over:
            return []

        events: List[Dict[str, Any]] = []
        changed = False
        if world.auto_equip_enabled:
            result = self.items.auto_equip(world)
            if result is not None:
                changed = True
                events.append({"tick": world.tick, "type": "auto_equip", "message": result.message})
        if world.auto_learn_skill_enabled:
            for skill_id in self.skill_tree.auto_learn(world):
                changed = True
                events.append({
                    "tick": world.tick,
                    "type": "auto_learn",
                    "skill_id": skill_id,
                    "level": world.skill_level(skill_id),
                })
        if changed:
            recompute_derived_stats(world, self.config, self.content)
        return events

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def _finish(self, command: str, result: CommandResult) -> CommandResult:
        if result.success:
            recompute_derived_stats(self.world, self.config, self.content)
            if result.message:
                self.feed.log(result.message)
        else:
            logger.debug("Session %s: %s rejected: %s", self.id, command, result.message)
        return result

    def equip(self, inventory_index: int) -> CommandResult:
        return self._finish("equip", self.items.equip(self.world, inventory_index))

    def unequip(self, slot: Union[str, ItemSlot]) -> CommandResult:
        try:
            item_slot = ItemSlot(slot)
        except ValueError:
            return self._finish("unequip", CommandResult.rejected(f"Unknown slot: {slot}"))
        return self._finish("unequip", self.items.unequip(self.world, item_slot))

    def learn_skill(self, skill_id: str) -> CommandResult:
        return self._finish("learn_skill", self.skill_tree.learn(self.world, skill_id))

    def buy(self, shop_index: int) -> CommandResult:
        return self._finish("buy", self.shop.buy(self.world, shop_index))

    def sell(self, inventory_index: int) -> CommandResult:
        return self._finish("sell", self.shop.sell(self.world, inventory_index))

    def refresh_shop(self, free: bool = False) -> CommandResult:
        return self._finish("refresh_shop", self.shop.refresh(self.world, self.rng, free=free))

    def enhance_item(self, item_id: str, location: Optional[str] = None) -> CommandResult:
        return self._finish("enhance_item", self.items.enhance(self.world, item_id, location))

    def set_automation(
        self,
        auto_equip: Optional[bool] = None,
        auto_learn: Optional[bool] = None,
    ) -> CommandResult:
        if auto_equip is not None:
            self.world.auto_equip_enabled = auto_equip
        if auto_learn is not None:
            self.world.auto_learn_skill_enabled = auto_learn
        return CommandResult.ok(
            f"Auto-equip {'on' if self.world.auto_equip_enabled else 'off'}, "
            f"auto-learn {'on' if self.world.auto_learn_skill_enabled else 'off'}"
        )

    def upgrade_permanent_stat(self, key: str) -> CommandResult:
        """
        Spend essence on a permanent base-stat upgrade.

        The current run's base stats are rebuilt from the new levels.
        """
        upgrade = self.content.get_upgrade(key)
        if upgrade is None:
            return self._finish("upgrade", CommandResult.rejected(f"Unknown upgrade: {key}"))

        progress = self.world.progress
        level = progress.level_of(str(upgrade.key))
        if level >= upgrade.max_level:
            return self._finish("upgrade", CommandResult.rejected(f"{upgrade.name} is already at max level"))
        cost = upgrade.cost(level)
        if progress.essence < cost:
            return self._finish("upgrade", CommandResult.rejected(f"Not enough essence ({cost} needed)"))

        progress.essence -= cost
        progress.upgrade_levels[str(upgrade.key)] = level + 1
        self.world.player.base = base_stats_for_run(self.config, self.content, progress)
        return self._finish(
            "upgrade",
            CommandResult.ok(f"{upgrade.name} upgraded to level {level + 1}", data=level + 1),
        )

    def restart_run(self) -> CommandResult:
        """
        Start a new run after death.

        Essence is granted from the best wave reached. Gold, inventory,
        equipment and persistent progress carry over; level, skills,
        enhancement stones and run statistics start fresh.
        """
        old = self.world
        if not old.is_game_over:
            return self._finish("restart_run", CommandResult.rejected("The current run is still in progress"))

        progress = old.progress
        essence = math.floor(progress.highest_wave_achieved * self.config.wave_clear_essence_multiplier)
        progress.essence += essence

        world = WorldState(
            player=create_player(self.config, self.content, progress, gold=old.player.gold),
            inventory=list(old.inventory),
            equipped=dict(old.equipped),
            progress=progress,
            auto_equip_enabled=old.auto_equip_enabled,
            auto_learn_skill_enabled=old.auto_learn_skill_enabled,
        )
        self.world = self._start_world(world)
        self.feed.clear()

        message = f"New run started (+{essence} essence from wave progress)"
        logger.info("Session %s: %s", self.id, message)
        return self._finish("restart_run", CommandResult.ok(message, data=essence))

    def hard_reset(self) -> CommandResult:
        """Wipe everything, persistent progress included."""
        self.world = self._start_world(new_world(self.config, self.content, PersistentProgress()))
        self.feed.clear()
        logger.info("Session %s: hard reset", self.id)
        return self._finish("hard_reset", CommandResult.ok("All progress has been reset"))

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def snapshot(self) -> GameSnapshot:
        return snapshot_from_world(self.world)

    def load(self, raw: Union[GameSnapshot, Dict[str, Any], str, bytes, None]) -> CommandResult:
        """Replace the world with a (possibly partial) snapshot."""
        snapshot = raw if isinstance(raw, GameSnapshot) else parse_snapshot(raw)
        self.world = self._start_world(world_from_snapshot(snapshot, self.config, self.content))
        self.feed.clear()
        return self._finish("load", CommandResult.ok(f"Loaded save at wave {self.world.wave.number}"))

    # =========================================================================
    # VIEWS
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Read-only view of the world for clients."""
        world = self.world
        player = world.player
        return {
            "session_id": self.id,
            "tick": world.tick,
            "game_time": world.game_time,
            "is_game_over": world.is_game_over,
            "wave": {
                "number": world.wave.number,
                "phase": world.wave.phase.name,
                "is_boss_wave": self.config.is_boss_wave(world.wave.number),
            },
            "player": {
                "level": player.level,
                "experience": player.experience,
                "experience_to_next_level": player.experience_to_next_level,
                "skill_points": player.skill_points,
                "gold": player.gold,
                "enhancement_stones": player.enhancement_stones,
                "hp": player.hp,
                "position": player.position.to_dict(),
                "engaged_monster_id": player.engaged_monster_id,
                "effects": [e.to_dict() for e in player.effects],
            },
            "stats": world.derived.to_dict(),
            "monsters": [m.to_dict() for m in world.monsters],
            "inventory": [item.model_dump(mode="json") if item else None for item in world.inventory],
            "equipped": {str(slot): item.model_dump(mode="json") for slot, item in world.equipped.items()},
            "skill_levels": dict(world.skill_levels),
            "shop": [item.model_dump(mode="json") for item in world.shop],
            "progress": world.progress.to_dict(),
            "session_stats": world.stats.to_dict(),
            "auto_equip_enabled": world.auto_equip_enabled,
            "auto_learn_skill_enabled": world.auto_learn_skill_enabled,
        }
