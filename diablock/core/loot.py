"""Loot & Kill Rewards for Diablock.

Every monster that reaches zero health, whatever killed it, goes through
the same pipeline: experience, gold (with skill and buff bonuses),
enhancement stones, boss essence, on-kill skill procs and an item roll.
"""

import logging
import random
from typing import Any, Dict, List, TYPE_CHECKING

from diablock.combat.skill_procs import ProcContext, ProcTrigger, SkillProcSystem
from diablock.combat.status_effects import StatusEffectType, strongest_potency
from diablock.core.economy import EconomyCalculator
from diablock.core.item_manager import ItemManager
from diablock.core.rounding import round_half_up

if TYPE_CHECKING:
    from diablock.combat.entities import Monster
    from diablock.core.config import GameConfig
    from diablock.core.game_state import WorldState

logger = logging.getLogger(__name__)


class LootSystem:
    """Grants kill rewards and clears dead monsters from the roster."""

    def __init__(
        self,
        config: "GameConfig",
        procs: SkillProcSystem,
        item_manager: ItemManager,
        rng: random.Random,
    ):
        self.config = config
        self.procs = procs
        self.items = item_manager
        self.economy = EconomyCalculator(config)
        self.rng = rng

    def process_kills(self, world: "WorldState") -> List[Dict[str, Any]]:
        """
        Reward and remove every dead monster.

        Returns:
            Reward events.
        """
        events: List[Dict[str, Any]] = []
        dead = [m for m in world.monsters if not m.is_alive]
        if not dead:
            return events

        for monster in dead:
            self.reward_kill(world, monster, events)

        dead_ids = {m.id for m in dead}
        world.monsters = [m for m in world.monsters if m.id not in dead_ids]
        if world.player.engaged_monster_id in dead_ids:
            world.player.reset_engagement()
        return events

    def reward_kill(self, world: "WorldState", monster: "Monster", events: List[Dict[str, Any]]) -> None:
        player = world.player
        stats = world.stats
        ctx = ProcContext(world=world, events=events, target=monster)

        stats.monsters_killed += 1
        if monster.is_boss:
            stats.bosses_defeated += 1

        # Experience
        level_up = self.economy.grant_experience(player, monster.experience)
        stats.experience_gained += monster.experience
        if level_up.levels_gained:
            message = f"Level up! You are now level {level_up.new_level}"
            logger.debug("Tick %d: %s", world.tick, message)
            events.append({
                "tick": world.tick,
                "type": "level_up",
                "level": level_up.new_level,
                "skill_points": level_up.skill_points_gained,
                "message": message,
            })

        # Gold, each bonus rounded before the next applies
        ctx.gold = self.economy.roll_gold(self.rng, monster.gold_drop)
        self.procs.fire(ProcTrigger.GOLD_ROLL, ctx)
        gold_find = strongest_potency(player.effects, StatusEffectType.GOLD_FIND_BUFF)
        if gold_find > 0:
            ctx.gold = round_half_up(ctx.gold * (1 + gold_find))
        gold = int(ctx.gold)
        player.gold += gold
        stats.gold_earned += gold

        # Enhancement stones
        stones = 0
        if self.rng.random() < self.config.enhancement_stone_drop_chance:
            low, high = self.config.enhancement_stone_drop_amount
            stones = self.rng.randint(low, high)
            player.enhancement_stones += stones
            stats.enhancement_stones_acquired += stones

        # Boss essence
        essence = 0
        if monster.is_boss:
            essence = self.config.boss_essence_drop
            world.progress.essence += essence

        kill_message = f"{monster.name} defeated: +{monster.experience} XP, +{gold} gold"
        if stones:
            kill_message += f", +{stones} stones"
        if essence:
            kill_message += f", +{essence} essence"
        events.append({
            "tick": world.tick,
            "type": "monster_killed",
            "monster_id": monster.id,
            "is_boss": monster.is_boss,
            "experience": monster.experience,
            "gold": gold,
            "enhancement_stones": stones,
            "essence": essence,
            "message": kill_message,
        })
        if monster.is_boss:
            logger.info("Tick %d: boss %s defeated (+%d essence)", world.tick, monster.name, essence)

        self.procs.fire(ProcTrigger.ON_KILL, ctx)
        self._roll_item(world, monster, events)

    def _roll_item(self, world: "WorldState", monster: "Monster", events: List[Dict[str, Any]]) -> None:
        chance = self.config.boss_loot_drop_chance if monster.is_boss else self.config.loot_drop_chance
        if self.rng.random() >= chance:
            return

        min_rarity = self.config.boss_loot_min_rarity_index if monster.is_boss else 0
        item = self.items.generator.generate(world.player.level, self.rng, min_rarity)
        index = self.items.add_to_inventory(world, item)
        if index is None:
            events.append({
                "tick": world.tick,
                "type": "loot_lost",
                "item_name": item.name,
                "message": f"Inventory full: {item.name} was lost",
            })
            return

        world.stats.items_looted += 1
        logger.debug("Tick %d: looted %s", world.tick, item.name)
        events.append({
            "tick": world.tick,
            "type": "loot",
            "item_id": item.id,
            "item_name": item.name,
            "rarity": str(item.rarity),
            "message": f"Looted {item.name}",
        })
