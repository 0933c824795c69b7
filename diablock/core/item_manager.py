"""Item Manager for Diablock.

Generates random equipment and moves items between inventory and
equipment slots. Handles enhancement and auto-equip scoring.
"""

import logging
import math
import random
from typing import List, Optional, Tuple, TYPE_CHECKING

from diablock.core.economy import EconomyCalculator
from diablock.core.results import CommandResult
from diablock.data.models import (
    CORE_STATS,
    RARITY_ORDER,
    Item,
    ItemSlot,
    ModifierType,
    Rarity,
    StatModifier,
    StatName,
)

if TYPE_CHECKING:
    from diablock.core.config import GameConfig
    from diablock.core.game_state import WorldState
    from diablock.data.content import GameContent

logger = logging.getLogger(__name__)


class ItemGenerator:
    """Rolls random items from the per-slot base table."""

    # Chance for each potential affix to actually roll
    AFFIX_CHANCE = 0.7
    # Chance for an attack/defense/max_hp affix to be a percent bonus
    PERCENT_AFFIX_CHANCE = 0.3

    AFFIX_STATS: Tuple[StatName, ...] = tuple(StatName)

    def __init__(self, content: "GameContent"):
        self.content = content

    def generate(
        self,
        level: int,
        rng: random.Random,
        min_rarity_index: int = 0,
    ) -> Item:
        """
        Generate a random item.

        Args:
            level: Item level driving affix values and value.
            rng: Random number generator.
            min_rarity_index: Lowest rarity allowed (index into RARITY_ORDER).

        Returns:
            A new Item.
        """
        level = max(1, level)
        slot = rng.choice(list(ItemSlot))
        floor_index = min(max(0, min_rarity_index), len(RARITY_ORDER) - 1)
        rarity = rng.choice(RARITY_ORDER[floor_index:])
        ri = rarity.index

        base = self.content.get_item_base(slot)
        modifiers: List[StatModifier] = [m.model_copy() for m in base.modifiers] if base else []

        for _ in range(ri + 1):
            if rng.random() >= self.AFFIX_CHANCE:
                continue
            affix = self._roll_affix(level, ri, rng)
            self._merge(modifiers, affix)

        gold_value = math.floor(level * 5 * (ri + 1) * (1 + len(modifiers) * 0.5))
        if rarity == Rarity.LEGENDARY:
            gold_value *= 2

        base_name = base.name if base else slot.value.title()
        return Item(
            name=f"{rarity.value.title()} {base_name}",
            slot=slot,
            rarity=rarity,
            modifiers=modifiers,
            level_requirement=max(1, level - 2 + ri),
            gold_value=gold_value,
        )

    def _roll_affix(self, level: int, ri: int, rng: random.Random) -> StatModifier:
        stat = rng.choice(self.AFFIX_STATS)
        tier = ri + 1

        if stat in CORE_STATS:
            if rng.random() < self.PERCENT_AFFIX_CHANCE:
                value = (rng.random() * 0.05 + 0.01) * tier
                return StatModifier(stat=stat, type=ModifierType.PERCENT, value=round(value, 3))
            value = math.floor((rng.random() * 5 + 1) * (level / 2 + 1) * tier)
            return StatModifier(stat=stat, type=ModifierType.FLAT, value=value)

        if stat == StatName.CRIT_CHANCE:
            value = (rng.random() * 0.03 + 0.01) * tier
        elif stat == StatName.CRIT_DAMAGE:
            value = (rng.random() * 0.03 + 0.01) * tier * 10
        elif stat in (StatName.ATTACK_SPEED, StatName.MOVEMENT_SPEED):
            value = (rng.random() * 0.1 + 0.02) * tier
        else:  # Health regen
            value = (rng.random() + 0.1) * tier
        return StatModifier(stat=stat, type=ModifierType.FLAT, value=round(value, 3))

    @staticmethod
    def _merge(modifiers: List[StatModifier], affix: StatModifier) -> None:
        for index, existing in enumerate(modifiers):
            if existing.stat == affix.stat and existing.type == affix.type:
                modifiers[index] = existing.model_copy(
                    update={"value": round(existing.value + affix.value, 3)}
                )
                return
        modifiers.append(affix)


class ItemManager:
    """
    Inventory and equipment operations.

    Every command validates first and mutates only on success.
    """

    # Auto-equip weights for flat modifiers
    FLAT_SCORE_WEIGHTS = {
        StatName.ATTACK: 2.0,
        StatName.MAX_HP: 0.5,
        StatName.DEFENSE: 1.5,
    }
    PERCENT_SCORE_WEIGHT = 0.2
    RARITY_SCORE = 10
    ENHANCEMENT_SCORE = 5

    def __init__(self, config: "GameConfig", content: "GameContent"):
        self.config = config
        self.content = content
        self.economy = EconomyCalculator(config)
        self.generator = ItemGenerator(content)

    # =========================================================================
    # INVENTORY
    # =========================================================================

    def add_to_inventory(self, world: "WorldState", item: Item) -> Optional[int]:
        """Place an item in the first free slot. Returns the index, or None if full."""
        index = world.free_inventory_index()
        if index is None:
            return None
        world.inventory[index] = item
        return index

    def find_item(self, world: "WorldState", item_id: str) -> Tuple[Optional[str], Optional[Item]]:
        """Locate an item: ("equipped" | "inventory", item)."""
        for item in world.equipped.values():
            if item.id == item_id:
                return "equipped", item
        for item in world.inventory:
            if item is not None and item.id == item_id:
                return "inventory", item
        return None, None

    # =========================================================================
    # EQUIPMENT
    # =========================================================================

    def equip(self, world: "WorldState", inventory_index: int) -> CommandResult:
        """
        Equip the item at an inventory index.

        The previously equipped item in that slot moves into the freed
        inventory index.
        """
        if not 0 <= inventory_index < len(world.inventory):
            return CommandResult.rejected("Invalid inventory slot")
        item = world.inventory[inventory_index]
        if item is None:
            return CommandResult.rejected("No item in that inventory slot")

        if item.level_requirement and world.player.level < item.level_requirement:
            return CommandResult.rejected(
                f"Requires level {item.level_requirement} (current level {world.player.level})"
            )

        slot = ItemSlot(item.slot)
        previous = world.equipped.get(slot)
        world.equipped[slot] = item
        world.inventory[inventory_index] = previous
        return CommandResult.ok(f"Equipped {item.name}")

    def unequip(self, world: "WorldState", slot: ItemSlot) -> CommandResult:
        item = world.equipped.get(slot)
        if item is None:
            return CommandResult.rejected(f"Nothing equipped in {slot}")
        index = world.free_inventory_index()
        if index is None:
            return CommandResult.rejected("Inventory is full")

        del world.equipped[slot]
        world.inventory[index] = item
        return CommandResult.ok(f"Unequipped {item.name}")

    # =========================================================================
    # ENHANCEMENT
    # =========================================================================

    def enhance(
        self,
        world: "WorldState",
        item_id: str,
        location: Optional[str] = None,
    ) -> CommandResult:
        """
        Spend gold and enhancement stones to raise an item's enhancement level.

        Args:
            world: World to mutate on success.
            item_id: Item to enhance.
            location: "equipped" or "inventory"; searched in both if omitted.
        """
        found_location, item = self.find_item(world, item_id)
        if item is None or (location is not None and location != found_location):
            return CommandResult.rejected("Item not found")

        cost = self.economy.enhancement_cost(item, world.player.level)
        if cost is None:
            return CommandResult.rejected(f"{item.name} is already at maximum enhancement")
        if world.player.gold < cost.gold:
            return CommandResult.rejected(f"Not enough gold ({cost.gold} needed)")
        if world.player.enhancement_stones < cost.stones:
            return CommandResult.rejected(f"Not enough enhancement stones ({cost.stones} needed)")

        world.player.gold -= cost.gold
        world.player.enhancement_stones -= cost.stones
        enhanced = item.model_copy(update={"enhancement_level": item.enhancement_level + 1})
        self._replace(world, found_location, enhanced)
        world.stats.items_enhanced += 1
        return CommandResult.ok(
            f"{enhanced.name} enhanced to +{enhanced.enhancement_level}", data=enhanced
        )

    @staticmethod
    def _replace(world: "WorldState", location: str, item: Item) -> None:
        if location == "equipped":
            world.equipped[ItemSlot(item.slot)] = item
            return
        for index, existing in enumerate(world.inventory):
            if existing is not None and existing.id == item.id:
                world.inventory[index] = item
                return

    # =========================================================================
    # AUTO-EQUIP
    # =========================================================================

    def item_score(self, item: Optional[Item]) -> float:
        """Heuristic value of an item for auto-equip comparisons."""
        if item is None:
            return 0.0
        multiplier = item.enhancement_multiplier(self.config.enhancement_bonus_per_level)
        score = 0.0
        for mod in item.modifiers:
            if mod.type == ModifierType.FLAT:
                score += mod.value * self.FLAT_SCORE_WEIGHTS.get(mod.stat, 1.0) * multiplier
            else:
                score += mod.value * 100 * multiplier * self.PERCENT_SCORE_WEIGHT
        score += item.rarity_index * self.RARITY_SCORE
        score += item.enhancement_level * self.ENHANCEMENT_SCORE
        return score

    def auto_equip(self, world: "WorldState") -> Optional[CommandResult]:
        """Equip the first inventory item that beats what is worn. At most one per call."""
        for index, item in enumerate(world.inventory):
            if item is None:
                continue
            if item.level_requirement and world.player.level < item.level_requirement:
                continue
            current = world.equipped.get(ItemSlot(item.slot))
            if self.item_score(item) > self.item_score(current):
                result = self.equip(world, index)
                if result.success:
                    logger.debug("Auto-equipped %s", item.name)
                    return result
        return None
