"""Shop System for Diablock.

The shop shows a fixed number of generated items whose level follows the
current wave and the best wave ever reached. Refreshing costs gold unless
it happens as part of a run restart.
"""

import math
import random
from typing import List, TYPE_CHECKING

from diablock.core.item_manager import ItemManager
from diablock.core.results import CommandResult
from diablock.data.models import Item, Rarity

if TYPE_CHECKING:
    from diablock.core.config import GameConfig
    from diablock.core.game_state import WorldState


class Shop:
    """
    Buys, sells and restocks items.

    Key mechanics:
    1. Item level = max(1, floor(wave * scaling + highest_wave * 0.1))
    2. Higher item levels raise the rarity floor
    3. Bought items leave the listing; sold items give back a share of value
    """

    # (item level threshold, minimum rarity) checked highest first
    RARITY_FLOORS = (
        (20, Rarity.RARE),
        (10, Rarity.UNCOMMON),
    )

    def __init__(self, config: "GameConfig", item_manager: ItemManager):
        self.config = config
        self.items = item_manager

    def item_level(self, world: "WorldState") -> int:
        return max(
            1,
            math.floor(
                world.wave.number * self.config.shop_item_level_scaling_factor
                + world.progress.highest_wave_achieved * self.config.shop_highest_wave_level_factor
            ),
        )

    def min_rarity_index(self, item_level: int) -> int:
        for threshold, rarity in self.RARITY_FLOORS:
            if item_level > threshold:
                return rarity.index
        return 0

    def generate_stock(self, world: "WorldState", rng: random.Random) -> List[Item]:
        level = self.item_level(world)
        floor_index = self.min_rarity_index(level)
        return [
            self.items.generator.generate(level, rng, floor_index)
            for _ in range(self.config.shop_num_items)
        ]

    def refresh(self, world: "WorldState", rng: random.Random, free: bool = False) -> CommandResult:
        """
        Replace the shop listing.

        Args:
            world: World to mutate on success.
            rng: Random number generator for item rolls.
            free: Skip the refresh cost (run restarts).
        """
        cost = 0 if free else self.config.shop_refresh_cost
        if world.player.gold < cost:
            return CommandResult.rejected(f"Not enough gold to refresh ({cost} needed)")

        world.player.gold -= cost
        world.shop = self.generate_stock(world, rng)
        return CommandResult.ok("Shop refreshed", data=world.shop)

    def buy(self, world: "WorldState", shop_index: int) -> CommandResult:
        if not 0 <= shop_index < len(world.shop):
            return CommandResult.rejected("Invalid shop slot")
        item = world.shop[shop_index]
        if world.player.gold < item.gold_value:
            return CommandResult.rejected(f"Not enough gold ({item.gold_value} needed)")
        if world.free_inventory_index() is None:
            return CommandResult.rejected("Inventory is full")

        world.player.gold -= item.gold_value
        self.items.add_to_inventory(world, item)
        world.shop.pop(shop_index)
        return CommandResult.ok(f"Bought {item.name}", data=item)

    def sell(self, world: "WorldState", inventory_index: int) -> CommandResult:
        if not 0 <= inventory_index < len(world.inventory):
            return CommandResult.rejected("Invalid inventory slot")
        item = world.inventory[inventory_index]
        if item is None:
            return CommandResult.rejected("No item in that inventory slot")

        price = self.items.economy.sell_price(item)
        world.player.gold += price
        world.inventory[inventory_index] = None
        return CommandResult.ok(f"Sold {item.name} for {price} gold", data=price)
