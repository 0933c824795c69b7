"""Economy System for Diablock.

Handles the experience curve, level-ups, gold rolls, sell prices and
enhancement costs.
"""

import math
import random
from dataclasses import dataclass
from typing import Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from diablock.combat.entities import PlayerState
    from diablock.core.config import GameConfig
    from diablock.data.models import Item


@dataclass
class LevelUpResult:
    """Outcome of granting experience."""

    levels_gained: int = 0
    skill_points_gained: int = 0
    new_level: int = 1


@dataclass
class EnhancementCost:
    """Gold and stones needed for the next enhancement level."""

    gold: int
    stones: int


class EconomyCalculator:
    """Calculate all economy-related values."""

    def __init__(self, config: "GameConfig"):
        self.config = config

    def experience_to_next_level(self, level: int) -> int:
        """Experience needed to go from ``level`` to ``level + 1``."""
        return math.floor(
            self.config.base_experience
            * self.config.experience_scaling_factor ** (level - 1)
        )

    def grant_experience(self, player: "PlayerState", amount: int) -> LevelUpResult:
        """
        Add experience, levelling up as many times as the total allows.

        Each level grants skill points and recomputes the next threshold.
        """
        result = LevelUpResult(new_level=player.level)
        if amount <= 0:
            return result

        player.experience += amount
        while player.experience >= player.experience_to_next_level:
            player.experience -= player.experience_to_next_level
            player.level += 1
            player.skill_points += self.config.skill_points_per_level
            player.experience_to_next_level = self.experience_to_next_level(player.level)
            result.levels_gained += 1
            result.skill_points_gained += self.config.skill_points_per_level

        result.new_level = player.level
        return result

    @staticmethod
    def roll_gold(rng: random.Random, gold_range: Tuple[int, int]) -> int:
        low, high = gold_range
        if high <= low:
            return max(0, low)
        return rng.randint(low, high)

    def sell_price(self, item: "Item") -> int:
        return math.floor(item.gold_value * self.config.sell_price_modifier)

    def max_enhancement_level(self, item: "Item") -> int:
        return self.config.enhancement_max_level_by_rarity.get(str(item.rarity), 0)

    def enhancement_cost(self, item: "Item", player_level: int) -> Optional[EnhancementCost]:
        """
        Cost of the next enhancement, or None when the item is maxed.

        Costs grow geometrically with the current enhancement level and
        linearly with the item's level (its requirement, or the player's
        level when it has none).
        """
        if item.enhancement_level >= self.max_enhancement_level(item):
            return None

        cfg = self.config
        effective_level = item.level_requirement or player_level
        level_factor = 1 + effective_level * cfg.enhancement_item_level_multiplier
        gold = math.floor(
            cfg.enhancement_base_gold_cost
            * cfg.enhancement_gold_cost_factor ** item.enhancement_level
            * level_factor
        )
        stones = math.ceil(
            cfg.enhancement_base_stone_cost
            * cfg.enhancement_stone_cost_factor ** item.enhancement_level
            * level_factor
        )
        return EnhancementCost(gold=gold, stones=stones)
