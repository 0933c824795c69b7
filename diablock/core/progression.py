"""Permanent meta-progression for Diablock.

Essence survives character death and buys permanent base-stat upgrades.
The highest wave ever reached is tracked alongside it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, TYPE_CHECKING

from diablock.combat.entities import BaseStats

if TYPE_CHECKING:
    from diablock.core.config import GameConfig
    from diablock.data.content import GameContent

logger = logging.getLogger(__name__)


@dataclass
class PersistentProgress:
    """State that survives run restarts."""

    essence: int = 0
    upgrade_levels: Dict[str, int] = field(default_factory=dict)
    highest_wave_achieved: int = 0

    def level_of(self, key: str) -> int:
        return self.upgrade_levels.get(key, 0)

    def record_wave(self, wave: int) -> None:
        """Raise the high-water mark, never lower it."""
        self.highest_wave_achieved = max(self.highest_wave_achieved, wave)

    def to_dict(self) -> dict:
        return {
            "essence": self.essence,
            "upgrade_levels": dict(self.upgrade_levels),
            "highest_wave_achieved": self.highest_wave_achieved,
        }


def base_stats_for_run(
    config: "GameConfig",
    content: "GameContent",
    progress: PersistentProgress,
) -> BaseStats:
    """Initial player stats plus every purchased permanent upgrade."""
    base = BaseStats.from_dict(config.initial_player_stats)
    for upgrade in content.upgrades:
        level = progress.level_of(str(upgrade.key))
        if level > 0:
            bonus = upgrade.bonus_per_level * level
            base.set(upgrade.key, base.get(upgrade.key) + bonus)
            logger.debug("Permanent upgrade %s level %d: +%s", upgrade.key, level, bonus)
    return base
