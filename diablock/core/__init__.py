# Core game systems: configuration, economy, items, progression, sessions
from .constants import (
    BATTLE_TICK_INTERVAL_MS,
    BOSS_WAVE_INTERVAL,
    INVENTORY_SLOTS,
    PLAYER_ID,
)
from .config import GameConfig, StatusEffectRoll

__all__ = [
    # Constants
    "BATTLE_TICK_INTERVAL_MS",
    "BOSS_WAVE_INTERVAL",
    "INVENTORY_SLOTS",
    "PLAYER_ID",
    # Configuration
    "GameConfig",
    "StatusEffectRoll",
]
