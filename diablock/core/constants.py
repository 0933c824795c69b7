"""Diablock Game Constants."""

from typing import Final

# =============================================================================
# SIMULATION CLOCK
# =============================================================================
BATTLE_TICK_INTERVAL_MS: Final[int] = 1000  # 1 tick = 1 second of game time

# =============================================================================
# MAP & MOVEMENT
# =============================================================================
MAP_BOUNDS: Final[dict[str, float]] = {
    "min_x": -20.0,
    "max_x": 20.0,
    "min_z": -20.0,
    "max_z": 20.0,
}
SPAWN_EDGE_PADDING: Final[float] = 2.0
MONSTER_BASE_Y_SCALE_FACTOR: Final[float] = 0.6

ENGAGEMENT_RANGE: Final[float] = 2.5
AGGRO_RANGE: Final[float] = 12.0
MOVEMENT_TARGET_UPDATE_COOLDOWN_TICKS: Final[int] = 5
MONSTER_MOVEMENT_SPEED: Final[float] = 0.8  # Units per tick
PATROL_ARRIVAL_DISTANCE: Final[float] = 1.0

# =============================================================================
# PLAYER
# =============================================================================
INITIAL_PLAYER_STATS: Final[dict[str, float]] = {
    "max_hp": 100,
    "attack": 10,
    "defense": 2,
    "crit_chance": 0.05,
    "crit_damage": 1.5,
    "health_regen": 1.0,
    "attack_speed": 1.0,
    "movement_speed": 1.0,
}
INITIAL_GOLD: Final[int] = 0

BASE_EXPERIENCE: Final[int] = 100
EXPERIENCE_SCALING_FACTOR: Final[float] = 1.2
SKILL_POINTS_PER_LEVEL: Final[int] = 1

# Chance for every player hit to apply an effect to the target
PLAYER_BASE_STATUS_EFFECT: Final[dict] = {
    "type": "POISON",
    "chance": 0.10,
    "potency": 2,
    "duration": 3,
}

# =============================================================================
# MONSTER COMBAT
# =============================================================================
MONSTER_CRIT_CHANCE: Final[float] = 0.05
MONSTER_CRIT_DAMAGE: Final[float] = 1.5

# =============================================================================
# WAVES
# =============================================================================
BOSS_WAVE_INTERVAL: Final[int] = 10
MIN_MONSTERS_PER_WAVE: Final[int] = 3
BASE_MONSTER_COUNT: Final[float] = 3
MONSTERS_PER_WAVE_INCREMENT: Final[float] = 0.5
MAX_MONSTERS_ON_SCREEN: Final[int] = 15
WAVE_MONSTER_COUNT_OVERRIDES: Final[dict[int, int]] = {}

WAVE_SCALING_RATE: Final[float] = 0.07
BOSS_WAVE_SCALING_RATE: Final[float] = 0.03

# =============================================================================
# LOOT & ECONOMY
# =============================================================================
LOOT_DROP_CHANCE: Final[float] = 0.3
BOSS_LOOT_DROP_CHANCE: Final[float] = 1.0
BOSS_LOOT_MIN_RARITY_INDEX: Final[int] = 2  # Rare

ENHANCEMENT_STONE_DROP_CHANCE: Final[float] = 0.1
ENHANCEMENT_STONE_DROP_AMOUNT: Final[tuple[int, int]] = (1, 3)

BOSS_ESSENCE_DROP: Final[int] = 10
WAVE_CLEAR_ESSENCE_MULTIPLIER: Final[float] = 0.5

INVENTORY_SLOTS: Final[int] = 20

# =============================================================================
# SHOP
# =============================================================================
SHOP_NUM_ITEMS_TO_DISPLAY: Final[int] = 6
SHOP_REFRESH_COST: Final[int] = 10
SELL_PRICE_MODIFIER: Final[float] = 0.5
SHOP_ITEM_LEVEL_SCALING_FACTOR: Final[float] = 0.5
SHOP_HIGHEST_WAVE_LEVEL_FACTOR: Final[float] = 0.1

# =============================================================================
# ENHANCEMENT
# =============================================================================
ENHANCEMENT_MAX_LEVEL_BY_RARITY: Final[dict[str, int]] = {
    "common": 3,
    "uncommon": 5,
    "rare": 7,
    "epic": 9,
    "legendary": 12,
}
ENHANCEMENT_BONUS_PER_LEVEL: Final[float] = 0.05
ENHANCEMENT_BASE_GOLD_COST: Final[int] = 50
ENHANCEMENT_GOLD_COST_FACTOR: Final[float] = 1.5
ENHANCEMENT_BASE_STONE_COST: Final[int] = 1
ENHANCEMENT_STONE_COST_FACTOR: Final[float] = 1.3
ENHANCEMENT_ITEM_LEVEL_MULTIPLIER: Final[float] = 0.1

# =============================================================================
# SKILL TUNING
# =============================================================================
QUAKE_STOMP_RADIUS: Final[float] = 4.0
LUCKY_STREAK_WINDOW_TICKS: Final[int] = 10
LUCKY_STREAK_DURATION_TICKS: Final[int] = 5
LUCKY_STREAK_KILLS_REQUIRED: Final[int] = 3
COMBAT_FLOW_HITS_REQUIRED: Final[int] = 3
MASTER_TACTICIAN_CRIT_CHANCE: Final[float] = 0.20
MASTER_TACTICIAN_CRIT_DAMAGE: Final[float] = 0.30

# =============================================================================
# EVENT FEEDS
# =============================================================================
MAX_BATTLE_LOG_MESSAGES: Final[int] = 100
MAX_ATTACK_EVENTS: Final[int] = 20
MAX_SKILL_PROC_EVENTS: Final[int] = 20

# =============================================================================
# IDS
# =============================================================================
PLAYER_ID: Final[str] = "player"
