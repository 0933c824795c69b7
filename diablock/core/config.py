"""Tunable engine configuration.

GameConfig bundles every balance knob the simulation reads. Defaults come
from ``diablock.core.constants`` so a bare ``GameConfig()`` plays the
standard game, while tests and simulations can override single values.
"""

from typing import Optional

from pydantic import BaseModel, Field

from diablock.core import constants as C


class StatusEffectRoll(BaseModel):
    """A chance-gated status effect attached to hits."""

    type: str = Field(..., description="StatusEffectType name, e.g. POISON")
    chance: float = Field(default=0.0, ge=0.0, le=1.0)
    potency: float = 0.0
    duration: int = Field(default=1, ge=1)


class GameConfig(BaseModel):
    """All balance values consumed by the engine."""

    # Clock
    tick_interval_ms: int = C.BATTLE_TICK_INTERVAL_MS

    # Map & movement
    map_min_x: float = C.MAP_BOUNDS["min_x"]
    map_max_x: float = C.MAP_BOUNDS["max_x"]
    map_min_z: float = C.MAP_BOUNDS["min_z"]
    map_max_z: float = C.MAP_BOUNDS["max_z"]
    spawn_edge_padding: float = C.SPAWN_EDGE_PADDING
    monster_y_scale_factor: float = C.MONSTER_BASE_Y_SCALE_FACTOR
    engagement_range: float = C.ENGAGEMENT_RANGE
    aggro_range: float = C.AGGRO_RANGE
    movement_target_update_cooldown_ticks: int = C.MOVEMENT_TARGET_UPDATE_COOLDOWN_TICKS
    monster_movement_speed: float = C.MONSTER_MOVEMENT_SPEED
    patrol_arrival_distance: float = C.PATROL_ARRIVAL_DISTANCE
    player_seeks_targets: bool = False

    # Player
    initial_player_stats: dict[str, float] = Field(
        default_factory=lambda: dict(C.INITIAL_PLAYER_STATS)
    )
    initial_gold: int = C.INITIAL_GOLD
    base_experience: int = C.BASE_EXPERIENCE
    experience_scaling_factor: float = C.EXPERIENCE_SCALING_FACTOR
    skill_points_per_level: int = C.SKILL_POINTS_PER_LEVEL
    player_base_status_effect: Optional[StatusEffectRoll] = Field(
        default_factory=lambda: StatusEffectRoll(**C.PLAYER_BASE_STATUS_EFFECT)
    )

    # Monster combat
    monster_crit_chance: float = C.MONSTER_CRIT_CHANCE
    monster_crit_damage: float = C.MONSTER_CRIT_DAMAGE

    # Waves
    boss_wave_interval: int = Field(default=C.BOSS_WAVE_INTERVAL, ge=1)
    min_monsters_per_wave: int = C.MIN_MONSTERS_PER_WAVE
    base_monster_count: float = C.BASE_MONSTER_COUNT
    monsters_per_wave_increment: float = C.MONSTERS_PER_WAVE_INCREMENT
    max_monsters_on_screen: int = C.MAX_MONSTERS_ON_SCREEN
    wave_monster_count_overrides: dict[int, int] = Field(
        default_factory=lambda: dict(C.WAVE_MONSTER_COUNT_OVERRIDES)
    )
    wave_scaling_rate: float = C.WAVE_SCALING_RATE
    boss_wave_scaling_rate: float = C.BOSS_WAVE_SCALING_RATE

    # Loot & economy
    loot_drop_chance: float = C.LOOT_DROP_CHANCE
    boss_loot_drop_chance: float = C.BOSS_LOOT_DROP_CHANCE
    boss_loot_min_rarity_index: int = C.BOSS_LOOT_MIN_RARITY_INDEX
    enhancement_stone_drop_chance: float = C.ENHANCEMENT_STONE_DROP_CHANCE
    enhancement_stone_drop_amount: tuple[int, int] = C.ENHANCEMENT_STONE_DROP_AMOUNT
    boss_essence_drop: int = C.BOSS_ESSENCE_DROP
    wave_clear_essence_multiplier: float = C.WAVE_CLEAR_ESSENCE_MULTIPLIER
    inventory_slots: int = C.INVENTORY_SLOTS

    # Shop
    shop_num_items: int = C.SHOP_NUM_ITEMS_TO_DISPLAY
    shop_refresh_cost: int = C.SHOP_REFRESH_COST
    sell_price_modifier: float = C.SELL_PRICE_MODIFIER
    shop_item_level_scaling_factor: float = C.SHOP_ITEM_LEVEL_SCALING_FACTOR
    shop_highest_wave_level_factor: float = C.SHOP_HIGHEST_WAVE_LEVEL_FACTOR

    # Enhancement
    enhancement_max_level_by_rarity: dict[str, int] = Field(
        default_factory=lambda: dict(C.ENHANCEMENT_MAX_LEVEL_BY_RARITY)
    )
    enhancement_bonus_per_level: float = C.ENHANCEMENT_BONUS_PER_LEVEL
    enhancement_base_gold_cost: int = C.ENHANCEMENT_BASE_GOLD_COST
    enhancement_gold_cost_factor: float = C.ENHANCEMENT_GOLD_COST_FACTOR
    enhancement_base_stone_cost: int = C.ENHANCEMENT_BASE_STONE_COST
    enhancement_stone_cost_factor: float = C.ENHANCEMENT_STONE_COST_FACTOR
    enhancement_item_level_multiplier: float = C.ENHANCEMENT_ITEM_LEVEL_MULTIPLIER

    # Skill tuning
    quake_stomp_radius: float = C.QUAKE_STOMP_RADIUS
    lucky_streak_window_ticks: int = C.LUCKY_STREAK_WINDOW_TICKS
    lucky_streak_duration_ticks: int = C.LUCKY_STREAK_DURATION_TICKS
    lucky_streak_kills_required: int = C.LUCKY_STREAK_KILLS_REQUIRED
    combat_flow_hits_required: int = C.COMBAT_FLOW_HITS_REQUIRED
    master_tactician_crit_chance: float = C.MASTER_TACTICIAN_CRIT_CHANCE
    master_tactician_crit_damage: float = C.MASTER_TACTICIAN_CRIT_DAMAGE

    # Event feeds
    max_battle_log_messages: int = C.MAX_BATTLE_LOG_MESSAGES
    max_attack_events: int = C.MAX_ATTACK_EVENTS
    max_skill_proc_events: int = C.MAX_SKILL_PROC_EVENTS

    @property
    def tick_seconds(self) -> float:
        """Game time covered by one tick."""
        return self.tick_interval_ms / 1000.0

    def is_boss_wave(self, wave: int) -> bool:
        return wave > 0 and wave % self.boss_wave_interval == 0
