"""Monster AI and Movement for Diablock Combat.

Each monster runs a three-state machine every tick:
- PATROLLING: wander towards a random point inside the map
- PURSUING: player within aggro range, move straight at the player
- ENGAGED: player within engagement range, stand still and attack

Stunned monsters keep their state and skip movement for the tick.
"""

import random
from typing import Optional, TYPE_CHECKING

from diablock.combat.entities import Monster, MonsterAIState, PlayerState
from diablock.combat.geometry import Position, random_point_in_bounds
from diablock.combat.status_effects import StatusEffectType, strongest_potency

if TYPE_CHECKING:
    from diablock.core.config import GameConfig


class MonsterDirector:
    """
    Monster behaviour manager.

    Usage:
        director = MonsterDirector(config, rng)
        # Each tick, for each live monster:
        director.update(monster, player, stunned=False)
    """

    def __init__(self, config: "GameConfig", rng: Optional[random.Random] = None):
        self.config = config
        self.rng = rng or random.Random()

    def effective_speed(self, monster: Monster) -> float:
        slow = strongest_potency(monster.effects, StatusEffectType.SLOW)
        return monster.movement_speed * max(0.0, 1 - slow)

    def decide_state(self, monster: Monster, player: PlayerState) -> MonsterAIState:
        if not player.is_alive:
            return MonsterAIState.PATROLLING
        distance = monster.position.distance_to(player.position)
        if distance <= self.config.engagement_range:
            return MonsterAIState.ENGAGED
        if distance <= self.config.aggro_range:
            return MonsterAIState.PURSUING
        return MonsterAIState.PATROLLING

    def update(self, monster: Monster, player: PlayerState, stunned: bool = False) -> MonsterAIState:
        """
        Advance one monster by one tick.

        Args:
            monster: Monster to update (mutated).
            player: The player, read only.
            stunned: Monster is stunned this tick.

        Returns:
            The monster's state after the update.
        """
        if not monster.is_alive:
            return monster.ai_state

        if stunned:
            # A dead player still breaks engagement
            if not player.is_alive:
                monster.ai_state = MonsterAIState.PATROLLING
            return monster.ai_state

        monster.ai_state = self.decide_state(monster, player)
        speed = self.effective_speed(monster)

        if monster.ai_state == MonsterAIState.PURSUING:
            chase = Position(player.position.x, monster.position.y, player.position.z)
            monster.position = monster.position.move_towards(chase, speed)
            monster.movement_target = None
        elif monster.ai_state == MonsterAIState.PATROLLING:
            self._patrol(monster, speed)

        monster.target_update_cooldown -= 1
        return monster.ai_state

    def _patrol(self, monster: Monster, speed: float) -> None:
        target = monster.movement_target
        needs_new_target = (
            target is None
            or monster.target_update_cooldown <= 0
            or monster.position.distance_to(target) < self.config.patrol_arrival_distance
        )
        if needs_new_target:
            monster.movement_target = random_point_in_bounds(self.rng, self.config, monster.position.y)
            monster.target_update_cooldown = self.config.movement_target_update_cooldown_ticks

        monster.position = monster.position.move_towards(monster.movement_target, speed).clamped(self.config)
