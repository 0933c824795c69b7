"""Player Targeting for Diablock Combat.

The player holds at most one engaged monster. An engagement that goes
stale (target dead, missing or out of range) is dropped and the
consecutive-hit streak resets; a replacement is picked on a later tick.
"""

from typing import Any, Dict, List, Optional, TYPE_CHECKING

from diablock.combat.entities import Monster, MonsterAIState
from diablock.combat.geometry import Position

if TYPE_CHECKING:
    from diablock.core.config import GameConfig
    from diablock.core.game_state import WorldState


class PlayerDirector:
    """Engagement tracking and optional target seeking for the player."""

    def __init__(self, config: "GameConfig"):
        self.config = config

    def is_valid_target(self, world: "WorldState", monster: Optional[Monster]) -> bool:
        if monster is None or not monster.is_alive:
            return False
        distance = monster.position.distance_to(world.player.position)
        return distance <= self.config.engagement_range

    def update(self, world: "WorldState") -> List[Dict[str, Any]]:
        """
        Validate or acquire the engaged target.

        Returns:
            Engagement events.
        """
        player = world.player
        events: List[Dict[str, Any]] = []

        if player.engaged_monster_id is not None:
            monster = world.get_monster(player.engaged_monster_id)
            if not self.is_valid_target(world, monster):
                events.append({
                    "tick": world.tick,
                    "type": "engagement_lost",
                    "monster_id": player.engaged_monster_id,
                })
                player.reset_engagement()
            return events

        target = self.select_target(world)
        if target is not None:
            player.engaged_monster_id = target.id
            player.consecutive_attack_count = 0
            events.append({
                "tick": world.tick,
                "type": "engaged",
                "monster_id": target.id,
                "message": f"Engaging {target.name}",
            })
        elif self.config.player_seeks_targets:
            self.seek(world)
        return events

    def select_target(self, world: "WorldState") -> Optional[Monster]:
        """First engaged monster in roster order that is in range."""
        for monster in world.monsters:
            if monster.ai_state == MonsterAIState.ENGAGED and self.is_valid_target(world, monster):
                return monster
        return None

    def seek(self, world: "WorldState") -> None:
        """Walk towards the nearest live monster until it is in range."""
        player = world.player
        live = world.live_monsters
        if not live:
            return
        nearest = min(live, key=lambda m: m.position.distance_to(player.position))
        if nearest.position.distance_to(player.position) <= self.config.engagement_range:
            return
        goal = Position(nearest.position.x, player.position.y, nearest.position.z)
        player.position = player.position.move_towards(
            goal, world.derived.movement_speed
        ).clamped(self.config)
