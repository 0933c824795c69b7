"""Skill tree for Diablock.

Skill levels only go up during a run; a restart resets them to zero.
"""

import logging
from typing import List, Optional, TYPE_CHECKING

from diablock.core.results import CommandResult

if TYPE_CHECKING:
    from diablock.core.game_state import WorldState
    from diablock.data.content import GameContent
    from diablock.data.models import SkillDefinition

logger = logging.getLogger(__name__)


class SkillTree:
    """Validates and applies skill purchases."""

    def __init__(self, content: "GameContent"):
        self.content = content

    def rejection_reason(self, world: "WorldState", skill: "SkillDefinition") -> Optional[str]:
        """Why the skill cannot be learned right now, or None."""
        level = world.skill_level(skill.id)
        if level >= skill.max_level:
            return f"{skill.name} is already at max level"
        missing = [p for p in skill.prerequisites if world.skill_level(p) < 1]
        if missing:
            return f"{skill.name} requires {', '.join(missing)}"
        cost = skill.cost(level)
        if world.player.skill_points < cost:
            return f"Not enough skill points ({cost} needed)"
        return None

    def learn(self, world: "WorldState", skill_id: str) -> CommandResult:
        skill = self.content.get_skill(skill_id)
        if skill is None:
            return CommandResult.rejected(f"Unknown skill: {skill_id}")

        reason = self.rejection_reason(world, skill)
        if reason:
            return CommandResult.rejected(reason)

        level = world.skill_level(skill.id)
        world.player.skill_points -= skill.cost(level)
        world.skill_levels[skill.id] = level + 1
        world.stats.skills_learned += 1
        return CommandResult.ok(f"Learned {skill.name} (level {level + 1})")

    def auto_learn(self, world: "WorldState") -> List[str]:
        """
        Repeatedly learn the cheapest affordable skill.

        Returns:
            Ids of skills learned, in order (a skill may repeat).
        """
        learned: List[str] = []
        while True:
            candidates = [
                skill for skill in self.content.skills
                if self.rejection_reason(world, skill) is None
            ]
            if not candidates:
                return learned
            cheapest = min(candidates, key=lambda s: s.cost(world.skill_level(s.id)))
            self.learn(world, cheapest.id)
            learned.append(cheapest.id)
            logger.debug("Auto-learned %s", cheapest.id)
