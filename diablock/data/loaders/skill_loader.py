"""Skill data loader for Diablock."""

from functools import lru_cache
from typing import Optional

from ..models.skill import SkillDefinition
from ._common import DATA_DIR, read_table

SKILLS_FILE = DATA_DIR / "skills.json"


@lru_cache(maxsize=1)
def load_skills() -> tuple[SkillDefinition, ...]:
    """Load the skill tree from JSON file."""
    return tuple(read_table(SKILLS_FILE, "skills", SkillDefinition.model_validate))


def get_skill_by_id(skill_id: str) -> Optional[SkillDefinition]:
    """Get a skill definition by its ID."""
    for skill in load_skills():
        if skill.id == skill_id:
            return skill
    return None
