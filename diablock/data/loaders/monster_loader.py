"""Monster data loader for Diablock."""

from functools import lru_cache
from typing import Optional

from ..models.monster import MonsterDefinition
from ._common import DATA_DIR, read_table

MONSTERS_FILE = DATA_DIR / "monsters.json"


@lru_cache(maxsize=1)
def load_monsters() -> tuple[MonsterDefinition, ...]:
    """Load all monster definitions from JSON file.

    Returns:
        Tuple of MonsterDefinition objects, bosses included.
    """
    return tuple(read_table(MONSTERS_FILE, "monsters", MonsterDefinition.model_validate))


def get_monster_by_id(monster_id: str) -> Optional[MonsterDefinition]:
    """Get a monster definition by its ID."""
    for monster in load_monsters():
        if monster.id == monster_id:
            return monster
    return None


def get_normal_monsters() -> list[MonsterDefinition]:
    """Get all non-boss monster definitions."""
    return [m for m in load_monsters() if not m.is_boss]


def get_boss_monsters() -> list[MonsterDefinition]:
    """Get all boss definitions in table order."""
    return [m for m in load_monsters() if m.is_boss]
