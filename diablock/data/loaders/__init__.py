# Data Loaders
from .monster_loader import (
    load_monsters,
    get_monster_by_id,
    get_normal_monsters,
    get_boss_monsters,
)
from .skill_loader import load_skills, get_skill_by_id
from .item_loader import load_item_bases, get_item_base
from .upgrade_loader import load_permanent_upgrades, get_permanent_upgrade

__all__ = [
    # Monster loaders
    "load_monsters",
    "get_monster_by_id",
    "get_normal_monsters",
    "get_boss_monsters",
    # Skill loaders
    "load_skills",
    "get_skill_by_id",
    # Item loaders
    "load_item_bases",
    "get_item_base",
    # Upgrade loaders
    "load_permanent_upgrades",
    "get_permanent_upgrade",
]
