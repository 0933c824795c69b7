"""Bundled content tables consumed by a session."""

from dataclasses import dataclass, field
from typing import Optional

from .loaders import load_item_bases, load_monsters, load_permanent_upgrades, load_skills
from .models import ItemBase, ItemSlot, MonsterDefinition, PermanentUpgrade, SkillDefinition


@dataclass
class GameContent:
    """Static tables for one session. Empty tables are valid."""

    monsters: list[MonsterDefinition] = field(default_factory=list)
    skills: list[SkillDefinition] = field(default_factory=list)
    item_bases: list[ItemBase] = field(default_factory=list)
    upgrades: list[PermanentUpgrade] = field(default_factory=list)

    @property
    def normal_monsters(self) -> list[MonsterDefinition]:
        return [m for m in self.monsters if not m.is_boss]

    @property
    def boss_monsters(self) -> list[MonsterDefinition]:
        return [m for m in self.monsters if m.is_boss]

    def get_skill(self, skill_id: str) -> Optional[SkillDefinition]:
        for skill in self.skills:
            if skill.id == skill_id:
                return skill
        return None

    def get_item_base(self, slot: ItemSlot) -> Optional[ItemBase]:
        for base in self.item_bases:
            if base.slot == slot:
                return base
        return None

    def get_upgrade(self, key: str) -> Optional[PermanentUpgrade]:
        for upgrade in self.upgrades:
            if upgrade.key == key:
                return upgrade
        return None


def load_default_content() -> GameContent:
    """Build a GameContent from the bundled JSON tables."""
    return GameContent(
        monsters=list(load_monsters()),
        skills=list(load_skills()),
        item_bases=list(load_item_bases()),
        upgrades=list(load_permanent_upgrades()),
    )
