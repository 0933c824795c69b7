"""Skill data model for Diablock."""

from pydantic import BaseModel, Field

from .item import ModifierType, StatModifier, StatName


class SkillModifierFormula(BaseModel):
    """Passive modifier scaling linearly with skill level."""
    stat: StatName
    type: ModifierType = ModifierType.FLAT
    base: float = 0.0
    per_level: float = 0.0

    def at_level(self, level: int) -> StatModifier:
        return StatModifier(
            stat=self.stat,
            type=self.type,
            value=self.base + self.per_level * (level - 1),
        )


class SkillDefinition(BaseModel):
    """Static skill-tree entry."""
    id: str = Field(..., description="Unique identifier (lowercase, underscores)")
    name: str
    description: str = ""
    max_level: int = Field(default=1, ge=1)
    cost_base: int = Field(default=1, ge=1)
    cost_per_level: int = Field(default=0, ge=0)
    prerequisites: list[str] = Field(default_factory=list)
    modifiers: list[SkillModifierFormula] = Field(default_factory=list)

    def cost(self, current_level: int) -> int:
        """Skill points needed to go from current_level to the next."""
        return self.cost_base + self.cost_per_level * current_level

    def effects(self, level: int) -> list[StatModifier]:
        """Passive stat modifiers granted at a given level."""
        if level <= 0:
            return []
        return [formula.at_level(level) for formula in self.modifiers]
