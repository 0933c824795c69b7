"""Monster data model for Diablock."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator


class MonsterEffect(BaseModel):
    """Status effect a monster may inflict on hit."""
    type: str = Field(..., description="StatusEffectType name")
    chance: float = Field(default=0.0, ge=0.0, le=1.0)
    potency: float = 0.0
    duration: int = Field(default=1, ge=1)


class MonsterDefinition(BaseModel):
    """Static monster template."""
    id: str = Field(..., description="Unique identifier (lowercase, underscores)")
    name: str = Field(..., description="Display name")
    hp: int = Field(..., gt=0)
    attack: int = Field(..., ge=0)
    defense: int = Field(default=0, ge=0)
    experience: int = Field(default=0, ge=0)
    gold_drop: tuple[int, int] = Field(default=(0, 0), description="(min, max) gold")
    size_scale: float = Field(default=1.0, gt=0)
    applies_effect: Optional[MonsterEffect] = None
    is_boss: bool = False

    @model_validator(mode="after")
    def _check_gold_range(self) -> "MonsterDefinition":
        low, high = self.gold_drop
        if low > high:
            raise ValueError(f"gold_drop min {low} exceeds max {high}")
        return self
