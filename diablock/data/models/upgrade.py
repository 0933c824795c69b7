"""Permanent upgrade data model for Diablock."""

from pydantic import BaseModel, Field

from .item import StatName


class PermanentUpgrade(BaseModel):
    """Essence-bought bonus applied to the base stats of every run."""
    key: StatName
    name: str
    bonus_per_level: float
    base_cost: int = Field(..., ge=0)
    cost_increase_per_level: int = Field(default=0, ge=0)
    max_level: int = Field(default=10, ge=1)

    def cost(self, current_level: int) -> int:
        return self.base_cost + current_level * self.cost_increase_per_level
