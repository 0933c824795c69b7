"""Continuous map geometry for Diablock combat.

Entities live on a flat arena in x/z with a cosmetic y height. Distances
used for ranges and targeting are planar (x/z only).
"""

import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from diablock.core.config import GameConfig

# Height difference below which y is left alone while moving
Y_SNAP_TOLERANCE = 0.1


@dataclass(frozen=True)
class Position:
    """
    A point on the arena.

    Attributes:
        x: Horizontal axis.
        y: Height (cosmetic, ignored by distance checks).
        z: Depth axis.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def distance_to(self, other: "Position") -> float:
        """Planar distance to another position."""
        return math.hypot(self.x - other.x, self.z - other.z)

    def move_towards(self, target: "Position", speed: float) -> "Position":
        """
        Step towards a target by at most ``speed`` units.

        Snaps onto the target when it is within one step. Height moves at
        half speed and only when it differs noticeably.

        Args:
            target: Destination.
            speed: Units per tick.

        Returns:
            The new position.
        """
        if speed <= 0:
            return self

        dx = target.x - self.x
        dz = target.z - self.z
        planar = math.hypot(dx, dz)

        if planar <= speed:
            return Position(target.x, target.y, target.z)

        new_x = self.x + dx / planar * speed
        new_z = self.z + dz / planar * speed

        new_y = self.y
        dy = target.y - self.y
        if abs(dy) > Y_SNAP_TOLERANCE:
            step = speed * 0.5
            new_y = self.y + math.copysign(min(abs(dy), step), dy)

        return Position(new_x, new_y, new_z)

    def clamped(self, config: "GameConfig") -> "Position":
        """Clamp into the arena bounds."""
        return Position(
            min(max(self.x, config.map_min_x), config.map_max_x),
            self.y,
            min(max(self.z, config.map_min_z), config.map_max_z),
        )

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "z": self.z}


def random_point_in_bounds(rng: random.Random, config: "GameConfig", y: float = 0.0) -> Position:
    """Uniform random point inside the arena."""
    return Position(
        rng.uniform(config.map_min_x, config.map_max_x),
        y,
        rng.uniform(config.map_min_z, config.map_max_z),
    )


def random_edge_point(rng: random.Random, config: "GameConfig", y: float = 0.0) -> Position:
    """
    Random point on one of the four arena edges, pulled inwards by the
    spawn padding.
    """
    pad = config.spawn_edge_padding
    edge = rng.randint(0, 3)
    if edge == 0:  # North
        pos = Position(rng.uniform(config.map_min_x, config.map_max_x), y, config.map_max_z - pad)
    elif edge == 1:  # South
        pos = Position(rng.uniform(config.map_min_x, config.map_max_x), y, config.map_min_z + pad)
    elif edge == 2:  # East
        pos = Position(config.map_max_x - pad, y, rng.uniform(config.map_min_z, config.map_max_z))
    else:  # West
        pos = Position(config.map_min_x + pad, y, rng.uniform(config.map_min_z, config.map_max_z))
    return pos.clamped(config)
