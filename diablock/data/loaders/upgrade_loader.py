"""Permanent upgrade data loader for Diablock."""

from functools import lru_cache
from typing import Optional

from ..models.upgrade import PermanentUpgrade
from ._common import DATA_DIR, read_table

UPGRADES_FILE = DATA_DIR / "permanent_upgrades.json"


@lru_cache(maxsize=1)
def load_permanent_upgrades() -> tuple[PermanentUpgrade, ...]:
    """Load permanent upgrade configuration from JSON file."""
    return tuple(
        read_table(UPGRADES_FILE, "permanent_upgrades", PermanentUpgrade.model_validate)
    )


def get_permanent_upgrade(key: str) -> Optional[PermanentUpgrade]:
    """Get the upgrade configuration for a stat key."""
    for upgrade in load_permanent_upgrades():
        if upgrade.key == key:
            return upgrade
    return None
