"""Item base data loader for Diablock."""

from functools import lru_cache
from typing import Optional

from ..models.item import ItemBase, ItemSlot
from ._common import DATA_DIR, read_table

ITEM_BASES_FILE = DATA_DIR / "item_bases.json"


@lru_cache(maxsize=1)
def load_item_bases() -> tuple[ItemBase, ...]:
    """Load per-slot item base templates from JSON file."""
    return tuple(read_table(ITEM_BASES_FILE, "item_bases", ItemBase.model_validate))


def get_item_base(slot: ItemSlot) -> Optional[ItemBase]:
    """Get the base template for an equipment slot."""
    for base in load_item_bases():
        if base.slot == slot:
            return base
    return None
