"""
File-backed snapshot storage.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from diablock.core.save_state import GameSnapshot

logger = logging.getLogger(__name__)

SLOT_NAME = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class FileSnapshotStore:
    """One JSON file per save slot under ``save_dir``."""

    def __init__(self, save_dir: Union[str, Path]):
        self.save_dir = Path(save_dir)

    def path_for(self, name: str) -> Path:
        if not SLOT_NAME.match(name):
            raise ValueError(f"Invalid save slot name: {name!r}")
        return self.save_dir / f"{name}.json"

    def save(self, name: str, snapshot: GameSnapshot) -> Path:
        path = self.path_for(name)
        self.save_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        logger.info("Saved snapshot %s", path)
        return path

    def load(self, name: str) -> Optional[str]:
        """Raw snapshot text, or None when the slot does not exist."""
        path = self.path_for(name)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Could not read snapshot %s: %s", path, e)
            return None

    def list_slots(self) -> List[str]:
        if not self.save_dir.exists():
            return []
        return sorted(p.stem for p in self.save_dir.glob("*.json"))
