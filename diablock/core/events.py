"""Bounded event feeds for observers.

The engine emits plain event dicts every tick. Renderers and the API
drain these feeds; nothing in the simulation reads them back.
"""

from collections import deque
from typing import Any, Deque, Dict, Iterable, List, TYPE_CHECKING

if TYPE_CHECKING:
    from diablock.core.config import GameConfig

ATTACK_EVENT_TYPES = frozenset({"attack", "monster_attack", "dot_damage", "thorns", "quake_stomp"})
SKILL_PROC_EVENT_TYPES = frozenset({"skill_proc"})


class EventFeed:
    """Battle log plus attack and skill-proc streams, each capped."""

    def __init__(self, config: "GameConfig"):
        self.battle_log: Deque[str] = deque(maxlen=config.max_battle_log_messages)
        self.attack_events: Deque[Dict[str, Any]] = deque(maxlen=config.max_attack_events)
        self.skill_proc_events: Deque[Dict[str, Any]] = deque(maxlen=config.max_skill_proc_events)

    def publish(self, events: Iterable[Dict[str, Any]]) -> None:
        for event in events:
            event_type = event.get("type")
            if event_type in ATTACK_EVENT_TYPES:
                self.attack_events.append(event)
            elif event_type in SKILL_PROC_EVENT_TYPES:
                self.skill_proc_events.append(event)
            message = event.get("message")
            if message:
                self.battle_log.append(message)

    def log(self, message: str) -> None:
        self.battle_log.append(message)

    def drain(self) -> Dict[str, List[Any]]:
        """Return and clear every feed."""
        drained = {
            "battle_log": list(self.battle_log),
            "attack_events": list(self.attack_events),
            "skill_proc_events": list(self.skill_proc_events),
        }
        self.clear()
        return drained

    def clear(self) -> None:
        self.battle_log.clear()
        self.attack_events.clear()
        self.skill_proc_events.clear()
