"""
Session management service.
"""

import logging
from typing import Any, Dict, List, Optional

from diablock.combat.simulation import RunStatistics, RunSimulator
from diablock.core.config import GameConfig
from diablock.core.results import CommandResult
from diablock.core.session import GameSession
from diablock.data.content import GameContent, load_default_content

from ..config import Settings
from .save_store import FileSnapshotStore

logger = logging.getLogger(__name__)


class SessionService:
    """Holds live sessions in memory and persists them on request."""

    def __init__(
        self,
        settings: Settings,
        store: FileSnapshotStore,
        content: Optional[GameContent] = None,
    ):
        self.settings = settings
        self.store = store
        self.content = content if content is not None else load_default_content()
        self._sessions: Dict[str, GameSession] = {}

    def _config(self) -> GameConfig:
        return GameConfig(tick_interval_ms=self.settings.TICK_INTERVAL_MS)

    # === Sessions ===

    def create_session(self, seed: Optional[int] = None) -> GameSession:
        if len(self._sessions) >= self.settings.MAX_SESSIONS:
            raise ValueError("Maximum number of sessions reached")
        if seed is None:
            seed = self.settings.DEFAULT_SEED
        session = GameSession(config=self._config(), content=self.content, seed=seed)
        self._sessions[session.id] = session
        return session

    def get_session(self, session_id: str) -> Optional[GameSession]:
        return self._sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        if self._sessions.pop(session_id, None) is None:
            return False
        logger.info("Session %s deleted", session_id)
        return True

    def list_sessions(self) -> List[str]:
        return list(self._sessions)

    # === Ticking ===

    def tick(self, session: GameSession, count: int) -> Dict[str, Any]:
        """Advance a session, capped at MAX_TICKS_PER_REQUEST."""
        count = min(count, self.settings.MAX_TICKS_PER_REQUEST)
        start = session.world.tick
        events = session.tick(count)
        return {
            "tick": session.world.tick,
            "ticks_run": session.world.tick - start,
            "wave": session.world.wave.number,
            "is_game_over": session.world.is_game_over,
            "events": events,
        }

    # === Persistence ===

    def save_to_file(self, session: GameSession, name: Optional[str] = None) -> str:
        slot = name or session.id
        self.store.save(slot, session.snapshot())
        return slot

    def load_from_file(self, session: GameSession, name: Optional[str] = None) -> CommandResult:
        slot = name or session.id
        raw = self.store.load(slot)
        if raw is None:
            raise ValueError(f"No save found in slot {slot!r}")
        return session.load(raw)

    # === Simulation ===

    def simulate(self, num_runs: int, max_ticks: int, seed: Optional[int] = None) -> RunStatistics:
        if num_runs > self.settings.MAX_SIMULATION_RUNS:
            raise ValueError(f"num_runs may not exceed {self.settings.MAX_SIMULATION_RUNS}")
        if max_ticks > self.settings.MAX_SIMULATION_TICKS:
            raise ValueError(f"max_ticks may not exceed {self.settings.MAX_SIMULATION_TICKS}")
        simulator = RunSimulator(config=self._config(), content=self.content, base_seed=seed)
        return simulator.run(num_runs=num_runs, max_ticks=max_ticks)
