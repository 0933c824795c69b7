"""Monte Carlo Run Simulation for Diablock.

Plays many independent, seeded sessions headlessly (auto-equip and
auto-learn on) until the player dies or a tick cap is hit, and
summarizes how far runs get.
"""

import random
import statistics
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from diablock.core.config import GameConfig
from diablock.core.session import GameSession
from diablock.data.content import GameContent, load_default_content


@dataclass
class RunOutcome:
    """Result of a single simulated run."""

    seed: int
    wave_reached: int
    ticks: int
    died: bool
    player_level: int
    monsters_killed: int
    bosses_defeated: int
    gold_earned: int
    essence: int


@dataclass
class RunStatistics:
    """
    Aggregate of many simulated runs.

    Waves are the wave the run ended on (the wave that killed the
    player, or the current wave at the tick cap).
    """

    runs: int
    avg_wave: float
    min_wave: int
    max_wave: int
    median_wave: float
    death_rate: float  # 0.0 to 1.0
    avg_ticks: float
    avg_level: float
    avg_kills: float
    avg_bosses_defeated: float
    avg_gold_earned: float
    avg_essence: float

    # 95% interval for the mean wave reached
    wave_confidence: Tuple[float, float] = (0.0, 0.0)

    outcomes: List[RunOutcome] = field(default_factory=list)

    def to_dict(self, include_outcomes: bool = False) -> Dict[str, Any]:
        data = asdict(self)
        if not include_outcomes:
            data.pop("outcomes")
        return data


class RunSimulator:
    """
    Monte Carlo run simulator.

    Usage:
        simulator = RunSimulator(base_seed=7)
        stats = simulator.run(num_runs=20, max_ticks=2000)
        print(f"Average wave: {stats.avg_wave:.1f}")
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        content: Optional[GameContent] = None,
        base_seed: Optional[int] = None,
    ):
        """
        Initialize simulator.

        Args:
            config: Balance configuration shared by every run.
            content: Content tables shared by every run.
            base_seed: Base seed for reproducibility (seeds will be derived).
        """
        self.config = config or GameConfig()
        self.content = content if content is not None else load_default_content()
        self.base_seed = base_seed
        self.rng = random.Random(base_seed)

    def run(
        self,
        num_runs: int = 10,
        max_ticks: int = 1000,
        parallel: bool = False,
        max_workers: int = 4,
    ) -> RunStatistics:
        """
        Play ``num_runs`` sessions of at most ``max_ticks`` ticks each.

        Args:
            num_runs: Number of independent runs.
            max_ticks: Tick cap per run.
            parallel: Run sessions on a thread pool.
            max_workers: Max parallel workers.

        Returns:
            RunStatistics over every run.
        """
        if num_runs < 1:
            raise ValueError("num_runs must be at least 1")
        if max_ticks < 1:
            raise ValueError("max_ticks must be at least 1")

        seeds = [self._get_run_seed(i) for i in range(num_runs)]
        if parallel and num_runs > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                outcomes = list(executor.map(lambda s: self.play_one(s, max_ticks), seeds))
        else:
            outcomes = [self.play_one(seed, max_ticks) for seed in seeds]

        return self._analyze(outcomes)

    def play_one(self, seed: int, max_ticks: int) -> RunOutcome:
        """Play a single session to death or the tick cap."""
        session = GameSession(config=self.config, content=self.content, seed=seed)
        while not session.world.is_game_over and session.world.tick < max_ticks:
            session.tick(min(100, max_ticks - session.world.tick))
            session.feed.clear()

        world = session.world
        return RunOutcome(
            seed=seed,
            wave_reached=world.wave.number,
            ticks=world.tick,
            died=world.is_game_over,
            player_level=world.player.level,
            monsters_killed=world.stats.monsters_killed,
            bosses_defeated=world.stats.bosses_defeated,
            gold_earned=world.stats.gold_earned,
            essence=world.progress.essence,
        )

    def _get_run_seed(self, index: int) -> int:
        """Get deterministic seed for a run."""
        if self.base_seed is not None:
            return self.base_seed + index
        return self.rng.randint(0, 2**31)

    def _analyze(self, outcomes: List[RunOutcome]) -> RunStatistics:
        waves = [o.wave_reached for o in outcomes]
        n = len(outcomes)

        def mean_of(attr: str) -> float:
            return statistics.mean(getattr(o, attr) for o in outcomes)

        return RunStatistics(
            runs=n,
            avg_wave=statistics.mean(waves),
            min_wave=min(waves),
            max_wave=max(waves),
            median_wave=statistics.median(waves),
            death_rate=sum(1 for o in outcomes if o.died) / n,
            avg_ticks=mean_of("ticks"),
            avg_level=mean_of("player_level"),
            avg_kills=mean_of("monsters_killed"),
            avg_bosses_defeated=mean_of("bosses_defeated"),
            avg_gold_earned=mean_of("gold_earned"),
            avg_essence=mean_of("essence"),
            wave_confidence=self._mean_confidence_interval(waves),
            outcomes=outcomes,
        )

    @staticmethod
    def _mean_confidence_interval(values: List[int]) -> Tuple[float, float]:
        """Normal-approximation 95% interval for the mean."""
        mean = statistics.mean(values)
        if len(values) < 2:
            return (float(mean), float(mean))
        z = 1.96  # 95% confidence
        spread = z * statistics.stdev(values) / len(values) ** 0.5
        return (mean - spread, mean + spread)
