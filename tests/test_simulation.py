"""Tests for Monte Carlo run simulation."""

import pytest

from diablock.combat.simulation import RunSimulator


class TestRunSimulator:
    """RunSimulator tests."""

    @pytest.fixture
    def simulator(self):
        return RunSimulator(base_seed=11)

    def test_run_statistics(self, simulator):
        stats = simulator.run(num_runs=3, max_ticks=60)

        assert stats.runs == 3
        assert [o.seed for o in stats.outcomes] == [11, 12, 13]
        assert all(o.ticks <= 60 for o in stats.outcomes)
        assert stats.min_wave <= stats.avg_wave <= stats.max_wave
        assert 0.0 <= stats.death_rate <= 1.0

    def test_deterministic(self):
        first = RunSimulator(base_seed=5).run(num_runs=2, max_ticks=80)
        second = RunSimulator(base_seed=5).run(num_runs=2, max_ticks=80)

        assert first.avg_wave == second.avg_wave
        assert first.avg_kills == second.avg_kills
        assert first.avg_gold_earned == second.avg_gold_earned

    def test_parallel_matches_serial(self):
        serial = RunSimulator(base_seed=3).run(num_runs=3, max_ticks=40)
        parallel = RunSimulator(base_seed=3).run(num_runs=3, max_ticks=40, parallel=True, max_workers=3)

        assert [o.wave_reached for o in serial.outcomes] == [o.wave_reached for o in parallel.outcomes]

    def test_single_run_confidence(self, simulator):
        stats = simulator.run(num_runs=1, max_ticks=20)

        assert stats.wave_confidence == (stats.avg_wave, stats.avg_wave)

    def test_invalid_arguments(self, simulator):
        with pytest.raises(ValueError):
            simulator.run(num_runs=0)
        with pytest.raises(ValueError):
            simulator.run(num_runs=1, max_ticks=0)

    def test_to_dict(self, simulator):
        stats = simulator.run(num_runs=2, max_ticks=20)

        assert "outcomes" not in stats.to_dict()
        assert len(stats.to_dict(include_outcomes=True)["outcomes"]) == 2
