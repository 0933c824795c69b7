#!/usr/bin/env python
"""
Headless Diablock runner.

Usage:
    # Play one run until death (or the tick cap) and print a summary
    python play.py --seed 42 --ticks 5000

    # Resume from a save file and keep going
    python play.py --load saves/run.json --save saves/run.json

    # Monte Carlo: 20 runs, aggregate statistics
    python play.py --runs 20 --ticks 3000 --seed 1
"""

import argparse
import logging
import sys
from pathlib import Path

from diablock.combat.simulation import RunSimulator
from diablock.core.session import GameSession


def play_single(args: argparse.Namespace) -> None:
    session = GameSession(seed=args.seed)
    if args.load:
        path = Path(args.load)
        if not path.exists():
            print(f"Save file not found: {path}")
            sys.exit(1)
        print(session.load(path.read_text(encoding="utf-8")).message)
    session.set_automation(auto_equip=not args.no_auto_equip, auto_learn=not args.no_auto_learn)

    while not session.world.is_game_over and session.world.tick < args.ticks:
        session.tick(min(args.report_every, args.ticks - session.world.tick))
        world = session.world
        if args.verbose:
            for message in session.feed.drain()["battle_log"]:
                print(f"  {message}")
        else:
            session.feed.clear()
        print(
            f"[tick {world.tick:>6}] wave {world.wave.number:>3} | "
            f"lvl {world.player.level:>3} | hp {world.player.hp:>7.1f}/{world.derived.max_hp:<7.1f} | "
            f"gold {world.player.gold:>6} | kills {world.stats.monsters_killed}"
        )

    world = session.world
    print("=" * 60)
    print("Run Summary")
    print("=" * 60)
    print(f"Outcome: {'died' if world.is_game_over else 'tick cap reached'}")
    print(f"Wave reached: {world.wave.number}")
    print(f"Highest wave ever: {world.progress.highest_wave_achieved}")
    for key, value in world.stats.to_dict().items():
        print(f"{key.replace('_', ' ').capitalize()}: {value}")
    print(f"Essence: {world.progress.essence}")
    print("=" * 60)

    if args.save:
        path = Path(args.save)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(session.snapshot().model_dump_json(indent=2), encoding="utf-8")
        print(f"Saved to {path}")


def simulate(args: argparse.Namespace) -> None:
    simulator = RunSimulator(base_seed=args.seed)
    stats = simulator.run(num_runs=args.runs, max_ticks=args.ticks)

    print("=" * 60)
    print(f"Monte Carlo: {stats.runs} runs, up to {args.ticks:,} ticks each")
    print("=" * 60)
    low, high = stats.wave_confidence
    print(f"Average wave: {stats.avg_wave:.2f} (95% CI {low:.2f} - {high:.2f})")
    print(f"Wave range: {stats.min_wave} - {stats.max_wave} (median {stats.median_wave})")
    print(f"Death rate: {stats.death_rate:.1%}")
    print(f"Average level: {stats.avg_level:.1f}")
    print(f"Average kills: {stats.avg_kills:.1f}")
    print(f"Average bosses defeated: {stats.avg_bosses_defeated:.2f}")
    print(f"Average gold earned: {stats.avg_gold_earned:.1f}")
    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(
        description="Diablock headless runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--ticks",
        type=int,
        default=5000,
        help="Tick cap per run (default: 5000)",
    )
    parser.add_argument(
        "--runs",
        type=int,
        default=0,
        help="Run a Monte Carlo simulation with this many runs",
    )
    parser.add_argument(
        "--report-every",
        type=int,
        default=100,
        help="Print a status line every N ticks (default: 100)",
    )
    parser.add_argument("--load", type=str, help="Load a save file before playing")
    parser.add_argument("--save", type=str, help="Write a save file after playing")
    parser.add_argument("--no-auto-equip", action="store_true", help="Disable auto-equip")
    parser.add_argument("--no-auto-learn", action="store_true", help="Disable auto-learn")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print the battle log")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level (default: WARNING)")

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.ticks < 1 or args.report_every < 1:
        parser.error("--ticks and --report-every must be positive")

    if args.runs > 0:
        simulate(args)
    else:
        play_single(args)


if __name__ == "__main__":
    main()
