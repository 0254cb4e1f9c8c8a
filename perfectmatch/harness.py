#!/usr/bin/env python3
"""
Command-line harness for perfectmatch.

Plays one game (optionally from a YAML kit) or benchmarks many seeded games,
printing a summary and optionally writing the result as JSON.
"""

import argparse
import inspect
import json
import sys
from datetime import datetime

from .audit import AuditTrail
from .errors import SolverError
from .gamemaster import GameMaster
from .kit import load_kit
from .runner import GameRunner, RunConfig, summary_lines
from .stats import benchmark
from .strategy import resolve_strategy


def build_strategy(strategy_cls, contestants, observer=None):
    """
    Instantiate a strategy, handing it the observer only if it takes one.

    Strategies registered by other packages need not accept ``observer``.
    """
    try:
        params = inspect.signature(strategy_cls).parameters
    except (TypeError, ValueError):
        params = {}
    if observer is not None and "observer" in params:
        return strategy_cls(contestants, observer=observer)
    return strategy_cls(contestants)


def play_one(args) -> dict:
    strategy_name = args.strategy
    max_iterations = args.max_iterations
    if args.kit:
        kit = load_kit(args.kit)
        game = kit.build_game()
        strategy_name = args.strategy or kit.strategy
        if max_iterations is None:
            max_iterations = kit.max_iterations
        print(f"[*] Kit: {kit.name} ({len(kit.contestants)} contestants)")
    else:
        game = GameMaster.initialize_game(args.contestants, seed=args.seed)

    strategy_name = strategy_name or "brute_force"
    strategy_cls = resolve_strategy(strategy_name)
    trail = AuditTrail()
    strategy = build_strategy(strategy_cls, game.contestants(), observer=trail)
    runner = GameRunner(
        game,
        strategy,
        RunConfig(
            max_iterations=100 if max_iterations is None else max_iterations,
            verbose=args.verbose,
        ),
    )
    result = runner.run()

    print()
    for line in summary_lines(result):
        print(line)
    print(f"Audit events: {len(trail.entries)}")

    payload = result.to_dict()
    payload["strategy"] = strategy_name
    payload["correct"] = game.is_solution(result.perfect_matches)
    payload["audit"] = trail.to_dicts()
    return payload


def play_many(args) -> dict:
    strategy_cls = resolve_strategy(args.strategy or "brute_force")
    summary = benchmark(
        num_contestants=args.contestants,
        games=args.games,
        strategy_factory=lambda contestants: strategy_cls(contestants),
        seed=args.seed,
        max_iterations=100 if args.max_iterations is None else args.max_iterations,
    )
    print()
    print(f"Games: {summary.games} x {summary.num_contestants} contestants")
    print(f"Solve rate: {summary.solve_rate:.1%}")
    print(
        f"Iterations: mean {summary.mean_iterations:.2f}, median {summary.median_iterations:.1f}, "
        f"std {summary.std_iterations:.2f}, min {summary.min_iterations}, "
        f"max {summary.max_iterations}, p90 {summary.p90_iterations:.1f}"
    )
    print(f"Queries per game: {summary.mean_queries:.2f}")
    return summary.to_dict()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Perfect match deduction strategy simulator"
    )
    parser.add_argument(
        "--contestants",
        type=int,
        default=12,
        help="Number of contestants per game (default: 12)",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=1,
        help="Number of games to play; more than 1 runs a benchmark (default: 1)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the secret pairing(s)",
    )
    parser.add_argument(
        "--kit",
        type=str,
        default=None,
        help="Path to a YAML game kit (single game only)",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Iteration cap per game (default: 100, or the kit's value)",
    )
    parser.add_argument(
        "--strategy",
        type=str,
        default=None,
        help="Strategy name (default: brute_force)",
    )
    parser.add_argument(
        "--result-file",
        type=str,
        default=None,
        help="Path to write result JSON",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    print("=" * 60)
    print("perfectmatch")
    print(f"Started: {datetime.now().isoformat()}")
    print("=" * 60)

    if args.max_iterations is not None and args.max_iterations < 1:
        print(f"[!] --max-iterations must be at least 1, got {args.max_iterations}")
        return 2

    if args.kit and args.games > 1:
        print("[!] --kit plays a single game; drop --games or --kit")
        return 2

    try:
        if args.games > 1:
            result = play_many(args)
        else:
            result = play_one(args)
    except (SolverError, KeyError, ValueError) as e:
        print(f"[!] {type(e).__name__}: {e}")
        return 1

    if args.result_file:
        with open(args.result_file, 'w') as f:
            json.dump(result, f, indent=2)
        print(f"Result file: {args.result_file}")

    return 0 if result.get("solved", True) else 1


if __name__ == "__main__":
    sys.exit(main())
