"""
Multi-game benchmark.

Plays many seeded games and summarises how many iterations the strategy
needed. Seeds are derived from a base seed, so a benchmark is reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from .contestant import Contestant
from .gamemaster import GameMaster
from .runner import GameRunner, RunConfig, RunResult
from .spi.game_strategy import GameStrategy

StrategyFactory = Callable[[List[Contestant]], GameStrategy]


@dataclass
class BenchmarkSummary:
    num_contestants: int
    games: int
    solved: int
    mean_iterations: float
    median_iterations: float
    std_iterations: float
    min_iterations: int
    max_iterations: int
    p90_iterations: float
    mean_queries: float
    iterations: List[int] = field(default_factory=list)

    @property
    def solve_rate(self) -> float:
        return self.solved / self.games if self.games else 0.0

    def to_dict(self) -> dict:
        return {
            "num_contestants": self.num_contestants,
            "games": self.games,
            "solved": self.solved,
            "solve_rate": self.solve_rate,
            "mean_iterations": self.mean_iterations,
            "median_iterations": self.median_iterations,
            "std_iterations": self.std_iterations,
            "min_iterations": self.min_iterations,
            "max_iterations": self.max_iterations,
            "p90_iterations": self.p90_iterations,
            "mean_queries": self.mean_queries,
        }


def summarize(num_contestants: int, results: List[RunResult]) -> BenchmarkSummary:
    if not results:
        raise ValueError("Cannot summarise an empty benchmark.")
    iterations = np.array([r.iterations for r in results], dtype=float)
    queries = np.array([r.queries for r in results], dtype=float)
    return BenchmarkSummary(
        num_contestants=num_contestants,
        games=len(results),
        solved=sum(1 for r in results if r.solved),
        mean_iterations=float(np.mean(iterations)),
        median_iterations=float(np.median(iterations)),
        std_iterations=float(np.std(iterations)),
        min_iterations=int(np.min(iterations)),
        max_iterations=int(np.max(iterations)),
        p90_iterations=float(np.percentile(iterations, 90)),
        mean_queries=float(np.mean(queries)),
        iterations=[int(i) for i in iterations],
    )


def benchmark(
    num_contestants: int,
    games: int,
    strategy_factory: StrategyFactory,
    seed: Optional[int] = None,
    max_iterations: int = 100,
) -> BenchmarkSummary:
    """
    Play ``games`` games of ``num_contestants`` and summarise them.

    Args:
        num_contestants: Even number of players per game
        games: How many games to play
        strategy_factory: Builds a fresh strategy from a contestant list
        seed: Base seed; game i uses a seed drawn from it
        max_iterations: Iteration cap per game
    """
    if games <= 0:
        raise ValueError(f"games must be positive, got {games}.")
    rng = np.random.default_rng(seed)
    game_seeds = rng.integers(0, 2**31 - 1, size=games)

    results: List[RunResult] = []
    for game_seed in game_seeds:
        game = GameMaster.initialize_game(num_contestants, seed=int(game_seed))
        strategy = strategy_factory(game.contestants())
        runner = GameRunner(game, strategy, RunConfig(max_iterations=max_iterations))
        results.append(runner.run())
    return summarize(num_contestants, results)
