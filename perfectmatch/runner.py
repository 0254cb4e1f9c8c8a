"""
Game runner.

Drives one game between a strategy and an oracle:

    while not solved and iterations < max_iterations:
        guess = strategy.ceremony_pairs()
        strategy.ceremony_feedback(oracle.ceremony(guess), guess)
        if solved: break
        pair = strategy.send_to_booth()
        strategy.booth_feedback(oracle.truth_booth(pair))

The runner owns the iteration cap and the console log. The strategy never
sees either.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .contestant import ContestantPair, format_pairs
from .spi.game_strategy import Correct, GameStrategy
from .spi.oracle import Oracle


@dataclass
class RunConfig:
    max_iterations: int = 100
    verbose: bool = False


@dataclass
class RunResult:
    """Result of one game."""
    solved: bool
    iterations: int
    ceremonies: int
    booth_queries: int
    times_round_used: int
    perfect_matches: List[ContestantPair]
    elapsed_time: float
    termination_reason: str
    trace: list = field(default_factory=list)

    @property
    def queries(self) -> int:
        return self.ceremonies + self.booth_queries

    def to_dict(self) -> dict:
        return {
            "solved": self.solved,
            "iterations": self.iterations,
            "ceremonies": self.ceremonies,
            "booth_queries": self.booth_queries,
            "queries": self.queries,
            "times_round_used": self.times_round_used,
            "perfect_matches": [list(pair.key()) for pair in self.perfect_matches],
            "elapsed_time": self.elapsed_time,
            "termination_reason": self.termination_reason,
            "trace_length": len(self.trace),
        }


class GameRunner:
    def __init__(
        self,
        oracle: Oracle,
        strategy: GameStrategy,
        config: Optional[RunConfig] = None,
    ):
        self.oracle = oracle
        self.strategy = strategy
        self.config = config or RunConfig()
        self.trace: List[str] = []
        self.ceremonies = 0
        self.booth_queries = 0

    def log(self, msg: str) -> None:
        """Record a message in the trace, and print it when verbose."""
        timestamped = f"[{datetime.now().strftime('%H:%M:%S.%f')[:-3]}] {msg}"
        self.trace.append(timestamped)
        if self.config.verbose:
            print(f"[perfectmatch] {msg}")

    def run(self) -> RunResult:
        start = time.time()
        iterations = 0
        reason = "max_iterations"

        while iterations < self.config.max_iterations:
            if self.strategy.is_solved:
                reason = "solved"
                break
            iterations += 1
            self.log(f"---- iteration {iterations} ----")
            self._ceremony()
            if self.strategy.is_solved:
                reason = "solved"
                break
            self._truth_booth()
        else:
            if self.strategy.is_solved:
                reason = "solved"

        solved = self.strategy.is_solved
        self.log(f"Game over ({reason}) after {iterations} iterations")
        return RunResult(
            solved=solved,
            iterations=iterations,
            ceremonies=self.ceremonies,
            booth_queries=self.booth_queries,
            times_round_used=self._times_round_used(),
            perfect_matches=list(self.strategy.perfect_matches),
            elapsed_time=time.time() - start,
            termination_reason=reason,
            trace=list(self.trace),
        )

    def _ceremony(self) -> None:
        guess = self.strategy.ceremony_pairs()
        num_right = self.oracle.ceremony(guess)
        self.ceremonies += 1
        self.log(f"Ceremony: {num_right}/{len(guess)} right")
        if self.config.verbose:
            self.log("Ceremony guess:\n" + format_pairs(guess))
        self.strategy.ceremony_feedback(num_right, guess)

    def _truth_booth(self) -> None:
        pair = self.strategy.send_to_booth()
        feedback = self.oracle.truth_booth(pair)
        self.booth_queries += 1
        verdict = "perfect match" if isinstance(feedback, Correct) else "no match"
        source = getattr(self.strategy, "last_booth_source", None)
        self.log(f"Truth booth: {pair} -> {verdict}" + (f" (from {source})" if source else ""))
        self.strategy.booth_feedback(feedback)
        self.log(f"Confirmed matches: {len(self.strategy.perfect_matches)}")

    def _times_round_used(self) -> int:
        round_manager = getattr(self.strategy, "round_manager", None)
        if round_manager is None:
            return 0
        return round_manager.times_round_used


def run_game(oracle: Oracle, strategy: GameStrategy, max_iterations: int = 100, verbose: bool = False) -> RunResult:
    return GameRunner(oracle, strategy, RunConfig(max_iterations=max_iterations, verbose=verbose)).run()


def summary_lines(result: RunResult) -> List[str]:
    return [
        f"Solved: {result.solved}",
        f"Iterations: {result.iterations}",
        f"Ceremonies: {result.ceremonies}",
        f"Truth booth queries: {result.booth_queries}",
        f"Round guesses used: {result.times_round_used}",
        f"Elapsed Time: {result.elapsed_time:.3f}s",
        f"Termination: {result.termination_reason}",
    ]
