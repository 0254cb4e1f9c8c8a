"""
Deterministic game master: owns the secret pairing and answers queries.
"""

from __future__ import annotations

import random
from typing import Iterable, List, Optional, Set

from .contestant import Contestant, ContestantPair, pairs_to_contestants
from .spi.game_strategy import Correct, Feedback, Wrong


class GameMaster:
    def __init__(self, pairs: Iterable[ContestantPair], seed: Optional[int] = None):
        self._pairs: List[ContestantPair] = list(pairs)
        self._secret: Set[ContestantPair] = set(self._pairs)
        seen = pairs_to_contestants(self._pairs)
        if len(seen) != len(set(seen)):
            raise ValueError("Each contestant must appear in exactly one secret pair.")
        if not self._pairs:
            raise ValueError("A game needs at least one secret pair.")
        self._rng = random.Random(seed)
        self.ceremonies = 0
        self.booth_queries = 0

    @classmethod
    def initialize_game(cls, num_contestants: int, seed: Optional[int] = None) -> "GameMaster":
        """
        Create ``num_contestants`` contestants and pair them off at random.

        Ids are 0..n-1; the same seed always yields the same secret pairing.
        """
        if num_contestants < 2 or num_contestants % 2:
            raise ValueError(
                f"num_contestants must be an even number of at least 2, got {num_contestants}."
            )
        return cls.random_pairing([Contestant(i) for i in range(num_contestants)], seed=seed)

    @classmethod
    def random_pairing(cls, contestants: Iterable[Contestant], seed: Optional[int] = None) -> "GameMaster":
        """Shuffle ``contestants`` with ``seed`` and pair neighbours off."""
        players = list(contestants)
        if len(players) % 2:
            raise ValueError(f"Can't pair off an odd number of contestants ({len(players)}).")
        rng = random.Random(seed)
        rng.shuffle(players)
        pairs = [
            ContestantPair(players[i], players[i + 1])
            for i in range(0, len(players), 2)
        ]
        return cls(pairs, seed=seed)

    @classmethod
    def from_pairs(cls, pairs: Iterable[ContestantPair], seed: Optional[int] = None) -> "GameMaster":
        return cls(pairs, seed=seed)

    @property
    def num_pairs(self) -> int:
        return len(self._pairs)

    @property
    def queries(self) -> int:
        return self.ceremonies + self.booth_queries

    def contestants(self) -> List[Contestant]:
        """All contestants, in an order that does not reveal the pairing."""
        players = pairs_to_contestants(self._pairs)
        self._rng.shuffle(players)
        return players

    def is_perfect_match(self, pair: ContestantPair) -> bool:
        return pair in self._secret

    def ceremony(self, guess: List[ContestantPair]) -> int:
        self.ceremonies += 1
        return sum(1 for pair in set(guess) if pair in self._secret)

    def truth_booth(self, guess: ContestantPair) -> Feedback:
        self.booth_queries += 1
        if guess in self._secret:
            return Correct(guess)
        return Wrong(guess)

    def is_solution(self, pairs: Iterable[ContestantPair]) -> bool:
        return set(pairs) == self._secret
