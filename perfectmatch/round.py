"""
Saved ceremony rounds.

A SavedRound keeps the pairs guessed in one ceremony together with how many
of them were right. As later deductions disprove individual guesses, the live
subset shrinks and the chance that any remaining guess is correct rises.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .contestant import Contestant, ContestantPair
from .errors import ROUND_EXHAUSTED, InvariantViolation


class SavedRound:
    def __init__(self, guesses: Iterable[ContestantPair], num_correct: int, round_id: int = 0):
        if num_correct < 0:
            raise ValueError(f"num_correct must be non-negative, got {num_correct}.")
        self._guesses: tuple = tuple(guesses)
        self._live: List[int] = list(range(len(self._guesses)))
        self.num_correct: int = num_correct
        self.round_id: int = round_id

    @property
    def guesses(self) -> List[ContestantPair]:
        """Every pair originally guessed, live or not."""
        return list(self._guesses)

    @property
    def live_guesses(self) -> List[ContestantPair]:
        return [self._guesses[i] for i in self._live]

    @property
    def live_count(self) -> int:
        return len(self._live)

    @property
    def is_exhausted(self) -> bool:
        return not self._live

    def probability(self) -> float:
        """
        Chance that a single live guess is a perfect match.

        An exhausted round has nothing left to offer and reports 0.0.
        """
        if not self._live:
            return 0.0
        return self.num_correct / len(self._live)

    def pick(self, num: int) -> List[ContestantPair]:
        """Return the first ``num`` live guesses, in original guess order."""
        if num > len(self._live):
            raise InvariantViolation(
                code=ROUND_EXHAUSTED,
                message=(
                    f"Can't pick {num} guesses because only {len(self._live)} "
                    "have not been eliminated."
                ),
                details={"round_id": self.round_id, "requested": num, "live": len(self._live)},
            )
        return [self._guesses[i] for i in self._live[:num]]

    def eliminate_guesses(self, pairs: Iterable[ContestantPair]) -> int:
        """Drop live guesses equal to any of ``pairs``. Returns how many were dropped."""
        disproved = set(pairs)
        before = len(self._live)
        self._live = [i for i in self._live if self._guesses[i] not in disproved]
        return before - len(self._live)

    def eliminate_player(self, contestant: Contestant) -> int:
        """Drop live guesses that mention ``contestant``. Returns how many were dropped."""
        before = len(self._live)
        self._live = [i for i in self._live if not self._guesses[i].contains(contestant)]
        return before - len(self._live)

    def decrement_correct(self) -> None:
        if self.num_correct > 0:
            self.num_correct -= 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round_id": self.round_id,
            "num_correct": self.num_correct,
            "live": [list(pair.key()) for pair in self.live_guesses],
            "guessed": len(self._guesses),
        }

    def __repr__(self) -> str:
        return (
            f"SavedRound(id={self.round_id}, correct={self.num_correct}, "
            f"live={len(self._live)}/{len(self._guesses)})"
        )
