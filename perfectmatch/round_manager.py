"""
Round manager: probability bookkeeping across saved ceremony rounds.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from .contestant import ContestantPair, format_pairs
from .errors import NO_CANDIDATES, InvariantViolation
from .possibilities import PossibilityMap
from .round import SavedRound


class RoundManager:
    """
    Ordered collection of saved rounds.

    Decides whether the best surviving round guess beats guessing straight
    from the possibility map, and keeps every round consistent with new
    deductions.
    """

    def __init__(self) -> None:
        self.rounds: List[SavedRound] = []
        self.times_round_used: int = 0
        self._last_round_id: int = 0

    def __len__(self) -> int:
        return len(self.rounds)

    def __iter__(self) -> Iterator[SavedRound]:
        return iter(self.rounds)

    def latest(self) -> Optional[SavedRound]:
        return self.rounds[-1] if self.rounds else None

    def most_effective(self) -> Optional[SavedRound]:
        """Live round with the highest probability. First found wins ties."""
        best: Optional[SavedRound] = None
        for saved in self.rounds:
            if saved.is_exhausted:
                continue
            if best is None or saved.probability() > best.probability():
                best = saved
        return best

    def should_use_round(self, possibilities: PossibilityMap) -> bool:
        """
        Compare the best round against a blind pick from the possibility map.

        The blind pick takes the most constrained contestant, so its chance is
        1 / (that contestant's remaining candidates).
        """
        best_round = self.most_effective()
        if best_round is None:
            return False
        min_candidates = possibilities.min_candidate_count()
        if not min_candidates:
            raise InvariantViolation(
                code=NO_CANDIDATES,
                message="There should be possibilities left while rounds are still live.",
                details={"round_id": best_round.round_id},
            )
        return best_round.probability() > 1.0 / min_candidates

    def best_guess(self) -> Optional[ContestantPair]:
        """
        First live guess of the most effective round.

        The guess stays live; booth feedback retires it through
        confirm_match or eliminate_guesses.
        """
        best_round = self.most_effective()
        if best_round is None:
            return None
        self.times_round_used += 1
        return best_round.pick(1)[0]

    def record_round(self, guess: Iterable[ContestantPair], num_correct: int) -> SavedRound:
        self._last_round_id += 1
        saved = SavedRound(guess, num_correct, round_id=self._last_round_id)
        self.rounds.append(saved)
        return saved

    def confirm_match(self, pair: ContestantPair) -> None:
        # Every round loses one correct guess, whether or not it held the pair.
        for saved in self.rounds:
            saved.decrement_correct()
            saved.eliminate_player(pair.a)
            saved.eliminate_player(pair.b)

    def eliminate_guesses(self, pairs: Iterable[ContestantPair]) -> None:
        disproved = list(pairs)
        for saved in self.rounds:
            saved.eliminate_guesses(disproved)

    def prune(self) -> int:
        """Drop rounds with no live guesses or no correct guesses left. Returns how many."""
        num_saved = len(self.rounds)
        self.rounds = [
            saved for saved in self.rounds
            if saved.live_count > 0 and saved.num_correct != 0
        ]
        return num_saved - len(self.rounds)

    def describe(self) -> str:
        lines = []
        for saved in self.rounds:
            lines.append(
                f"saved round #{saved.round_id} ({saved.num_correct} correct, "
                f"p={saved.probability():.3f}) --"
            )
            lines.append(format_pairs(saved.live_guesses))
        return "\n".join(lines)
