"""
Brute force deduction strategy.

Proposes ceremonies built from pairs that have never been ruled out. A
ceremony with no new matches rules out every pair in it; a ceremony with new
matches is saved as a round. The truth booth is then pointed either at the
most promising saved-round guess or at the most constrained contestant,
whichever has the better odds. Confirmed matches are fixed in place for
every later ceremony.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional, Type

from . import audit
from .audit import SolverEvent, SolverObserver
from .contestant import Contestant, ContestantPair
from .errors import NEGATIVE_CORRECT, NO_CANDIDATES, InvariantViolation
from .pairing import possible_pairing
from .possibilities import PossibilityMap
from .round_manager import RoundManager
from .spi.adapter import load_strategy, strategy_entry_points
from .spi.game_strategy import Correct, Feedback, Wrong


class StrategyPhase(str, Enum):
    """Where the strategy is in the ceremony / truth booth cycle."""
    AWAITING_CEREMONY_GUESS = "awaiting_ceremony_guess"
    AWAITING_CEREMONY_FEEDBACK = "awaiting_ceremony_feedback"
    AWAITING_BOOTH_GUESS = "awaiting_booth_guess"
    AWAITING_BOOTH_FEEDBACK = "awaiting_booth_feedback"
    COMPLETE = "complete"


class BruteForceStrategy:
    """
    Elimination plus saved-round strategy.

    Owns the possibility map, the confirmed matches and the round manager.
    Phase is tracked for drivers and the audit trail; calls made out of order
    are still honoured.
    """

    name = "brute_force"

    def __init__(
        self,
        contestants: Iterable[Contestant],
        observer: Optional[SolverObserver] = None,
    ) -> None:
        """
        Args:
            contestants: Every participant of the game (even count, at least 2)
            observer: Optional callable receiving SolverEvent records
        """
        contestants = list(contestants)
        if len(set(contestants)) % 2:
            raise ValueError(
                f"A perfect pairing needs an even number of contestants, got {len(set(contestants))}."
            )
        self.possibilities = PossibilityMap(contestants)
        self.round_manager = RoundManager()
        self.phase = StrategyPhase.AWAITING_CEREMONY_GUESS
        self._observer = observer
        self._last_booth_source: Optional[str] = None

    @property
    def contestants(self) -> List[Contestant]:
        return sorted(self.possibilities.contestants)

    @property
    def perfect_matches(self) -> List[ContestantPair]:
        return self.possibilities.perfect_matches

    @property
    def is_solved(self) -> bool:
        return self.possibilities.is_solved

    @property
    def last_booth_source(self) -> Optional[str]:
        """'round' or 'possibilities', whichever produced the last booth guess."""
        return self._last_booth_source

    # ---- ceremony ----

    def ceremony_pairs(self) -> List[ContestantPair]:
        guess = possible_pairing(self.possibilities)
        self.phase = StrategyPhase.AWAITING_CEREMONY_FEEDBACK
        self._emit(audit.CEREMONY_PROPOSED, {"guess": _keys(guess)})
        return guess

    def ceremony_feedback(self, num_right: int, guess: List[ContestantPair]) -> None:
        """
        Learn from a ceremony result.

        Only matches beyond the confirmed ones are informative. With none, every
        unconfirmed pair in ``guess`` is ruled out; otherwise the unconfirmed
        pairs not already ruled out are saved as a round carrying that many
        correct guesses.

        Raises:
            InvariantViolation: if fewer pairs were right than are already confirmed
        """
        confirmed = self.possibilities.perfect_matches
        num_new_correct = num_right - len(confirmed)
        if num_new_correct < 0:
            raise InvariantViolation(
                code=NEGATIVE_CORRECT,
                message=(
                    f"Ceremony reported {num_right} right but {len(confirmed)} "
                    "matches are already confirmed."
                ),
                details={"num_right": num_right, "confirmed": len(confirmed)},
            )
        unconfirmed = [pair for pair in guess if pair not in confirmed]
        self._emit(
            audit.CEREMONY_FEEDBACK,
            {"num_right": num_right, "num_new_correct": num_new_correct, "guess": _keys(guess)},
        )

        if num_new_correct == 0:
            self._exclude(unconfirmed)
        else:
            viable = [pair for pair in unconfirmed if not self.possibilities.is_excluded(pair.a, pair.b)]
            saved = self.round_manager.record_round(viable, num_new_correct)
            self._emit(audit.ROUND_RECORDED, saved.to_dict())

        self._prune()
        self._advance(StrategyPhase.AWAITING_BOOTH_GUESS)

    # ---- truth booth ----

    def send_to_booth(self) -> ContestantPair:
        """
        Pick the pair to verify next.

        Raises:
            InvariantViolation: if every contestant is already matched
        """
        if self.round_manager.should_use_round(self.possibilities):
            pair = self.round_manager.best_guess()
            self._last_booth_source = "round"
        else:
            contestant = self.possibilities.most_constrained()
            if contestant is None:
                raise InvariantViolation(
                    code=NO_CANDIDATES,
                    message="Every contestant is already matched; nothing to send to the booth.",
                )
            partner = min(self.possibilities.candidates(contestant))
            pair = ContestantPair(contestant, partner)
            self._last_booth_source = "possibilities"

        self.phase = StrategyPhase.AWAITING_BOOTH_FEEDBACK
        self._emit(
            audit.BOOTH_PROPOSED,
            {"pair": list(pair.key()), "source": self._last_booth_source},
        )
        return pair

    def booth_feedback(self, feedback: Feedback) -> None:
        if not isinstance(feedback, (Correct, Wrong)):
            raise TypeError(f"Unknown booth feedback: {feedback!r}")
        self._emit(
            audit.BOOTH_FEEDBACK,
            {"pair": list(feedback.pair.key()), "correct": isinstance(feedback, Correct)},
        )
        if isinstance(feedback, Correct):
            self._confirm(feedback.pair)
        else:
            self._exclude([feedback.pair])

        self._prune()
        self._advance(StrategyPhase.AWAITING_CEREMONY_GUESS)

    # ---- internals ----

    def _exclude(self, pairs: List[ContestantPair]) -> None:
        before = self._snapshot()
        applied = [pair for pair in pairs if self.possibilities.exclude_pair(pair)]
        # Rounds may still hold pairs the map ruled out earlier.
        self.round_manager.eliminate_guesses(pairs)
        if not applied:
            return
        self._emit(audit.PAIRS_EXCLUDED, {"pairs": _keys(applied)}, before)

    def _confirm(self, pair: ContestantPair) -> None:
        before = self._snapshot()
        if not self.possibilities.lock_pair_as_match(pair):
            return
        self.round_manager.confirm_match(pair)
        self._emit(
            audit.MATCH_CONFIRMED,
            {"pair": list(pair.key()), "confirmed": len(self.possibilities.perfect_matches)},
            before,
        )

    def _prune(self) -> None:
        pruned = self.round_manager.prune()
        if pruned:
            self._emit(audit.ROUNDS_PRUNED, {"pruned": pruned, "rounds": len(self.round_manager)})

    def _advance(self, phase: StrategyPhase) -> None:
        self.phase = StrategyPhase.COMPLETE if self.is_solved else phase

    def _snapshot(self) -> Dict[int, List[int]]:
        if self._observer is None:
            return {}
        return self.possibilities.snapshot()

    def _emit(
        self,
        verb: str,
        payload: Dict,
        before: Optional[Dict[int, List[int]]] = None,
    ) -> None:
        if self._observer is None:
            return
        after = self.possibilities.snapshot()
        self._observer(
            SolverEvent(
                verb=verb,
                payload=payload,
                possibilities_before=after if before is None else before,
                possibilities_after=after,
            )
        )


def _keys(pairs: Iterable[ContestantPair]) -> List[List[int]]:
    return [list(pair.key()) for pair in pairs]


def resolve_strategy(name: str) -> Type:
    """
    Look up a strategy class by name.

    The built-in strategy is always available; others come from the
    ``perfectmatch.strategies`` entry point group.
    """
    if name == BruteForceStrategy.name:
        return BruteForceStrategy
    registered = strategy_entry_points()
    if name not in registered:
        known = sorted({BruteForceStrategy.name, *registered})
        raise KeyError(f"Unknown strategy '{name}'. Available: {', '.join(known)}")
    return load_strategy(name, registered[name])
