"""
Possibility map: the elimination engine.

Tracks, for every unresolved contestant, which contestants are still viable
partners. The adjacency is symmetric at all times: B is a candidate of A
exactly when A is a candidate of B. The only mutation entry points are
exclude_pair and lock_pair_as_match, and each keeps that symmetry intact.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from .contestant import Contestant, ContestantPair
from .errors import BOOKKEEPING, CONFLICTING_MATCH, InvariantViolation


class PossibilityMap:
    """
    Symmetric map of contestant -> viable partners.

    Confirmed contestants are removed as keys and from every remaining
    candidate set. Key order is the order contestants were supplied in, which
    makes most-constrained tie-breaks reproducible.
    """

    def __init__(self, contestants: Iterable[Contestant]) -> None:
        """
        Initialize every contestant with all other contestants as candidates.

        Args:
            contestants: Participants of one game. Duplicates are collapsed.

        Raises:
            ValueError: if fewer than two distinct contestants are given
        """
        ordered: List[Contestant] = list(dict.fromkeys(contestants))
        if len(ordered) < 2:
            raise ValueError(
                f"At least 2 contestants are required, got {len(ordered)}."
            )
        self._contestants: FrozenSet[Contestant] = frozenset(ordered)
        self._possibilities: Dict[Contestant, Set[Contestant]] = {}
        for contestant in ordered:
            others = set(ordered)
            others.discard(contestant)
            self._possibilities[contestant] = others
        self._perfect_matches: List[ContestantPair] = []

    @property
    def contestants(self) -> FrozenSet[Contestant]:
        """Every contestant in the game, confirmed or not."""
        return self._contestants

    @property
    def unresolved(self) -> List[Contestant]:
        """Contestants whose partner is not confirmed yet, in key order."""
        return list(self._possibilities)

    @property
    def perfect_matches(self) -> List[ContestantPair]:
        """Confirmed pairs in confirmation order."""
        return list(self._perfect_matches)

    @property
    def is_solved(self) -> bool:
        return not self._possibilities

    def __contains__(self, contestant: object) -> bool:
        return contestant in self._possibilities

    def candidates(self, contestant: Contestant) -> FrozenSet[Contestant]:
        self._require_contestant(contestant)
        return frozenset(self._possibilities.get(contestant, ()))

    def is_confirmed(self, contestant: Contestant) -> bool:
        self._require_contestant(contestant)
        return contestant not in self._possibilities

    def is_excluded(self, a: Contestant, b: Contestant) -> bool:
        """
        Return True if (a, b) can no longer be a perfect match.

        A pair is excluded when either side is already confirmed with someone
        else, or when the two were separated by exclude_pair. A confirmed
        perfect match is not excluded.
        """
        self._require_contestant(a)
        self._require_contestant(b)
        if a not in self._possibilities or b not in self._possibilities:
            return ContestantPair(a, b) not in self._perfect_matches
        return b not in self._possibilities[a]

    def exclude_pair(self, pair: ContestantPair) -> bool:
        """
        Remove a and b from each other's candidate sets.

        Returns:
            True if the exclusion was applied, False if already excluded

        Raises:
            InvariantViolation: if a contestant would be left with no
                candidates at all
        """
        a, b = pair.a, pair.b
        if self.is_excluded(a, b) or pair in self._perfect_matches:
            return False
        a_poss = self._possibilities[a]
        b_poss = self._possibilities[b]
        if len(a_poss) <= 1 or len(b_poss) <= 1:
            raise InvariantViolation(
                code=BOOKKEEPING,
                message=(
                    f"Bookkeeping error for {pair}: excluding it would leave a "
                    "contestant with no possible partner."
                ),
                details={
                    "pair": list(pair.key()),
                    "remaining": {str(a.id): len(a_poss), str(b.id): len(b_poss)},
                },
            )
        a_poss.discard(b)
        b_poss.discard(a)
        return True

    def lock_pair_as_match(self, pair: ContestantPair) -> bool:
        """
        Record pair as a perfect match.

        Both contestants stop being keys and are removed from every other
        contestant's candidate set.

        Returns:
            True if newly confirmed, False if it was already confirmed

        Raises:
            InvariantViolation: if the pair was excluded earlier or either
                contestant is already matched with someone else
        """
        if pair in self._perfect_matches:
            return False
        if self.is_excluded(pair.a, pair.b):
            raise InvariantViolation(
                code=CONFLICTING_MATCH,
                message=f"{pair} cannot be a perfect match: it was already ruled out.",
                details={"pair": list(pair.key())},
            )
        for contestant in (pair.a, pair.b):
            del self._possibilities[contestant]
        for poss in self._possibilities.values():
            poss.discard(pair.a)
            poss.discard(pair.b)
        self._perfect_matches.append(pair)
        return True

    def remaining_count(self) -> int:
        """Number of undetermined pair candidates left."""
        return sum(len(poss) for poss in self._possibilities.values()) // 2

    def most_constrained(self, exclude: Iterable[Contestant] = ()) -> Optional[Contestant]:
        """
        Return the unresolved contestant with the fewest candidates left.

        Ties go to the earliest key. Contestants in ``exclude`` are skipped.
        """
        skip = set(exclude)
        best: Optional[Contestant] = None
        best_size = 0
        for contestant, poss in self._possibilities.items():
            if contestant in skip:
                continue
            if best is None or len(poss) < best_size:
                best = contestant
                best_size = len(poss)
        return best

    def min_candidate_count(self) -> Optional[int]:
        contestant = self.most_constrained()
        if contestant is None:
            return None
        return len(self._possibilities[contestant])

    def snapshot(self) -> Dict[int, List[int]]:
        """Plain id -> sorted candidate ids view, for audit payloads."""
        return {
            contestant.id: sorted(c.id for c in poss)
            for contestant, poss in self._possibilities.items()
        }

    def _require_contestant(self, contestant: Contestant) -> None:
        if contestant not in self._contestants:
            raise KeyError(f"{contestant} is not part of this game.")
