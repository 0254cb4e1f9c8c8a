"""
Backtracking pairing generator.

Builds one full pairing that is consistent with a possibility map, using a
most-constrained-first depth-first search. The search keeps an explicit
stack of frames instead of recursing, so deep games never hit the recursion
limit and backtracking can resume from any frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Set

from .contestant import Contestant, ContestantPair
from .errors import UNSATISFIABLE, InvariantViolation
from .possibilities import PossibilityMap


@dataclass
class Frame:
    """A contestant waiting for a partner, and the partners not yet tried."""

    contestant: Contestant
    candidates: Set[Contestant]


def possible_pairing(possibilities: PossibilityMap) -> List[ContestantPair]:
    """
    Return a complete pairing consistent with ``possibilities``.

    Confirmed perfect matches come first, followed by one pair for every
    unresolved contestant. No returned pair is excluded in the map.

    The candidate with the lowest id is tried first and ties between equally
    constrained contestants go to the earliest one in the map, so the result
    is reproducible for a given contestant order.

    Raises:
        InvariantViolation: if the map admits no complete pairing
    """
    confirmed = possibilities.perfect_matches
    unresolved = possibilities.unresolved
    needed = len(unresolved) // 2
    if needed == 0:
        return confirmed

    committed: List[ContestantPair] = []
    assigned: Set[Contestant] = set()

    seed = possibilities.most_constrained()
    stack: List[Frame] = [Frame(seed, set(possibilities.candidates(seed)))]

    while len(committed) < needed:
        top = stack[-1]
        if top.candidates:
            partner = min(top.candidates)
            top.candidates.discard(partner)
            committed.append(ContestantPair(top.contestant, partner))
            assigned.update((top.contestant, partner))

            next_contestant = possibilities.most_constrained(exclude=assigned)
            if next_contestant is not None:
                stack.append(
                    Frame(
                        next_contestant,
                        set(possibilities.candidates(next_contestant)) - assigned,
                    )
                )
        else:
            # Unwind every exhausted frame along with the pair that led to it.
            while not stack[-1].candidates:
                stack.pop()
                if not stack:
                    raise InvariantViolation(
                        code=UNSATISFIABLE,
                        message=(
                            "No combination of pairs is left while the game is "
                            "still going."
                        ),
                        details={"possibilities": possibilities.snapshot()},
                    )
                undone = committed.pop()
                assigned.difference_update(undone.members)

    return confirmed + committed
