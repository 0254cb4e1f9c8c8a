"""
Contestant identity types.

Contestants are opaque: the solver only relies on a stable integer id.
Labels are display-only and never take part in equality or hashing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional


@dataclass(frozen=True, order=True)
class Contestant:
    id: int
    label: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        if self.label:
            return f"{self.label}({self.id})"
        return f"Player({self.id})"


@dataclass(frozen=True, eq=False)
class ContestantPair:
    """
    Unordered pair of two distinct contestants.

    (A, B) and (B, A) compare equal and hash the same. The construction order
    is kept only for display.
    """

    a: Contestant
    b: Contestant

    def __post_init__(self) -> None:
        if self.a == self.b:
            raise ValueError(f"{self.a} cannot be paired with themselves.")

    @property
    def members(self) -> FrozenSet[Contestant]:
        return frozenset((self.a, self.b))

    def contains(self, contestant: Contestant) -> bool:
        return contestant == self.a or contestant == self.b

    def other(self, contestant: Contestant) -> Contestant:
        if contestant == self.a:
            return self.b
        if contestant == self.b:
            return self.a
        raise ValueError(f"{contestant} is not part of {self}.")

    def key(self) -> tuple:
        """Order-independent sort key: (lower id, higher id)."""
        return tuple(sorted((self.a.id, self.b.id)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContestantPair):
            return NotImplemented
        return self.members == other.members

    def __hash__(self) -> int:
        return hash(self.members)

    def __str__(self) -> str:
        return f"{self.a}, {self.b}"


def gen_contestants(num: int) -> List[Contestant]:
    return [Contestant(i) for i in range(num)]


def pairs_to_contestants(pairs: Iterable[ContestantPair]) -> List[Contestant]:
    contestants: List[Contestant] = []
    for pair in pairs:
        contestants.append(pair.a)
        contestants.append(pair.b)
    return contestants


def contestants_to_pairs(contestants: List[Contestant]) -> List[ContestantPair]:
    """Pair neighbours off in order: (c0, c1), (c2, c3), ..."""
    return [
        ContestantPair(contestants[i], contestants[i + 1])
        for i in range(0, len(contestants) - 1, 2)
    ]


def mixed_guess(
    perfect_matches: List[ContestantPair],
    num_perfect: int,
    num_unperfect: int,
) -> List[ContestantPair]:
    """
    Build a guess containing exactly ``num_perfect`` of ``perfect_matches``.

    The first ``num_perfect`` matches are kept; the contestants of the
    remaining matches are re-paired outside-in so none of those pairs are
    correct (given at least two matches are re-paired).
    """
    if num_perfect + num_unperfect > len(perfect_matches):
        raise ValueError(
            f"{num_perfect + num_unperfect} pairs can't be made from "
            f"{len(perfect_matches)} matches."
        )
    guess = list(perfect_matches[:num_perfect])
    to_unmatch = pairs_to_contestants(perfect_matches[num_perfect:])
    for i in range(len(to_unmatch) // 2):
        guess.append(ContestantPair(to_unmatch[i], to_unmatch[len(to_unmatch) - 1 - i]))
    return guess


def format_pairs(pairs: Iterable[ContestantPair]) -> str:
    return "\n".join(str(pair) for pair in pairs)
