"""
Solver events and the audit trail observer.

The strategy reports what it does through an optional observer callable.
Nothing in the solver reads observer state back, so running with or without
an observer produces the same guesses.
"""

from __future__ import annotations

import hashlib
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

# Event verbs
CEREMONY_PROPOSED = "CEREMONY_PROPOSED"
CEREMONY_FEEDBACK = "CEREMONY_FEEDBACK"
ROUND_RECORDED = "ROUND_RECORDED"
PAIRS_EXCLUDED = "PAIRS_EXCLUDED"
BOOTH_PROPOSED = "BOOTH_PROPOSED"
BOOTH_FEEDBACK = "BOOTH_FEEDBACK"
MATCH_CONFIRMED = "MATCH_CONFIRMED"
ROUNDS_PRUNED = "ROUNDS_PRUNED"


@dataclass(frozen=True)
class SolverEvent:
    verb: str
    payload: Dict[str, Any]
    possibilities_before: Dict[int, List[int]] = field(default_factory=dict)
    possibilities_after: Dict[int, List[int]] = field(default_factory=dict)


SolverObserver = Callable[[SolverEvent], None]


@dataclass
class AuditEntry:
    event_id: str
    ts: float
    verb: str
    payload: Dict[str, Any]
    possibilities_before_hash: str
    possibilities_after_hash: str
    remaining_before: int
    remaining_after: int
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "event_id": self.event_id,
            "ts": self.ts,
            "verb": self.verb,
            "payload": self.payload,
            "possibilities_before_hash": self.possibilities_before_hash,
            "possibilities_after_hash": self.possibilities_after_hash,
            "remaining_before": self.remaining_before,
            "remaining_after": self.remaining_after,
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data


class AuditTrail:
    """
    Observer that keeps an ordered, hash-chained record of solver events.

    Each entry hashes the possibility map before and after the event, chained
    to the previous entry, so two runs can be compared step by step.
    """

    def __init__(self, game_id: Optional[str] = None) -> None:
        self.game_id = game_id or str(uuid.uuid4())
        self._entries: List[AuditEntry] = []
        self._head_hash: str = ""

    def __call__(self, event: SolverEvent) -> None:
        before_hash = _hash_possibilities(event.possibilities_before, self.game_id, self._head_hash)
        after_hash = _hash_possibilities(event.possibilities_after, self.game_id, self._head_hash)
        entry = AuditEntry(
            event_id=str(uuid.uuid4()),
            ts=time.time(),
            verb=event.verb,
            payload=dict(event.payload),
            possibilities_before_hash=before_hash,
            possibilities_after_hash=after_hash,
            remaining_before=_count(event.possibilities_before),
            remaining_after=_count(event.possibilities_after),
        )
        self._entries.append(entry)
        self._head_hash = after_hash

    @property
    def entries(self) -> List[AuditEntry]:
        return list(self._entries)

    @property
    def head_hash(self) -> str:
        return self._head_hash

    def verbs(self) -> List[str]:
        return [entry.verb for entry in self._entries]

    def since(self, event_id: Optional[str] = None) -> List[AuditEntry]:
        if event_id is None:
            return list(self._entries)
        for idx, entry in enumerate(self._entries):
            if entry.event_id == event_id:
                return list(self._entries[idx + 1:])
        return list(self._entries)

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]


def _count(possibilities: Dict[int, List[int]]) -> int:
    return sum(len(poss) for poss in possibilities.values()) // 2


def _hash_possibilities(possibilities: Dict[int, List[int]], game_id: str, prev_hash: str) -> str:
    serialized = "\n".join(
        f"{key}:{','.join(str(c) for c in sorted(poss))}"
        for key, poss in sorted(possibilities.items())
    )
    payload = f"{serialized}|{game_id}|{prev_hash}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
