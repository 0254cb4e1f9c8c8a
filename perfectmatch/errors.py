"""
Solver error types.

Every error carries a machine-readable code alongside the message so drivers
can report failures without parsing strings.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SolverError(Exception):
    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvariantViolation(SolverError):
    """
    Raised when solver state is provably inconsistent.

    These are defects, not recoverable conditions: the elimination discipline
    guarantees they cannot happen with a truthful oracle. Callers must not
    retry.
    """


class KitError(SolverError):
    """Raised when a game kit file cannot be loaded or fails validation."""


# Invariant violation codes
BOOKKEEPING = "BOOKKEEPING"
UNSATISFIABLE = "UNSATISFIABLE"
ROUND_EXHAUSTED = "ROUND_EXHAUSTED"
CONFLICTING_MATCH = "CONFLICTING_MATCH"
NEGATIVE_CORRECT = "NEGATIVE_CORRECT"
NO_CANDIDATES = "NO_CANDIDATES"

# Driver codes
STRATEGY_UNAVAILABLE = "STRATEGY_UNAVAILABLE"
