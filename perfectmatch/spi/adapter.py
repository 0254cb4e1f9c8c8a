"""
Strategy discovery through package entry points.

Third-party packages register strategy classes under the
``perfectmatch.strategies`` group. Entry points are listed without importing
anything; a strategy module is only imported when it is asked for.
"""

from __future__ import annotations

from importlib import metadata
from typing import Dict, Type

from ..errors import STRATEGY_UNAVAILABLE, SolverError

ENTRY_POINT_GROUP = "perfectmatch.strategies"


def strategy_entry_points() -> Dict[str, metadata.EntryPoint]:
    """Map entry point name -> unloaded entry point."""
    eps = metadata.entry_points()
    if hasattr(eps, "select"):
        group = eps.select(group=ENTRY_POINT_GROUP)
    else:
        group = eps.get(ENTRY_POINT_GROUP, [])
    return {ep.name: ep for ep in group}


def load_strategy(name: str, entry_point: metadata.EntryPoint) -> Type:
    """
    Import the strategy class behind ``entry_point``.

    Raises:
        SolverError: STRATEGY_UNAVAILABLE if the module or attribute is missing
    """
    try:
        return entry_point.load()
    except (ImportError, AttributeError) as exc:
        raise SolverError(
            code=STRATEGY_UNAVAILABLE,
            message=f"Strategy '{name}' is registered but could not be loaded: {exc}",
            details={"strategy": name, "target": getattr(entry_point, "value", None)},
        ) from exc


def discover_strategies() -> Dict[str, Type]:
    """Map entry point name -> strategy class for every installed strategy."""
    return {name: load_strategy(name, ep) for name, ep in strategy_entry_points().items()}
