"""
Game kit loader.

A kit is a YAML file describing one game: who plays, optionally the secret
pairing, and how the driver should run it. Example::

    name: season_1
    contestants: [Ana, Ben, Cy, Dee]
    secret_pairs: [[0, 2], [1, 3]]
    max_iterations: 50
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .contestant import Contestant, ContestantPair
from .errors import KitError
from .gamemaster import GameMaster


class GameKitModel(BaseModel):
    name: str = "game"
    num_contestants: Optional[int] = Field(default=None, ge=2)
    contestants: Optional[List[str]] = None
    secret_pairs: Optional[List[List[int]]] = None
    seed: Optional[int] = None
    max_iterations: int = Field(default=100, gt=0)
    strategy: str = "brute_force"

    @model_validator(mode="after")
    def _check_roster(self) -> "GameKitModel":
        if self.num_contestants is None and self.contestants is None:
            raise ValueError("either num_contestants or contestants is required")
        size = len(self.contestants) if self.contestants is not None else self.num_contestants
        if self.num_contestants is not None and size != self.num_contestants:
            raise ValueError(
                f"num_contestants is {self.num_contestants} but {size} contestants are listed"
            )
        if size < 2 or size % 2:
            raise ValueError(f"an even number of at least 2 contestants is required, got {size}")
        if self.secret_pairs is not None:
            seen: List[int] = []
            for pair in self.secret_pairs:
                if len(pair) != 2 or pair[0] == pair[1]:
                    raise ValueError(f"secret pair {pair} must name two different contestants")
                seen.extend(pair)
            if sorted(seen) != list(range(size)):
                raise ValueError("secret_pairs must use every contestant index exactly once")
        return self

    @property
    def size(self) -> int:
        if self.contestants is not None:
            return len(self.contestants)
        return self.num_contestants or 0


@dataclass(frozen=True)
class GameKit:
    name: str
    contestants: List[Contestant]
    secret_pairs: Optional[List[ContestantPair]]
    seed: Optional[int]
    max_iterations: int
    strategy: str

    def build_game(self) -> GameMaster:
        if self.secret_pairs is not None:
            return GameMaster.from_pairs(self.secret_pairs, seed=self.seed)
        return GameMaster.random_pairing(self.contestants, seed=self.seed)


def parse_kit(data: Dict[str, Any]) -> GameKit:
    try:
        model = GameKitModel.model_validate(data)
    except ValidationError as exc:
        raise KitError(
            code="INVALID_KIT",
            message="Game kit failed validation.",
            details={"errors": exc.errors(include_url=False)},
        ) from exc

    labels = model.contestants or [None] * model.size
    contestants = [Contestant(i, label) for i, label in enumerate(labels)]
    secret_pairs = None
    if model.secret_pairs is not None:
        secret_pairs = [
            ContestantPair(contestants[a], contestants[b]) for a, b in model.secret_pairs
        ]
    return GameKit(
        name=model.name,
        contestants=contestants,
        secret_pairs=secret_pairs,
        seed=model.seed,
        max_iterations=model.max_iterations,
        strategy=model.strategy,
    )


def load_kit(path: str) -> GameKit:
    try:
        data = yaml.safe_load(Path(path).read_text())
    except (OSError, yaml.YAMLError) as exc:
        raise KitError(
            code="UNREADABLE_KIT",
            message=f"Could not read game kit {path}: {exc}",
        ) from exc
    if not isinstance(data, dict):
        raise KitError(code="INVALID_KIT", message=f"Game kit {path} must be a mapping.")
    return parse_kit(data)
