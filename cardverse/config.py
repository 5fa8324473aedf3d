"""Game configuration – rule constants with JSON overrides."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any


@dataclass
class GameConfig:
    starting_health: int = 30
    starting_mana: int = 1
    mana_cap: int = 10
    initial_hand_size: int = 5
    row_size: int = 3
    turn_timer: int = 60          # seconds, bookkeeping only
    max_turns: int = 50           # driver loop limit

    def __post_init__(self) -> None:
        if self.starting_health < 1:
            raise ValueError(f"starting_health must be >= 1, got {self.starting_health}")
        if not 0 <= self.starting_mana <= self.mana_cap:
            raise ValueError(
                f"starting_mana {self.starting_mana} not in [0,{self.mana_cap}]"
            )
        if self.initial_hand_size < 0:
            raise ValueError(f"initial_hand_size must be >= 0, got {self.initial_hand_size}")
        if self.row_size < 1:
            raise ValueError(f"row_size must be >= 1, got {self.row_size}")

    @classmethod
    def from_json(cls, path: str | Path, **overrides: Any) -> "GameConfig":
        """Load config from JSON file with optional CLI overrides."""
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        raw.update({k: v for k, v in overrides.items() if v is not None})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        return cls(**raw)
