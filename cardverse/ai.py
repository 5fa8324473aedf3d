"""AI agents – ABC, SimpleAI, RandomAI."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

from cardverse.actions import Action, Attack, EndPhase, PlayCard
from cardverse.models import GameState
from cardverse.targeting import find_instance


class Agent(ABC):
    @abstractmethod
    def choose_action(self, gs: GameState, legal_actions: list[Action]) -> Action:
        ...


# ---------------------------------------------------------------------------
# SimpleAI
# ---------------------------------------------------------------------------

class SimpleAI(Agent):
    """Placeholder opponent.

    Main phase: a random affordable card, into a random empty front slot if
    there is one, otherwise a random back slot. Combat: every ready creature
    hits the opposing player. Single-target spells are cast without a target.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def choose_action(self, gs: GameState, legal_actions: list[Action]) -> Action:
        plays = [a for a in legal_actions if isinstance(a, PlayCard) and a.target_id is None]
        if plays:
            card_ids = list(dict.fromkeys(a.instance_id for a in plays))
            chosen = self._rng.choice(card_ids)
            options = [a for a in plays if a.instance_id == chosen]
            inst = find_instance(gs, chosen)
            if inst is not None and not inst.card.is_spell:
                front = [a for a in options if a.position is not None and a.position.row == "front"]
                options = front or options
            return self._rng.choice(options)

        face = [a for a in legal_actions if isinstance(a, Attack) and a.defender_id is None]
        if face:
            return face[0]

        return EndPhase()


# ---------------------------------------------------------------------------
# RandomAI
# ---------------------------------------------------------------------------

class RandomAI(Agent):
    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def choose_action(self, gs: GameState, legal_actions: list[Action]) -> Action:
        return self._rng.choice(legal_actions)
