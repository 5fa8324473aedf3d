"""Target resolution – turns an effect's TargetType into concrete instances."""

from __future__ import annotations

from cardverse.models import CardInstance, Effect, GameState, TargetType


def find_owner(gs: GameState, instance: CardInstance) -> int | None:
    """Index of the player holding ``instance`` in hand or on the battlefield."""
    for pi, player in enumerate(gs.players):
        if any(c is instance for c in player.hand):
            return pi
        if any(c is instance for c in player.battlefield_cards()):
            return pi
    return None


def find_instance(gs: GameState, instance_id: str) -> CardInstance | None:
    for player in gs.players:
        for inst in player.hand:
            if inst.id == instance_id:
                return inst
        for inst in player.battlefield_cards():
            if inst.id == instance_id:
                return inst
    return None


def resolve_targets(
    gs: GameState,
    effect: Effect,
    source: CardInstance,
    chosen: CardInstance | None = None,
    owner: int | None = None,
) -> list[CardInstance]:
    """Resolve ``effect.target`` for ``source``.

    Group targets are read from the battlefields. Single targets (ally, enemy,
    any) come from ``chosen`` and are dropped if ``chosen`` sits on the wrong
    side. ``owner`` overrides the owner lookup for sources that have already
    left play (spells, dying cards).
    """
    if owner is None:
        owner = find_owner(gs, source)
    if owner is None:
        return []
    allies = gs.players[owner]
    enemies = gs.players[1 - owner]

    match effect.target:
        case TargetType.SELF:
            return [source]
        case TargetType.ALLY_ALL:
            return list(allies.battlefield_cards())
        case TargetType.ENEMY_ALL:
            return list(enemies.battlefield_cards())
        case TargetType.ALLY:
            if chosen is not None and any(c is chosen for c in allies.battlefield_cards()):
                return [chosen]
        case TargetType.ENEMY:
            if chosen is not None and any(c is chosen for c in enemies.battlefield_cards()):
                return [chosen]
        case TargetType.ANY:
            if chosen is not None and any(c is chosen for c in gs.all_battlefield_cards()):
                return [chosen]
    return []
