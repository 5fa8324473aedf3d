"""Actions – play-card preconditions, placement, spells, combat.

This layer sits between a driver (AI, UI) and the rules core. It validates
what the core deliberately leaves unchecked (mana, slot occupancy, attack
eligibility) and answers False instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from cardverse.effects import apply_effect
from cardverse.models import (
    ON_PLAY, ROWS, CardInstance, CardPosition, Effect, GamePhase, GameState,
    Player, TargetType,
)
from cardverse.targeting import find_instance, find_owner, resolve_targets


# ---------------------------------------------------------------------------
# Action types (frozen dataclasses)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlayCard:
    instance_id: str
    position: CardPosition | None = None   # None for spells
    target_id: str | None = None


@dataclass(frozen=True)
class Attack:
    attacker_id: str
    defender_id: str | None = None         # None = the opposing player


@dataclass(frozen=True)
class EndPhase:
    pass


Action = Union[PlayCard, Attack, EndPhase]

SINGLE_TARGETS = (TargetType.ALLY, TargetType.ENEMY, TargetType.ANY)


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------

def empty_slots(player: Player) -> list[CardPosition]:
    slots: list[CardPosition] = []
    for row_name in ROWS:
        for idx, inst in enumerate(player.row(row_name)):
            if inst is None:
                slots.append(CardPosition(row=row_name, index=idx))
    return slots


def _slot_free(player: Player, position: CardPosition) -> bool:
    if position.row not in ROWS:
        return False
    row = player.row(position.row)
    return 0 <= position.index < len(row) and row[position.index] is None


def can_play_card(
    player: Player,
    instance: CardInstance,
    position: CardPosition | None = None,
) -> bool:
    """True if ``player`` may play ``instance`` from hand right now."""
    if not any(c is instance for c in player.hand):
        return False
    if instance.card.stats.mana_cost > player.mana:
        return False
    if instance.card.is_spell:
        return position is None
    return position is not None and _slot_free(player, position)


def can_attack(instance: CardInstance) -> bool:
    return instance.position is not None and instance.can_attack and not instance.is_exhausted


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

def cast_effect(
    gs: GameState,
    effect: Effect,
    source: CardInstance,
    target: CardInstance | None = None,
    owner: int | None = None,
) -> list[CardInstance]:
    """Resolve ``effect``'s targets for ``source`` and apply it. Returns the targets."""
    targets = resolve_targets(gs, effect, source, chosen=target, owner=owner)
    apply_effect(effect, source, targets)
    if targets:
        gs.add_log(f"{source.card.name}: {effect.name} affects {len(targets)} card(s)")
    return targets


def play_card(
    gs: GameState,
    player_idx: int,
    instance: CardInstance,
    position: CardPosition | None = None,
    target: CardInstance | None = None,
) -> bool:
    """Pay for and play ``instance``. Spells resolve and go to the graveyard;
    everything else takes the slot at ``position`` and fires its on-play
    effects."""
    player = gs.players[player_idx]
    if not can_play_card(player, instance, position):
        return False

    player.hand = [c for c in player.hand if c is not instance]
    player.mana -= instance.card.stats.mana_cost
    who = player.name or player.id

    if instance.card.is_spell:
        gs.add_log(f"{who} casts {instance.card.name}")
        player.graveyard.append(instance)
        for effect in instance.card.effects:
            cast_effect(gs, effect, instance, target, owner=player_idx)
        return True

    assert position is not None
    player.row(position.row)[position.index] = instance
    instance.position = position
    gs.add_log(f"{who} plays {instance.card.name} in {position.row} row")
    for effect in instance.card.effects:
        if effect.condition == ON_PLAY:
            cast_effect(gs, effect, instance, target, owner=player_idx)
    return True


def attack(
    gs: GameState,
    attacker: CardInstance,
    defender: CardInstance | None = None,
) -> bool:
    """``attacker`` strikes ``defender`` (who strikes back) or the opposing player.

    Dead cards are left in place; call TurnManager.resolve_deaths() and
    check_game_over() afterwards.
    """
    owner = find_owner(gs, attacker)
    if owner is None or not can_attack(attacker):
        return False
    enemy = gs.players[1 - owner]

    if defender is None:
        enemy.health -= attacker.current_stats.attack
        gs.add_log(
            f"{attacker.card.name} attacks {enemy.name or enemy.id} "
            f"for {attacker.current_stats.attack}"
        )
    else:
        if not any(c is defender for c in enemy.battlefield_cards()):
            return False
        defender.current_stats.health -= attacker.current_stats.attack
        attacker.current_stats.health -= defender.current_stats.attack
        gs.add_log(f"{attacker.card.name} attacks {defender.card.name}")

    attacker.can_attack = False
    attacker.is_exhausted = True
    return True


# ---------------------------------------------------------------------------
# Legal action generation
# ---------------------------------------------------------------------------

def _target_options(gs: GameState, instance: CardInstance) -> list[str | None]:
    effects = instance.card.effects
    if not instance.card.is_spell:
        effects = tuple(e for e in effects if e.condition == ON_PLAY)
    if not any(e.target in SINGLE_TARGETS for e in effects):
        return [None]
    return [None] + [c.id for c in gs.all_battlefield_cards()]


def get_legal_actions(gs: GameState) -> list[Action]:
    if gs.phase == GamePhase.MAIN:
        return _get_main_actions(gs)
    elif gs.phase == GamePhase.COMBAT:
        return _get_attack_actions(gs)
    return [EndPhase()]


def _get_main_actions(gs: GameState) -> list[Action]:
    actions: list[Action] = []
    p = gs.current_player()
    slots = empty_slots(p)
    for inst in p.hand:
        if inst.card.stats.mana_cost > p.mana:
            continue
        targets = _target_options(gs, inst)
        positions: list[CardPosition | None] = [None] if inst.card.is_spell else list(slots)
        for pos in positions:
            for tid in targets:
                actions.append(PlayCard(instance_id=inst.id, position=pos, target_id=tid))
    actions.append(EndPhase())
    return actions


def _get_attack_actions(gs: GameState) -> list[Action]:
    actions: list[Action] = []
    enemies = list(gs.opponent().battlefield_cards())
    for inst in gs.current_player().battlefield_cards():
        if not can_attack(inst):
            continue
        actions.append(Attack(attacker_id=inst.id))
        for enemy in enemies:
            actions.append(Attack(attacker_id=inst.id, defender_id=enemy.id))
    actions.append(EndPhase())
    return actions


def apply_action(gs: GameState, action: Action) -> bool:
    """Apply ``action`` for the current player. False if nothing happened."""
    match action:
        case PlayCard(instance_id=iid, position=pos, target_id=tid):
            if gs.phase != GamePhase.MAIN:
                return False
            inst = find_instance(gs, iid)
            if inst is None:
                return False
            target = find_instance(gs, tid) if tid is not None else None
            return play_card(gs, gs.current_player_index, inst, pos, target)
        case Attack(attacker_id=aid, defender_id=did):
            if gs.phase != GamePhase.COMBAT:
                return False
            attacker = find_instance(gs, aid)
            if attacker is None or find_owner(gs, attacker) != gs.current_player_index:
                return False
            defender = find_instance(gs, did) if did is not None else None
            if did is not None and defender is None:
                return False
            return attack(gs, attacker, defender)
        case EndPhase():
            return False
        case _:
            return False
