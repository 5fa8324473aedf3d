"""Effect processor – category handlers and turn-boundary passes.

Every function here works only on the card instances it is given and keeps
no state between calls. Categories without a registered handler (shield,
summoning, ...) are accepted and do nothing beyond duration bookkeeping.
"""

from __future__ import annotations

import uuid
from typing import Callable, Iterable, Optional, Union

from cardverse.models import (
    ON_DEATH, TURN_END, TURN_START,
    ActiveEffect, CardInstance, Effect, EffectCategory, EffectType,
)

EffectHandler = Callable[[Effect, CardInstance, CardInstance], None]

EFFECT_HANDLERS: dict[EffectCategory, EffectHandler] = {}

Targets = Optional[Union[CardInstance, Iterable[CardInstance]]]


def register_category(category: EffectCategory):
    """Decorator to register the handler for one effect category."""
    def decorator(fn: EffectHandler) -> EffectHandler:
        EFFECT_HANDLERS[category] = fn
        return fn
    return decorator


# ---------------------------------------------------------------------------
# Utility
# ---------------------------------------------------------------------------

def _mentions(effect: Effect, word: str) -> bool:
    return word in effect.description.lower()


def affects_stat(effect: Effect, stat: str) -> bool:
    """True if a stat_modification effect touches ``stat``.

    An explicit ``affected_stats`` wins; otherwise the description text is
    searched for the stat name.
    """
    if effect.affected_stats:
        return stat in effect.affected_stats
    return _mentions(effect, stat)


def _add_marker(target: CardInstance, prefix: str, effect: Effect) -> None:
    turns = effect.duration if effect.duration > 0 else 1
    target.active_effects.append(ActiveEffect(
        effect_id=f"{prefix}-{uuid.uuid4().hex[:8]}",
        turns_remaining=turns,
        magnitude=1,
    ))


def _normalize_targets(targets: Targets) -> list[CardInstance]:
    if targets is None:
        return []
    if isinstance(targets, CardInstance):
        return [targets]
    return list(targets)


# ---------------------------------------------------------------------------
# Category handlers
# ---------------------------------------------------------------------------

@register_category(EffectCategory.STAT_MODIFICATION)
def _stat_modification(effect: Effect, source: CardInstance, target: CardInstance) -> None:
    sign = 1 if effect.type == EffectType.BUFF else -1
    delta = effect.magnitude * sign
    stats = target.current_stats
    if affects_stat(effect, "attack"):
        stats.attack += delta
    if affects_stat(effect, "health"):
        stats.health += delta
    # health may go negative, attack may not
    stats.attack = max(0, stats.attack)


@register_category(EffectCategory.DAMAGE)
def _damage(effect: Effect, source: CardInstance, target: CardInstance) -> None:
    target.current_stats.health -= effect.magnitude


@register_category(EffectCategory.HEALING)
def _healing(effect: Effect, source: CardInstance, target: CardInstance) -> None:
    max_health = target.card.stats.health
    target.current_stats.health = min(max_health, target.current_stats.health + effect.magnitude)


@register_category(EffectCategory.CONTROL)
def _control(effect: Effect, source: CardInstance, target: CardInstance) -> None:
    if _mentions(effect, "silence"):
        _add_marker(target, "silence", effect)
    if _mentions(effect, "stun"):
        _add_marker(target, "stun", effect)
        target.can_attack = False


@register_category(EffectCategory.UTILITY)
def _utility(effect: Effect, source: CardInstance, target: CardInstance) -> None:
    """Card draw and mana effects need the game state; the driver owns them."""
    pass


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

def apply_single_effect(effect: Effect, source: CardInstance, target: CardInstance) -> None:
    handler = EFFECT_HANDLERS.get(effect.category)
    if handler is not None:
        handler(effect, source, target)

    if effect.duration > 0:
        for active in target.active_effects:
            if active.effect_id == effect.id:
                active.turns_remaining = effect.duration
                break
        else:
            target.active_effects.append(ActiveEffect(
                effect_id=effect.id,
                turns_remaining=effect.duration,
                magnitude=effect.magnitude,
            ))


def apply_effect(effect: Effect, source: CardInstance, targets: Targets) -> None:
    """Apply ``effect`` once to each target (None, one instance, or many)."""
    for target in _normalize_targets(targets):
        apply_single_effect(effect, source, target)


# ---------------------------------------------------------------------------
# Turn-boundary passes
# ---------------------------------------------------------------------------

def _fire_persistent(card: CardInstance, condition: str) -> None:
    for effect in card.card.effects:
        if effect.type == EffectType.PERSISTENT and effect.condition == condition:
            apply_single_effect(effect, card, card)


def tick_active_effects(card: CardInstance) -> None:
    """Count every active effect down by one turn and drop expired ones."""
    for active in card.active_effects:
        active.turns_remaining -= 1
    card.active_effects = [ae for ae in card.active_effects if ae.turns_remaining > 0]


def process_start_turn_effects(cards: Iterable[CardInstance]) -> None:
    for card in cards:
        tick_active_effects(card)
        _fire_persistent(card, TURN_START)


def process_end_turn_effects(cards: Iterable[CardInstance]) -> None:
    for card in cards:
        _fire_persistent(card, TURN_END)


def death_effects(card: CardInstance) -> list[Effect]:
    """Permanent effects of ``card`` that fire when it dies."""
    return [e for e in card.card.effects if e.condition == ON_DEATH]
