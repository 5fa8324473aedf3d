"""Card definitions from a normalized image-analysis result.

How the analysis is produced is not this module's concern; it expects a dict
such as::

    {
        "objects_detected": ["Old Oak"],
        "suggested_stats": {"health": 9, "attack": 4, "mana_cost": 3},
        "generated_description": "...",
        "generated_lore": "...",
        "rarity": "rare",
        "card_type": "creature",
        "element": "flora",
        "suggested_effects": [{"name": "Regeneration"}],  # or "effects"
    }
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from cardverse.elements import get_element_by_name
from cardverse.models import (
    ALWAYS, STAT_RANGES, STATS, Card, CardStats, CardType, Effect, EffectCategory,
    EffectType, Element, Rarity, TargetType,
)

FALLBACK_STATS = {"health": 6, "attack": 6, "mana_cost": 5}
FALLBACK_NAME = "Mysterious Card"
FALLBACK_DESCRIPTION = "A mysterious card with unknown properties."
FALLBACK_LORE = "The origins of this card are shrouded in mystery."

DEFAULT_EFFECT_DURATION = 1
DEFAULT_EFFECT_MAGNITUDE = 1
KEY_TERMS = (
    "damage", "heal", "buff", "debuff", "boost", "stun", "freeze",
    "attack", "defend", "protect", "shield", "summon", "banish",
)

# Maximum number of effects a card of each rarity carries
MAX_EFFECTS: dict[Rarity, int] = {
    Rarity.COMMON: 1,
    Rarity.UNCOMMON: 1,
    Rarity.RARE: 2,
    Rarity.EPIC: 2,
    Rarity.LEGENDARY: 3,
    Rarity.MYTHIC: 3,
    Rarity.UNIQUE: 3,
}


def clamp_stats(suggested: dict[str, Any] | None) -> CardStats:
    """Keep only health/attack/mana_cost and clamp each into its range.

    Missing or non-numeric values take the fallback value.
    """
    suggested = suggested or {}
    values: dict[str, int] = {}
    for stat, (lo, hi) in STAT_RANGES.items():
        raw = suggested.get(stat, FALLBACK_STATS[stat])
        try:
            value = int(round(float(raw)))
        except (TypeError, ValueError, OverflowError):
            value = FALLBACK_STATS[stat]
        values[stat] = max(lo, min(hi, value))
    return CardStats(**values)


def _pick_name(analysis: dict[str, Any], custom_name: str | None) -> str:
    if custom_name:
        return custom_name
    objects = analysis.get("objects_detected") or []
    if objects and isinstance(objects[0], str) and len(objects[0].strip()) > 1:
        return objects[0].strip()
    return FALLBACK_NAME


def _pick_enum(enum_cls, value: Any, default):
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        return default


def _first(suggestion: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if suggestion.get(key):
            return suggestion[key]
    return None


def _bounded_int(raw: Any, default: int, lo: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError):
        return default
    return value if value >= lo else default


def _effect_name(name: str, description: str) -> str:
    # Names that repeat a "Name: text" description or run too long get a short one
    if (description.startswith(name) and ":" in description) or len(name) > 25:
        lowered = description.lower()
        for term in KEY_TERMS:
            if term in lowered:
                return f"{term.capitalize()} Mastery"
        return "Special Ability"
    return name


def _is_inline(suggestion: dict[str, Any]) -> bool:
    return bool(
        _first(suggestion, "type", "effect_type", "effectType")
        and _first(suggestion, "category", "effect_category", "effectCategory")
    )


def _custom_effect(suggestion: dict[str, Any]) -> Effect | None:
    """Effect described inline by a suggestion; None if a kind cannot be mapped."""
    effect_type = _pick_enum(EffectType, _first(suggestion, "type", "effect_type", "effectType"), None)
    category = _pick_enum(
        EffectCategory, _first(suggestion, "category", "effect_category", "effectCategory"), None,
    )
    target = _pick_enum(
        TargetType, _first(suggestion, "target", "target_type", "targetType") or "self", None,
    )
    if effect_type is None or category is None or target is None:
        return None

    description = str(suggestion.get("description") or "")
    affected = suggestion.get("affected_stats") or ()
    if isinstance(affected, str):
        affected = (affected,)
    condition = suggestion.get("condition")
    return Effect(
        id=str(suggestion.get("id") or uuid.uuid4()),
        name=_effect_name(str(suggestion.get("name") or "Special Ability"), description),
        type=effect_type,
        category=category,
        duration=_bounded_int(suggestion.get("duration"), DEFAULT_EFFECT_DURATION, -1),
        magnitude=_bounded_int(suggestion.get("magnitude"), DEFAULT_EFFECT_MAGNITUDE, 0),
        target=target,
        condition=condition if condition and condition != "none" else ALWAYS,
        description=description,
        affected_stats=tuple(s for s in affected if s in STATS),
    )


def _from_pool(text: str, pool: dict[str, Effect]) -> Effect | None:
    text = text.lower()
    if not text:
        return None
    for effect in pool.values():
        pool_name = effect.name.lower()
        if text in pool_name or pool_name in text:
            return effect
    for effect in pool.values():
        if text in effect.description.lower():
            return effect
    return None


def _match_effects(
    suggestions: list[Any],
    pool: dict[str, Effect],
) -> list[Effect]:
    """Inline suggestions become custom effects; the rest are matched by name.

    A suggestion whose kinds cannot be mapped falls back to the pool by name.
    Unmatched suggestions are dropped.
    """
    effects: list[Effect] = []
    for suggestion in suggestions:
        if isinstance(suggestion, dict):
            effect = _custom_effect(suggestion) if _is_inline(suggestion) else None
            if effect is None:
                effect = _from_pool(str(suggestion.get("name") or ""), pool)
        else:
            effect = _from_pool(str(suggestion or ""), pool)
        if effect is not None:
            effects.append(effect)
    return effects


def generate_card(
    analysis: dict[str, Any],
    user_id: str,
    custom_name: str | None = None,
    effects_pool: dict[str, Effect] | None = None,
    card_id: str | None = None,
    now: datetime | None = None,
) -> Card:
    if not isinstance(analysis, dict):
        raise ValueError(f"analysis must be a dict, got {type(analysis).__name__}")

    rarity = _pick_enum(Rarity, analysis.get("rarity", "common"), Rarity.COMMON)
    card_type = _pick_enum(CardType, analysis.get("card_type", "creature"), CardType.CREATURE)
    element = get_element_by_name(str(analysis.get("element", ""))) or Element.AETHER

    effects = _match_effects(
        analysis.get("suggested_effects") or analysis.get("effects") or [], effects_pool or {},
    )

    return Card(
        id=card_id or str(uuid.uuid4()),
        name=_pick_name(analysis, custom_name),
        rarity=rarity,
        card_type=card_type,
        element=element,
        stats=clamp_stats(analysis.get("suggested_stats")),
        effects=tuple(effects[:MAX_EFFECTS[rarity]]),
        description=analysis.get("generated_description") or FALLBACK_DESCRIPTION,
        lore=analysis.get("generated_lore") or FALLBACK_LORE,
        created_at=now or datetime.now(timezone.utc),
        created_by=user_id,
        image_url=analysis.get("image_url", ""),
    )
