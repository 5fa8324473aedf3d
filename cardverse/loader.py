"""JSON data loading and validation for effects, cards and decks."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from cardverse.models import (
    ALWAYS, STAT_RANGES, STATS, Card, CardStats, CardType, DeckDef, DeckEntry,
    Effect, EffectCategory, EffectType, Element, Rarity, TargetType,
)


def _enum(enum_cls, value: Any, what: str, owner: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f"{owner}: invalid {what} '{value}'") from None


# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------

def parse_effect(entry: dict[str, Any]) -> Effect:
    eid = entry["id"]
    owner = f"Effect {eid}"
    effect = Effect(
        id=eid,
        name=entry.get("name", eid),
        type=_enum(EffectType, entry["type"], "type", owner),
        category=_enum(EffectCategory, entry["category"], "category", owner),
        duration=int(entry.get("duration", 0)),
        magnitude=int(entry.get("magnitude", 0)),
        target=_enum(TargetType, entry.get("target", "self"), "target", owner),
        condition=entry.get("condition", ALWAYS),
        description=entry.get("description", ""),
        affected_stats=tuple(entry.get("affected_stats", ())),
    )
    _validate_effect(effect)
    return effect


def _validate_effect(effect: Effect) -> None:
    if effect.duration < -1:
        raise ValueError(f"Effect {effect.id}: duration {effect.duration} must be >= -1")
    for stat in effect.affected_stats:
        if stat not in STATS:
            raise ValueError(f"Effect {effect.id}: unknown affected stat '{stat}'")


def load_effects(path: str | Path) -> dict[str, Effect]:
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    effects_db: dict[str, Effect] = {}
    for entry in raw:
        effect = parse_effect(entry)
        if effect.id in effects_db:
            raise ValueError(f"Effect {effect.id}: duplicate id")
        effects_db[effect.id] = effect
    return effects_db


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------

def parse_card(entry: dict[str, Any], effects_db: dict[str, Effect] | None = None) -> Card:
    """Build a Card from a JSON entry. Effects may be ids into ``effects_db``
    or inline effect objects."""
    cid = entry["id"]
    owner = f"Card {cid}"
    effects_db = effects_db or {}

    effects: list[Effect] = []
    for e in entry.get("effects", []):
        if isinstance(e, str):
            if e not in effects_db:
                raise ValueError(f"{owner}: unknown effect '{e}'")
            effects.append(effects_db[e])
        else:
            effects.append(parse_effect(e))

    stats = entry["stats"]
    created_at = entry.get("created_at")
    card = Card(
        id=cid,
        name=entry["name"],
        rarity=_enum(Rarity, entry.get("rarity", "common"), "rarity", owner),
        card_type=_enum(CardType, entry.get("card_type", "creature"), "card_type", owner),
        element=_enum(Element, entry.get("element", "aether"), "element", owner),
        stats=CardStats(
            health=int(stats["health"]),
            attack=int(stats["attack"]),
            mana_cost=int(stats["mana_cost"]),
        ),
        effects=tuple(effects),
        description=entry.get("description", ""),
        lore=entry.get("lore", ""),
        created_at=(
            datetime.fromisoformat(created_at) if created_at
            else datetime.now(timezone.utc)
        ),
        created_by=entry.get("created_by", ""),
        image_url=entry.get("image_url", ""),
    )
    _validate_card(card)
    return card


def _validate_card(card: Card) -> None:
    for stat, (lo, hi) in STAT_RANGES.items():
        value = getattr(card.stats, stat)
        if value < lo or value > hi:
            raise ValueError(f"Card {card.id}: {stat} {value} out of range [{lo},{hi}]")


def load_cards(
    path: str | Path,
    effects_db: dict[str, Effect] | None = None,
) -> dict[str, Card]:
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    card_db: dict[str, Card] = {}
    for entry in raw:
        card = parse_card(entry, effects_db)
        card_db[card.id] = card
    return card_db


def card_to_dict(card: Card) -> dict[str, Any]:
    """Serialize a Card to a JSON-friendly dict (inline effects)."""
    return {
        "id": card.id,
        "name": card.name,
        "rarity": card.rarity.value,
        "card_type": card.card_type.value,
        "element": card.element.value,
        "stats": {
            "health": card.stats.health,
            "attack": card.stats.attack,
            "mana_cost": card.stats.mana_cost,
        },
        "effects": [
            {
                "id": e.id,
                "name": e.name,
                "type": e.type.value,
                "category": e.category.value,
                "duration": e.duration,
                "magnitude": e.magnitude,
                "target": e.target.value,
                "condition": e.condition,
                "description": e.description,
                "affected_stats": list(e.affected_stats),
            }
            for e in card.effects
        ],
        "description": card.description,
        "lore": card.lore,
        "created_at": card.created_at.isoformat(),
        "created_by": card.created_by,
        "image_url": card.image_url,
    }


# ---------------------------------------------------------------------------
# Decks
# ---------------------------------------------------------------------------

def load_deck(path: str | Path, card_db: dict[str, Card]) -> DeckDef:
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    deck_id = raw["deck_id"]
    entries: list[DeckEntry] = []
    for e in raw["entries"]:
        card_id = e["card_id"]
        count = e["count"]
        if card_id not in card_db:
            raise ValueError(f"Deck {deck_id}: unknown card_id '{card_id}'")
        if count < 1:
            raise ValueError(f"Deck {deck_id}: card '{card_id}' count {count} must be >= 1")
        entries.append(DeckEntry(card_id=card_id, count=count))

    if not entries:
        raise ValueError(f"Deck {deck_id}: no entries")

    return DeckDef(deck_id=deck_id, entries=tuple(entries))


def build_deck(deck_def: DeckDef, card_db: dict[str, Card]) -> list[Card]:
    cards: list[Card] = []
    for entry in deck_def.entries:
        cards.extend([card_db[entry.card_id]] * entry.count)
    return cards
