"""Data models for the CardVerse battle core."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterator


# ---------------------------------------------------------------------------
# Classification enums
# ---------------------------------------------------------------------------

class Rarity(Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"
    UNIQUE = "unique"

    @property
    def tier(self) -> int:
        return list(Rarity).index(self)


class CardType(Enum):
    CREATURE = "creature"
    SPELL = "spell"
    ARTIFACT = "artifact"
    EQUIPMENT = "equipment"
    LOCATION = "location"
    TOTEM = "totem"
    SUMMON = "summon"
    ENTITY = "entity"
    VEHICLE = "vehicle"
    ERROR = "error"


class Element(Enum):
    AURORA = "aurora"
    VOID = "void"
    CRYSTAL = "crystal"
    BLOOD = "blood"
    STORM = "storm"
    FLORA = "flora"
    AETHER = "aether"


class EffectType(Enum):
    BUFF = "buff"
    DEBUFF = "debuff"
    TRIGGER = "trigger"
    PERSISTENT = "persistent"
    PASSIVE = "passive"
    SUMMON = "summon"
    TRANSFORM = "transform"
    REVIVE = "revive"


class EffectCategory(Enum):
    STAT_MODIFICATION = "stat_modification"
    DAMAGE = "damage"
    HEALING = "healing"
    CONTROL = "control"
    UTILITY = "utility"
    SHIELD = "shield"
    SUMMONING = "summoning"
    REVIVAL = "revival"
    TRANSFORMATION = "transformation"
    ENVIRONMENT = "environment"


class TargetType(Enum):
    SELF = "self"
    ALLY = "ally"
    ALLY_ALL = "ally_all"
    ENEMY = "enemy"
    ENEMY_ALL = "enemy_all"
    ANY = "any"


class GamePhase(Enum):
    SETUP = "setup"
    UPKEEP = "upkeep"
    MAIN = "main"
    COMBAT = "combat"
    END = "end"


# Conditions understood by the turn-boundary and death passes
TURN_START = "turn_start"
TURN_END = "turn_end"
ON_PLAY = "on_play"
ON_DEATH = "on_death"
ALWAYS = "always"

PERMANENT = -1

ROWS = ("front", "back")
STATS = ("health", "attack")

# Closed ranges for card definition stats
STAT_RANGES: dict[str, tuple[int, int]] = {
    "health": (1, 12),
    "attack": (0, 12),
    "mana_cost": (0, 10),
}


# ---------------------------------------------------------------------------
# Definitions (immutable)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Effect:
    id: str
    name: str
    type: EffectType
    category: EffectCategory
    duration: int              # 0 = instant, -1 = permanent, >0 = turns
    magnitude: int
    target: TargetType
    condition: str = ALWAYS
    description: str = ""
    affected_stats: tuple[str, ...] = ()   # empty -> read from description

    @property
    def is_permanent(self) -> bool:
        return self.duration == PERMANENT


@dataclass(frozen=True)
class CardStats:
    health: int
    attack: int
    mana_cost: int


@dataclass(frozen=True)
class Card:
    id: str
    name: str
    rarity: Rarity
    card_type: CardType
    element: Element
    stats: CardStats
    effects: tuple[Effect, ...] = ()
    description: str = ""
    lore: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    created_by: str = ""
    image_url: str = ""

    @property
    def is_spell(self) -> bool:
        return self.card_type == CardType.SPELL


# ---------------------------------------------------------------------------
# Deck definition
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DeckEntry:
    card_id: str
    count: int


@dataclass(frozen=True)
class DeckDef:
    deck_id: str
    entries: tuple[DeckEntry, ...]


# ---------------------------------------------------------------------------
# In-game instances
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CardPosition:
    row: str      # "front" or "back"
    index: int    # 0..row_size-1


@dataclass
class CurrentStats:
    health: int
    attack: int


@dataclass
class ActiveEffect:
    effect_id: str
    turns_remaining: int
    magnitude: int


@dataclass
class CardInstance:
    card: Card
    current_stats: CurrentStats
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    position: CardPosition | None = None
    active_effects: list[ActiveEffect] = field(default_factory=list)
    can_attack: bool = False
    is_exhausted: bool = False

    @property
    def is_dead(self) -> bool:
        return self.current_stats.health <= 0

    def has_active(self, effect_id: str) -> bool:
        return any(ae.effect_id == effect_id for ae in self.active_effects)


def _empty_row() -> list[CardInstance | None]:
    return [None, None, None]


@dataclass
class Player:
    id: str
    name: str = ""
    health: int = 30
    max_health: int = 30
    mana: int = 1
    mana_max: int = 1
    deck: list[Card] = field(default_factory=list)
    hand: list[CardInstance] = field(default_factory=list)
    front: list[CardInstance | None] = field(default_factory=_empty_row)
    back: list[CardInstance | None] = field(default_factory=_empty_row)
    graveyard: list[CardInstance] = field(default_factory=list)
    turns_started: int = 0

    def row(self, name: str) -> list[CardInstance | None]:
        return self.front if name == "front" else self.back

    def battlefield_cards(self) -> Iterator[CardInstance]:
        for name in ROWS:
            for inst in self.row(name):
                if inst is not None:
                    yield inst


# ---------------------------------------------------------------------------
# Game state (mutable, modified in-place)
# ---------------------------------------------------------------------------

@dataclass
class GameState:
    players: list[Player]
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    current_player_index: int = 0
    phase: GamePhase = GamePhase.SETUP
    turn_number: int = 1
    log: list[str] = field(default_factory=list)
    is_game_over: bool = False
    winner: str | None = None

    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    def opponent_idx(self) -> int:
        return 1 - self.current_player_index

    def opponent(self) -> Player:
        return self.players[self.opponent_idx()]

    def all_battlefield_cards(self) -> list[CardInstance]:
        cards: list[CardInstance] = []
        for p in self.players:
            cards.extend(p.battlefield_cards())
        return cards

    def add_log(self, line: str) -> None:
        self.log.append(line)


# ---------------------------------------------------------------------------
# Match log (returned by the driver loop)
# ---------------------------------------------------------------------------

@dataclass
class MatchLog:
    game_id: str
    winner: str | None
    reason: str            # "health" or "turn_limit"
    turns: int
    final_health: tuple[int, int]
    events: list[str] | None = None
