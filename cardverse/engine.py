"""Game engine – setup, turn/phase state machine, game-over check."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from cardverse.actions import EndPhase, apply_action, get_legal_actions
from cardverse.config import GameConfig
from cardverse.effects import (
    apply_effect, death_effects, process_end_turn_effects,
    process_start_turn_effects,
)
from cardverse.models import (
    ROWS, Card, CardInstance, CurrentStats, GamePhase, GameState, MatchLog,
    Player,
)
from cardverse.targeting import resolve_targets

if TYPE_CHECKING:
    from cardverse.ai import Agent


# ---------------------------------------------------------------------------
# Deck and card-instance helpers
# ---------------------------------------------------------------------------

def shuffle_deck(deck: list, rng: random.Random | None = None) -> list:
    """Fisher–Yates shuffle of ``deck`` in place. Returns the same list."""
    rng = rng or random.Random()
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def create_card_instance(card: Card) -> CardInstance:
    return CardInstance(
        card=card,
        current_stats=CurrentStats(health=card.stats.health, attack=card.stats.attack),
    )


def draw_card(player: Player) -> CardInstance | None:
    """Draw from the top (tail) of the deck. None if the deck is empty."""
    if not player.deck:
        return None
    inst = create_card_instance(player.deck.pop())
    player.hand.append(inst)
    return inst


def create_new_game(
    players: tuple[Player, Player] | list[Player],
    rng: random.Random | None = None,
    config: GameConfig | None = None,
) -> GameState:
    """Shuffle decks, deal opening hands and reset both players."""
    config = config or GameConfig()
    rng = rng or random.Random()

    for player in players:
        player.deck = shuffle_deck(list(player.deck), rng)
        player.hand = []
        for _ in range(config.initial_hand_size):
            draw_card(player)
        player.front = [None] * config.row_size
        player.back = [None] * config.row_size
        player.graveyard = []
        player.health = config.starting_health
        player.max_health = config.starting_health
        player.mana = config.starting_mana
        player.mana_max = config.starting_mana
        player.turns_started = 0

    gs = GameState(
        players=list(players),
        current_player_index=0,
        phase=GamePhase.UPKEEP,
        turn_number=1,
    )
    # Player 0's first turn begins now
    gs.players[0].turns_started = 1
    gs.add_log("Game started!")
    return gs


# ---------------------------------------------------------------------------
# Turn manager
# ---------------------------------------------------------------------------

class TurnManager:
    """Owns one GameState and drives its phase cycle.

    UPKEEP -> MAIN -> COMBAT -> END, then control passes to the other player.
    Nothing here raises for an illegal request; it is a no-op instead.
    """

    def __init__(self, gs: GameState, config: GameConfig | None = None) -> None:
        self._gs = gs
        self.config = config or GameConfig()
        self._turn_timer = self.config.turn_timer

    def get_game_state(self) -> GameState:
        return self._gs

    def get_current_player(self) -> Player:
        return self._gs.current_player()

    # -- phases ---------------------------------------------------------------

    def next_phase(self) -> GameState:
        gs = self._gs
        match gs.phase:
            case GamePhase.UPKEEP:
                gs.phase = GamePhase.MAIN
            case GamePhase.MAIN:
                gs.phase = GamePhase.COMBAT
            case GamePhase.COMBAT:
                gs.phase = GamePhase.END
            case GamePhase.END:
                return self.end_turn()
            case _:
                return gs
        gs.add_log(f"{self.get_current_player().name or 'Player'} enters {gs.phase.value}")
        return gs

    def end_turn(self) -> GameState:
        gs = self._gs
        process_end_turn_effects(gs.all_battlefield_cards())

        gs.current_player_index = 1 - gs.current_player_index
        if gs.current_player_index == 0:
            gs.turn_number += 1
        gs.phase = GamePhase.UPKEEP
        self._turn_timer = self.config.turn_timer

        self._start_turn()
        return gs

    def _start_turn(self) -> None:
        gs = self._gs
        player = self.get_current_player()
        player.turns_started += 1
        gs.add_log(f"Turn {gs.turn_number}: {player.name or player.id} begins")

        self.draw_card(player)

        # First turn keeps the starting mana; each later turn adds a crystal
        if player.turns_started > 1:
            player.mana_max = min(self.config.mana_cap, player.mana_max + 1)
        player.mana = player.mana_max

        for inst in player.battlefield_cards():
            inst.can_attack = True
            inst.is_exhausted = False

        process_start_turn_effects(gs.all_battlefield_cards())

    # -- cards ----------------------------------------------------------------

    def draw_card(self, player: Player) -> CardInstance | None:
        inst = draw_card(player)
        if inst is None:
            self._gs.add_log(f"{player.name or player.id} has no cards left to draw")
        else:
            self._gs.add_log(f"{player.name or player.id} draws a card")
        return inst

    def resolve_deaths(self) -> list[CardInstance]:
        """Move every battlefield instance with health <= 0 to the graveyard.

        On-death effects fire while the dying cards are still in place; if they
        kill further cards those are resolved in the next round.
        """
        gs = self._gs
        removed: list[CardInstance] = []
        while True:
            dying: list[tuple[int, str, int, CardInstance]] = []
            for pi, player in enumerate(gs.players):
                for row_name in ROWS:
                    for idx, inst in enumerate(player.row(row_name)):
                        if inst is not None and inst.is_dead:
                            dying.append((pi, row_name, idx, inst))
            if not dying:
                return removed

            for pi, _, _, inst in dying:
                for effect in death_effects(inst):
                    targets = resolve_targets(gs, effect, inst, owner=pi)
                    apply_effect(effect, inst, targets)

            for pi, row_name, idx, inst in dying:
                player = gs.players[pi]
                player.row(row_name)[idx] = None
                inst.position = None
                inst.can_attack = False
                player.graveyard.append(inst)
                removed.append(inst)
                gs.add_log(f"{inst.card.name} dies")

    # -- timer (bookkeeping only) ---------------------------------------------

    def update_timer(self, remaining_time: int) -> None:
        self._turn_timer = remaining_time

    def get_turn_timer(self) -> int:
        return self._turn_timer

    # -- result ---------------------------------------------------------------

    def check_game_over(self) -> bool:
        gs = self._gs
        if gs.is_game_over:
            return True
        for i, player in enumerate(gs.players):
            if player.health <= 0:
                gs.is_game_over = True
                gs.winner = gs.players[1 - i].id
                gs.add_log(f"Game over: {gs.players[1 - i].name or gs.winner} wins")
                return True
        return False


# ---------------------------------------------------------------------------
# Driver loop
# ---------------------------------------------------------------------------

def run_game(
    manager: TurnManager,
    agents: tuple["Agent", "Agent"],
    max_turns: int | None = None,
    trace: bool = False,
) -> MatchLog:
    """Play until a player drops to 0 health or the turn limit passes."""
    gs = manager.get_game_state()
    limit = max_turns if max_turns is not None else manager.config.max_turns

    while not gs.is_game_over and gs.turn_number <= limit:
        if gs.phase in (GamePhase.MAIN, GamePhase.COMBAT):
            legal = get_legal_actions(gs)
            action = agents[gs.current_player_index].choose_action(gs, legal)
            if isinstance(action, EndPhase) or not apply_action(gs, action):
                manager.next_phase()
        elif gs.phase == GamePhase.SETUP:
            gs.phase = GamePhase.UPKEEP
        else:
            manager.next_phase()
        manager.resolve_deaths()
        manager.check_game_over()

    if gs.is_game_over:
        winner, reason = gs.winner, "health"
    else:
        hp0, hp1 = gs.players[0].health, gs.players[1].health
        if hp0 > hp1:
            winner = gs.players[0].id
        elif hp1 > hp0:
            winner = gs.players[1].id
        else:
            winner = None
        reason = "turn_limit"

    return MatchLog(
        game_id=gs.id,
        winner=winner,
        reason=reason,
        turns=gs.turn_number,
        final_health=(gs.players[0].health, gs.players[1].health),
        events=list(gs.log) if trace else None,
    )
