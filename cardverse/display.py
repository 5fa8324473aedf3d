"""CLI display – board state and game log."""

from __future__ import annotations

from cardverse.models import ROWS, CardInstance, GameState


def _slot(inst: CardInstance | None) -> str:
    if inst is None:
        return "[ -- ]"
    ready = "*" if inst.can_attack and not inst.is_exhausted else ""
    marks = "".join(f"+{ae.effect_id.split('-')[0]}" for ae in inst.active_effects)
    return f"[{inst.card.name} {inst.current_stats.attack}/{inst.current_stats.health}{ready}{marks}]"


def render_board(gs: GameState) -> None:
    print(f"\n{'='*60}")
    print(f"  Turn {gs.turn_number}  |  Active: Player {gs.current_player_index}"
          f"  |  Phase: {gs.phase.value}")
    print(f"{'='*60}")

    for pi, p in enumerate(gs.players):
        marker = " <<" if pi == gs.current_player_index else ""
        print(f"  P{pi} {p.name}: HP={p.health}/{p.max_health}  Mana={p.mana}/{p.mana_max}  "
              f"Hand={len(p.hand)}  Deck={len(p.deck)}  Grave={len(p.graveyard)}{marker}")
        for row_name in ROWS:
            print(f"      {row_name:5s}: " + " ".join(_slot(i) for i in p.row(row_name)))

    if gs.is_game_over:
        print(f"\n  GAME OVER – winner: {gs.winner}")
    print()


def render_log(gs: GameState, last: int | None = None) -> None:
    lines = gs.log if last is None else gs.log[-last:]
    for line in lines:
        print(f"  {line}")
