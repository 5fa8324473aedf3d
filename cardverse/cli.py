"""CLI entry point – play / generate subcommands."""

from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path

from cardverse.ai import Agent, RandomAI, SimpleAI
from cardverse.cardgen import generate_card
from cardverse.config import GameConfig
from cardverse.display import render_board, render_log
from cardverse.engine import TurnManager, create_new_game, run_game
from cardverse.loader import build_deck, card_to_dict, load_cards, load_deck, load_effects
from cardverse.models import Player

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_CARDS = DATA_DIR / "cards.json"
DEFAULT_EFFECTS = DATA_DIR / "effects.json"

AGENTS = {
    "simple": SimpleAI,
    "random": RandomAI,
}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="cardverse", description="CardVerse battle engine")
    sub = parser.add_subparsers(dest="command")

    # --- play ---
    p_play = sub.add_parser("play", help="Play a single AI vs AI match")
    p_play.add_argument("--deck-a", required=True, help="Path to deck A JSON")
    p_play.add_argument("--deck-b", required=True, help="Path to deck B JSON")
    p_play.add_argument("--seed", type=int, default=42)
    p_play.add_argument("--ai-a", choices=sorted(AGENTS), default="simple")
    p_play.add_argument("--ai-b", choices=sorted(AGENTS), default="simple")
    p_play.add_argument("--cards", default=str(DEFAULT_CARDS), help="Path to cards.json")
    p_play.add_argument("--effects", default=str(DEFAULT_EFFECTS), help="Path to effects.json")
    p_play.add_argument("--config", default=None, help="Path to game config JSON")
    p_play.add_argument("--max-turns", type=int, default=None, help="Override turn limit")
    p_play.add_argument("--trace", action="store_true", help="Print the game log")

    # --- generate ---
    p_gen = sub.add_parser("generate", help="Create a card from an analysis result")
    p_gen.add_argument("--analysis", required=True, help="Path to analysis JSON")
    p_gen.add_argument("--user", default="anonymous", help="Creator id")
    p_gen.add_argument("--name", default=None, help="Custom card name")
    p_gen.add_argument("--effects", default=str(DEFAULT_EFFECTS), help="Path to effects.json")
    p_gen.add_argument("--output", default=None, help="Write card JSON here instead of stdout")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "play":
        _cmd_play(args)
    elif args.command == "generate":
        _cmd_generate(args)


def _make_agent(name: str, seed: int) -> Agent:
    return AGENTS[name](seed)


def _cmd_play(args: argparse.Namespace) -> None:
    config = (
        GameConfig.from_json(args.config, max_turns=args.max_turns)
        if args.config else GameConfig()
    )
    if args.config is None and args.max_turns is not None:
        config.max_turns = args.max_turns

    effects_db = load_effects(args.effects)
    card_db = load_cards(args.cards, effects_db)
    deck_a = load_deck(args.deck_a, card_db)
    deck_b = load_deck(args.deck_b, card_db)

    players = (
        Player(id="p0", name=deck_a.deck_id, deck=build_deck(deck_a, card_db)),
        Player(id="p1", name=deck_b.deck_id, deck=build_deck(deck_b, card_db)),
    )
    gs = create_new_game(players, rng=random.Random(args.seed), config=config)
    manager = TurnManager(gs, config)
    agents = (_make_agent(args.ai_a, args.seed), _make_agent(args.ai_b, args.seed + 1))

    log = run_game(manager, agents, trace=args.trace)

    render_board(gs)
    print(f"Result: {log.winner or 'draw'} ({log.reason})")
    print(f"Turns: {log.turns}  Final HP: P0={log.final_health[0]} P1={log.final_health[1]}")

    if log.events:
        print(f"\nLog ({len(log.events)} entries):")
        render_log(gs)


def _cmd_generate(args: argparse.Namespace) -> None:
    with open(args.analysis, encoding="utf-8") as f:
        analysis = json.load(f)

    effects_pool = load_effects(args.effects) if Path(args.effects).exists() else {}
    card = generate_card(analysis, args.user, custom_name=args.name, effects_pool=effects_pool)
    text = json.dumps(card_to_dict(card), indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Card written to: {args.output}")
    else:
        print(text)
