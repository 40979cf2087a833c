"""
gemswap CLI - headless tools for the match-three engine.

Usage:
    gemswap show [--seed N]                 Print a freshly generated board
    gemswap autoplay [--turns N] [--seed N] Play random valid swaps and report the score
"""

import argparse
import logging
import sys

from gemswap.components.game_config import GameConfig
from gemswap.constants import GRID_COLS, GRID_ROWS, TOKEN_KINDS
from gemswap.events.bus import EVENT_BOARD_RESHUFFLED, EVENT_TICK
from gemswap.systems.autoplay import AutoPlaySystem
from gemswap.systems.board_ops import format_board
from gemswap.systems.turn_state_utils import is_idle
from gemswap.world import create_game

# Upper bound on ticks per autoplay turn when animations are paced.
MAX_TICKS_PER_TURN = 10_000


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="gemswap - tile-matching puzzle engine",
        prog="gemswap",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    parser.add_argument("--rows", type=int, default=GRID_ROWS)
    parser.add_argument("--cols", type=int, default=GRID_COLS)
    parser.add_argument("--kinds", type=int, default=TOKEN_KINDS)
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible boards")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("show", help="Print a freshly generated board")

    autoplay_parser = subparsers.add_parser("autoplay", help="Play random valid swaps")
    autoplay_parser.add_argument("--turns", type=int, default=20, help="Number of swaps to play")
    autoplay_parser.add_argument("--paced", action="store_true",
                                 help="Drive the cascade through timed animation phases")
    autoplay_parser.add_argument("--verbose", "-v", action="store_true", help="Print every swap and the final board")
    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = GameConfig(
            rows=args.rows,
            cols=args.cols,
            kinds=args.kinds,
            await_animations=getattr(args, "paced", False),
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.command == "show":
        return cmd_show(args, config)
    if args.command == "autoplay":
        return cmd_autoplay(args, config)
    parser.print_help()
    return 1


def cmd_show(args, config: GameConfig) -> int:
    """Print a freshly generated board."""
    session = create_game(config, seed=args.seed)
    try:
        print(format_board(session.board))
    finally:
        session.close()
    return 0


def cmd_autoplay(args, config: GameConfig) -> int:
    """Play random valid swaps and summarise the run."""
    session = create_game(config, seed=args.seed, with_timer=config.await_animations)
    bot = AutoPlaySystem(session.world, session.event_bus, rng=session.board_system.rng, max_turns=args.turns)
    reshuffles = []
    session.event_bus.subscribe(EVENT_BOARD_RESHUFFLED, lambda sender, **payload: reshuffles.append(payload))
    try:
        ticks = 0
        while not (bot.finished and is_idle(session.world)):
            played = bot.turns_played
            session.event_bus.emit(EVENT_TICK, dt=1 / 60)
            ticks += 1
            if args.verbose and bot.turns_played != played:
                print(f"turn {bot.turns_played}: {bot.last_swap[0]} <-> {bot.last_swap[1]}")
            if ticks > MAX_TICKS_PER_TURN * max(args.turns, 1):
                print("Error: autoplay stalled", file=sys.stderr)
                return 1
        if args.verbose:
            print(format_board(session.board))
        progress = session.progress
        print(f"turns: {bot.turns_played}")
        print(f"score: {progress.score}")
        print(f"best combo: {progress.best_combo}")
        print(f"reshuffles: {len(reshuffles)}")
    finally:
        session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
