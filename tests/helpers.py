from __future__ import annotations

import random
from typing import List, Sequence

from gemswap.components.board import Board
from gemswap.components.game_config import GameConfig
from gemswap.events.bus import EventBus
from gemswap.world import GameSession, create_game


class ScriptedRandom(random.Random):
    """Random whose randrange replays a fixed script, so refills are predictable.

    ``choice`` is left untouched, which keeps board initialisation working normally.
    """

    def __init__(self, values: Sequence[int], seed: int = 0):
        super().__init__(seed)
        self.values: List[int] = list(values)

    def randrange(self, *args, **kwargs):
        return self.values.pop(0)


def filler(rows: int, cols: int) -> List[List[int]]:
    """Layout of kinds 3..6 with no two equal neighbours anywhere."""
    return [[3 + (r + 2 * c) % 4 for c in range(cols)] for r in range(rows)]


def diagonal_layout(rows: int, cols: int) -> List[List[int]]:
    """Three kinds along anti-diagonals: no matches and no swap can create one."""
    return [[(r + c) % 3 for c in range(cols)] for r in range(rows)]


# Swapping (3,0)<->(4,0) clears row 4 cols 0-2; the drop lines up 1s on row 4 cols 2-4.
CASCADE_LAYOUT = [
    [3, 4, 5, 6, 3],
    [5, 6, 3, 4, 5],
    [4, 3, 6, 5, 6],
    [0, 5, 1, 3, 4],
    [2, 0, 0, 1, 1],
]
CASCADE_REFILLS = [0, 1, 2, 4, 5, 6]
CASCADE_FINAL = (
    (0, 1, 4, 5, 6),
    (3, 4, 2, 6, 3),
    (5, 6, 5, 4, 5),
    (4, 3, 3, 5, 6),
    (2, 5, 6, 3, 4),
)


def make_board(layout: Sequence[Sequence[int | None]], kinds: int = 7) -> Board:
    board = Board(rows=len(layout), cols=len(layout[0]), kinds=kinds)
    board.load(layout)
    return board


def make_session(layout, *, rng: random.Random | None = None, **config_kwargs) -> GameSession:
    config = GameConfig(rows=len(layout), cols=len(layout[0]), **config_kwargs)
    game = create_game(config, rng=rng or random.Random(0))
    game.board.load(layout)
    return game


def record(bus: EventBus, name: str) -> list[dict]:
    events: list[dict] = []
    bus.subscribe(name, lambda sender, **payload: events.append(payload))
    return events
