from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Set, Tuple

import esper

from gemswap.components.board import Board, Cell, Position
from gemswap.constants import MIN_MATCH_LENGTH
from gemswap.utils.worlds import use_world

logger = logging.getLogger(__name__)

HORIZONTAL = "horizontal"
VERTICAL = "vertical"


@dataclass(slots=True)
class MatchRun:
    token: int
    positions: List[Position]
    orientation: str = HORIZONTAL

    def __len__(self) -> int:
        return len(self.positions)


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    token: int


@dataclass(slots=True)
class Spawn:
    position: Position
    token: int
    # Negative row above the visible grid the new token should appear to fall from.
    spawn_offset: int


def get_board(world: str) -> Board:
    use_world(world)
    for _, board in esper.get_component(Board):
        return board
    raise RuntimeError(f"Board not found in world {world!r}")


def is_adjacent(a: Position, b: Position) -> bool:
    ar, ac = a
    br, bc = b
    return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)


def fill_without_matches(board: Board, rng: random.Random) -> None:
    """Fill every cell, never completing a three-run with the two cells to the left or above.

    Only the two immediately preceding cells per axis are inspected; that is enough to
    rule out runs while keeping the kind distribution as close to uniform as possible.
    """
    choices = list(range(board.kinds))
    for row in range(board.rows):
        for col in range(board.cols):
            board.set((row, col), None)
    for row in range(board.rows):
        for col in range(board.cols):
            available = choices
            left1 = board.get((row, col - 1))
            left2 = board.get((row, col - 2))
            if left1 is not None and left1 == left2:
                available = [t for t in available if t != left1]
            up1 = board.get((row - 1, col))
            up2 = board.get((row - 2, col))
            if up1 is not None and up1 == up2:
                available = [t for t in available if t != up1]
            # Only reachable with fewer than three kinds.
            if not available:
                available = choices
            board.set((row, col), rng.choice(available))


def find_matches(board: Board) -> List[MatchRun]:
    """Detect every maximal horizontal and vertical run of length >= 3.

    Horizontal runs come first (row-major), then vertical runs (column-major). A cell
    already claimed by a horizontal run is left out of any vertical run crossing it;
    the vertical run is still reported while it keeps at least one cell.
    """
    runs: List[MatchRun] = []
    claimed: Set[Position] = set()
    # Horizontal runs
    for r in range(board.rows):
        run: List[Position] = []
        last: Cell = None
        for c in range(board.cols + 1):
            tval = board.get((r, c))
            if tval is not None and tval == last:
                run.append((r, c))
                continue
            if len(run) >= MIN_MATCH_LENGTH and last is not None:
                runs.append(MatchRun(token=last, positions=run, orientation=HORIZONTAL))
                claimed.update(run)
            run = [(r, c)] if tval is not None else []
            last = tval
    # Vertical runs
    for c in range(board.cols):
        run = []
        last = None
        for r in range(board.rows + 1):
            tval = board.get((r, c))
            if tval is not None and tval == last:
                run.append((r, c))
                continue
            if len(run) >= MIN_MATCH_LENGTH and last is not None:
                unclaimed = [pos for pos in run if pos not in claimed]
                if unclaimed:
                    runs.append(MatchRun(token=last, positions=unclaimed, orientation=VERTICAL))
            run = [(r, c)] if tval is not None else []
            last = tval
    return runs


def remove_matches(board: Board, runs: List[MatchRun]) -> List[Position]:
    """Empty every cell referenced by ``runs``; return the cells actually cleared."""
    removed: List[Position] = []
    for match in runs:
        for pos in match.positions:
            if board.get(pos) is not None:
                board.set(pos, None)
                removed.append(pos)
    return removed


def compact(board: Board) -> List[GravityMove]:
    """Slide tokens down each column into the gaps below them, keeping their order."""
    moves: List[GravityMove] = []
    for col in range(board.cols):
        write_row = board.rows - 1
        for row in range(board.rows - 1, -1, -1):
            token = board.get((row, col))
            if token is None:
                continue
            if row != write_row:
                moves.append(GravityMove(source=(row, col), target=(write_row, col), token=token))
                board.set((write_row, col), token)
                board.set((row, col), None)
            write_row -= 1
    return moves


def refill(board: Board, rng: random.Random) -> List[Spawn]:
    """Give every empty cell a uniformly random kind. No match avoidance here."""
    spawned: List[Spawn] = []
    for col in range(board.cols):
        empty_count = sum(1 for row in range(board.rows) if board.get((row, col)) is None)
        if not empty_count:
            continue
        for row in range(board.rows):
            if board.get((row, col)) is not None:
                continue
            token = rng.randrange(board.kinds)
            board.set((row, col), token)
            spawned.append(Spawn(position=(row, col), token=token, spawn_offset=-(empty_count - row)))
    return spawned


def would_create_match(board: Board, a: Position, b: Position) -> bool:
    """Return True if swapping a/b would produce a match. The board is left untouched."""
    board.swap(a, b)
    try:
        return bool(find_matches(board))
    finally:
        board.swap(a, b)


def _adjacent_pairs(board: Board):
    for row in range(board.rows):
        for col in range(board.cols):
            if col + 1 < board.cols:
                yield (row, col), (row, col + 1)
            if row + 1 < board.rows:
                yield (row, col), (row + 1, col)


def has_any_legal_move(board: Board) -> bool:
    return any(would_create_match(board, a, b) for a, b in _adjacent_pairs(board))


def find_valid_swaps(board: Board) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    return [(a, b) for a, b in _adjacent_pairs(board) if would_create_match(board, a, b)]


def reshuffle(board: Board, rng: random.Random, *, max_attempts: int) -> int:
    """Regenerate the board until it offers a legal move; return the attempts used.

    When every attempt is deadlocked (only possible for degenerate board shapes or
    kind counts) the last generated board is kept.
    """
    for attempt in range(1, max_attempts + 1):
        fill_without_matches(board, rng)
        if has_any_legal_move(board):
            return attempt
    logger.warning(
        "No board with a legal move after %d attempts (%dx%d, %d kinds); keeping the last one",
        max_attempts, board.rows, board.cols, board.kinds,
    )
    return max_attempts


def format_board(board: Board, empty: str = ".") -> str:
    return "\n".join(
        " ".join(empty if cell is None else str(cell) for cell in row)
        for row in board.cells
    )
