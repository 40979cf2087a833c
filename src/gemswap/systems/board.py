import logging
import random
from typing import List, Optional, Tuple

import esper

from gemswap.components.board import Board, Cell, Position
from gemswap.systems import board_ops
from gemswap.systems.board_ops import GravityMove, MatchRun, Spawn
from gemswap.systems.turn_state_utils import get_config, get_rng
from gemswap.utils.worlds import use_world

logger = logging.getLogger(__name__)


class BoardSystem:
    """Owns the session's Board entity and exposes the grid operations on it.

    Nothing here emits events or knows about turns; MatchResolutionSystem decides when
    each operation runs.
    """
    def __init__(
        self,
        world: str,
        rows: Optional[int] = None,
        cols: Optional[int] = None,
        kinds: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        self.world = world
        config = get_config(world)
        self.rng = rng or get_rng(world)
        board = Board(
            rows=rows if rows is not None else config.rows,
            cols=cols if cols is not None else config.cols,
            kinds=kinds if kinds is not None else config.kinds,
        )
        use_world(world)
        self.board_entity = esper.create_entity(board)
        self.initialize()

    @property
    def board(self) -> Board:
        use_world(self.world)
        return esper.component_for_entity(self.board_entity, Board)

    def initialize(self) -> Board:
        board = self.board
        board_ops.fill_without_matches(board, self.rng)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Board initialized:\n%s", board_ops.format_board(board))
        return board

    def get(self, pos: Position) -> Cell:
        return self.board.get(pos)

    def set(self, pos: Position, value: Cell) -> None:
        self.board.set(pos, value)

    @staticmethod
    def is_adjacent(a: Position, b: Position) -> bool:
        return board_ops.is_adjacent(a, b)

    def swap(self, a: Position, b: Position) -> None:
        self.board.swap(a, b)

    def find_matches(self) -> List[MatchRun]:
        return board_ops.find_matches(self.board)

    def remove_matches(self, runs: List[MatchRun]) -> List[Position]:
        return board_ops.remove_matches(self.board, runs)

    def compact(self) -> List[GravityMove]:
        return board_ops.compact(self.board)

    def refill(self) -> List[Spawn]:
        return board_ops.refill(self.board, self.rng)

    def would_create_match(self, a: Position, b: Position) -> bool:
        return board_ops.would_create_match(self.board, a, b)

    def has_any_legal_move(self) -> bool:
        return board_ops.has_any_legal_move(self.board)

    def find_valid_swaps(self) -> List[Tuple[Position, Position]]:
        return board_ops.find_valid_swaps(self.board)

    def reshuffle(self, max_attempts: Optional[int] = None) -> int:
        attempts = max_attempts if max_attempts is not None else get_config(self.world).reshuffle_attempts
        return board_ops.reshuffle(self.board, self.rng, max_attempts=attempts)

    def describe(self) -> str:
        return board_ops.format_board(self.board)
