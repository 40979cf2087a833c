from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

Position = Tuple[int, int]
Cell = Optional[int]


@dataclass(slots=True)
class Board:
    """Token matrix for a single session.

    Cells hold an ``int`` token kind in ``[0, kinds)`` or ``None`` when empty.
    Reads outside the grid return ``None`` and writes outside it are ignored, so
    neighbour arithmetic near the edges never needs its own bounds checks.
    """
    rows: int
    cols: int
    kinds: int
    cells: List[List[Cell]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[None] * self.cols for _ in range(self.rows)]

    def in_bounds(self, pos: Position) -> bool:
        row, col = pos
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get(self, pos: Position) -> Cell:
        if not self.in_bounds(pos):
            return None
        return self.cells[pos[0]][pos[1]]

    def set(self, pos: Position, value: Cell) -> None:
        if self.in_bounds(pos):
            self.cells[pos[0]][pos[1]] = value

    def swap(self, a: Position, b: Position) -> None:
        # No adjacency check; callers decide which swaps are legal.
        # A pair reaching outside the grid is left alone.
        if not (self.in_bounds(a) and self.in_bounds(b)):
            return
        first = self.get(a)
        self.set(a, self.get(b))
        self.set(b, first)

    def positions(self) -> Iterable[Position]:
        for row in range(self.rows):
            for col in range(self.cols):
                yield row, col

    def empty_positions(self) -> List[Position]:
        return [pos for pos in self.positions() if self.get(pos) is None]

    def snapshot(self) -> Tuple[Tuple[Cell, ...], ...]:
        return tuple(tuple(row) for row in self.cells)

    def load(self, layout: Sequence[Sequence[Cell]]) -> None:
        """Replace the contents with ``layout`` (must match the board dimensions)."""
        if len(layout) != self.rows or any(len(row) != self.cols for row in layout):
            raise ValueError(f"layout must be {self.rows}x{self.cols}")
        self.cells = [list(row) for row in layout]
