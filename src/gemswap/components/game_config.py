from dataclasses import dataclass

from gemswap.constants import (
    BASE_POINTS_PER_TOKEN,
    GRID_COLS,
    GRID_ROWS,
    LENGTH_BONUS_PER_TOKEN,
    RESHUFFLE_ATTEMPTS,
    TOKEN_KINDS,
)


@dataclass(slots=True)
class GameConfig:
    """Per-session tuning, stored on the state entity next to GameProgress and TurnState.

    ``await_animations`` makes the controller pause at every phase boundary until an
    ``animation_complete`` event for the announced kind arrives.
    """
    rows: int = GRID_ROWS
    cols: int = GRID_COLS
    kinds: int = TOKEN_KINDS
    base_points: int = BASE_POINTS_PER_TOKEN
    length_bonus: int = LENGTH_BONUS_PER_TOKEN
    reshuffle_attempts: int = RESHUFFLE_ATTEMPTS
    await_animations: bool = False

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"board must have at least one cell, got {self.rows}x{self.cols}")
        if self.kinds < 1:
            raise ValueError(f"kinds must be positive, got {self.kinds}")
        if self.base_points < 0 or self.length_bonus < 0:
            raise ValueError("scoring values must be non-negative")
        if self.reshuffle_attempts < 1:
            raise ValueError("reshuffle_attempts must be at least 1")
