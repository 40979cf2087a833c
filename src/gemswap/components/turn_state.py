from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

Position = Tuple[int, int]


class TurnPhase(Enum):
    """Externally visible phases; only IDLE accepts a new swap."""
    IDLE = auto()
    SWAPPING = auto()
    RESOLVING = auto()


class ResolveStep(Enum):
    """Internal continuation points of a turn, one per animation boundary."""
    FINISH_SWAP = auto()
    DETECT = auto()
    DROP = auto()
    FILL = auto()


@dataclass(slots=True)
class TurnState:
    """Tracks the turn in flight. Mutated only by MatchResolutionSystem."""

    phase: TurnPhase = TurnPhase.IDLE
    step: Optional[ResolveStep] = None
    # Animation kind the controller is waiting on, if any.
    awaiting: Optional[str] = None
    swap: Optional[Tuple[Position, Position]] = None
    swap_matched: bool = False
    # Bumped by reset; a step that sees a different value stops.
    generation: int = 0
