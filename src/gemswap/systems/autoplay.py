import random
from typing import Optional, Tuple

from gemswap.components.turn_state import TurnPhase
from gemswap.events.bus import EventBus, EVENT_TICK, EVENT_TILE_SWAP_REQUEST, EVENT_TURN_PHASE_CHANGED
from gemswap.systems.board_ops import find_valid_swaps, get_board
from gemswap.systems.turn_state_utils import is_idle

Position = Tuple[int, int]


class AutoPlaySystem:
    """Requests a random valid swap whenever the board is idle.

    ``decision_delay`` seconds of ticks must pass after each return to idle before the
    next request, so a paced session looks like someone is playing it.
    """

    def __init__(
        self,
        world: str,
        event_bus: EventBus,
        rng: Optional[random.Random] = None,
        decision_delay: float = 0.0,
        max_turns: Optional[int] = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.random = rng or random.Random()
        self.decision_delay = max(0.0, decision_delay)
        self.delay_remaining = self.decision_delay
        self.max_turns = max_turns
        self.turns_played = 0
        self.last_swap: Optional[Tuple[Position, Position]] = None
        event_bus.subscribe(EVENT_TICK, self.on_tick)
        event_bus.subscribe(EVENT_TURN_PHASE_CHANGED, self.on_turn_phase_changed)

    @property
    def finished(self) -> bool:
        return self.max_turns is not None and self.turns_played >= self.max_turns

    def on_turn_phase_changed(self, sender, **payload) -> None:
        if payload.get("new_phase") is TurnPhase.IDLE:
            self.delay_remaining = self.decision_delay

    def on_tick(self, sender, **payload) -> None:
        if self.finished or not is_idle(self.world):
            return
        dt = float(payload.get("dt", 0.0))
        if self.delay_remaining > 0.0:
            self.delay_remaining = max(0.0, self.delay_remaining - dt)
            if self.delay_remaining > 0.0:
                return
        swaps = find_valid_swaps(get_board(self.world))
        if not swaps:
            return
        src, dst = self.random.choice(swaps)
        self.last_swap = (src, dst)
        self.turns_played += 1
        self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=dst)
