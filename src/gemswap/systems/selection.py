from typing import Optional, Tuple

from gemswap.events.bus import (
    EventBus,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAP_REQUEST,
)
from gemswap.systems.board_ops import get_board, is_adjacent
from gemswap.systems.turn_state_utils import is_idle

Position = Tuple[int, int]


class SelectionSystem:
    """Turns tile clicks into swap requests.

    First click selects, clicking the selected tile again deselects, an adjacent
    click requests a swap, any other click moves the selection. Clicks are ignored
    while a turn is in flight or when they land outside the board.
    """
    def __init__(self, world: str, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.selected: Optional[Position] = None
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        if not is_idle(self.world):
            return
        clicked = (row, col)
        if not get_board(self.world).in_bounds(clicked):
            return
        if self.selected is None:
            self._select(clicked)
        elif self.selected == clicked:
            self.clear_selection(reason='toggle')
        elif is_adjacent(self.selected, clicked):
            src = self.selected
            self.selected = None
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=clicked)
        else:
            self._select(clicked)

    def clear_selection(self, reason: str = 'cleared') -> None:
        prev = self.selected
        if prev is None:
            return
        self.selected = None
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason, prev_row=prev[0], prev_col=prev[1])

    def _select(self, pos: Position) -> None:
        self.selected = pos
        self.event_bus.emit(EVENT_TILE_SELECTED, row=pos[0], col=pos[1])
