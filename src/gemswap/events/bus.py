from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that are not stored anywhere alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT & SELECTION
# ============================================================================
EVENT_TILE_CLICK = "tile_click"                    # payload: row, col
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str, prev_row, prev_col


# ============================================================================
# COMMANDS
# ============================================================================
EVENT_BOARD_RESET_REQUEST = "board_reset_request"  # payload: reset_score=bool
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)


# ============================================================================
# SWAP OUTCOMES
# ============================================================================
EVENT_TILE_SWAP_REJECTED = "tile_swap_rejected"    # payload: src, dst, reason=str
EVENT_TILE_SWAP_RESOLVED = "tile_swap_resolved"    # payload: src, dst, matched=bool


# ============================================================================
# BOARD MECHANICS
# ============================================================================
EVENT_BOARD_INITIALIZED = "board_initialized"      # payload: cells=tuple[tuple[int|None,...],...]
EVENT_MATCH_FOUND = "match_found"                  # payload: runs=list[MatchRun], depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...]
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=list[GravityMove]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: spawns=list[Spawn]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int
EVENT_BOARD_RESHUFFLED = "board_reshuffled"        # payload: attempts=int, cells=tuple[...]


# ============================================================================
# PROGRESS
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: total=int, delta=int
EVENT_COMBO_CHANGED = "combo_changed"              # payload: count=int
EVENT_TURN_PHASE_CHANGED = "turn_phase_changed"    # payload: previous_phase=TurnPhase, new_phase=TurnPhase


# ============================================================================
# ANIMATION
# ============================================================================
EVENT_ANIMATION_START = "animation_start"          # payload: kind=str, items=list, meta=dict
EVENT_ANIMATION_COMPLETE = "animation_complete"    # payload: kind=str
