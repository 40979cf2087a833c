import logging
from typing import Callable, Dict, List, Optional

from gemswap.components.board import Position
from gemswap.components.game_progress import GameProgress
from gemswap.components.turn_state import ResolveStep, TurnPhase, TurnState
from gemswap.events.bus import (
    EventBus,
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_BOARD_INITIALIZED,
    EVENT_BOARD_RESET_REQUEST,
    EVENT_BOARD_RESHUFFLED,
    EVENT_CASCADE_COMPLETE,
    EVENT_COMBO_CHANGED,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_SCORE_CHANGED,
    EVENT_TILE_SWAP_REJECTED,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_RESOLVED,
    EVENT_TURN_PHASE_CHANGED,
)
from gemswap.systems.board import BoardSystem
from gemswap.systems.turn_state_utils import get_config, get_or_create_progress, get_or_create_turn_state
from gemswap.utils.scoring import score_round

logger = logging.getLogger(__name__)

REJECT_BUSY = "busy"
REJECT_OUT_OF_BOUNDS = "out_of_bounds"
REJECT_NOT_ADJACENT = "not_adjacent"


class MatchResolutionSystem:
    """Drives one turn from the swap request to a stable board.

    Flow:
      - attempt_swap validates the request, predicts its outcome and commits the swap.
      - A swap without a match is undone; a matching swap enters RESOLVING and loops
        detect -> score -> clear -> drop -> refill until a round finds nothing.
      - Before going back to IDLE the board is checked for a legal move and reshuffled
        when deadlocked.
    With GameConfig.await_animations set, each phase boundary emits EVENT_ANIMATION_START
    and the turn resumes only on the EVENT_ANIMATION_COMPLETE of the same kind.
    """
    def __init__(self, world: str, event_bus: EventBus, board_system: BoardSystem):
        self.world = world
        self.event_bus = event_bus
        self.board_system = board_system
        self.config = get_config(world)
        self._steps: Dict[ResolveStep, Callable[[], None]] = {
            ResolveStep.FINISH_SWAP: self._finish_swap,
            ResolveStep.DETECT: self._detect,
            ResolveStep.DROP: self._drop,
            ResolveStep.FILL: self._fill,
        }
        get_or_create_turn_state(world)
        get_or_create_progress(world)
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)
        self.event_bus.subscribe(EVENT_BOARD_RESET_REQUEST, self.on_reset_request)
        self.event_bus.subscribe(EVENT_ANIMATION_COMPLETE, self.on_animation_complete)
        self._ensure_playable()

    @property
    def state(self) -> TurnState:
        return get_or_create_turn_state(self.world)

    @property
    def progress(self) -> GameProgress:
        return get_or_create_progress(self.world)

    # Commands -----------------------------------------------------------------

    def on_swap_request(self, sender, **payload):
        src = payload.get('src')
        dst = payload.get('dst')
        if not src or not dst:
            return
        self.attempt_swap(tuple(src), tuple(dst))

    def on_reset_request(self, sender, **payload):
        self.reset(reset_score=payload.get('reset_score', True))

    def reset(self, *, reset_score: bool = True) -> None:
        """Regenerate the board and drop any turn in flight."""
        state = self.state
        state.generation += 1
        state.step = None
        state.awaiting = None
        state.swap = None
        state.swap_matched = False
        progress = self.progress
        progress.combo_count = 0
        if reset_score:
            progress.score = 0
            progress.best_combo = 0
        board = self.board_system.initialize()
        self.event_bus.emit(EVENT_BOARD_INITIALIZED, cells=board.snapshot())
        self.event_bus.emit(EVENT_SCORE_CHANGED, total=progress.score, delta=0)
        self._ensure_playable()
        self._set_phase(TurnPhase.IDLE)

    def attempt_swap(self, src: Position, dst: Position) -> bool:
        """Start a turn; returns False when the request is rejected without side effects."""
        reason = self._rejection_reason(src, dst)
        if reason is not None:
            logger.debug("Swap %s <-> %s rejected: %s", src, dst, reason)
            self.event_bus.emit(EVENT_TILE_SWAP_REJECTED, src=src, dst=dst, reason=reason)
            return False
        self.progress.combo_count = 0
        matched = self.board_system.would_create_match(src, dst)
        self.board_system.swap(src, dst)
        state = self.state
        state.swap = (src, dst)
        state.swap_matched = matched
        self._set_phase(TurnPhase.SWAPPING)
        self._schedule(ResolveStep.FINISH_SWAP, 'swap', [src, dst], meta={'matched': matched})
        self._run()
        return True

    def on_animation_complete(self, sender, **payload):
        state = self.state
        if state.awaiting is None or payload.get('kind') != state.awaiting:
            return
        state.awaiting = None
        self._run()

    # Turn steps ---------------------------------------------------------------

    def _rejection_reason(self, src: Position, dst: Position) -> Optional[str]:
        if self.state.phase is not TurnPhase.IDLE:
            return REJECT_BUSY
        board = self.board_system.board
        if not (board.in_bounds(src) and board.in_bounds(dst)):
            return REJECT_OUT_OF_BOUNDS
        if not self.board_system.is_adjacent(src, dst):
            return REJECT_NOT_ADJACENT
        return None

    def _finish_swap(self):
        state = self.state
        if state.swap is None:
            return
        src, dst = state.swap
        matched = state.swap_matched
        generation = state.generation
        state.swap = None
        state.swap_matched = False
        if not matched:
            # Presentation gets the swap-and-restore; the board ends where it started.
            self.board_system.swap(src, dst)
        if not self._emit_current(generation, EVENT_TILE_SWAP_RESOLVED, src=src, dst=dst, matched=matched):
            return
        if not matched:
            self._settle()
            return
        self._set_phase(TurnPhase.RESOLVING)
        self._schedule(ResolveStep.DETECT)

    def _detect(self):
        generation = self.state.generation
        runs = self.board_system.find_matches()
        if not runs:
            self._settle()
            return
        progress = self.progress
        progress.combo_count += 1
        progress.best_combo = max(progress.best_combo, progress.combo_count)
        points = score_round(
            runs,
            progress.combo_count,
            base_points=self.config.base_points,
            length_bonus=self.config.length_bonus,
        )
        progress.score += points
        logger.debug(
            "Cascade round %d: %d run(s), +%d points (total %d)",
            progress.combo_count, len(runs), points, progress.score,
        )
        if not self._emit_current(generation, EVENT_MATCH_FOUND, runs=runs, depth=progress.combo_count):
            return
        if not self._emit_current(generation, EVENT_SCORE_CHANGED, total=progress.score, delta=points):
            return
        if progress.combo_count > 1 and not self._emit_current(
            generation, EVENT_COMBO_CHANGED, count=progress.combo_count
        ):
            return
        removed = self.board_system.remove_matches(runs)
        if not self._emit_current(generation, EVENT_MATCH_CLEARED, positions=removed):
            return
        self._schedule(ResolveStep.DROP, 'fade', removed)

    def _drop(self):
        generation = self.state.generation
        moves = self.board_system.compact()
        if not self._emit_current(generation, EVENT_GRAVITY_APPLIED, moves=moves):
            return
        self._schedule(ResolveStep.FILL, 'fall', moves)

    def _fill(self):
        generation = self.state.generation
        spawns = self.board_system.refill()
        if not self._emit_current(generation, EVENT_REFILL_COMPLETED, spawns=spawns):
            return
        self._schedule(ResolveStep.DETECT, 'refill', spawns)

    def _settle(self):
        state = self.state
        if state.phase is TurnPhase.RESOLVING:
            if not self._emit_current(state.generation, EVENT_CASCADE_COMPLETE, depth=self.progress.combo_count):
                return
        self._ensure_playable()
        state.step = None
        self._set_phase(TurnPhase.IDLE)

    def _ensure_playable(self) -> bool:
        """Reshuffle a deadlocked board; return True when a reshuffle happened."""
        if self.board_system.has_any_legal_move():
            return False
        attempts = self.board_system.reshuffle(self.config.reshuffle_attempts)
        logger.info("Board deadlocked; reshuffled after %d attempt(s)", attempts)
        self.event_bus.emit(
            EVENT_BOARD_RESHUFFLED,
            attempts=attempts,
            cells=self.board_system.board.snapshot(),
        )
        return True

    # Scheduling ---------------------------------------------------------------

    def _emit_current(self, generation: int, name: str, **payload) -> bool:
        """Emit, then report whether the turn survived its handlers.

        A handler may call reset(); the steps of the replaced turn must stop there.
        """
        self.event_bus.emit(name, **payload)
        return self.state.generation == generation

    def _schedule(self, step: ResolveStep, kind: Optional[str] = None, items: Optional[List] = None,
                  meta: Optional[dict] = None):
        state = self.state
        state.step = step
        if kind and items and self.config.await_animations:
            state.awaiting = kind
            self.event_bus.emit(EVENT_ANIMATION_START, kind=kind, items=list(items), meta=meta or {})

    def _run(self):
        state = self.state
        while state.step is not None and state.awaiting is None:
            step = state.step
            state.step = None
            self._steps[step]()

    def _set_phase(self, phase: TurnPhase):
        state = self.state
        if state.phase is phase:
            return
        previous = state.phase
        state.phase = phase
        self.event_bus.emit(EVENT_TURN_PHASE_CHANGED, previous_phase=previous, new_phase=phase)
