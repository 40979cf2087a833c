from typing import List

import esper

from gemswap.components.phase_animation import PhaseAnimation
from gemswap.constants import (
    FADE_DURATION,
    FALL_BASE_DURATION,
    FALL_PER_ROW_DURATION,
    REFILL_DURATION,
    SWAP_DURATION,
)
from gemswap.events.bus import (
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_BOARD_INITIALIZED,
    EVENT_TICK,
    EventBus,
)
from gemswap.utils.worlds import use_world


def duration_for(kind: str, items: List, meta: dict) -> float:
    """Seconds a presentation would spend on one phase."""
    if kind == 'swap':
        # An unmatched swap plays forward and back.
        return SWAP_DURATION if meta.get('matched') else SWAP_DURATION * 2
    if kind == 'fade':
        return FADE_DURATION
    if kind == 'fall':
        distance = max((move.target[0] - move.source[0] for move in items), default=0)
        return FALL_BASE_DURATION + FALL_PER_ROW_DURATION * distance
    if kind == 'refill':
        return REFILL_DURATION
    return 0.0


class PhaseTimerSystem:
    """Stands in for a renderer: completes announced animations once their time has elapsed.

    Each EVENT_ANIMATION_START spawns an entity carrying a PhaseAnimation; EVENT_TICK
    advances them and emits EVENT_ANIMATION_COMPLETE for every one that finished.
    A fresh board (EVENT_BOARD_INITIALIZED) cancels whatever is still running.
    """
    def __init__(self, world: str, event_bus: EventBus, speed: float = 1.0):
        if speed <= 0:
            raise ValueError(f"speed must be positive, got {speed}")
        self.world = world
        self.event_bus = event_bus
        self.speed = speed
        event_bus.subscribe(EVENT_ANIMATION_START, self.on_animation_start)
        event_bus.subscribe(EVENT_TICK, self.on_tick)
        event_bus.subscribe(EVENT_BOARD_INITIALIZED, self.on_board_initialized)

    def on_animation_start(self, sender, **kwargs):
        kind = kwargs.get('kind')
        if not kind:
            return
        duration = duration_for(kind, kwargs.get('items') or [], kwargs.get('meta') or {})
        use_world(self.world)
        esper.create_entity(PhaseAnimation(kind=kind, duration=duration / self.speed))

    def on_board_initialized(self, sender, **kwargs):
        self.cancel_all()

    def on_tick(self, sender, **kwargs):
        dt = float(kwargs.get('dt', 1 / 60))
        use_world(self.world)
        finished = []
        for ent, anim in esper.get_component(PhaseAnimation):
            anim.elapsed += dt
            if anim.finished:
                finished.append((ent, anim.kind))
        # Delete before emitting: completion handlers may announce the next phase.
        for ent, _ in finished:
            use_world(self.world)
            esper.delete_entity(ent, immediate=True)
        for _, kind in finished:
            self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind=kind)

    def cancel_all(self) -> None:
        use_world(self.world)
        for ent, _ in list(esper.get_component(PhaseAnimation)):
            esper.delete_entity(ent, immediate=True)

    def active_kinds(self) -> List[str]:
        use_world(self.world)
        return [anim.kind for _, anim in esper.get_component(PhaseAnimation)]
