import random
from dataclasses import dataclass
from typing import Optional

import esper

from gemswap.components.board import Board
from gemswap.components.game_config import GameConfig
from gemswap.components.game_progress import GameProgress
from gemswap.components.random_source import RandomSource
from gemswap.components.turn_state import TurnState
from gemswap.events.bus import EventBus
from gemswap.systems.animation import PhaseTimerSystem
from gemswap.systems.board import BoardSystem
from gemswap.systems.match_resolution import MatchResolutionSystem
from gemswap.systems.selection import SelectionSystem
from gemswap.utils.worlds import close_world, new_world_name, use_world


def create_world(
    config: Optional[GameConfig] = None,
    *,
    rng: Optional[random.Random] = None,
    name: Optional[str] = None,
) -> str:
    """Create (or wipe) an esper world for one session and register its singletons.

    Returns the world name systems use to reach the session's components.
    """
    world = name or new_world_name()
    use_world(world)
    esper.clear_database()
    esper.create_entity(
        config or GameConfig(),
        GameProgress(),
        TurnState(),
        RandomSource(rng=rng or random.Random()),
    )
    return world


@dataclass(slots=True)
class GameSession:
    """Everything one game needs: its world, bus and the systems wired to them."""
    world: str
    event_bus: EventBus
    board_system: BoardSystem
    resolution: MatchResolutionSystem
    selection: SelectionSystem
    timer: Optional[PhaseTimerSystem] = None

    @property
    def board(self) -> Board:
        return self.board_system.board

    @property
    def progress(self) -> GameProgress:
        return self.resolution.progress

    def attempt_swap(self, src, dst) -> bool:
        return self.resolution.attempt_swap(src, dst)

    def reset(self, *, reset_score: bool = True) -> None:
        self.resolution.reset(reset_score=reset_score)

    def close(self) -> None:
        close_world(self.world)


def create_game(
    config: Optional[GameConfig] = None,
    *,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    event_bus: Optional[EventBus] = None,
    with_timer: bool = False,
    timer_speed: float = 1.0,
) -> GameSession:
    """Build a ready-to-play session. ``seed`` is ignored when ``rng`` is given."""
    bus = event_bus or EventBus()
    world = create_world(config, rng=rng or random.Random(seed))
    board_system = BoardSystem(world)
    resolution = MatchResolutionSystem(world, bus, board_system)
    selection = SelectionSystem(world, bus)
    timer = PhaseTimerSystem(world, bus, speed=timer_speed) if with_timer else None
    return GameSession(
        world=world,
        event_bus=bus,
        board_system=board_system,
        resolution=resolution,
        selection=selection,
        timer=timer,
    )
