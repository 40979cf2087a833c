import random
from typing import Optional, Type, TypeVar

import esper

from gemswap.components.game_config import GameConfig
from gemswap.components.game_progress import GameProgress
from gemswap.components.random_source import RandomSource
from gemswap.components.turn_state import TurnPhase, TurnState
from gemswap.utils.worlds import use_world

C = TypeVar("C")


def _singleton(world: str, component_type: Type[C]) -> Optional[C]:
    use_world(world)
    for _, component in esper.get_component(component_type):
        return component
    return None


def get_or_create_turn_state(world: str) -> TurnState:
    """Return the shared TurnState component, creating it if absent."""
    existing = _singleton(world, TurnState)
    if existing is not None:
        return existing
    state = TurnState()
    esper.create_entity(state)
    return state


def get_or_create_progress(world: str) -> GameProgress:
    existing = _singleton(world, GameProgress)
    if existing is not None:
        return existing
    progress = GameProgress()
    esper.create_entity(progress)
    return progress


def get_config(world: str) -> GameConfig:
    config = _singleton(world, GameConfig)
    if config is None:
        raise RuntimeError(f"GameConfig not registered in world {world!r}")
    return config


def get_rng(world: str) -> random.Random:
    source = _singleton(world, RandomSource)
    if source is None:
        source = RandomSource()
        esper.create_entity(source)
    return source.rng


def is_idle(world: str) -> bool:
    return get_or_create_turn_state(world).phase is TurnPhase.IDLE
