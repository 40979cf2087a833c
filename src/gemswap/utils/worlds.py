"""Helpers around esper's named world contexts.

Every session lives in its own esper world so that several boards can coexist in
one process. Systems keep the world name and re-activate it before touching
components.
"""
from __future__ import annotations

import itertools

import esper

DEFAULT_WORLD = "default"

_world_ids = itertools.count(1)


def new_world_name(prefix: str = "session") -> str:
    return f"{prefix}-{next(_world_ids)}"


def use_world(name: str) -> None:
    esper.switch_world(name)


def close_world(name: str) -> None:
    """Drop every entity of ``name`` and forget the context."""
    if name == DEFAULT_WORLD:
        use_world(name)
        esper.clear_database()
        return
    # esper refuses to delete the active context.
    use_world(DEFAULT_WORLD)
    if name in esper.list_worlds():
        esper.delete_world(name)
