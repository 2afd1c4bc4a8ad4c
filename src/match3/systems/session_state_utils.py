from __future__ import annotations

import random
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

from esper import World

from match3.config import SessionConfig
from match3.components.board import Board
from match3.components.session_state import SessionState
from match3.components.tile_kinds import TileKinds
from match3.events.bus import EventBus, EVENT_TILE_DESELECTED, EVENT_TURN_COMPLETE, EVENT_TURN_STARTED


def get_session_state(world: World) -> SessionState:
    for _, state in world.get_component(SessionState):
        return state
    raise RuntimeError("SessionState not found")


def get_session_config(world: World) -> SessionConfig:
    for _, config in world.get_component(SessionConfig):
        return config
    raise RuntimeError("SessionConfig not found")


def get_tile_kinds(world: World) -> TileKinds:
    for _, kinds in world.get_component(TileKinds):
        return kinds
    raise RuntimeError("TileKinds definitions not found")


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not found")


def world_random(world: World) -> random.Random:
    rng = getattr(world, "random", None)
    if isinstance(rng, random.Random):
        return rng
    rng = random.Random()
    setattr(world, "random", rng)
    return rng


def clear_selection(world: World, event_bus: EventBus, reason: str) -> Optional[Tuple[int, int]]:
    """Drop the selected cell, if any, and announce it with EVENT_TILE_DESELECTED."""
    state = get_session_state(world)
    prev = state.selected
    if prev is None:
        return None
    state.selected = None
    event_bus.emit(EVENT_TILE_DESELECTED, reason=reason, prev_row=prev[0], prev_col=prev[1])
    return prev


@contextmanager
def turn(world: World, event_bus: EventBus, source: str) -> Iterator[SessionState]:
    """Hold the busy flag for one turn and bracket it with turn events.

    The flag is released even when the turn body raises.
    """
    state = get_session_state(world)
    state.busy = True
    state.turn_source = source
    event_bus.emit(EVENT_TURN_STARTED, source=source)
    try:
        yield state
    finally:
        state.busy = False
        state.turn_source = None
    event_bus.emit(EVENT_TURN_COMPLETE, source=source, score=state.score)
