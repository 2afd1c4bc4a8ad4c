"""Facade over the ECS world and systems for one play session.

The presentation layer talks to the engine through gestures (``select_cell``,
``request_swap``, ``request_rotate``, ``clear_selection``) and reads score and
rotation budget back. The only callback the engine issues is ``on_tile_moved``
(tile id, new row, new col), called synchronously whenever a tile changes slot.
"""
from __future__ import annotations

import random
from typing import Callable, List, Optional, Tuple

from match3.config import SessionConfig
from match3.components.board import Board, Position
from match3.components.gravity import GravityDirection, RotateDirection
from match3.events.bus import (EventBus, EVENT_DESELECT_REQUEST, EVENT_ROTATE_REQUEST, EVENT_TILE_CLICK,
                               EVENT_TILE_MOVED, EVENT_TILE_SWAP_REQUEST)
from match3.systems.board import BoardSystem
from match3.systems.match import find_all_matches, find_valid_swaps, has_valid_move, kind_grid
from match3.systems.match_resolution import MatchResolutionSystem
from match3.systems.rotation import RotationSystem
from match3.systems.session_state_utils import get_session_state
from match3.world import create_world

TileMovedCallback = Callable[[int, int, int], object]


class BoardEngine:
    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        rng: random.Random | None = None,
        event_bus: EventBus | None = None,
        on_tile_moved: TileMovedCallback | None = None,
    ):
        self.event_bus = event_bus or EventBus()
        self.world = create_world(self.event_bus, config, rng=rng)
        if on_tile_moved is not None:
            self.event_bus.subscribe(
                EVENT_TILE_MOVED,
                lambda sender, **payload: on_tile_moved(payload['tile'], payload['row'], payload['col']),
            )
        # Board must exist before the resolution systems look it up.
        self.board_system = BoardSystem(self.world, self.event_bus, generate=False)
        self.match_resolution = MatchResolutionSystem(self.world, self.event_bus)
        self.rotation_system = RotationSystem(self.world, self.event_bus)
        self.board_system.initialize_grid()

    # -- inbound gestures -------------------------------------------------

    def select_cell(self, row: int, col: int) -> None:
        self.event_bus.emit(EVENT_TILE_CLICK, row=row, col=col)

    def request_swap(self, src: Position, dst: Position) -> None:
        self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=dst)

    def request_rotate(self, direction: RotateDirection | str) -> None:
        self.event_bus.emit(EVENT_ROTATE_REQUEST, direction=direction)

    def clear_selection(self) -> None:
        self.event_bus.emit(EVENT_DESELECT_REQUEST, reason='request')

    # -- outbound signals -------------------------------------------------

    @property
    def board(self) -> Board:
        return self.board_system.board

    @property
    def score(self) -> int:
        return get_session_state(self.world).score

    @property
    def remaining_rotations(self) -> int:
        return get_session_state(self.world).remaining_rotations

    @property
    def angle(self) -> int:
        return get_session_state(self.world).angle

    @property
    def gravity_direction(self) -> GravityDirection:
        return get_session_state(self.world).gravity

    @property
    def selected(self) -> Optional[Tuple[int, int]]:
        return get_session_state(self.world).selected

    @property
    def busy(self) -> bool:
        return get_session_state(self.world).busy

    # -- queries ----------------------------------------------------------

    def kinds(self) -> List[List[Optional[int]]]:
        return kind_grid(self.world, self.board)

    def matches(self) -> set[Position]:
        return find_all_matches(self.world)

    def has_valid_move(self) -> bool:
        return has_valid_move(self.world)

    def hint(self) -> Optional[Tuple[Position, Position]]:
        swaps = find_valid_swaps(self.world)
        return swaps[0] if swaps else None
