import logging
from typing import Optional, Tuple
from esper import World
from match3.events.bus import (EventBus, EVENT_TILE_CLICK, EVENT_TILE_SELECTED,
                               EVENT_TILE_SWAP_REQUEST, EVENT_DESELECT_REQUEST, EVENT_BOARD_GENERATED)
from match3.components.board import Board
from match3.systems.board_ops import ArrangementResult, generate_board
from match3.systems.session_state_utils import clear_selection, get_session_config, get_session_state

logger = logging.getLogger(__name__)


class BoardSystem:
    """Owns the board entity and the click-driven selection flow.

    A click on an empty selection selects the cell; a second click on the same
    cell deselects it; a click on an orthogonal neighbour requests a swap; any
    other click moves the selection. Clicks are ignored while a turn is busy.
    """
    def __init__(self, world: World, event_bus: EventBus, *, generate: bool = True):
        self.world = world
        self.event_bus = event_bus
        config = get_session_config(world)
        self.board_entity = self.world.create_entity()
        self.world.add_component(self.board_entity, Board.from_mask(config.pattern))
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_DESELECT_REQUEST, self.on_deselect_request)
        if generate:
            self.initialize_grid()

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    @property
    def selected(self) -> Optional[Tuple[int, int]]:
        return get_session_state(self.world).selected

    def initialize_grid(self) -> ArrangementResult:
        result = generate_board(self.world)
        self.event_bus.emit(EVENT_BOARD_GENERATED, attempts=result.attempts, clean=result.clean)
        return result

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        state = get_session_state(self.world)
        if state.busy:
            logger.debug("click at (%s, %s) ignored: turn in progress", row, col)
            return
        board = self.board
        if board.get(row, col) is None:
            # Blocked or empty cells cannot be selected.
            return
        cell = (row, col)
        if state.selected is None:
            state.selected = cell
            self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col)
        elif state.selected == cell:
            self._clear_selection('reselect')
        elif self.is_adjacent(state.selected, cell):
            src = state.selected
            self._clear_selection('swap')
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=cell)
        else:
            state.selected = cell
            self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col)

    def on_deselect_request(self, sender, **kwargs):
        if get_session_state(self.world).busy:
            return
        self._clear_selection(kwargs.get('reason', 'request'))

    def _clear_selection(self, reason: str) -> None:
        clear_selection(self.world, self.event_bus, reason)

    @staticmethod
    def is_adjacent(a: Tuple[int,int], b: Tuple[int,int]) -> bool:
        ar, ac = a
        br, bc = b
        return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)
