import logging
from typing import List, Set, Tuple
from esper import World
from match3.events.bus import (EventBus, EVENT_TILE_SWAP_REQUEST, EVENT_TILE_SWAP_VALID, EVENT_TILE_SWAP_INVALID,
                               EVENT_MATCH_FOUND, EVENT_MATCH_CLEARED, EVENT_CASCADE_STEP, EVENT_CASCADE_COMPLETE,
                               EVENT_GRAVITY_APPLIED, EVENT_TILE_MOVED, EVENT_REFILL_COMPLETED, EVENT_BOARD_CHANGED,
                               EVENT_BOARD_GENERATED, EVENT_BOARD_SHUFFLED, EVENT_SCORE_CHANGED)
from match3.components.board import Position
from match3.systems.board import BoardSystem
from match3.systems.board_ops import (fill_empty_slots, generate_board, remove_tiles, shuffle_board,
                                      swap_tiles)
from match3.systems.gravity import apply_gravity
from match3.systems.match import find_all_matches, has_valid_move
from match3.systems.session_state_utils import (clear_selection, get_board, get_session_config,
                                                  get_session_state, turn)

logger = logging.getLogger(__name__)


class MatchResolutionSystem:
    """Runs swap turns and the cascade loop.

    Every phase is a synchronous board transform followed by its notifications:
    Remove -> Compact -> Fill -> Rescan, repeated until a scan finds nothing.
    Presentation subscribers of EVENT_TILE_MOVED act as the phase barrier;
    they have returned by the time the next phase starts.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)
        self.event_bus.subscribe(EVENT_BOARD_CHANGED, self.on_board_changed)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        src, dst = tuple(src), tuple(dst)
        state = get_session_state(self.world)
        if state.busy:
            logger.debug("swap %s -> %s ignored: turn in progress", src, dst)
            return
        board = get_board(self.world)
        if board.get(*src) is None or board.get(*dst) is None:
            return
        if not BoardSystem.is_adjacent(src, dst):
            logger.debug("swap %s -> %s ignored: cells are not adjacent", src, dst)
            return
        with turn(self.world, self.event_bus, 'swap'):
            clear_selection(self.world, self.event_bus, 'swap')
            self._swap(src, dst)
            matches = find_all_matches(self.world)
            if not matches:
                # Undo rather than rescan: the board returns to its exact prior state.
                self._swap(src, dst)
                self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)
            else:
                self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
                self.resolve_cascades(matches, reason='swap')
            self.settle()

    def on_board_changed(self, sender, **kwargs):
        """Resolve a board altered outside a swap (rotation, tests, tools)."""
        reason = kwargs.get('reason', 'board_changed')
        compact = kwargs.get('compact', False)
        state = get_session_state(self.world)
        if state.busy:
            self._resolve_changed_board(reason, compact)
            return
        with turn(self.world, self.event_bus, reason):
            self._resolve_changed_board(reason, compact)

    def _resolve_changed_board(self, reason: str, compact: bool) -> None:
        if compact:
            self.compact()
            self.refill()
        self.resolve_cascades(find_all_matches(self.world), reason=reason)
        self.settle()

    def resolve_cascades(self, matches: Set[Position], *, reason: str) -> int:
        """Clear matches until none remain; returns the cascade depth reached."""
        depth = 0
        while matches:
            depth += 1
            positions = sorted(matches)
            logger.debug("cascade step %d (%s): %d tiles", depth, reason, len(positions))
            self.event_bus.emit(EVENT_CASCADE_STEP, depth=depth, positions=positions, reason=reason)
            self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), depth=depth)
            self._award(len(positions))
            removed = remove_tiles(self.world, positions)
            self.event_bus.emit(EVENT_MATCH_CLEARED, positions=positions, kinds=removed)
            self.compact()
            self.refill()
            matches = find_all_matches(self.world)
        if depth:
            self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth, reason=reason)
        return depth

    def compact(self) -> int:
        direction = get_session_state(self.world).gravity
        moves = apply_gravity(self.world, direction)
        for move in moves:
            self.event_bus.emit(EVENT_TILE_MOVED, tile=move.tile, row=move.target[0],
                                col=move.target[1], source=move.source)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, direction=direction, moved=len(moves))
        return len(moves)

    def refill(self) -> List[Position]:
        new_tiles = fill_empty_slots(self.world)
        if new_tiles:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=new_tiles)
        return new_tiles

    def settle(self) -> None:
        """Shuffle a board without valid moves, escalating to regeneration if shuffling fails."""
        config = get_session_config(self.world)
        if not config.auto_shuffle or has_valid_move(self.world):
            return
        logger.info("no valid move left; shuffling board")
        result = shuffle_board(self.world)
        self.event_bus.emit(EVENT_BOARD_SHUFFLED, attempts=result.attempts, clean=result.clean)
        if result.clean:
            return
        logger.info("shuffle failed to produce a playable board; regenerating")
        result = generate_board(self.world)
        self.event_bus.emit(EVENT_BOARD_GENERATED, attempts=result.attempts, clean=result.clean)

    def _swap(self, src: Tuple[int, int], dst: Tuple[int, int]) -> None:
        board = get_board(self.world)
        swap_tiles(self.world, src, dst)
        for row, col in (src, dst):
            tile = board.get(row, col)
            other = dst if (row, col) == src else src
            self.event_bus.emit(EVENT_TILE_MOVED, tile=tile, row=row, col=col, source=other)

    def _award(self, tiles: int) -> None:
        state = get_session_state(self.world)
        delta = tiles * get_session_config(self.world).score_per_tile
        state.score += delta
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=state.score, delta=delta)
