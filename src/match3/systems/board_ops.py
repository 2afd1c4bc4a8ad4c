from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from esper import World

from match3.components.board import Position
from match3.components.tile import Tile
from match3.errors import BlockedCellError
from match3.systems.match import find_all_matches, has_valid_move, kind_at, would_create_match
from match3.systems.session_state_utils import (
    get_board,
    get_session_config,
    get_tile_kinds,
    world_random,
)

logger = logging.getLogger(__name__)

TypeEntry = Tuple[int, int, int]


@dataclass(slots=True)
class ArrangementResult:
    """Outcome of generation or shuffling: attempts used and whether the board came out clean."""
    attempts: int
    clean: bool


def spawn_tile(world: World, row: int, col: int, kind: int) -> int:
    """Create a tile entity of ``kind`` and place it at (row, col)."""
    board = get_board(world)
    if board.get(row, col) is not None:
        raise ValueError(f"Cell ({row}, {col}) already holds a tile")
    if not board.is_playable(row, col):
        raise BlockedCellError(row, col)
    tile = world.create_entity(Tile(kind=kind))
    board.set(row, col, tile)
    return tile


def remove_tiles(world: World, positions: Iterable[Position]) -> List[TypeEntry]:
    """Empty the given slots and delete their tile entities.

    Returns ``(row, col, kind)`` for every tile actually removed.
    """
    board = get_board(world)
    removed: List[TypeEntry] = []
    for row, col in positions:
        tile = board.get(row, col)
        if tile is None:
            continue
        kind = world.component_for_entity(tile, Tile).kind
        board.set(row, col, None)
        world.delete_entity(tile, immediate=True)
        removed.append((row, col, kind))
    return removed


def clear_board(world: World) -> None:
    board = get_board(world)
    remove_tiles(world, [pos for pos, _ in board.occupied()])


def swap_tiles(world: World, src: Position, dst: Position) -> bool:
    """Swap the tiles in two occupied playable slots."""
    board = get_board(world)
    if board.get(*src) is None or board.get(*dst) is None:
        return False
    board.swap(src, dst)
    return True


def random_kind(world: World, rng: random.Random | None = None) -> int:
    rng = rng or world_random(world)
    return rng.randrange(get_tile_kinds(world).count)


def fill_empty_slots(world: World) -> List[Position]:
    """Fill every empty playable slot, row-major, with a uniformly random kind.

    No anti-match filtering happens here; a refill may line up a fresh match,
    which the next scan of the cascade loop picks up.
    """
    board = get_board(world)
    rng = world_random(world)
    spawned: List[Position] = []
    for row, col in board.empty_cells():
        spawn_tile(world, row, col, random_kind(world, rng))
        spawned.append((row, col))
    return spawned


def _guarded_kind(world: World, row: int, col: int, rng: random.Random, draws: int) -> int:
    count = get_tile_kinds(world).count
    kind = 0
    for _ in range(draws):
        kind = rng.randrange(count)
        if not would_create_match(world, row, col, kind):
            return kind
    # Out of draws: step to the next kind so generation always terminates.
    return (kind + 1) % count


def generate_board(world: World) -> ArrangementResult:
    """Deal a fresh board with no matches and at least one valid move.

    Each playable cell gets a random kind that does not complete a run with the
    cells left of or above it. A finished board that still has a match or no
    valid move is discarded and dealt again, up to the configured number of
    whole-board attempts; after that the last board stays as dealt.
    """
    config = get_session_config(world)
    board = get_board(world)
    rng = world_random(world)
    for attempt in range(1, config.generation_attempts + 1):
        clear_board(world)
        for row, col in board.playable_cells():
            spawn_tile(world, row, col, _guarded_kind(world, row, col, rng, config.generation_draws))
        if not find_all_matches(world) and has_valid_move(world):
            logger.debug("board generated after %d attempt(s)", attempt)
            return ArrangementResult(attempts=attempt, clean=True)
    logger.warning(
        "board generation exhausted %d attempts without a clean board", config.generation_attempts
    )
    return ArrangementResult(attempts=config.generation_attempts, clean=False)


def _place_kinds(world: World, cells: Sequence[Position], kinds: Sequence[int]) -> bool:
    """Place kinds into cells in order; return False if any placement completed a run."""
    clean = True
    for (row, col), kind in zip(cells, kinds):
        if clean and would_create_match(world, row, col, kind):
            clean = False
        spawn_tile(world, row, col, kind)
    return clean


def shuffle_board(world: World) -> ArrangementResult:
    """Redistribute the kinds currently on the board.

    The kinds are shuffled and dealt back row-major into the occupied cells.
    An attempt is rejected when any placement would complete a run or the
    result has no valid move; the kinds are reshuffled and dealt again, up to
    the configured ceiling. When attempts run out the last arrangement stays in
    place.
    """
    config = get_session_config(world)
    board = get_board(world)
    rng = world_random(world)
    cells = [pos for pos, _ in board.occupied()]
    kinds = [kind_at(world, board, row, col) for row, col in cells]
    if not cells:
        return ArrangementResult(attempts=0, clean=True)
    for attempt in range(1, config.shuffle_attempts + 1):
        rng.shuffle(kinds)
        clear_board(world)
        if _place_kinds(world, cells, kinds) and has_valid_move(world):
            logger.info("board shuffled after %d attempt(s)", attempt)
            return ArrangementResult(attempts=attempt, clean=True)
    logger.warning("shuffle exhausted %d attempts; keeping last arrangement", config.shuffle_attempts)
    return ArrangementResult(attempts=config.shuffle_attempts, clean=False)


def load_kinds(world: World, grid: Sequence[Sequence[Optional[int]]]) -> None:
    """Replace every tile with the kinds given row by row (None leaves a slot empty)."""
    board = get_board(world)
    if len(grid) != board.rows or any(len(row) != board.cols for row in grid):
        raise ValueError(f"Kind grid does not match a {board.rows}x{board.cols} board")
    clear_board(world)
    for row, values in enumerate(grid):
        for col, kind in enumerate(values):
            if kind is not None:
                spawn_tile(world, row, col, kind)
