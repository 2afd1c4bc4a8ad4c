"""Match detection over the board.

All functions read the Board and Tile components of a world and never leave
the board mutated. Blocked and empty cells terminate runs.
"""
from __future__ import annotations

from typing import Iterator, List, Optional, Set, Tuple

from esper import World

from match3.components.board import Board, Position
from match3.components.tile import Tile
from match3.constants import MIN_MATCH
from match3.systems.session_state_utils import get_board


def kind_at(world: World, board: Board, row: int, col: int) -> Optional[int]:
    """Kind of the tile at (row, col), or None for empty and blocked cells."""
    if not board.is_playable(row, col):
        return None
    tile = board.get(row, col)
    if tile is None:
        return None
    return world.component_for_entity(tile, Tile).kind


def kind_grid(world: World, board: Board | None = None) -> List[List[Optional[int]]]:
    board = board or get_board(world)
    return [[kind_at(world, board, r, c) for c in range(board.cols)] for r in range(board.rows)]


def _scan_line(kinds: List[Optional[int]], positions: List[Position], found: Set[Position]) -> None:
    run: List[Position] = []
    last: Optional[int] = None
    for kind, pos in zip(kinds, positions):
        if kind is not None and kind == last:
            run.append(pos)
            continue
        if len(run) >= MIN_MATCH:
            found.update(run)
        run = [pos] if kind is not None else []
        last = kind
    if len(run) >= MIN_MATCH:
        found.update(run)


def find_all_matches(world: World) -> Set[Position]:
    """Coordinates of every tile in a horizontal or vertical run of 3 or more.

    Tiles at the crossing of a horizontal and a vertical run appear once.
    """
    board = get_board(world)
    grid = kind_grid(world, board)
    found: Set[Position] = set()
    for r in range(board.rows):
        _scan_line(grid[r], [(r, c) for c in range(board.cols)], found)
    for c in range(board.cols):
        _scan_line([grid[r][c] for r in range(board.rows)], [(r, c) for r in range(board.rows)], found)
    return found


def would_create_match(world: World, row: int, col: int, kind: int) -> bool:
    """Return True if placing ``kind`` at (row, col) completes a run with the two
    tiles to its left or the two tiles above it.

    This is a local check for row-major generation and shuffling; it assumes
    the rest of the board holds no match already.
    """
    board = get_board(world)
    board.get(row, col)  # bounds check
    if col >= 2:
        left1 = kind_at(world, board, row, col - 1)
        left2 = kind_at(world, board, row, col - 2)
        if left1 == kind and left2 == kind:
            return True
    if row >= 2:
        up1 = kind_at(world, board, row - 1, col)
        up2 = kind_at(world, board, row - 2, col)
        if up1 == kind and up2 == kind:
            return True
    return False


def _count_direction(world: World, board: Board, row: int, col: int, dr: int, dc: int, kind: int) -> int:
    count = 0
    r, c = row + dr, col + dc
    while board.in_bounds(r, c) and kind_at(world, board, r, c) == kind:
        count += 1
        r += dr
        c += dc
    return count


def creates_run_at(world: World, board: Board, pos: Position) -> bool:
    """Return True if the tile at ``pos`` sits in a horizontal or vertical run of 3+."""
    row, col = pos
    kind = kind_at(world, board, row, col)
    if kind is None:
        return False
    horizontal = 1 + _count_direction(world, board, row, col, 0, -1, kind) + _count_direction(world, board, row, col, 0, 1, kind)
    if horizontal >= MIN_MATCH:
        return True
    vertical = 1 + _count_direction(world, board, row, col, -1, 0, kind) + _count_direction(world, board, row, col, 1, 0, kind)
    return vertical >= MIN_MATCH


def _swappable(board: Board, pos: Position) -> bool:
    row, col = pos
    return board.is_playable(row, col) and board.get(row, col) is not None


def iter_adjacent_pairs(board: Board) -> Iterator[Tuple[Position, Position]]:
    """Every horizontally then every vertically adjacent pair of occupied playable cells."""
    for row in range(board.rows):
        for col in range(board.cols - 1):
            a, b = (row, col), (row, col + 1)
            if _swappable(board, a) and _swappable(board, b):
                yield a, b
    for row in range(board.rows - 1):
        for col in range(board.cols):
            a, b = (row, col), (row + 1, col)
            if _swappable(board, a) and _swappable(board, b):
                yield a, b


def swap_creates_match(world: World, src: Position, dst: Position) -> bool:
    """Tentatively swap src/dst, test both cells, and restore the board."""
    board = get_board(world)
    with board.tentative_swap(src, dst):
        return creates_run_at(world, board, src) or creates_run_at(world, board, dst)


def has_valid_move(world: World) -> bool:
    board = get_board(world)
    return any(swap_creates_match(world, a, b) for a, b in iter_adjacent_pairs(board))


def find_valid_swaps(world: World) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    board = get_board(world)
    return [(a, b) for a, b in iter_adjacent_pairs(board) if swap_creates_match(world, a, b)]
