"""Directional gravity compaction.

Each pass handles every line of the board once: columns for DOWN/UP, rows for
LEFT/RIGHT. Tiles in the playable cells of a line are collected in line order,
the playable cells are cleared, and the tiles are placed back in the same
relative order against the gravity end of the line. Blocked cells are skipped;
they never receive a tile and never split the packing.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from esper import World

from match3.components.board import Board, Position
from match3.components.gravity import GravityDirection
from match3.systems.session_state_utils import get_board

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GravityMove:
    tile: int
    source: Position
    target: Position


def _line_cells(board: Board, direction: GravityDirection, index: int) -> List[Position]:
    """Playable cells of one line, in ascending row/column order."""
    if direction.vertical:
        return [(row, index) for row in range(board.rows) if board.mask[row][index]]
    return [(index, col) for col in range(board.cols) if board.mask[index][col]]


def compact_line(board: Board, cells: List[Position], toward_start: bool) -> List[GravityMove]:
    collected = [(board.get(*pos), pos) for pos in cells]
    collected = [(tile, pos) for tile, pos in collected if tile is not None]
    if not collected:
        return []
    for pos in cells:
        board.set(pos[0], pos[1], None)
    if toward_start:
        targets = cells[:len(collected)]
    else:
        targets = cells[len(cells) - len(collected):]
    moves: List[GravityMove] = []
    for (tile, source), target in zip(collected, targets):
        board.set(target[0], target[1], tile)
        if target != source:
            moves.append(GravityMove(tile=tile, source=source, target=target))
    return moves


def apply_gravity(world: World, direction: GravityDirection) -> List[GravityMove]:
    """Run one compaction pass and return the tiles whose slot changed.

    An empty result means nothing moved; a second pass right after a first one
    always returns an empty list.
    """
    board = get_board(world)
    line_count = board.cols if direction.vertical else board.rows
    moves: List[GravityMove] = []
    for index in range(line_count):
        cells = _line_cells(board, direction, index)
        moves.extend(compact_line(board, cells, direction.toward_start))
    logger.debug("gravity %s moved %d tiles", direction.value, len(moves))
    return moves
