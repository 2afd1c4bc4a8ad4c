from __future__ import annotations

from contextlib import contextmanager
from dataclasses import InitVar, dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

from match3.errors import BlockedCellError, BoardBoundsError, DegenerateBoardError

Position = Tuple[int, int]


@dataclass(slots=True)
class Board:
    """Grid of tile slots plus the immutable playability mask.

    Slots hold tile entity ids (or None when empty). A tile never records its
    own coordinates; its position is whichever slot currently references it.
    Any coordinate outside the grid is a programming error and raises
    BoardBoundsError instead of reading as empty.
    """
    rows: int
    cols: int
    pattern: InitVar[Sequence[Sequence[bool]]] = ()
    _mask: Tuple[Tuple[bool, ...], ...] = field(init=False, repr=False)
    slots: List[List[Optional[int]]] = field(init=False, repr=False)

    def __post_init__(self, pattern: Sequence[Sequence[bool]]) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise DegenerateBoardError(f"Board must be at least 1x1, got {self.rows}x{self.cols}")
        if not pattern:
            pattern = [[True] * self.cols for _ in range(self.rows)]
        if len(pattern) != self.rows or any(len(row) != self.cols for row in pattern):
            raise DegenerateBoardError(f"Playability mask does not match a {self.rows}x{self.cols} board")
        self._mask = tuple(tuple(bool(cell) for cell in row) for row in pattern)
        self.slots = [[None] * self.cols for _ in range(self.rows)]

    @classmethod
    def from_mask(cls, mask: Sequence[Sequence[bool]]) -> "Board":
        rows = len(mask)
        cols = len(mask[0]) if rows else 0
        return cls(rows=rows, cols=cols, pattern=mask)

    @property
    def mask(self) -> Tuple[Tuple[bool, ...], ...]:
        """Per-cell playability, fixed when the board is built."""
        return self._mask

    @property
    def dimensions(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def _check(self, row: int, col: int) -> None:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise BoardBoundsError(row, col, self.rows, self.cols)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_playable(self, row: int, col: int) -> bool:
        self._check(row, col)
        return self.mask[row][col]

    def get(self, row: int, col: int) -> Optional[int]:
        self._check(row, col)
        return self.slots[row][col]

    def set(self, row: int, col: int, tile: Optional[int]) -> None:
        self._check(row, col)
        if tile is not None and not self.mask[row][col]:
            raise BlockedCellError(row, col)
        self.slots[row][col] = tile

    def swap(self, a: Position, b: Position) -> None:
        self._check(*a)
        self._check(*b)
        (ar, ac), (br, bc) = a, b
        self.slots[ar][ac], self.slots[br][bc] = self.slots[br][bc], self.slots[ar][ac]

    @contextmanager
    def tentative_swap(self, a: Position, b: Position) -> Iterator[None]:
        """Swap two slots for the duration of the block, restoring them on any exit."""
        self.swap(a, b)
        try:
            yield
        finally:
            self.swap(a, b)

    def playable_cells(self) -> Iterator[Position]:
        """Row-major iteration over every playable coordinate."""
        for row in range(self.rows):
            for col in range(self.cols):
                if self.mask[row][col]:
                    yield row, col

    def occupied(self) -> Iterator[Tuple[Position, int]]:
        for row, col in self.playable_cells():
            tile = self.slots[row][col]
            if tile is not None:
                yield (row, col), tile

    def empty_cells(self) -> List[Position]:
        return [pos for pos in self.playable_cells() if self.slots[pos[0]][pos[1]] is None]

    def playable_count(self) -> int:
        return sum(1 for _ in self.playable_cells())

    def snapshot(self) -> Tuple[Tuple[Optional[int], ...], ...]:
        return tuple(tuple(row) for row in self.slots)
