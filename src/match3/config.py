"""Session configuration: board pattern, tile kinds, rotation budget and retry ceilings.

A configuration is supplied once when a session starts and never changes
afterwards. Boards are described by a playability pattern, usually parsed from
text::

    SessionConfig.from_pattern_text('''
        0 1 1 0
        1 1 1 1
        1 1 1 1
    ''')

``0`` marks a blocked cell; any other token marks a playable one.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Tuple

from match3.constants import (
    GENERATION_ATTEMPTS,
    GENERATION_DRAWS,
    MAX_ROTATIONS,
    SCORE_PER_TILE,
    SHUFFLE_ATTEMPTS,
    TILE_KINDS,
)
from match3.errors import ConfigurationError

Pattern = Tuple[Tuple[bool, ...], ...]

_ROW_SPLIT = re.compile(r"[\n;]")
_TOKEN_SPLIT = re.compile(r"[,\s]+")
BLOCKED_TOKEN = "0"


def _row_tokens(line: str) -> list[str]:
    stripped = line.strip()
    if _TOKEN_SPLIT.search(stripped):
        return [tok for tok in _TOKEN_SPLIT.split(stripped) if tok]
    return list(stripped)


def parse_pattern(text: str) -> Pattern:
    """Parse a row-delimited token string into a rectangular playability mask.

    Rows are separated by newlines or ``;``. Tokens inside a row are separated
    by commas and/or whitespace; a row without separators is read one character
    per cell. Blank rows are skipped and shorter rows are padded with playable
    cells up to the longest row.
    """
    rows: list[list[bool]] = []
    for line in _ROW_SPLIT.split(text):
        tokens = _row_tokens(line)
        if not tokens:
            continue
        rows.append([tok != BLOCKED_TOKEN for tok in tokens])
    if not rows:
        raise ConfigurationError("Board pattern contains no rows")
    width = max(len(row) for row in rows)
    return tuple(tuple(row + [True] * (width - len(row))) for row in rows)


def normalize_pattern(cells: Iterable[Iterable[object]]) -> Pattern:
    """Coerce nested iterables (bools, ints, strings) into a padded mask."""
    rows: list[list[bool]] = []
    for row in cells:
        rows.append([str(cell).strip() != BLOCKED_TOKEN and cell is not False for cell in row])
    if not rows or not any(rows):
        raise ConfigurationError("Board pattern contains no cells")
    width = max(len(row) for row in rows)
    return tuple(tuple(row + [True] * (width - len(row))) for row in rows)


@dataclass(frozen=True, slots=True)
class SessionConfig:
    pattern: Pattern
    tile_kinds: int = TILE_KINDS
    max_rotations: int = MAX_ROTATIONS
    auto_shuffle: bool = True
    generation_attempts: int = GENERATION_ATTEMPTS
    generation_draws: int = GENERATION_DRAWS
    shuffle_attempts: int = SHUFFLE_ATTEMPTS
    score_per_tile: int = SCORE_PER_TILE

    def __post_init__(self) -> None:
        if not self.pattern or not self.pattern[0]:
            raise ConfigurationError("Board pattern must have at least one row and one column")
        width = len(self.pattern[0])
        if any(len(row) != width for row in self.pattern):
            raise ConfigurationError("Board pattern rows must all have the same length")
        if self.tile_kinds < 2:
            raise ConfigurationError(f"tile_kinds must be at least 2, got {self.tile_kinds}")
        if self.max_rotations < 0:
            raise ConfigurationError(f"max_rotations must not be negative, got {self.max_rotations}")
        for name in ("generation_attempts", "generation_draws", "shuffle_attempts"):
            if getattr(self, name) < 1:
                raise ConfigurationError(f"{name} must be positive")
        if self.score_per_tile < 0:
            raise ConfigurationError("score_per_tile must not be negative")

    @property
    def rows(self) -> int:
        return len(self.pattern)

    @property
    def cols(self) -> int:
        return len(self.pattern[0])

    @classmethod
    def rectangular(cls, rows: int, cols: int, **overrides) -> "SessionConfig":
        if rows <= 0 or cols <= 0:
            raise ConfigurationError(f"Board must be at least 1x1, got {rows}x{cols}")
        pattern = tuple(tuple(True for _ in range(cols)) for _ in range(rows))
        return cls(pattern=pattern, **overrides)

    @classmethod
    def from_pattern_text(cls, text: str, **overrides) -> "SessionConfig":
        return cls(pattern=parse_pattern(text), **overrides)

    @classmethod
    def from_cells(cls, cells: Iterable[Iterable[object]], **overrides) -> "SessionConfig":
        return cls(pattern=normalize_pattern(cells), **overrides)
