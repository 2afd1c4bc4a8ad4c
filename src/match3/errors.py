"""Exception hierarchy for the match-three engine.

Only precondition violations raise. Exhausted retries and rejected gestures
are normal outcomes and never surface as exceptions.
"""

__all__ = [
    "Match3Error",
    "BoardBoundsError",
    "BlockedCellError",
    "DegenerateBoardError",
    "ConfigurationError",
]


class Match3Error(Exception):
    """Base class for every error raised by the engine."""


class BoardBoundsError(Match3Error, IndexError):
    """A coordinate lies outside ``[0, rows) x [0, cols)``."""

    def __init__(self, row: int, col: int, rows: int, cols: int):
        super().__init__(f"Cell ({row}, {col}) is outside a {rows}x{cols} board")
        self.row = row
        self.col = col


class BlockedCellError(Match3Error, ValueError):
    """A tile was placed on a cell the playability mask excludes."""

    def __init__(self, row: int, col: int):
        super().__init__(f"Cell ({row}, {col}) is blocked and cannot hold a tile")
        self.row = row
        self.col = col


class DegenerateBoardError(Match3Error, ValueError):
    """The board has zero rows or zero columns."""


class ConfigurationError(Match3Error, ValueError):
    """Session configuration is inconsistent or out of range."""
