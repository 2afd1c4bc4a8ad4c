from dataclasses import dataclass

@dataclass(slots=True)
class Tile:
    """Per-tile kind assignment.

    ``kind`` is an index in ``0..K-1``. The tile's position is the board slot that
    references its entity; it is never stored here.
    """
    kind: int
