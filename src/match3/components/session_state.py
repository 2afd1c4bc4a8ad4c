"""Mutable per-session state shared by the board, match and rotation systems."""
from dataclasses import dataclass
from typing import Optional, Tuple

from match3.components.gravity import GravityDirection, direction_for_angle


@dataclass(slots=True)
class SessionState:
    """Singleton component holding everything a turn reads or writes besides the board.

    ``busy`` is a reentrancy guard: while a turn runs, every inbound gesture is
    dropped without effect.
    """
    remaining_rotations: int
    score: int = 0
    angle: int = 0
    busy: bool = False
    selected: Optional[Tuple[int, int]] = None
    turn_source: Optional[str] = None

    @property
    def gravity(self) -> GravityDirection:
        return direction_for_angle(self.angle)
