"""Gravity directions and the fixed rotation-angle mapping."""
from enum import Enum


class GravityDirection(Enum):
    DOWN = "down"    # packs toward row 0
    LEFT = "left"    # packs toward column 0
    UP = "up"        # packs toward the last row
    RIGHT = "right"  # packs toward the last column

    @property
    def vertical(self) -> bool:
        return self in (GravityDirection.DOWN, GravityDirection.UP)

    @property
    def toward_start(self) -> bool:
        return self in (GravityDirection.DOWN, GravityDirection.LEFT)


ANGLE_TO_DIRECTION = {
    0: GravityDirection.DOWN,
    90: GravityDirection.LEFT,
    180: GravityDirection.UP,
    270: GravityDirection.RIGHT,
}


def direction_for_angle(angle: int) -> GravityDirection:
    try:
        return ANGLE_TO_DIRECTION[angle % 360]
    except KeyError as exc:
        raise ValueError(f"Rotation angle must be a multiple of 90, got {angle}") from exc


class RotateDirection(Enum):
    """Rotation gesture; RIGHT turns the board clockwise (+90), LEFT counter-clockwise (-90)."""
    LEFT = -1
    RIGHT = 1
