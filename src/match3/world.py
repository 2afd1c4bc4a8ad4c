import random

from esper import World
from match3.events.bus import EventBus
from match3.config import SessionConfig
from match3.constants import GRID_COLS, GRID_ROWS
from match3.components.session_state import SessionState
from match3.components.tile_kinds import TileKinds


def create_world(
    event_bus: EventBus,
    config: SessionConfig | None = None,
    *,
    rng: random.Random | None = None,
) -> World:
    """Build the ECS world for one session.

    The session entity carries the immutable SessionConfig, the TileKinds
    registry and the mutable SessionState. The Board itself is created by
    BoardSystem from the configured pattern.
    """
    world = World()
    setattr(world, "random", rng or random.Random())
    if config is None:
        config = SessionConfig.rectangular(GRID_ROWS, GRID_COLS)

    world.create_entity(
        config,
        TileKinds(count=config.tile_kinds),
        SessionState(remaining_rotations=config.max_rotations),
    )
    return world
