import logging
from esper import World
from match3.events.bus import EventBus, EVENT_ROTATE_REQUEST, EVENT_ROTATION_APPLIED, EVENT_BOARD_CHANGED
from match3.components.gravity import RotateDirection
from match3.constants import ROTATION_STEP
from match3.systems.session_state_utils import clear_selection, get_session_state, turn

logger = logging.getLogger(__name__)


class RotationSystem:
    """Turns the board by 90 degrees per request, changing the gravity direction.

    A rotation spends one unit of the rotation budget, then runs one gravity
    pass toward the new direction, refills, and resolves cascades through
    EVENT_BOARD_CHANGED. Requests made while busy or with an empty budget do
    nothing.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_ROTATE_REQUEST, self.on_rotate_request)

    def on_rotate_request(self, sender, **kwargs):
        direction = kwargs.get('direction')
        if direction is None:
            return
        if isinstance(direction, str):
            direction = RotateDirection[direction.upper()]
        else:
            direction = RotateDirection(direction)
        state = get_session_state(self.world)
        if state.busy:
            logger.debug("rotation ignored: turn in progress")
            return
        if state.remaining_rotations <= 0:
            logger.debug("rotation ignored: budget spent")
            return
        with turn(self.world, self.event_bus, 'rotation'):
            clear_selection(self.world, self.event_bus, 'rotation')
            state.remaining_rotations -= 1
            state.angle = (state.angle + direction.value * ROTATION_STEP) % 360
            self.event_bus.emit(
                EVENT_ROTATION_APPLIED,
                angle=state.angle,
                direction=state.gravity,
                remaining=state.remaining_rotations,
            )
            self.event_bus.emit(EVENT_BOARD_CHANGED, reason='rotation', compact=True)
