from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems nobody stores alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# INPUT (inbound gestures)
# ============================================================================
EVENT_TILE_CLICK = "tile_click"                    # payload: row, col
EVENT_DESELECT_REQUEST = "deselect_request"        # payload: None
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_ROTATE_REQUEST = "rotate_request"            # payload: direction=RotateDirection


# ============================================================================
# SELECTION & SWAPS
# ============================================================================
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str, prev_row, prev_col
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(r,c), dst=(r,c)


# ============================================================================
# TURN FLOW
# ============================================================================
EVENT_TURN_STARTED = "turn_started"                # payload: source=str
EVENT_TURN_COMPLETE = "turn_complete"              # payload: source=str, score=int


# ============================================================================
# BOARD RESOLUTION
# ============================================================================
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(r,c),...], size=int, depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...], kinds=[(r,c,kind),...]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(r,c),...], reason=str
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, reason=str
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: direction=GravityDirection, moved=int
EVENT_TILE_MOVED = "tile_moved"                    # payload: tile=int, row, col, source=(r,c)
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...]
EVENT_BOARD_CHANGED = "board_changed"              # payload: reason=str, compact=bool
EVENT_BOARD_GENERATED = "board_generated"          # payload: attempts=int, clean=bool
EVENT_BOARD_SHUFFLED = "board_shuffled"            # payload: attempts=int, clean=bool


# ============================================================================
# SESSION SIGNALS
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int
EVENT_ROTATION_APPLIED = "rotation_applied"        # payload: angle=int, direction=GravityDirection, remaining=int
