import sys, os
ROOT = os.path.dirname(__file__)
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

import logging
import random

from match3.components.gravity import RotateDirection
from match3.systems.session_state_utils import get_tile_kinds
from match3.engine import BoardEngine
from match3.events.bus import (EVENT_CASCADE_STEP, EVENT_MATCH_CLEARED, EVENT_REFILL_COMPLETED,
                               EVENT_ROTATION_APPLIED, EVENT_BOARD_SHUFFLED, EVENT_SCORE_CHANGED,
                               EVENT_TILE_SWAP_INVALID, EVENT_TILE_SWAP_VALID)

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

seed = int(sys.argv[1]) if len(sys.argv) > 1 else 7
engine = BoardEngine(rng=random.Random(seed))
names = get_tile_kinds(engine.world)


def show(title):
    print(f"-- {title} (score={engine.score}, angle={engine.angle}, gravity={engine.gravity_direction.value})")
    for row in engine.kinds():
        print(' '.join('.' if kind is None else names.name_for(kind)[0].upper() for kind in row))


received = []
for ev in [EVENT_TILE_SWAP_VALID, EVENT_TILE_SWAP_INVALID, EVENT_CASCADE_STEP, EVENT_MATCH_CLEARED,
           EVENT_REFILL_COMPLETED, EVENT_SCORE_CHANGED, EVENT_ROTATION_APPLIED, EVENT_BOARD_SHUFFLED]:
    engine.event_bus.subscribe(ev, lambda s, _ev=ev, **k: received.append((_ev, k)))

show('generated board')
hint = engine.hint()
print('hint', hint)
if hint is not None:
    engine.request_swap(*hint)
    show('after hinted swap')

engine.request_rotate(RotateDirection.RIGHT)
show('after rotating right')

for name, payload in received:
    print(name, payload)
