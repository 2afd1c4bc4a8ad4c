from __future__ import annotations

import random
from typing import Iterable, List, Optional, Sequence

from esper import World

from match3.config import SessionConfig
from match3.events.bus import EventBus
from match3.systems.board import BoardSystem
from match3.systems.board_ops import load_kinds
from match3.systems.match_resolution import MatchResolutionSystem
from match3.systems.rotation import RotationSystem
from match3.world import create_world


class ScriptedRandom(random.Random):
    """Random source whose ``randrange`` calls return scripted values first.

    Once the script runs out it behaves like a seeded ``random.Random``.
    """

    def __init__(self, script: Iterable[int] = (), seed: int = 0) -> None:
        super().__init__(seed)
        self.script: List[int] = list(script)

    def randrange(self, start, stop=None, step=1):
        if self.script and stop is None:
            value = self.script.pop(0)
            assert 0 <= value < start, f"scripted value {value} outside range({start})"
            return value
        return super().randrange(start, stop, step)


def stalemate_kinds(rows: int, cols: int) -> List[List[int]]:
    """Five-kind layout with no match and, on a 5x5 board, no valid move."""
    return [[(r + 2 * c) % 5 for c in range(cols)] for r in range(rows)]


def make_session(
    config: SessionConfig | None = None,
    *,
    kinds: Sequence[Sequence[Optional[int]]] | None = None,
    rng: random.Random | None = None,
    generate: bool = False,
) -> tuple[EventBus, World, BoardSystem]:
    """Wire a world with the board, match resolution and rotation systems."""
    bus = EventBus()
    world = create_world(bus, config, rng=rng or random.Random(1234))
    board = BoardSystem(world, bus, generate=generate)
    MatchResolutionSystem(world, bus)
    RotationSystem(world, bus)
    if kinds is not None:
        load_kinds(world, kinds)
    return bus, world, board


def collect_events(bus: EventBus, *names: str) -> List[tuple[str, dict]]:
    received: List[tuple[str, dict]] = []
    for name in names:
        bus.subscribe(name, lambda sender, _name=name, **payload: received.append((_name, payload)))
    return received
