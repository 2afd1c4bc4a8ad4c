import random

import pytest

from match3.components.gravity import GravityDirection, RotateDirection
from match3.components.tile import Tile
from match3.config import SessionConfig
from match3.engine import BoardEngine
from match3.errors import BoardBoundsError
from match3.events.bus import EventBus, EVENT_MATCH_CLEARED, EVENT_REFILL_COMPLETED
from match3.systems.board_ops import load_kinds
from tests.helpers import ScriptedRandom, collect_events, stalemate_kinds


def _scripted_engine(script):
    bus = EventBus()
    moved = []
    config = SessionConfig.rectangular(8, 8, auto_shuffle=False)
    engine = BoardEngine(config, rng=random.Random(7), event_bus=bus,
                         on_tile_moved=lambda tile, row, col: moved.append((tile, row, col)))
    kinds = stalemate_kinds(8, 8)
    kinds[0][1] = 0
    kinds[0][3] = 0
    load_kinds(engine.world, kinds)
    setattr(engine.world, "random", ScriptedRandom(script, seed=7))
    return engine, bus, moved


def test_swap_scores_refills_and_settles():
    engine, bus, moved = _scripted_engine([1, 2, 4])
    events = collect_events(bus, EVENT_MATCH_CLEARED, EVENT_REFILL_COMPLETED)
    assert engine.matches() == set()

    engine.request_swap((0, 2), (0, 3))

    assert engine.score == 30
    assert events[0][1]['positions'] == [(0, 0), (0, 1), (0, 2)]
    assert events[1][1]['new_tiles'] == [(7, 0), (7, 1), (7, 2)]
    # Two tiles swapped, then seven tiles in each of three columns fell one row.
    assert len(moved) == 2 + 21
    assert engine.matches() == set()
    assert engine.busy is False
    assert len(engine.world.get_component(Tile)) == 64


def test_callback_reports_final_slot_of_each_move():
    engine, bus, moved = _scripted_engine([1, 2, 4])
    engine.request_swap((0, 2), (0, 3))
    for tile, row, col in moved[2:]:
        assert col in (0, 1, 2)
        assert 0 <= row < 7
    tile, row, col = moved[1]
    assert (row, col) == (0, 3)
    assert engine.board.get(0, 3) == tile


def test_click_gestures_drive_a_swap():
    engine, bus, moved = _scripted_engine([1, 2, 4])
    engine.select_cell(0, 2)
    assert engine.selected == (0, 2)
    engine.select_cell(0, 3)
    assert engine.selected is None
    assert engine.score == 30


def test_clear_selection():
    engine, bus, moved = _scripted_engine([])
    engine.select_cell(5, 5)
    engine.clear_selection()
    assert engine.selected is None


def test_hint_points_at_a_scoring_swap():
    engine = BoardEngine(rng=random.Random(21))
    hint = engine.hint()
    assert hint is not None
    assert engine.has_valid_move()
    src, dst = hint
    before = engine.kinds()
    engine.request_swap(src, dst)
    assert engine.score >= 30
    assert engine.kinds() != before


def test_rotation_through_engine():
    engine = BoardEngine(SessionConfig.rectangular(6, 6, max_rotations=1), rng=random.Random(3))
    engine.request_rotate(RotateDirection.RIGHT)
    assert engine.angle == 90
    assert engine.gravity_direction is GravityDirection.LEFT
    assert engine.remaining_rotations == 0
    engine.request_rotate('right')
    assert engine.angle == 90


def test_default_engine_is_eight_by_eight():
    engine = BoardEngine(rng=random.Random(0))
    assert engine.board.dimensions == (8, 8)
    assert engine.score == 0
    assert engine.remaining_rotations == 5
    assert engine.gravity_direction is GravityDirection.DOWN
    assert all(kind is not None for row in engine.kinds() for kind in row)


def test_out_of_range_click_raises():
    engine = BoardEngine(rng=random.Random(0))
    with pytest.raises(BoardBoundsError):
        engine.select_cell(8, 0)


def test_request_swap_drops_standing_selection():
    engine, bus, moved = _scripted_engine([1, 2, 4])
    engine.select_cell(5, 5)
    engine.request_swap((0, 2), (0, 3))
    assert engine.score == 30
    assert engine.selected is None
    engine.select_cell(5, 5)
    engine.request_swap((3, 3), (3, 4))
    assert engine.selected is None
