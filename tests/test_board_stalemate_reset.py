import random
from collections import Counter

from match3.components.tile import Tile
from match3.config import SessionConfig
from match3.events.bus import (EVENT_BOARD_CHANGED, EVENT_BOARD_GENERATED, EVENT_BOARD_SHUFFLED,
                               EVENT_MATCH_FOUND, EVENT_SCORE_CHANGED)
from match3.systems.board_ops import shuffle_board
from match3.systems.match import find_all_matches, find_valid_swaps, has_valid_move, kind_grid
from match3.systems.session_state_utils import get_session_state
from tests.helpers import collect_events, make_session, stalemate_kinds


def _kind_counts(world):
    return Counter(kind for row in kind_grid(world) for kind in row if kind is not None)


def test_stalemate_triggers_board_reset():
    config = SessionConfig.rectangular(5, 5)
    bus, world, board = make_session(config, kinds=stalemate_kinds(5, 5), rng=random.Random(1234))

    assert not find_all_matches(world), "Setup should not contain initial matches"
    assert not find_valid_swaps(world), "Pattern should eliminate all valid moves"
    counts_before = _kind_counts(world)

    events = collect_events(bus, EVENT_BOARD_SHUFFLED, EVENT_BOARD_GENERATED, EVENT_MATCH_FOUND,
                            EVENT_SCORE_CHANGED)
    bus.emit(EVENT_BOARD_CHANGED, reason="test_stalemate")

    names = [name for name, _ in events]
    assert names[0] == EVENT_BOARD_SHUFFLED
    assert EVENT_MATCH_FOUND not in names
    assert EVENT_SCORE_CHANGED not in names
    assert not find_all_matches(world)
    assert has_valid_move(world)
    assert board.board.empty_cells() == []
    assert len(world.get_component(Tile)) == 25
    if events[0][1]['clean']:
        assert _kind_counts(world) == counts_before
    assert get_session_state(world).score == 0
    assert get_session_state(world).busy is False


def test_shuffle_keeps_kind_multiset():
    config = SessionConfig.rectangular(5, 5)
    _, world, _ = make_session(config, kinds=stalemate_kinds(5, 5), rng=random.Random(99))
    counts_before = _kind_counts(world)
    result = shuffle_board(world)
    assert result.clean
    assert _kind_counts(world) == counts_before
    assert not find_all_matches(world)
    assert has_valid_move(world)


def test_shuffle_skips_empty_cells():
    config = SessionConfig.rectangular(5, 5)
    kinds = stalemate_kinds(5, 5)
    kinds[4][4] = None
    _, world, board = make_session(config, kinds=kinds, rng=random.Random(3))
    shuffle_board(world)
    assert board.board.empty_cells() == [(4, 4)]


def test_failed_shuffle_escalates_to_regeneration():
    config = SessionConfig.rectangular(1, 2, shuffle_attempts=3, generation_attempts=2)
    bus, world, _ = make_session(config, kinds=[[0, 1]])
    events = collect_events(bus, EVENT_BOARD_SHUFFLED, EVENT_BOARD_GENERATED)
    bus.emit(EVENT_BOARD_CHANGED, reason="test_stalemate")
    assert events[0] == (EVENT_BOARD_SHUFFLED, {'attempts': 3, 'clean': False})
    assert events[1] == (EVENT_BOARD_GENERATED, {'attempts': 2, 'clean': False})
    assert len(events) == 2


def test_auto_shuffle_disabled_leaves_stalemate():
    config = SessionConfig.rectangular(5, 5, auto_shuffle=False)
    bus, world, board = make_session(config, kinds=stalemate_kinds(5, 5))
    before = board.board.snapshot()
    events = collect_events(bus, EVENT_BOARD_SHUFFLED)
    bus.emit(EVENT_BOARD_CHANGED, reason="test_stalemate")
    assert events == []
    assert board.board.snapshot() == before
