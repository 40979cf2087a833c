import pytest

from gemswap.components.turn_state import TurnPhase
from gemswap.events.bus import (
    EVENT_BOARD_INITIALIZED,
    EVENT_BOARD_RESET_REQUEST,
    EVENT_BOARD_RESHUFFLED,
    EVENT_CASCADE_COMPLETE,
    EVENT_COMBO_CHANGED,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_SCORE_CHANGED,
    EVENT_TILE_SWAP_REJECTED,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_RESOLVED,
    EVENT_TURN_PHASE_CHANGED,
)
from gemswap.systems.board_ops import find_matches
from helpers import ScriptedRandom, make_session, record

LAYOUT = [
    [1, 1, 2, 3],
    [4, 5, 1, 6],
    [3, 6, 4, 5],
]
# Refill for the cleared top row; leaves (0,1)<->(1,1) as a legal move.
REFILL = [5, 6, 5]
AFTER_MATCH = (
    (5, 6, 5, 3),
    (4, 5, 2, 6),
    (3, 6, 4, 5),
)


@pytest.fixture
def game():
    session = make_session(LAYOUT, rng=ScriptedRandom(REFILL))
    yield session
    session.close()


@pytest.mark.parametrize(
    "src,dst,reason",
    [
        ((0, 0), (-1, 0), "out_of_bounds"),
        ((2, 3), (2, 4), "out_of_bounds"),
        ((0, 0), (1, 1), "not_adjacent"),
        ((0, 0), (0, 2), "not_adjacent"),
        ((1, 1), (1, 1), "not_adjacent"),
    ],
)
def test_invalid_swaps_are_rejected_without_side_effects(game, src, dst, reason):
    rejected = record(game.event_bus, EVENT_TILE_SWAP_REJECTED)
    phases = record(game.event_bus, EVENT_TURN_PHASE_CHANGED)
    before = game.board.snapshot()
    assert game.attempt_swap(src, dst) is False
    assert rejected == [{"src": src, "dst": dst, "reason": reason}]
    assert phases == []
    assert game.board.snapshot() == before
    assert game.progress.score == 0


def test_swap_without_match_is_reverted(game):
    resolved = record(game.event_bus, EVENT_TILE_SWAP_RESOLVED)
    phases = record(game.event_bus, EVENT_TURN_PHASE_CHANGED)
    found = record(game.event_bus, EVENT_MATCH_FOUND)
    cascades = record(game.event_bus, EVENT_CASCADE_COMPLETE)
    reshuffles = record(game.event_bus, EVENT_BOARD_RESHUFFLED)

    assert game.attempt_swap((2, 0), (2, 1)) is True

    assert game.board.snapshot() == tuple(tuple(row) for row in LAYOUT)
    assert resolved == [{"src": (2, 0), "dst": (2, 1), "matched": False}]
    assert [p["new_phase"] for p in phases] == [TurnPhase.SWAPPING, TurnPhase.IDLE]
    assert found == []
    assert cascades == []
    assert reshuffles == []
    assert game.progress.score == 0


def test_matching_swap_scores_and_refills(game):
    resolved = record(game.event_bus, EVENT_TILE_SWAP_RESOLVED)
    found = record(game.event_bus, EVENT_MATCH_FOUND)
    scores = record(game.event_bus, EVENT_SCORE_CHANGED)
    combos = record(game.event_bus, EVENT_COMBO_CHANGED)
    cleared = record(game.event_bus, EVENT_MATCH_CLEARED)
    gravity = record(game.event_bus, EVENT_GRAVITY_APPLIED)
    refills = record(game.event_bus, EVENT_REFILL_COMPLETED)
    cascades = record(game.event_bus, EVENT_CASCADE_COMPLETE)
    phases = record(game.event_bus, EVENT_TURN_PHASE_CHANGED)

    assert game.attempt_swap((0, 2), (1, 2)) is True

    assert resolved == [{"src": (0, 2), "dst": (1, 2), "matched": True}]
    assert len(found) == 1 and found[0]["depth"] == 1
    assert [run.positions for run in found[0]["runs"]] == [[(0, 0), (0, 1), (0, 2)]]
    assert scores == [{"total": 150, "delta": 150}]
    assert combos == []
    assert cleared == [{"positions": [(0, 0), (0, 1), (0, 2)]}]
    assert gravity == [{"moves": []}]
    assert [(s.position, s.token, s.spawn_offset) for s in refills[0]["spawns"]] == [
        ((0, 0), 5, -1),
        ((0, 1), 6, -1),
        ((0, 2), 5, -1),
    ]
    assert cascades == [{"depth": 1}]
    assert [p["new_phase"] for p in phases] == [TurnPhase.SWAPPING, TurnPhase.RESOLVING, TurnPhase.IDLE]
    assert game.board.snapshot() == AFTER_MATCH
    assert find_matches(game.board) == []
    assert game.progress.score == 150
    assert game.progress.combo_count == 1


def test_swap_request_event_starts_turn(game):
    game.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=(1, 2), dst=(0, 2))
    assert game.progress.score == 150
    assert game.board.snapshot() == AFTER_MATCH


def test_swap_rejected_while_turn_in_flight():
    game = make_session(LAYOUT, rng=ScriptedRandom(REFILL), await_animations=True)
    try:
        rejected = record(game.event_bus, EVENT_TILE_SWAP_REJECTED)
        assert game.attempt_swap((0, 2), (1, 2)) is True
        assert game.resolution.state.phase is TurnPhase.SWAPPING
        assert game.attempt_swap((2, 0), (2, 1)) is False
        assert rejected[-1]["reason"] == "busy"
    finally:
        game.close()


def test_reset_regenerates_board_and_score(game):
    game.attempt_swap((0, 2), (1, 2))
    initialized = record(game.event_bus, EVENT_BOARD_INITIALIZED)
    scores = record(game.event_bus, EVENT_SCORE_CHANGED)

    game.reset()

    assert game.progress.score == 0
    assert game.progress.best_combo == 0
    assert len(initialized) == 1
    assert scores == [{"total": 0, "delta": 0}]
    assert game.board.empty_positions() == []
    assert find_matches(game.board) == []
    assert game.board_system.has_any_legal_move()
    assert game.resolution.state.phase is TurnPhase.IDLE


def test_reset_request_can_keep_score(game):
    game.attempt_swap((0, 2), (1, 2))
    game.event_bus.emit(EVENT_BOARD_RESET_REQUEST, reset_score=False)
    assert game.progress.score == 150
    assert find_matches(game.board) == []
