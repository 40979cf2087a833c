import pytest

from gemswap.components.board import Board
from gemswap.components.game_config import GameConfig


def test_new_board_is_empty():
    board = Board(rows=3, cols=4, kinds=7)
    assert len(board.cells) == 3
    assert all(len(row) == 4 for row in board.cells)
    assert len(board.empty_positions()) == 12


def test_out_of_bounds_reads_are_empty_and_writes_ignored():
    board = Board(rows=2, cols=2, kinds=7)
    board.load([[1, 2], [3, 4]])
    for pos in [(-1, 0), (0, -1), (2, 0), (0, 2), (-5, 9)]:
        assert board.get(pos) is None
        board.set(pos, 6)
    assert board.snapshot() == ((1, 2), (3, 4))


def test_swap_exchanges_cells_without_adjacency_check():
    board = Board(rows=3, cols=3, kinds=7)
    board.load([[0, 1, 2], [3, 4, 5], [6, 0, 1]])
    board.swap((0, 0), (2, 2))
    assert board.get((0, 0)) == 1
    assert board.get((2, 2)) == 0


def test_swap_with_outside_partner_is_ignored():
    board = Board(rows=3, cols=3, kinds=7)
    board.load([[1, 2, 3], [4, 5, 6], [0, 1, 2]])
    board.swap((0, 2), (0, 3))
    board.swap((3, 1), (2, 1))
    board.swap((-1, -1), (0, 0))
    assert board.snapshot() == ((1, 2, 3), (4, 5, 6), (0, 1, 2))


def test_load_rejects_wrong_dimensions():
    board = Board(rows=2, cols=2, kinds=7)
    with pytest.raises(ValueError):
        board.load([[1, 2, 3], [4, 5, 6]])


def test_positions_are_row_major():
    board = Board(rows=2, cols=2, kinds=7)
    assert list(board.positions()) == [(0, 0), (0, 1), (1, 0), (1, 1)]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"rows": 0},
        {"cols": -1},
        {"kinds": 0},
        {"base_points": -1},
        {"reshuffle_attempts": 0},
    ],
)
def test_game_config_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        GameConfig(**kwargs)


def test_game_config_defaults():
    config = GameConfig()
    assert (config.rows, config.cols, config.kinds) == (8, 8, 7)
    assert (config.base_points, config.length_bonus) == (50, 25)
    assert config.await_animations is False
