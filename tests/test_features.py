import random

import pytest

from env import ThreesBoard
from features import (
    LineTupleFeatures,
    SIX_TUPLES,
    SymmetricTupleFeatures,
    pack,
    symmetric_views,
    table_size,
    unpack,
)


def random_board(seed):
    rng = random.Random(seed)
    return ThreesBoard([rng.randint(0, 15) for _ in range(16)])


def test_pack_puts_first_cell_in_lowest_nibble() -> None:
    assert pack([1, 2, 3]) == 0x321
    assert pack([15, 0, 0, 0, 0, 15]) == 0xF0000F


def test_unpack_recovers_packed_ranks() -> None:
    rng = random.Random(7)
    for length in (4, 6):
        ranks = tuple(rng.randint(0, 15) for _ in range(length))
        key = pack(ranks)
        assert unpack(key, length) == ranks
        assert all((key >> (4 * j)) & 0xF == r for j, r in enumerate(ranks))
        assert key < table_size(length)


def test_six_tuple_layout_is_32_tables_of_16_to_the_6() -> None:
    features = SymmetricTupleFeatures()
    assert len(features) == 32
    assert set(features.table_sizes()) == {16 ** 6}


def test_symmetric_pairs_cover_each_table_once_in_order() -> None:
    pairs = SymmetricTupleFeatures().pairs(random_board(1))
    assert [t for t, _ in pairs] == list(range(32))
    assert all(0 <= key < 16 ** 6 for _, key in pairs)


def test_identity_view_keys_read_the_shape_cells() -> None:
    board = random_board(2)
    pairs = SymmetricTupleFeatures().pairs(board)
    for k, shape in enumerate(SIX_TUPLES):
        assert pairs[k] == (k, pack([board.cell_at(i) for i in shape]))


def test_symmetric_views_order() -> None:
    board = random_board(3)
    views = list(symmetric_views(board))
    assert len(views) == 8
    assert views[0] == board
    assert views[1] == board.rotate_clockwise()
    assert views[3] == board.rotate_clockwise().rotate_clockwise().rotate_clockwise()
    assert views[4] == board.reflect_horizontal()
    assert views[5] == board.reflect_horizontal().rotate_clockwise()


def test_rotating_the_board_shifts_keys_to_the_next_symmetry() -> None:
    board = random_board(4)
    features = SymmetricTupleFeatures()
    keys = [k for _, k in features.pairs(board)]
    rotated_keys = [k for _, k in features.pairs(board.rotate_clockwise())]
    # identity of the rotated board is the first rotation of the original
    assert rotated_keys[0:4] == keys[4:8]
    assert rotated_keys[4:8] == keys[8:12]


def test_line_features_use_rows_then_columns() -> None:
    board = ThreesBoard(list(range(16)))
    pairs = LineTupleFeatures().pairs(board)
    assert [t for t, _ in pairs] == list(range(8))
    assert pairs[0][1] == pack([0, 1, 2, 3])
    assert pairs[4][1] == pack([0, 4, 8, 12])
    assert LineTupleFeatures().table_sizes() == [16 ** 4] * 8


def test_invalid_shape_is_rejected() -> None:
    with pytest.raises(ValueError):
        SymmetricTupleFeatures([[0, 16]])
