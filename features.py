"""
N-tuple feature extraction.

A tuple is an ordered list of cell indices. Its feature key packs the ranks of
those cells 4 bits each, first cell in the lowest nibble, so a tuple of length
k addresses a table of 16**k weights.

Two extractors are provided:
  - SymmetricTupleFeatures: every base tuple on all 8 symmetric views of the
    board (identity, 3 rotations, reflection + 3 rotations), one table each.
  - LineTupleFeatures: the 4 rows and 4 columns as plain 4-tuples.
"""

from typing import Iterator, List, Sequence, Tuple

CELL_BITS = 4
CELL_MASK = (1 << CELL_BITS) - 1

# 6-tuples: a row plus its two leftmost neighbours below, and a 2x3 block,
# each on the outer row and one row in
SIX_TUPLES = [
    [0, 1, 2, 3, 4, 5],
    [4, 5, 6, 7, 8, 9],
    [0, 1, 2, 4, 5, 6],
    [4, 5, 6, 8, 9, 10],
]

ROWS = [[r * 4 + c for c in range(4)] for r in range(4)]
COLUMNS = [[r * 4 + c for r in range(4)] for c in range(4)]

N_SYMMETRIES = 8


def pack(values: Sequence[int]) -> int:
    """key = sum(values[j] << 4j)"""
    key = 0
    for j, v in enumerate(values):
        key |= v << (CELL_BITS * j)
    return key


def unpack(key: int, length: int) -> Tuple[int, ...]:
    return tuple((key >> (CELL_BITS * j)) & CELL_MASK for j in range(length))


def table_size(length: int) -> int:
    return 1 << (CELL_BITS * length)


def symmetric_views(board) -> Iterator:
    """
    The 8 views of a board in fixed order: identity, three successive
    clockwise rotations, then the horizontal reflection and three successive
    rotations of it.
    """
    view = board
    for sym in range(N_SYMMETRIES):
        if sym == 4:
            view = board.reflect_horizontal()
        elif sym:
            view = view.rotate_clockwise()
        yield view


class TupleFeatures:
    """Maps a board to the (table_index, key) pairs of its value function."""

    def table_sizes(self) -> List[int]:
        raise NotImplementedError

    def pairs(self, board) -> List[Tuple[int, int]]:
        raise NotImplementedError

    def __len__(self):
        return len(self.table_sizes())


class SymmetricTupleFeatures(TupleFeatures):
    def __init__(self, shapes=None):
        self.shapes = [list(s) for s in (shapes if shapes is not None else SIX_TUPLES)]
        for shape in self.shapes:
            if not shape or any(not 0 <= i < 16 for i in shape):
                raise ValueError(f"invalid tuple shape {shape}")

    def table_sizes(self):
        return [table_size(len(s)) for s in self.shapes] * N_SYMMETRIES

    def pairs(self, board):
        n = len(self.shapes)
        out = []
        for sym, view in enumerate(symmetric_views(board)):
            cells = [view.cell_at(i) for i in range(16)]
            for k, shape in enumerate(self.shapes):
                out.append((sym * n + k, pack([cells[i] for i in shape])))
        return out


class LineTupleFeatures(TupleFeatures):
    """Rows 0-3 use tables 0-3, columns 0-3 use tables 4-7."""

    shapes = ROWS + COLUMNS

    def table_sizes(self):
        return [table_size(4)] * len(self.shapes)

    def pairs(self, board):
        cells = [board.cell_at(i) for i in range(16)]
        return [(t, pack([cells[i] for i in shape])) for t, shape in enumerate(self.shapes)]
