"""
Threes! board logic shared by every agent and the episode driver.
Boards are immutable values: slide/place/rotate/reflect return a new board.

Cells hold tile ranks, not tile values:
  0 -> empty, 1 -> "1", 2 -> "2", 3 -> "3", 4 -> "6", 5 -> "12", ...
Slide directions are {0:UP, 1:RIGHT, 2:DOWN, 3:LEFT}; an illegal slide
returns reward -1 and the board unchanged.

Usage Example:
--------------
from env import ThreesBoard

b = ThreesBoard([1, 2, 0, 0] + [0] * 12)
after, reward = b.slide(3)   # LEFT: 1 and 2 merge into 3, reward 3
"""

# =============================== CONSTANTS =====================================
ACTIONS = ["UP", "RIGHT", "DOWN", "LEFT"]   # 0,1,2,3
NO_SLIDE = 4          # value of `last` before the first slide of an episode
MAX_RANK = 15         # ranks must fit in 4 bits for the n-tuple features
BAG_REFILL = (4, 4, 4)  # copies of tiles 1, 2, 3 in a fresh bag


def tile_value(rank):
    """Face value printed on a tile of the given rank."""
    if rank < 3:
        return rank
    return 3 << (rank - 3)


def tile_score(rank):
    """Points a tile of the given rank contributes to the board score."""
    if rank < 3:
        return 0
    return 3 ** (rank - 2)


# ---- cell permutations (row-major 4x4) ----
def _rotate(b):  # clockwise
    return [b[12], b[8], b[4], b[0], b[13], b[9], b[5], b[1],
            b[14], b[10], b[6], b[2], b[15], b[11], b[7], b[3]]


def _reflect(b):  # mirror each row
    out = []
    for r in range(4):
        out.extend(reversed(b[r * 4:r * 4 + 4]))
    return out


def _transpose(b):
    return [b[0], b[4], b[8], b[12], b[1], b[5], b[9], b[13],
            b[2], b[6], b[10], b[14], b[3], b[7], b[11], b[15]]


def _merge(a, b):
    """Rank produced by pushing tile b onto tile a, or 0 if they don't merge."""
    if a + b == 3 and a * b == 2:
        return 3
    if a == b and a >= 3:
        return a + 1
    return 0


def _slide_row(row):
    """Shift a row one step toward index 0. Every tile moves at most once."""
    row = list(row)
    for c in range(1, 4):
        if row[c] == 0:
            continue
        if row[c - 1] == 0:
            row[c - 1], row[c] = row[c], 0
            continue
        merged = _merge(row[c - 1], row[c])
        if merged:
            row[c - 1], row[c] = merged, 0
    return row


def _slide_left(b):
    new = []
    for r in range(4):
        new.extend(_slide_row(b[r * 4:r * 4 + 4]))
    return new


def _slide_cells(cells, op):
    b = list(cells)
    if op == 0:
        return _transpose(_slide_left(_transpose(b)))
    if op == 1:
        return _reflect(_slide_left(_reflect(b)))
    if op == 2:
        return _transpose(_reflect(_slide_left(_reflect(_transpose(b)))))
    return _slide_left(b)


# =============================== GAME LOGIC THREES =============================

class ThreesBoard:
    """Low-level Threes! board, independent from learning"""

    __slots__ = ("cells", "bag_counts", "hint", "last")

    def __init__(self, cells=None, bag=BAG_REFILL, hint=0, last=NO_SLIDE):
        self.cells = tuple(cells) if cells is not None else (0,) * 16
        if len(self.cells) != 16:
            raise ValueError(f"a board has 16 cells, got {len(self.cells)}")
        self.bag_counts = tuple(bag)
        self.hint = hint
        self.last = last

    def _replace(self, **changes):
        fields = {"cells": self.cells, "bag": self.bag_counts, "hint": self.hint, "last": self.last}
        fields.update(changes)
        return ThreesBoard(**fields)

    # ---- helper methods -----
    def cell_at(self, i): return self.cells[i]
    def at(self, r, c): return self.cells[r * 4 + c]
    def bag(self, tile): return self.bag_counts[tile - 1]

    def empty_cells(self):
        return [i for i in range(16) if self.cells[i] == 0]

    def max_tile(self):
        return max(self.cells)

    def score(self):
        return sum(tile_score(t) for t in self.cells)

    # ---- moves ----
    def slide(self, op):
        """Returns (new board, reward) or (self, -1) if the slide changes nothing."""
        if op not in (0, 1, 2, 3):
            return self, -1
        new = _slide_cells(self.cells, op)
        if tuple(new) == self.cells:
            return self, -1
        reward = sum(tile_score(t) for t in new) - self.score()
        return self._replace(cells=new, last=op), reward

    def place(self, pos, tile, hint=0):
        """
        Put `tile` on the empty cell `pos` and announce `hint` as the next tile.
        The placed tile is the previous hint when there is one; every newly
        announced tile is drawn from the bag, which refills once empty.
        Returns (new board, 0) or (self, -1).
        """
        if not 0 <= pos < 16 or self.cells[pos] != 0:
            return self, -1
        if tile not in (1, 2, 3) or hint not in (0, 1, 2, 3):
            return self, -1
        if self.hint and tile != self.hint:
            return self, -1

        bag = list(self.bag_counts)
        drawn = [hint] if self.hint else [tile, hint]
        for t in drawn:
            if t == 0:
                continue
            if bag[t - 1] == 0:
                return self, -1
            bag[t - 1] -= 1
            if not any(bag):
                bag = list(BAG_REFILL)

        cells = list(self.cells)
        cells[pos] = tile
        return self._replace(cells=cells, bag=bag, hint=hint), 0

    # ---- transformations ----
    def rotate_clockwise(self):
        return self._replace(cells=_rotate(self.cells))

    def reflect_horizontal(self):
        return self._replace(cells=_reflect(self.cells))

    def legal_moves(self):
        """returns list of valid slide directions"""
        return [op for op in range(4) if self.slide(op)[1] != -1]

    # ---- value semantics ----
    def __eq__(self, other):
        if not isinstance(other, ThreesBoard):
            return NotImplemented
        return (self.cells, self.bag_counts, self.hint, self.last) == \
            (other.cells, other.bag_counts, other.hint, other.last)

    def __hash__(self):
        return hash((self.cells, self.bag_counts, self.hint, self.last))

    def __repr__(self):
        return f"ThreesBoard({list(self.cells)}, bag={self.bag_counts}, hint={self.hint}, last={self.last})"

    def __str__(self):
        lines = ["+------------------------+"]
        for r in range(4):
            lines.append("|" + "".join(f"{tile_value(self.at(r, c)):6d}" for c in range(4)) + "|")
        lines.append("+------------------------+")
        lines.append(f"hint: {tile_value(self.hint)}  bag: {self.bag_counts}")
        return "\n".join(lines)
