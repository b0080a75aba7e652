import pytest

from env import ThreesBoard


class StubBoard:
    """
    Board with scripted slide outcomes: `outcomes` maps a direction to
    (after_cells, reward); every other direction is illegal.
    Symmetry transforms use the real board's cell permutations.
    """

    def __init__(self, cells, outcomes=None):
        self.cells = tuple(cells)
        self.outcomes = outcomes or {}

    def cell_at(self, i):
        return self.cells[i]

    def slide(self, op):
        if op not in self.outcomes:
            return self, -1
        cells, reward = self.outcomes[op]
        return StubBoard(cells), reward

    def rotate_clockwise(self):
        return StubBoard(ThreesBoard(self.cells).rotate_clockwise().cells)

    def reflect_horizontal(self):
        return StubBoard(ThreesBoard(self.cells).reflect_horizontal().cells)


def cells_with(**ranks):
    """16 empty cells with c<i>=rank overrides, e.g. cells_with(c0=3, c5=1)."""
    cells = [0] * 16
    for name, rank in ranks.items():
        cells[int(name[1:])] = rank
    return cells


@pytest.fixture
def stub():
    return StubBoard


@pytest.fixture
def make_cells():
    return cells_with
