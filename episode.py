import time
from dataclasses import dataclass

from action import Action
from env import ThreesBoard

INITIAL_TILES = 9   # the placer moves alone until this many tiles are down


def millisec():
    return time.perf_counter() * 1000.0


@dataclass
class Move:
    action: Action
    reward: int
    time: float  # ms spent by the agent choosing it


class Episode:
    """One game of Threes!: current board, move log, score and timing."""

    def __init__(self, board=None):
        self.board = board if board is not None else ThreesBoard()
        self.moves = []
        self.score = 0
        self.ep_open = ("", 0.0)
        self.ep_close = ("", 0.0)
        self._turn_start = 0.0

    def state(self):
        return self.board

    # ---- turns ----
    def take_turns(self, play, evil):
        """placer for the first INITIAL_TILES moves, then slider and placer alternate"""
        self._turn_start = millisec()
        n = len(self.moves)
        if n < INITIAL_TILES or (n - INITIAL_TILES) % 2 == 1:
            return evil
        return play

    def last_turns(self, play, evil):
        n = len(self.moves) - 1
        if n < INITIAL_TILES or (n - INITIAL_TILES) % 2 == 1:
            return evil
        return play

    def apply_action(self, move):
        """Play `move` on the board; False if it is illegal or the no-op."""
        after, reward = move.apply(self.board)
        if reward == -1:
            return False
        self.moves.append(Move(move, reward, millisec() - self._turn_start))
        self.board = after
        self.score += reward
        return True

    # ---- bookkeeping ----
    def open_episode(self, tag=""):
        self.ep_open = (tag, millisec())

    def close_episode(self, tag=""):
        self.ep_close = (tag, millisec())

    def _of(self, kind):
        return [m for m in self.moves if kind is None or isinstance(m.action, kind)]

    def step(self, kind=None):
        """Number of moves, optionally only those of one action type (Slide/Place)."""
        return len(self._of(kind))

    def time(self, kind=None):
        if kind is None:
            return self.ep_close[1] - self.ep_open[1]
        return sum(m.time for m in self._of(kind))

    def max_tile(self):
        return self.board.max_tile()

    def __str__(self):
        moves = "".join(str(m.action) for m in self.moves)
        return f"{self.ep_open[0]}|{moves}|{self.ep_close[0]}"

