"""
Moves exchanged between agents and the episode.

A bare Action() is the no-op: an agent returns it when it has nothing legal
to play, which ends the episode.
"""

from dataclasses import dataclass

from env import ACTIONS, tile_value


@dataclass(frozen=True)
class Action:
    def apply(self, board):
        """Returns (new board, reward); reward -1 means the action is illegal."""
        return board, -1

    def __bool__(self):
        return False

    def __str__(self):
        return "??"


@dataclass(frozen=True)
class Slide(Action):
    op: int

    def apply(self, board):
        return board.slide(self.op)

    def __bool__(self):
        return True

    def __str__(self):
        return "#" + ACTIONS[self.op][0] if 0 <= self.op < 4 else "#?"


@dataclass(frozen=True)
class Place(Action):
    pos: int
    tile: int
    hint: int = 0

    def apply(self, board):
        return board.place(self.pos, self.tile, self.hint)

    def __bool__(self):
        return True

    def __str__(self):
        return f"{self.pos:X}{tile_value(self.tile)}+{tile_value(self.hint)}"
