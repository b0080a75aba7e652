# heuristic_agent.py
from action import Action, Slide
from agent import Agent

# ========================= GREEDY ON IMMEDIATE REWARD =========================

class HeuristicSlider(Agent):
    """Selects the slide with the largest immediate reward (first one on ties)."""

    def __init__(self, args=""):
        super().__init__("name=slide role=slider " + args)
        self.opcode = [0, 1, 2, 3]

    def take_action(self, before):
        self.require_active()
        best_reward = -1
        best_action = -1
        for op in self.opcode:
            _, reward = before.slide(op)
            if reward > best_reward:
                best_action = op
                best_reward = reward

        if best_reward != -1:
            return Slide(best_action)
        return Action()

# ========================= WEIGHTED BOARD HEURISTIC ===========================

def empty_squares(board):
    return sum(1 for i in range(16) if board.cell_at(i) == 0)


def monotonic_structure(board, r, c, last_tile, visited):
    """
    Length of the longest non-increasing chain of tiles reachable from (r, c)
    through unvisited neighbours. A 1 may continue into a 2. Empty cells are
    crossed but not counted.
    """
    visited[r][c] = True
    here = board.at(r, c)
    carry = last_tile if here == 0 else here
    best_len = 0
    for nr, nc in ((r - 1, c), (r, c + 1), (r + 1, c), (r, c - 1)):
        if not (0 <= nr < 4 and 0 <= nc < 4) or visited[nr][nc]:
            continue
        there = board.at(nr, nc)
        if there <= carry or (here == 1 and there == 2):
            best_len = max(best_len, monotonic_structure(board, nr, nc, carry, visited))
    return best_len + (0 if here == 0 else 1)


def longest_monotonic_structure(board):
    best_len = 0
    for r in range(4):
        for c in range(4):
            visited = [[False] * 4 for _ in range(4)]
            best_len = max(best_len, monotonic_structure(board, r, c, board.at(r, c), visited))
    return best_len


def placement_table(multiplier):
    """Bonus for where the largest tile sits: edges get +multiplier, corners twice."""
    table = [[1] * 4 for _ in range(4)]
    for i in range(4):
        table[i][0] += multiplier
        table[i][3] += multiplier
    for j in range(4):
        table[0][j] += multiplier
        table[3][j] += multiplier
    return table


def largest_tile_position(board):
    largest, pos = 0, (0, 0)
    for r in range(4):
        for c in range(4):
            if board.at(r, c) > largest:
                largest, pos = board.at(r, c), (r, c)
    return pos


class HeuristicSliderKai(Agent):
    """
    Scores each legal slide as
        reward + empty_square_coef * empty cells
               + monotonic_structure_coef * longest monotonic chain
               + placement bonus of the largest tile
    and plays the best one.
    """

    def __init__(self, args=""):
        super().__init__("name=slide role=slider " + args)
        self.opcode = [0, 1, 2, 3]

    def evaluate(self, after, reward):
        cfg = self.config
        r, c = largest_tile_position(after)
        return (
            reward
            + empty_squares(after) * cfg.empty_square_coef
            + longest_monotonic_structure(after) * cfg.monotonic_structure_coef
            + placement_table(cfg.largest_placement_value_multiplier)[r][c]
        )

    def take_action(self, before):
        self.require_active()
        best_value = None
        best_action = -1
        for op in self.opcode:
            after, reward = before.slide(op)
            if reward == -1:
                continue
            value = self.evaluate(after, reward)
            if best_value is None or value > best_value:
                best_action = op
                best_value = value

        if best_value is not None:
            return Slide(best_action)
        return Action()
