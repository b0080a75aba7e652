import random

from action import Action, Place, Slide
from agent import Agent
from env import NO_SLIDE

# cells a new tile may enter from, indexed by the last slide direction
SPACES = {
    0: [12, 13, 14, 15],   # UP    -> bottom row
    1: [0, 4, 8, 12],      # RIGHT -> left column
    2: [0, 1, 2, 3],       # DOWN  -> top row
    3: [3, 7, 11, 15],     # LEFT  -> right column
    NO_SLIDE: list(range(16)),
}


class RandomAgent(Agent):
    """Agent owning an explicit random source, seeded from seed=..."""

    def __init__(self, args="", rng=None):
        super().__init__(args)
        self.rng = rng if rng is not None else random.Random(self.config.seed)


class RandomPlacer(RandomAgent):
    """Environment: places the hinted tile on a random free edge cell and draws a new hint"""

    def __init__(self, args="", rng=None):
        super().__init__("name=place role=placer " + args, rng)

    def take_action(self, after):
        self.require_active()
        space = list(SPACES[after.last])
        self.rng.shuffle(space)
        for pos in space:
            if after.cell_at(pos) != 0:
                continue

            bag = [t for t in (1, 2, 3) for _ in range(after.bag(t))]
            self.rng.shuffle(bag)

            tile = after.hint or bag.pop()
            hint = bag.pop()
            return Place(pos, tile, hint)
        return Action()


class RandomSlider(RandomAgent):
    """Player: picks any legal slide randomly"""

    def __init__(self, args="", rng=None):
        super().__init__("name=slide role=slider " + args, rng)
        self.opcode = [0, 1, 2, 3]

    def take_action(self, before):
        self.require_active()
        self.rng.shuffle(self.opcode)
        for op in self.opcode:
            _, reward = before.slide(op)
            if reward != -1:
                return Slide(op)
        return Action()
