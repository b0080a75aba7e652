"""
Afterstate TD(0) agents over n-tuple networks.

The value V(s') of an afterstate s' (board after the slide, before the new
tile) is the sum of one weight per (table, key) pair of the feature extractor.
During an episode the agent greedily plays argmax_a [ r(s, a) + V(s'_a) ] and
records (s'_t, r_t, value_t). When the episode closes the trajectory is walked
backward and every afterstate gets

    alpha * (value_{t+1} + r_{t+1} - value_t)        (0 past the last afterstate)

over the values recorded during play. What value_t holds depends on the
agent: the bare estimate V(s'_t), or V(s'_t) + r_t.

Board interface consumed here:
    board.slide(op) -> (after, reward)     reward -1 when illegal
    board.cell_at(i), board.rotate_clockwise(), board.reflect_horizontal()
"""

import logging

from action import Action, Slide
from agent import Agent
from errors import ConfigurationError, ProtocolError
from features import LineTupleFeatures, SymmetricTupleFeatures
from weight import WeightStore

logger = logging.getLogger(__name__)

OPCODES = (0, 1, 2, 3)


class Trajectory:
    """
    Per-episode buffer of afterstates, rewards and recorded values.

    While playing, the three lists have equal length n. seal() appends the
    terminal reward and value (both 0), giving rewards/values length n + 1
    against n afterstates, which is what the backward pass indexes.
    """

    def __init__(self):
        self.afterstates = []
        self.rewards = []
        self.values = []
        self.sealed = False

    def __len__(self):
        return len(self.afterstates)

    def record(self, after, reward, value):
        if self.sealed:
            raise ProtocolError("trajectory is sealed; open a new episode first")
        self.afterstates.append(after)
        self.rewards.append(float(reward))
        self.values.append(float(value))

    def seal(self):
        if self.sealed:
            raise ProtocolError("trajectory is already sealed")
        self.rewards.append(0.0)
        self.values.append(0.0)
        self.sealed = True

    def clear(self):
        self.afterstates.clear()
        self.rewards.clear()
        self.values.clear()
        self.sealed = False


class TDAgent(Agent):
    """
    Learning slider. The weight tables come from, in order of precedence:
    the `store` argument (already initialized, may be shared by several
    agents), load=PATH, init=SIZES, or the sizes the feature extractor needs.
    A store whose table sizes do not match the features is rejected.
    """

    def __init__(self, args="", features=None, store=None):
        super().__init__(args)
        if features is None:
            raise ConfigurationError("a TD agent needs a feature extractor")
        self.features = features
        self.trajectory = Trajectory()

        if store is None:
            store = self._build_store()
        elif not store.initialized:
            raise ConfigurationError("a shared weight store must be initialized before use")
        self._check_sizes(store)
        self.store = store

    def _build_store(self):
        cfg = self.config
        store = WeightStore()
        if cfg.init:
            store.initialize(cfg.init)
        if cfg.load:
            store.load(cfg.load)
        if not store.initialized:
            store.initialize(self.features.table_sizes())
        return store

    def _check_sizes(self, store):
        expected = tuple(self.features.table_sizes())
        if store.sizes() != expected:
            raise ConfigurationError(
                f"{self.name()}: weight tables {list(store.sizes())} do not match "
                f"the {len(expected)} tables of {sorted(set(expected))} entries the features need")

    @property
    def alpha(self):
        return self.config.alpha

    # ---- value function ----
    def evaluate(self, board):
        value = 0.0
        for table_index, key in self.features.pairs(board):
            value += self.store.read(table_index, key)
        return value

    # ---- recorded value convention ----
    def recorded_value(self, estimate, reward):
        """What take_action stores as the step's value (the estimate alone)."""
        return estimate

    def td_error(self, i):
        traj = self.trajectory
        return traj.values[i + 1] + traj.rewards[i + 1] - traj.values[i]

    # ---- episode ----
    def open_episode(self, flag=""):
        super().open_episode(flag)
        self.trajectory.clear()

    def take_action(self, before):
        self.require_active()
        best_op = None
        best_after = None
        best_reward = -1
        best_estimate = 0.0
        best_value = 0.0
        for op in OPCODES:
            after, reward = before.slide(op)
            if reward == -1:
                continue
            estimate = self.evaluate(after)
            value = estimate + reward
            if best_op is None or value > best_value:
                best_op, best_after, best_reward = op, after, reward
                best_estimate, best_value = estimate, value

        if best_op is None:
            return Action()
        self.trajectory.record(best_after, best_reward, self.recorded_value(best_estimate, best_reward))
        return Slide(best_op)

    def close_episode(self, flag=""):
        super().close_episode(flag)
        traj = self.trajectory
        traj.seal()
        if self.alpha:
            for i in range(len(traj) - 1, -1, -1):
                update = self.alpha * self.td_error(i)
                for table_index, key in self.features.pairs(traj.afterstates[i]):
                    self.store.accumulate(table_index, key, update)
        logger.debug("%s: closed episode after %d afterstates", self.name(), len(traj))
        traj.clear()

    def close(self):
        if self.config.save:
            self.store.save(self.config.save)


class FourTupleAgent(TDAgent):
    """
    Rows and columns as 4-tuples (8 tables of 16**4 weights).

    Records the full afterstate value, estimate + reward, as the step's value,
    so each TD error also carries the difference of consecutive rewards.
    """

    def __init__(self, args="", store=None):
        super().__init__("name=four-tuple role=slider alpha=0.0125 " + args,
                         features=LineTupleFeatures(), store=store)

    def recorded_value(self, estimate, reward):
        return estimate + reward


class SixTupleAgent(TDAgent):
    """
    Four 6-tuples expanded over the 8 board symmetries (32 tables of 16**6
    weights). Records the estimate alone, keeping reward and value apart.
    """

    def __init__(self, args="", store=None, shapes=None):
        super().__init__("name=six-tuple role=slider alpha=0.003125 " + args,
                         features=SymmetricTupleFeatures(shapes), store=store)
