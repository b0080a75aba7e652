"""
Common agent interface.

Every player (slider) and environment (placer) implements:
    open_episode(flag) / close_episode(flag) / take_action(board) -> Action
take_action must return a Slide, a Place, or the no-op Action() when it has
no legal move.
"""

from action import Action
from config import AgentConfig, parse_args
from errors import ProtocolError


class Agent:
    """Base agent: typed config plus the idle -> active -> idle episode cycle."""

    def __init__(self, args=""):
        self.config = AgentConfig.parse(args)
        self.active = False

    # ---- episode lifecycle ----
    def open_episode(self, flag=""):
        if self.active:
            raise ProtocolError(f"{self.name()}: open_episode while an episode is active")
        self.active = True

    def close_episode(self, flag=""):
        if not self.active:
            raise ProtocolError(f"{self.name()}: close_episode without an open episode")
        self.active = False

    def require_active(self):
        if not self.active:
            raise ProtocolError(f"{self.name()}: take_action outside an episode")

    def take_action(self, board):
        self.require_active()
        return Action()

    def close(self):
        """Release resources at shutdown."""

    # ---- metadata ----
    def property(self, key):
        return self.config.meta[key]

    def notify(self, msg):
        """Set one "key=value" pair; the typed config is re-validated."""
        meta = dict(self.config.meta)
        meta.update(parse_args(msg))
        self.config = AgentConfig.from_meta(meta)

    def name(self):
        return self.config.name

    def role(self):
        return self.config.role

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name()}, role={self.role()})"
