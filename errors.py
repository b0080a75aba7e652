"""
Error types raised by the Threes framework.

Configuration and persistence errors abort a run; IndexOutOfRange means a
tuple shape does not match the weight tables and should never be caught.
"""


class ThreesError(Exception):
    """Base class for every framework error"""


class ConfigurationError(ThreesError, ValueError):
    """Bad agent arguments or weight table sizes"""


class IndexOutOfRange(ThreesError, IndexError):
    """Weight table index or feature key outside the allocated tables"""


class PersistenceError(ThreesError, OSError):
    """Weight file could not be read or written"""


class ProtocolError(ThreesError, RuntimeError):
    """Episode lifecycle violated (e.g. take_action before open_episode)"""
