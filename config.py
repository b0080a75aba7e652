"""
Agent configuration.

Agents are configured from a single space-separated argument string such as
"name=six-tuple alpha=0.003125 init=65536,65536 save=weights.bin".
Later keys override earlier ones, so classes prepend their defaults.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from errors import ConfigurationError


def parse_args(args: str) -> Dict[str, str]:
    """Split "k1=v1 k2=v2" into a dict; a bare word maps to itself."""
    meta = {}
    for pair in args.split():
        key, _, value = pair.partition("=")
        meta[key] = value if _ else key
    return meta


def parse_sizes(text: str) -> Tuple[int, ...]:
    """Comma-separated positive table sizes, optionally wrapped in braces."""
    text = text.strip().strip("{}()[]")
    sizes = []
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        try:
            size = int(item)
        except ValueError:
            raise ConfigurationError(f"invalid weight table size: {item!r}") from None
        if size <= 0:
            raise ConfigurationError(f"weight table size must be positive, got {size}")
        sizes.append(size)
    if not sizes:
        raise ConfigurationError(f"no weight table sizes in {text!r}")
    return tuple(sizes)


def _number(meta, key, kind):
    try:
        return kind(meta[key])
    except ValueError:
        raise ConfigurationError(f"{key}={meta[key]!r} is not a valid {kind.__name__}") from None


@dataclass
class AgentConfig:
    """Typed view of the agent arguments, validated on construction."""

    name: str = "unknown"
    role: str = "unknown"

    # Randomness
    seed: Optional[int] = None

    # Weight tables
    init: Optional[Tuple[int, ...]] = None
    load: Optional[str] = None
    save: Optional[str] = None

    # Learning rate
    alpha: float = 0.0

    # Heuristic slider coefficients
    empty_square_coef: int = 5
    monotonic_structure_coef: int = 1
    largest_placement_value_multiplier: int = 2

    # Everything else, kept verbatim for property()
    meta: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.alpha < 0:
            raise ConfigurationError(f"alpha must be non-negative, got {self.alpha}")

    @classmethod
    def from_meta(cls, meta: Dict[str, str]) -> "AgentConfig":
        kwargs = {"meta": dict(meta)}
        for key in ("name", "role", "load", "save"):
            if key in meta:
                kwargs[key] = meta[key]
        if "seed" in meta:
            kwargs["seed"] = _number(meta, "seed", int)
        if "init" in meta:
            kwargs["init"] = parse_sizes(meta["init"])
        if "alpha" in meta:
            kwargs["alpha"] = _number(meta, "alpha", float)
        for key in ("empty_square_coef", "monotonic_structure_coef",
                    "largest_placement_value_multiplier"):
            if key in meta:
                kwargs[key] = _number(meta, key, int)
        return cls(**kwargs)

    @classmethod
    def parse(cls, args: str = "") -> "AgentConfig":
        return cls.from_meta(parse_args("name=unknown role=unknown " + args))
