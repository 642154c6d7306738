from __future__ import annotations
from dataclasses import dataclass

from minrk.errors import InvalidArgument

# Base of the polynomial hash. A prime a good deal larger than any byte value.
PRIME = 1_000_003
# 2^61 - 1 is a Mersenne prime: https://en.wikipedia.org/wiki/Mersenne_prime
MOD = 2**61 - 1


@dataclass(frozen=True)
class HashConfig:
    """
    The base and modulus of the rolling hash.

    Pass a weaker configuration (say `prime=1` or `mod=1`) to force collisions on purpose; the search still has to
    return the right answer because every candidate is compared directly.
    """

    prime: int = PRIME
    mod: int = MOD

    def __post_init__(self):
        for name in ("prime", "mod"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgument(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise InvalidArgument(f"{name} must be positive, got {value}")


DEFAULT_CONFIG = HashConfig()


def resolve(config: HashConfig | None) -> HashConfig:
    return DEFAULT_CONFIG if config is None else config
