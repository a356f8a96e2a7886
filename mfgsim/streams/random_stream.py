"""Uniform random streams consumed by the simulation entities.

Every stochastic entity owns its own stream so that replications are
reproducible from a list of seeds and independent of each other.
"""

import math
from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

import numpy as np

STREAM_NAMES = (
    "inspector1_c1",
    "inspector2_c2",
    "inspector2_c3",
    "workstation1",
    "workstation2",
    "workstation3",
    "routing_policy",
    "inspector2_selection",
)

DEFAULT_SEEDS = [420, 69, 1337, 13, 14, 46, 1617, 1819]


class RandomStream(ABC):
    """Source of i.i.d. uniform draws on [0, 1)."""

    @abstractmethod
    def next(self) -> float:
        """Return the next uniform draw in [0, 1)."""
        pass

    def next_int(self, n: int) -> int:
        """Return a uniform integer in [0, n)."""
        return min(int(self.next() * n), n - 1)


class NumpyStream(RandomStream):
    """Stream backed by a numpy ``Generator`` (PCG64)."""

    def __init__(self, seed: int):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def next(self) -> float:
        return float(self._rng.random())

    def __repr__(self) -> str:
        return f"NumpyStream(seed={self.seed})"


class LCGStream(RandomStream):
    """Linear congruential generator, x' = (a*x + c) mod m, scaled to [0, 1).

    Defaults are the Park-Miller minimal standard constants.
    """

    def __init__(self, seed: int, multiplier: int = 16807, increment: int = 0,
                 modulus: int = 2 ** 31 - 1):
        if modulus <= 1:
            raise ValueError("LCG modulus must be greater than 1")
        if increment == 0 and seed % modulus == 0:
            raise ValueError("LCG seed must be non-zero modulo the modulus when increment is 0")
        self.seed = seed
        self.multiplier = multiplier
        self.increment = increment
        self.modulus = modulus
        self._state = seed % modulus

    def next(self) -> float:
        self._state = (self.multiplier * self._state + self.increment) % self.modulus
        return self._state / self.modulus

    def __repr__(self) -> str:
        return (f"LCGStream(seed={self.seed}, a={self.multiplier}, "
                f"c={self.increment}, m={self.modulus})")


def exponential(stream: RandomStream, rate: float) -> float:
    """Draw an exponential variate with the given rate by inverse CDF.

    Args:
        stream: Uniform source
        rate: Rate parameter (mean = 1 / rate)

    Returns:
        Strictly positive service time
    """
    if not math.isfinite(rate) or rate <= 0:
        raise ValueError(f"Exponential rate must be positive and finite, got {rate}")

    while True:
        sample = -math.log(1.0 - stream.next()) / rate
        if sample > 0:
            return sample


def make_stream(seed: int, kind: str = "numpy") -> RandomStream:
    """Build one stream of the requested kind.

    Raises:
        ValueError: If the kind is unknown
    """
    if kind == "numpy":
        return NumpyStream(seed)
    elif kind == "lcg":
        return LCGStream(seed)
    else:
        raise ValueError(f"Unknown random stream kind: {kind}")


def make_streams(seeds: Sequence[int], kind: str = "numpy") -> Dict[str, RandomStream]:
    """Build the full, named stream set for one replication.

    Args:
        seeds: One seed per entry of ``STREAM_NAMES``, in that order
        kind: ``"numpy"`` or ``"lcg"``

    Returns:
        Mapping of stream name to stream
    """
    seeds: List[int] = list(seeds)
    if len(seeds) != len(STREAM_NAMES):
        raise ValueError(
            f"Expected {len(STREAM_NAMES)} seeds, got {len(seeds)}"
        )
    return {name: make_stream(int(seed), kind) for name, seed in zip(STREAM_NAMES, seeds)}
