"""Shared fixtures for the test suite."""

import itertools
import math

from mfgsim.streams.random_stream import RandomStream, STREAM_NAMES

# A uniform draw that makes the exponential draw exactly one mean long
UNIT_DRAW = 1.0 - math.exp(-1.0)


class FixedStream(RandomStream):
    """Stream cycling through a fixed list of draws."""

    def __init__(self, values):
        self._values = itertools.cycle(values)

    def next(self) -> float:
        return next(self._values)


def mean_time_streams(selection=(0.25, 0.75)):
    """Streams under which every service time equals 1 / rate.

    Inspector 2 alternates C2, C3, C2, ... with the default selection draws.
    """
    streams = {name: FixedStream([UNIT_DRAW]) for name in STREAM_NAMES}
    streams["inspector2_selection"] = FixedStream(list(selection))
    streams["routing_policy"] = FixedStream([0.5])
    return streams


def line_config(target=50, **sections):
    """Configuration dictionary with small defaults for fast runs."""
    config = {
        'simulation': {'target_products': target},
        'replications': {'count': 2},
    }
    for key, value in sections.items():
        config.setdefault(key, {}).update(value)
    return config
