"""Random number streams."""

from .random_stream import (
    RandomStream, NumpyStream, LCGStream, exponential, make_stream, make_streams,
    STREAM_NAMES, DEFAULT_SEEDS,
)

__all__ = [
    "RandomStream",
    "NumpyStream",
    "LCGStream",
    "exponential",
    "make_stream",
    "make_streams",
    "STREAM_NAMES",
    "DEFAULT_SEEDS",
]
