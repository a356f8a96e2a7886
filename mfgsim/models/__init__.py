"""Line configuration."""

from .line_config import LineConfig

__all__ = ["LineConfig"]
