"""mfgsim: discrete event simulator of a two-inspector manufacturing line."""

from .core.event_queue import Event, EventType, EventQueue
from .core.identifiers import ComponentType, EntityId
from .core.metrics_collector import MetricsCollector, SimulationResult
from .core.simulator import Simulator
from .models.line_config import LineConfig
from .utils.logger import setup_logger

__version__ = "0.1.0"
__all__ = [
    "Simulator",
    "Event",
    "EventType",
    "EventQueue",
    "ComponentType",
    "EntityId",
    "MetricsCollector",
    "SimulationResult",
    "LineConfig",
    "setup_logger",
]
