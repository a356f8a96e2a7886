"""Core simulation components."""

from .event_queue import Arrival, Departure, Event, EventType, EventQueue
from .identifiers import ComponentId, ComponentType, EntityId, EntityRole, ProductId
from .metrics_collector import MetricsCollector, SimulationResult
from .simulator import Simulator

__all__ = [
    "Simulator", "Event", "Arrival", "Departure", "EventType", "EventQueue",
    "MetricsCollector", "SimulationResult",
    "ComponentId", "ComponentType", "EntityId", "EntityRole", "ProductId",
]
