"""Event queue implementation for discrete event simulation."""

import heapq
import itertools
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, List, Optional, Tuple, Union

from .identifiers import ComponentId, EntityId, ProductId


class EventType(Enum):
    """Types of events in the simulation."""
    ARRIVAL = "arrival"
    DEPARTURE = "departure"


@dataclass(frozen=True)
class Event:
    """Event in the discrete event simulation.

    Attributes:
        time: Event timestamp
        entity_id: Entity the event is dispatched to
    """
    time: float
    entity_id: EntityId

    event_type: ClassVar[EventType]

    def __post_init__(self):
        """Validate event after initialization."""
        if self.time < 0:
            raise ValueError("Event time cannot be negative")


@dataclass(frozen=True)
class Arrival(Event):
    """A raw component arriving at an inspector."""
    component: ComponentId

    event_type: ClassVar[EventType] = EventType.ARRIVAL


@dataclass(frozen=True)
class Departure(Event):
    """An inspected component leaving an inspector, or a product leaving a workstation."""
    payload: Union[ComponentId, ProductId]

    event_type: ClassVar[EventType] = EventType.DEPARTURE


class EventQueue:
    """Future-event list.

    Events are ordered by time, earliest first. Events with equal time are
    returned in the order they were pushed (FIFO), which keeps runs
    reproducible regardless of event contents.
    """

    def __init__(self):
        """Initialize empty event queue."""
        self._queue: List[Tuple[float, int, Event]] = []
        self._counter = itertools.count()
        self._event_count = 0

    def push(self, event: Event) -> None:
        """Add event to the queue.

        Args:
            event: Event to add
        """
        heapq.heappush(self._queue, (event.time, next(self._counter), event))
        self._event_count += 1

    schedule = push

    def pop(self) -> Event:
        """Remove and return the next event.

        Returns:
            Next event to process

        Raises:
            IndexError: If queue is empty
        """
        if self.is_empty():
            raise IndexError("Cannot pop from empty event queue")
        return heapq.heappop(self._queue)[2]

    def pop_earliest(self) -> Optional[Event]:
        """Remove and return the next event, or None if the queue is empty."""
        if self.is_empty():
            return None
        return heapq.heappop(self._queue)[2]

    def peek(self) -> Optional[Event]:
        """Return the next event without removing it.

        Returns:
            Next event, or None if queue is empty
        """
        return self._queue[0][2] if self._queue else None

    def pending(self) -> List[Event]:
        """Copy of the pending events in dispatch order."""
        return [entry[2] for entry in sorted(self._queue)]

    def is_empty(self) -> bool:
        """Check if queue is empty."""
        return len(self._queue) == 0

    def size(self) -> int:
        """Get number of events in queue."""
        return len(self._queue)

    @property
    def total_scheduled(self) -> int:
        """Number of events pushed since creation."""
        return self._event_count

    def clear(self) -> None:
        """Remove all events from queue."""
        self._queue.clear()

    def __len__(self) -> int:
        """Get number of events in queue."""
        return len(self._queue)

    def __repr__(self) -> str:
        """String representation of event queue."""
        return f"EventQueue(size={len(self._queue)}, next={self.peek()})"
