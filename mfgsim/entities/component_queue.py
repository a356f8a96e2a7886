"""Bounded FIFO buffer holding inspected components."""

from collections import deque
from typing import Deque, List, Tuple

from ..core.identifiers import ComponentId, ComponentType, EntityId
from ..utils.logger import setup_logger

DEFAULT_CAPACITY = 2


class ComponentQueue:
    """Buffer between an inspector and a workstation.

    Occupancy is recorded as a step function: each ``(time, length)`` entry
    holds until the next entry. The history is only used for time-weighted
    averages.
    """

    def __init__(self, queue_id: EntityId, component_type: ComponentType,
                 capacity: int = DEFAULT_CAPACITY):
        """Initialize an empty queue.

        Args:
            queue_id: Queue identifier
            component_type: Type of component the queue accepts
            capacity: Maximum number of components held
        """
        if capacity < 1:
            raise ValueError(f"Queue capacity must be at least 1, got {capacity}")

        self.queue_id = queue_id
        self.component_type = component_type
        self.capacity = capacity
        self.logger = setup_logger(self.__class__.__name__)

        self.contents: Deque[ComponentId] = deque()
        self.occupancy_history: List[Tuple[float, int]] = [(0.0, 0)]
        self.num_departures = 0
        self.stats_start = 0.0

    def has_space(self) -> bool:
        return len(self.contents) < self.capacity

    def length(self) -> int:
        return len(self.contents)

    def __len__(self) -> int:
        return len(self.contents)

    def enqueue(self, component: ComponentId, time: float) -> None:
        """Append a component at the tail.

        Raises:
            RuntimeError: If the queue is full or the component has the wrong type
        """
        if not self.has_space():
            raise RuntimeError(f"Enqueue on full queue {self.queue_id.label} at t={time:.4f}")
        if component.type is not self.component_type:
            raise RuntimeError(
                f"Queue {self.queue_id.label} cannot hold component {component}"
            )
        self._check_time(time)

        self.contents.append(component)
        self._record(time)
        self.logger.debug(f"Queue {self.queue_id.label} now has {len(self.contents)} components")

    def dequeue(self, time: float) -> ComponentId:
        """Remove and return the component at the head.

        Raises:
            RuntimeError: If the queue is empty
        """
        if not self.contents:
            raise RuntimeError(f"Dequeue from empty queue {self.queue_id.label} at t={time:.4f}")
        self._check_time(time)

        component = self.contents.popleft()
        self.num_departures += 1
        self._record(time)
        return component

    def _check_time(self, time: float) -> None:
        last_time = self.occupancy_history[-1][0]
        if time < last_time:
            raise RuntimeError(
                f"Queue {self.queue_id.label} history went back in time: {time} < {last_time}"
            )

    def _record(self, time: float) -> None:
        self.occupancy_history.append((time, len(self.contents)))

    def time_weighted_average_occupancy(self, as_of: float) -> float:
        """Average number of components held over the statistics window.

        Args:
            as_of: End of the window (usually the final clock)

        Returns:
            Integral of length over [stats_start, as_of] divided by the window
            length, or 0.0 for an empty window
        """
        window = as_of - self.stats_start
        if window < 0:
            raise ValueError(f"as_of={as_of} precedes statistics start {self.stats_start}")
        if window == 0:
            return 0.0

        area = 0.0
        for (t_i, length_i), (t_next, _) in zip(self.occupancy_history,
                                               self.occupancy_history[1:] + [(as_of, 0)]):
            start = max(t_i, self.stats_start)
            end = min(t_next, as_of)
            if end > start:
                area += length_i * (end - start)
        return area / window

    def reset_statistics(self, time: float) -> None:
        """Restart occupancy statistics at ``time`` keeping the current contents."""
        self.stats_start = time
        self.num_departures = 0
        self.occupancy_history = [(time, len(self.contents))]

    def __repr__(self) -> str:
        items = ", ".join(str(c) for c in self.contents)
        return f"ComponentQueue({self.queue_id.label}, [{items}], capacity={self.capacity})"
