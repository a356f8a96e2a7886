"""Workstation entity: assembles one product from one unit of each required component."""

from typing import Optional, Sequence

from .component_queue import ComponentQueue
from ..core.identifiers import EntityId, ProductId
from ..core.event_queue import Departure
from ..streams.random_stream import RandomStream, exponential
from ..utils.logger import setup_logger


class Workstation:
    """Single-server assembly station fed by one or more component queues."""

    def __init__(self, station_id: EntityId, required_queues: Sequence[ComponentQueue],
                 service_rate: float, stream: RandomStream):
        """Initialize workstation.

        Args:
            station_id: Workstation identifier
            required_queues: Queues consumed from, in consumption order
            service_rate: Assembly rate (products per unit time while busy)
            stream: Uniform stream for assembly times
        """
        if not required_queues:
            raise ValueError(f"Workstation {station_id.label} needs at least one queue")

        self.station_id = station_id
        self.required_queues = list(required_queues)
        self.service_rate = service_rate
        self.stream = stream
        self.logger = setup_logger(self.__class__.__name__)

        # State
        self.busy = False
        self.in_service: Optional[ProductId] = None
        self.next_product_sequence = 0

        # Statistics
        self.last_event_time = 0.0
        self.total_busy = 0.0
        self.products_made = 0
        self.stats_start = 0.0

    def _accrue(self, time: float) -> None:
        delta = time - self.last_event_time
        if delta < 0:
            raise RuntimeError(
                f"Workstation {self.station_id.label} clock went back: {time} < {self.last_event_time}"
            )
        if self.busy:
            self.total_busy += delta
        self.last_event_time = time

    def can_produce(self) -> bool:
        """Whether every required queue holds at least one component."""
        return all(queue.length() >= 1 for queue in self.required_queues)

    def service_time(self) -> float:
        """Draw an assembly time."""
        return exponential(self.stream, self.service_rate)

    def attempt_service(self, time: float) -> Optional[Departure]:
        """Start assembling if idle and all components are available.

        Consumes exactly one component from each required queue when
        production starts.

        Args:
            time: Current simulation time

        Returns:
            Departure event for the new product, or None if production
            cannot start
        """
        self._accrue(time)
        if self.busy or not self.can_produce():
            return None

        for queue in self.required_queues:
            queue.dequeue(time)

        product = ProductId(self.station_id, self.next_product_sequence)
        self.next_product_sequence += 1
        self.busy = True
        self.in_service = product
        return Departure(
            time=time + self.service_time(),
            entity_id=self.station_id,
            payload=product,
        )

    def complete_service(self, time: float) -> ProductId:
        """Finish the product in service.

        Raises:
            RuntimeError: If the workstation is idle
        """
        if not self.busy:
            raise RuntimeError(
                f"Workstation {self.station_id.label} completed service while idle"
            )

        self._accrue(time)
        product = self.in_service
        self.busy = False
        self.in_service = None
        self.products_made += 1
        self.logger.debug(f"Workstation {self.station_id.label} produced {product} at t={time:.4f}")
        return product

    def update_statistics(self, time: float) -> None:
        """Accrue the open busy interval up to ``time``."""
        self._accrue(time)

    def reset_statistics(self, time: float) -> None:
        """Zero the counters and start a new statistics window at ``time``."""
        self._accrue(time)
        self.total_busy = 0.0
        self.products_made = 0
        self.stats_start = time

    def utilization(self, as_of: float) -> float:
        """Fraction of the statistics window spent busy (0.0 for an empty window)."""
        window = as_of - self.stats_start
        return self.total_busy / window if window > 0 else 0.0

    def __repr__(self) -> str:
        queues = ", ".join(q.queue_id.label for q in self.required_queues)
        return (f"Workstation({self.station_id.label}, busy={self.busy}, "
                f"queues=[{queues}], made={self.products_made})")
