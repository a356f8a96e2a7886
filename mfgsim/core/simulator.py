"""Main simulator class orchestrating the discrete event simulation."""

import time
from typing import Dict, List, Optional, Union

from .event_queue import Arrival, Departure, Event, EventQueue, EventType
from .identifiers import (
    ComponentId, ComponentType, EntityId, EntityRole,
    INSPECTORS, INSPECTOR_TYPES, QUEUES, QUEUES_BY_TYPE, QUEUE_TYPE, QUEUE_WORKSTATION,
    WORKSTATIONS, WORKSTATION_QUEUES, feeding_inspectors,
)
from .metrics_collector import MetricsCollector, SimulationResult
from ..entities.component_queue import ComponentQueue
from ..entities.inspector import Inspector
from ..entities.workstation import Workstation
from ..models.line_config import LineConfig
from ..policies.routing_policy import RoutingPolicy, create_policy
from ..streams.random_stream import RandomStream, make_streams
from ..utils.logger import setup_logger

# Stream names per inspector and component type
INSPECTOR_STREAMS = {
    EntityId.INSP1: {ComponentType.C1: "inspector1_c1"},
    EntityId.INSP2: {ComponentType.C2: "inspector2_c2", ComponentType.C3: "inspector2_c3"},
}

WORKSTATION_STREAMS = {
    EntityId.W1: "workstation1",
    EntityId.W2: "workstation2",
    EntityId.W3: "workstation3",
}


class Simulator:
    """Discrete event simulator of the two-inspector, three-workstation line.

    This class owns the clock, the future-event list and every entity, and
    implements the routing protocol between them:
    - Inspectors get a new component only after the previous one was placed
    - A finished component goes to a queue of its type with space; if none
      has space the inspector blocks holding it
    - Whenever a workstation consumes from its queues, the inspectors
      feeding it are notified so a blocked one can place its component
    - The run ends when the target number of products has departed

    All routing happens synchronously inside the handler of the event that
    caused it.
    """

    def __init__(self, config: Union[Dict, LineConfig],
                 streams: Optional[Dict[str, RandomStream]] = None,
                 policy: Optional[RoutingPolicy] = None,
                 record_trace: bool = False):
        """Initialize simulator.

        Args:
            config: Configuration dictionary or validated LineConfig
            streams: Named uniform streams (built from the configured seeds if omitted)
            policy: C1 queue selection policy (built from the configured name if omitted)
            record_trace: Keep a trace of every dispatched event
        """
        self.config = config if isinstance(config, LineConfig) else LineConfig(config)
        self.logger = setup_logger(self.__class__.__name__)

        # Simulation state
        self.clock = 0.0
        self.event_queue = EventQueue()
        self.target_products = self.config.target_products
        self.warmup_products = self.config.warmup_products
        self.products_departed = 0
        self.stats_start = 0.0
        self._initialized = False

        # Random streams for reproducibility
        self.streams = streams if streams is not None else make_streams(
            self.config.seeds, self.config.random_stream
        )
        self.selection_stream = self.streams["inspector2_selection"]
        self.components_created = {component_type: 0 for component_type in ComponentType}

        # Entities
        self.queues: Dict[EntityId, ComponentQueue] = {
            queue_id: ComponentQueue(queue_id, QUEUE_TYPE[queue_id],
                                     self.config.capacity_of(queue_id))
            for queue_id in QUEUES
        }
        self.inspectors: Dict[EntityId, Inspector] = {
            inspector_id: Inspector(
                inspector_id,
                self.config.inspection_rates,
                {t: self.streams[name] for t, name in INSPECTOR_STREAMS[inspector_id].items()},
            )
            for inspector_id in INSPECTORS
        }
        self.workstations: Dict[EntityId, Workstation] = {
            station_id: Workstation(
                station_id,
                [self.queues[q] for q in WORKSTATION_QUEUES[station_id]],
                self.config.assembly_rates[station_id],
                self.streams[WORKSTATION_STREAMS[station_id]],
            )
            for station_id in WORKSTATIONS
        }

        self.policy = policy if policy is not None else create_policy(
            self.config.tie_break_policy, self.streams["routing_policy"]
        )
        self.metrics_collector = MetricsCollector(record_trace=record_trace)

        self.logger.debug(f"Simulator initialized: {self.config}, policy={self.policy!r}")

    def run(self) -> SimulationResult:
        """Run the simulation until the target number of products has departed.

        Returns:
            End-of-run statistics
        """
        start_time = time.time()

        self._initialize()

        # Main simulation loop
        while self.products_departed < self.target_products:
            self.step()

        result = self._finalize()

        elapsed_time = time.time() - start_time
        self.logger.info(
            f"Produced {self.products_departed} products by t={self.clock:.2f} "
            f"({self.metrics_collector.events_dispatched} events, {elapsed_time:.2f}s)"
        )
        self.logger.debug(self.metrics_collector.get_summary())
        return result

    def step(self) -> Event:
        """Dispatch the earliest pending event.

        Returns:
            The dispatched event

        Raises:
            RuntimeError: If no event is pending (the line has stalled) or
                the event lies in the past
        """
        self._initialize()

        event = self.event_queue.pop_earliest()
        if event is None:
            raise RuntimeError(
                f"Future event list is empty at t={self.clock:.4f} with "
                f"{self.products_departed}/{self.target_products} products: the line has stalled"
            )
        if event.time < self.clock:
            raise RuntimeError(f"Event {event} precedes the clock t={self.clock}")

        self.clock = event.time
        self.metrics_collector.record_event(event)
        self._process_event(event)
        return event

    def _initialize(self) -> None:
        """Give both inspectors their first component."""
        if self._initialized:
            return
        self._initialized = True

        for inspector_id in INSPECTORS:
            self.schedule_arrival(inspector_id)

    def _process_event(self, event: Event) -> None:
        """Process a single event.

        Args:
            event: Event to process
        """
        handler = {
            (EventType.ARRIVAL, EntityRole.INSPECTOR): self._handle_inspector_arrival,
            (EventType.DEPARTURE, EntityRole.INSPECTOR): self._handle_inspection_complete,
            (EventType.DEPARTURE, EntityRole.WORKSTATION): self._handle_product_departure,
        }.get((event.event_type, event.entity_id.role))

        if handler is None:
            raise RuntimeError(f"No handler for {event.event_type.value} at {event.entity_id.label}")
        handler(event)

    def _handle_inspector_arrival(self, event: Arrival) -> None:
        """Handle a raw component arriving at an inspector."""
        inspector = self.inspectors[event.entity_id]
        departure = inspector.begin_inspection(event.component, self.clock)
        if departure is not None:
            self.event_queue.push(departure)

    def _handle_inspection_complete(self, event: Departure) -> None:
        """Handle an inspector finishing a component."""
        inspector_id = event.entity_id
        inspector = self.inspectors[inspector_id]
        component = event.payload

        has_room = self.has_room(component.type)
        released = inspector.complete_inspection(self.clock, has_room)
        if released is None:
            self.logger.debug(
                f"Inspector {inspector_id.label} blocked holding {component} at t={self.clock:.4f}"
            )
            return

        self._route(inspector_id, released)

    def _handle_product_departure(self, event: Departure) -> None:
        """Handle a finished product leaving a workstation."""
        station_id = event.entity_id
        self.workstations[station_id].complete_service(self.clock)
        self.products_departed += 1
        self.logger.debug(f"{self.products_departed} products have been produced")

        if self.products_departed == self.warmup_products:
            self._reset_statistics()

        self._start_service(station_id)
        for inspector_id in feeding_inspectors(station_id):
            self.notify(inspector_id)

    def schedule_arrival(self, inspector_id: EntityId) -> Arrival:
        """Hand an inspector its next raw component, at the current time.

        Args:
            inspector_id: Inspector receiving the component

        Returns:
            The scheduled arrival
        """
        arrival = Arrival(
            time=self.clock,
            entity_id=inspector_id,
            component=self._next_component(inspector_id),
        )
        self.event_queue.push(arrival)
        return arrival

    def _next_component(self, inspector_id: EntityId) -> ComponentId:
        types = INSPECTOR_TYPES[inspector_id]
        if len(types) == 1:
            component_type = types[0]
        else:
            component_type = types[self.selection_stream.next_int(len(types))]

        component = ComponentId(component_type, self.components_created[component_type])
        self.components_created[component_type] += 1
        return component

    def has_room(self, component_type: ComponentType) -> bool:
        """Whether any queue accepting ``component_type`` has space."""
        return any(self.queues[q].has_space() for q in QUEUES_BY_TYPE[component_type])

    def _blocked_queues(self, exclude: EntityId) -> List[EntityId]:
        """Queues that inspectors other than ``exclude`` are blocked on."""
        blocked = []
        for inspector_id, inspector in self.inspectors.items():
            if inspector_id is exclude or not inspector.blocked:
                continue
            blocked.extend(QUEUES_BY_TYPE[inspector.held_component.type])
        return blocked

    def _route(self, inspector_id: EntityId, component: ComponentId) -> None:
        """Place a released component and give its inspector the next one.

        Raises:
            RuntimeError: If no queue of the component's type has space
        """
        candidates = [self.queues[q] for q in QUEUES_BY_TYPE[component.type]]
        target = self.policy.select(candidates, self._blocked_queues(exclude=inspector_id))
        if target is None:
            raise RuntimeError(
                f"No queue has space for {component} from {inspector_id.label} at t={self.clock:.4f}"
            )

        self._deliver(target.queue_id, component)
        self.schedule_arrival(inspector_id)

    def _deliver(self, queue_id: EntityId, component: ComponentId) -> None:
        self.queues[queue_id].enqueue(component, self.clock)
        self._start_service(QUEUE_WORKSTATION[queue_id])

    def _start_service(self, station_id: EntityId) -> None:
        """Try to start a product and notify feeders if components were consumed."""
        departure = self.workstations[station_id].attempt_service(self.clock)
        if departure is None:
            return

        self.event_queue.push(departure)
        for inspector_id in feeding_inspectors(station_id):
            self.notify(inspector_id)

    def notify(self, inspector_id: EntityId) -> bool:
        """Unblock an inspector if it is blocked and its component now fits.

        The released component is routed and the inspector's next arrival
        scheduled before this returns. No-op for an inspector that is not
        blocked, or whose component still has no queue with space.

        Args:
            inspector_id: Inspector to notify

        Returns:
            True if the inspector was unblocked
        """
        inspector = self.inspectors[inspector_id]
        if not inspector.blocked or inspector.held_component is None:
            return False
        if not self.has_room(inspector.held_component.type):
            return False

        component = inspector.unblock(self.clock)
        self.logger.debug(f"Inspector {inspector_id.label} unblocked at t={self.clock:.4f}")
        self._route(inspector_id, component)
        return True

    def _update_statistics(self) -> None:
        for inspector in self.inspectors.values():
            inspector.update_statistics(self.clock)
        for workstation in self.workstations.values():
            workstation.update_statistics(self.clock)

    def _reset_statistics(self) -> None:
        """End the warm-up period: restart every statistic at the current clock."""
        for inspector in self.inspectors.values():
            inspector.reset_statistics(self.clock)
        for queue in self.queues.values():
            queue.reset_statistics(self.clock)
        for workstation in self.workstations.values():
            workstation.reset_statistics(self.clock)
        self.stats_start = self.clock
        self.logger.info(
            f"Warm-up ended after {self.products_departed} products at t={self.clock:.2f}"
        )

    def _finalize(self) -> SimulationResult:
        """Finalize simulation and compute results.

        Returns:
            End-of-run statistics
        """
        self._update_statistics()

        return self.metrics_collector.compute_metrics(
            clock=self.clock,
            stats_start=self.stats_start,
            products_departed=self.products_departed,
            tie_break_policy=self.policy.name,
            inspectors=self.inspectors,
            queues=self.queues,
            workstations=self.workstations,
        )

    def components_in_system(self) -> int:
        """Components under inspection, held by a blocked inspector or waiting in queues."""
        held = sum(1 for i in self.inspectors.values() if i.held_component is not None)
        return held + sum(q.length() for q in self.queues.values())
