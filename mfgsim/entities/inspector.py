"""Inspector entity: single-server inspection with blocking."""

from enum import Enum
from typing import Dict, Optional

from ..core.identifiers import ComponentId, ComponentType, EntityId, INSPECTOR_TYPES
from ..core.event_queue import Departure
from ..streams.random_stream import RandomStream, exponential
from ..utils.logger import setup_logger


class InspectorState(Enum):
    """States of an inspector."""
    FREE = "free"
    INSPECTING = "inspecting"
    BLOCKED = "blocked"


class Inspector:
    """Inspects one component at a time and hands it to the line.

    An inspector that finishes a component nobody can accept keeps holding
    it in the BLOCKED state until the scheduler unblocks it. Time spent
    INSPECTING counts as busy and time spent BLOCKED counts as blocked.
    """

    def __init__(self, inspector_id: EntityId, service_rates: Dict[ComponentType, float],
                 streams: Dict[ComponentType, RandomStream]):
        """Initialize inspector.

        Args:
            inspector_id: Inspector identifier
            service_rates: Inspection rate per component type it handles
            streams: Uniform stream per component type it handles
        """
        self.inspector_id = inspector_id
        self.component_types = INSPECTOR_TYPES[inspector_id]
        self.logger = setup_logger(self.__class__.__name__)

        missing = [t.label for t in self.component_types
                   if t not in service_rates or t not in streams]
        if missing:
            raise ValueError(
                f"Inspector {inspector_id.label} needs a rate and a stream for {missing}"
            )
        self.service_rates = {t: service_rates[t] for t in self.component_types}
        self.streams = {t: streams[t] for t in self.component_types}

        # State
        self.state = InspectorState.FREE
        self.held_component: Optional[ComponentId] = None

        # Statistics
        self.last_event_time = 0.0
        self.total_busy = 0.0
        self.total_blocked = 0.0
        self.num_inspected = 0
        self.stats_start = 0.0

    @property
    def busy(self) -> bool:
        return self.state is InspectorState.INSPECTING

    @property
    def blocked(self) -> bool:
        return self.state is InspectorState.BLOCKED

    def _accrue(self, time: float) -> None:
        delta = time - self.last_event_time
        if delta < 0:
            raise RuntimeError(
                f"Inspector {self.inspector_id.label} clock went back: {time} < {self.last_event_time}"
            )
        if self.state is InspectorState.INSPECTING:
            self.total_busy += delta
        elif self.state is InspectorState.BLOCKED:
            self.total_blocked += delta
        self.last_event_time = time

    def service_time(self, component_type: ComponentType) -> float:
        """Draw an inspection time for a component type."""
        return exponential(self.streams[component_type], self.service_rates[component_type])

    def begin_inspection(self, component: ComponentId, time: float) -> Optional[Departure]:
        """Start inspecting a component.

        Args:
            component: Component to inspect
            time: Current simulation time

        Returns:
            Departure event at the end of inspection, or None if the
            inspector already holds a component
        """
        if component.type not in self.component_types:
            raise RuntimeError(
                f"Inspector {self.inspector_id.label} cannot inspect {component}"
            )

        self._accrue(time)
        if self.state is not InspectorState.FREE:
            self.logger.warning(
                f"Inspector {self.inspector_id.label} is {self.state.value}; "
                f"{component} not admitted at t={time:.4f}"
            )
            return None

        self.state = InspectorState.INSPECTING
        self.held_component = component
        return Departure(
            time=time + self.service_time(component.type),
            entity_id=self.inspector_id,
            payload=component,
        )

    def complete_inspection(self, time: float, has_room: bool) -> Optional[ComponentId]:
        """Finish the current inspection.

        Args:
            time: Current simulation time
            has_room: Whether any queue for the component has space

        Returns:
            The released component, or None when the inspector blocks and
            keeps it
        """
        if self.state is not InspectorState.INSPECTING:
            raise RuntimeError(
                f"Inspector {self.inspector_id.label} completed inspection while {self.state.value}"
            )

        self._accrue(time)
        self.num_inspected += 1
        if not has_room:
            self.state = InspectorState.BLOCKED
            self.logger.debug(f"Inspector {self.inspector_id.label} blocked at t={time:.4f}")
            return None

        return self._release()

    def unblock(self, time: float) -> ComponentId:
        """Leave the BLOCKED state and release the held component.

        Raises:
            RuntimeError: If the inspector is not blocked
        """
        if self.state is not InspectorState.BLOCKED:
            raise RuntimeError(
                f"Inspector {self.inspector_id.label} unblocked while {self.state.value}"
            )

        self._accrue(time)
        self.logger.debug(f"Inspector {self.inspector_id.label} unblocked at t={time:.4f}")
        return self._release()

    def _release(self) -> ComponentId:
        component = self.held_component
        self.held_component = None
        self.state = InspectorState.FREE
        return component

    def update_statistics(self, time: float) -> None:
        """Accrue the open busy/blocked interval up to ``time``."""
        self._accrue(time)

    def reset_statistics(self, time: float) -> None:
        """Zero the counters and start a new statistics window at ``time``."""
        self._accrue(time)
        self.total_busy = 0.0
        self.total_blocked = 0.0
        self.num_inspected = 0
        self.stats_start = time

    def blocking_probability(self, as_of: float) -> float:
        """Fraction of the statistics window spent blocked (0.0 for an empty window)."""
        window = as_of - self.stats_start
        return self.total_blocked / window if window > 0 else 0.0

    def __repr__(self) -> str:
        return (f"Inspector({self.inspector_id.label}, state={self.state.value}, "
                f"held={self.held_component})")
