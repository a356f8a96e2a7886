"""Metrics collection and end-of-run aggregation."""

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Mapping, Tuple

from dataclasses_json import dataclass_json

from .event_queue import Event
from .identifiers import EntityId
from ..utils.logger import setup_logger

if TYPE_CHECKING:
    from ..entities import ComponentQueue, Inspector, Workstation


@dataclass_json
@dataclass
class WorkstationStats:
    """End-of-run counters of one workstation."""
    products_made: int
    total_busy: float
    utilization: float


@dataclass_json
@dataclass
class QueueStats:
    """End-of-run counters of one component queue."""
    departures: int
    average_occupancy: float
    length: int
    capacity: int


@dataclass_json
@dataclass
class InspectorStats:
    """End-of-run counters of one inspector."""
    inspected: int
    total_busy: float
    total_blocked: float
    blocking_probability: float
    state: str


@dataclass_json
@dataclass
class SimulationResult:
    """Everything a replication reports, keyed by entity label.

    ``products_departed`` counts every product of the run, warm-up included;
    ``products_in_window`` only those finished inside the statistics window
    [stats_start, clock]. Ratios are taken over that window and are 0.0 when
    it is empty.
    """
    clock: float
    stats_start: float
    products_departed: int
    products_in_window: int
    throughput: float
    tie_break_policy: str
    events_dispatched: int
    workstations: Dict[str, WorkstationStats] = field(default_factory=dict)
    queues: Dict[str, QueueStats] = field(default_factory=dict)
    inspectors: Dict[str, InspectorStats] = field(default_factory=dict)

    def stats(self) -> Dict[str, float]:
        """Flat per-replication statistics used for cross-replication analysis."""
        flat = {'throughput': self.throughput}
        for label, ws in self.workstations.items():
            flat[f'p_busy_{label}'] = ws.utilization
        for label, q in self.queues.items():
            flat[f'avg_occupancy_{label}'] = q.average_occupancy
        for label, insp in self.inspectors.items():
            flat[f'p_blocked_{label}'] = insp.blocking_probability
        return flat


class MetricsCollector:
    """Collect dispatch statistics during a run and aggregate entity counters after it.

    Optionally records a trace of every dispatched event as
    ``(time, event type, entity label)``.
    """

    def __init__(self, record_trace: bool = False):
        """Initialize metrics collector.

        Args:
            record_trace: Keep the full dispatch trace in memory
        """
        self.logger = setup_logger(self.__class__.__name__)
        self.record_trace = record_trace

        self.events_dispatched = 0
        self.dispatch_counts: Counter = Counter()
        self.trace: List[Tuple[float, str, str]] = []

    def record_event(self, event: Event) -> None:
        """Record one dispatched event.

        Args:
            event: Event about to be dispatched
        """
        self.events_dispatched += 1
        self.dispatch_counts[(event.event_type.value, event.entity_id.label)] += 1
        if self.record_trace:
            self.trace.append((event.time, event.event_type.value, event.entity_id.label))

    def event_kinds(self) -> List[str]:
        """Sequence of dispatched event types (requires ``record_trace``)."""
        return [kind for _, kind, _ in self.trace]

    def compute_metrics(self, clock: float, stats_start: float, products_departed: int,
                        tie_break_policy: str,
                        inspectors: Mapping[EntityId, "Inspector"],
                        queues: Mapping[EntityId, "ComponentQueue"],
                        workstations: Mapping[EntityId, "Workstation"]) -> SimulationResult:
        """Compute aggregate metrics from entity counters.

        Entity statistics must already be accrued up to ``clock``.

        Args:
            clock: Final simulation time
            stats_start: Start of the statistics window
            products_departed: Products finished since the start of the run
            tie_break_policy: Name of the routing policy used
            inspectors: Inspectors by id
            queues: Component queues by id
            workstations: Workstations by id

        Returns:
            Simulation result
        """
        window = clock - stats_start
        produced = sum(ws.products_made for ws in workstations.values())

        result = SimulationResult(
            clock=clock,
            stats_start=stats_start,
            products_departed=products_departed,
            products_in_window=produced,
            throughput=produced / window if window > 0 else 0.0,
            tie_break_policy=tie_break_policy,
            events_dispatched=self.events_dispatched,
        )

        for station_id, ws in workstations.items():
            result.workstations[station_id.label] = WorkstationStats(
                products_made=ws.products_made,
                total_busy=ws.total_busy,
                utilization=ws.utilization(clock),
            )

        for queue_id, queue in queues.items():
            result.queues[queue_id.label] = QueueStats(
                departures=queue.num_departures,
                average_occupancy=queue.time_weighted_average_occupancy(clock),
                length=queue.length(),
                capacity=queue.capacity,
            )

        for inspector_id, inspector in inspectors.items():
            result.inspectors[inspector_id.label] = InspectorStats(
                inspected=inspector.num_inspected,
                total_busy=inspector.total_busy,
                total_blocked=inspector.total_blocked,
                blocking_probability=inspector.blocking_probability(clock),
                state=inspector.state.value,
            )

        return result

    def get_summary(self) -> str:
        """Get human-readable summary of dispatch counts."""
        if not self.events_dispatched:
            return "No events dispatched"

        summary = ["=== Dispatch Summary ===", f"Events: {self.events_dispatched}"]
        for (kind, label), count in sorted(self.dispatch_counts.items()):
            summary.append(f"  {kind:<10} {label:<6} {count}")
        return "\n".join(summary)
