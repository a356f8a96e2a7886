"""Validated configuration of the manufacturing line."""

import copy
import math
from dataclasses import dataclass
from typing import Dict, List

from ..core.identifiers import (
    ComponentType, EntityId, EntityRole, QUEUES, WORKSTATIONS,
)
from ..policies.routing_policy import POLICIES, DEFAULT_POLICY
from ..streams.random_stream import DEFAULT_SEEDS, STREAM_NAMES

DEFAULT_INSPECTION_RATES = {"c1": 0.09654, "c2": 0.06436, "c3": 0.04847}
DEFAULT_ASSEMBLY_RATES = {"w1": 0.2172, "w2": 0.09015, "w3": 0.1137}
STREAM_KINDS = ("numpy", "lcg")

# Accepted keys of each configuration section
KNOWN_KEYS = {
    "simulation": ("target_products", "warmup_products", "seeds", "tie_break_policy", "random_stream"),
    "inspectors": ("service_rates",),
    "workstations": ("service_rates",),
    "queues": ("capacity", "overrides"),
    "replications": ("count", "confidence_level", "seed_increment"),
}


def _section(config: Dict, name: str) -> Dict:
    """Return section ``name`` of ``config``, rejecting keys it does not know."""
    section = config.get(name, {}) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Section {name} must be a mapping, got {type(section).__name__}")
    unknown = sorted(set(section) - set(KNOWN_KEYS[name]))
    if unknown:
        raise ValueError(f"Unknown keys in section {name}: {unknown}")
    return section


@dataclass
class LineConfig:
    """Line parameters, checked before any simulation starts.

    Invalid values raise ``ValueError`` so that a bad configuration is
    rejected up front instead of surfacing mid-run.
    """

    # Run control
    target_products: int
    warmup_products: int
    seeds: List[int]
    tie_break_policy: str
    random_stream: str

    # Service rates (events per unit time)
    inspection_rates: Dict[ComponentType, float]
    assembly_rates: Dict[EntityId, float]

    # Buffers
    queue_capacities: Dict[EntityId, int]

    # Replications
    num_replications: int
    confidence_level: float
    seed_increment: int

    def __init__(self, config: Dict):
        """Initialize from configuration dictionary.

        Args:
            config: Configuration dictionary (see configs/default.yaml)
        """
        config = config or {}
        unknown = sorted(set(config) - set(KNOWN_KEYS))
        if unknown:
            raise ValueError(f"Unknown configuration sections: {unknown}")

        sim_cfg = _section(config, "simulation")
        self.target_products = int(sim_cfg.get('target_products', 5000))
        self.warmup_products = int(sim_cfg.get('warmup_products', 0))
        self.seeds = [int(s) for s in sim_cfg.get('seeds', DEFAULT_SEEDS)]
        self.tie_break_policy = sim_cfg.get('tie_break_policy', DEFAULT_POLICY)
        self.random_stream = sim_cfg.get('random_stream', 'numpy')

        insp_rates = dict(DEFAULT_INSPECTION_RATES)
        insp_rates.update(_section(config, "inspectors").get('service_rates', {}) or {})
        self.inspection_rates = {
            ComponentType.from_label(label): float(rate) for label, rate in insp_rates.items()
        }

        ws_rates = dict(DEFAULT_ASSEMBLY_RATES)
        ws_rates.update(_section(config, "workstations").get('service_rates', {}) or {})
        self.assembly_rates = {}
        for label, rate in ws_rates.items():
            station = EntityId.from_label(label)
            if station.role is not EntityRole.WORKSTATION:
                raise ValueError(f"{label} is not a workstation")
            self.assembly_rates[station] = float(rate)

        queue_cfg = _section(config, "queues")
        capacity = int(queue_cfg.get('capacity', 2))
        self.queue_capacities = {queue_id: capacity for queue_id in QUEUES}
        for label, value in (queue_cfg.get('overrides', {}) or {}).items():
            queue_id = EntityId.from_label(label)
            if queue_id.role is not EntityRole.QUEUE:
                raise ValueError(f"{label} is not a component queue")
            self.queue_capacities[queue_id] = int(value)

        rep_cfg = _section(config, "replications")
        self.num_replications = int(rep_cfg.get('count', 11))
        self.confidence_level = float(rep_cfg.get('confidence_level', 0.95))
        self.seed_increment = int(rep_cfg.get('seed_increment', 1))

        self.validate()

    def validate(self) -> None:
        """Check every parameter.

        Raises:
            ValueError: On the first invalid parameter
        """
        if self.target_products < 1:
            raise ValueError(f"target_products must be positive, got {self.target_products}")
        if not 0 <= self.warmup_products < self.target_products:
            raise ValueError(
                f"warmup_products must be in [0, target_products), got {self.warmup_products}"
            )
        if len(self.seeds) != len(STREAM_NAMES):
            raise ValueError(
                f"Expected {len(STREAM_NAMES)} seeds ({', '.join(STREAM_NAMES)}), "
                f"got {len(self.seeds)}"
            )
        if self.tie_break_policy not in POLICIES:
            raise ValueError(
                f"Unknown tie-break policy: {self.tie_break_policy} (choose from {sorted(POLICIES)})"
            )
        if self.random_stream not in STREAM_KINDS:
            raise ValueError(f"Unknown random stream kind: {self.random_stream}")

        for component_type in ComponentType:
            rate = self.inspection_rates.get(component_type)
            if rate is None or not math.isfinite(rate) or rate <= 0:
                raise ValueError(
                    f"Inspection rate for {component_type.label} must be positive and finite"
                )
        for station in WORKSTATIONS:
            rate = self.assembly_rates.get(station)
            if rate is None or not math.isfinite(rate) or rate <= 0:
                raise ValueError(f"Assembly rate for {station.label} must be positive and finite")
        for queue_id, capacity in self.queue_capacities.items():
            if capacity < 1:
                raise ValueError(f"Capacity of {queue_id.label} must be at least 1, got {capacity}")

        if self.num_replications < 1:
            raise ValueError(f"Replication count must be positive, got {self.num_replications}")
        if not 0.0 < self.confidence_level < 1.0:
            raise ValueError(f"confidence_level must be in (0, 1), got {self.confidence_level}")

    def replication(self, index: int) -> "LineConfig":
        """Copy of this configuration with seeds offset for replication ``index``."""
        replica = copy.copy(self)
        replica.seeds = [seed + index * self.seed_increment for seed in self.seeds]
        return replica

    def capacity_of(self, queue_id: EntityId) -> int:
        return self.queue_capacities[queue_id]

    def __repr__(self) -> str:
        """String representation."""
        return (f"LineConfig(target={self.target_products}, warmup={self.warmup_products}, "
                f"policy={self.tie_break_policy}, stream={self.random_stream})")
