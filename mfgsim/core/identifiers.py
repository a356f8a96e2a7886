"""Typed identifiers and the fixed line topology.

The line always has two inspectors, five component queues and three
workstations. Entities are addressed through the closed ``EntityId``
enumeration; lookups go through the tables below rather than string
comparison.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class ComponentType(Enum):
    """Component types produced by the inspectors."""
    C1 = 1
    C2 = 2
    C3 = 3

    @property
    def label(self) -> str:
        return f"c{self.value}"

    @classmethod
    def from_label(cls, label: str) -> "ComponentType":
        """Parse a configuration tag such as ``"c2"``.

        Raises:
            ValueError: If the tag names no component type
        """
        for member in cls:
            if member.label == str(label).lower():
                return member
        raise ValueError(f"Unknown component type: {label}")


class EntityRole(Enum):
    """Roles an entity can play in the line."""
    INSPECTOR = "inspector"
    QUEUE = "queue"
    WORKSTATION = "workstation"


class EntityId(Enum):
    """Every entity of the line, tagged with its role."""
    INSP1 = ("insp1", EntityRole.INSPECTOR)
    INSP2 = ("insp2", EntityRole.INSPECTOR)
    C11 = ("c11", EntityRole.QUEUE)
    C12 = ("c12", EntityRole.QUEUE)
    C13 = ("c13", EntityRole.QUEUE)
    C2 = ("c2", EntityRole.QUEUE)
    C3 = ("c3", EntityRole.QUEUE)
    W1 = ("w1", EntityRole.WORKSTATION)
    W2 = ("w2", EntityRole.WORKSTATION)
    W3 = ("w3", EntityRole.WORKSTATION)

    def __init__(self, label: str, role: EntityRole):
        self.label = label
        self.role = role

    @classmethod
    def from_label(cls, label: str) -> "EntityId":
        """Resolve a configuration name such as ``"w2"``.

        Raises:
            ValueError: If the name is not an entity of the line
        """
        for member in cls:
            if member.label == str(label).lower():
                return member
        raise ValueError(f"Unknown entity: {label}")

    def __repr__(self) -> str:
        return f"EntityId.{self.name}"


@dataclass(frozen=True)
class ComponentId:
    """A single inspected component, unique by (type, sequence)."""
    type: ComponentType
    sequence: int

    def __str__(self) -> str:
        return f"{self.type.label}-{self.sequence}"


@dataclass(frozen=True)
class ProductId:
    """A finished product, unique by (workstation, sequence)."""
    workstation: EntityId
    sequence: int

    def __str__(self) -> str:
        return f"{self.workstation.label}-{self.sequence}"


INSPECTORS: Tuple[EntityId, ...] = (EntityId.INSP1, EntityId.INSP2)
QUEUES: Tuple[EntityId, ...] = (EntityId.C11, EntityId.C12, EntityId.C13, EntityId.C2, EntityId.C3)
WORKSTATIONS: Tuple[EntityId, ...] = (EntityId.W1, EntityId.W2, EntityId.W3)

# Candidate queues per component type, in index order
QUEUES_BY_TYPE: Dict[ComponentType, Tuple[EntityId, ...]] = {
    ComponentType.C1: (EntityId.C11, EntityId.C12, EntityId.C13),
    ComponentType.C2: (EntityId.C2,),
    ComponentType.C3: (EntityId.C3,),
}

# Component types each inspector can produce
INSPECTOR_TYPES: Dict[EntityId, Tuple[ComponentType, ...]] = {
    EntityId.INSP1: (ComponentType.C1,),
    EntityId.INSP2: (ComponentType.C2, ComponentType.C3),
}

# Queues each workstation consumes from, in consumption order
WORKSTATION_QUEUES: Dict[EntityId, Tuple[EntityId, ...]] = {
    EntityId.W1: (EntityId.C11,),
    EntityId.W2: (EntityId.C12, EntityId.C2),
    EntityId.W3: (EntityId.C13, EntityId.C3),
}

QUEUE_TYPE: Dict[EntityId, ComponentType] = {
    queue_id: component_type
    for component_type, queue_ids in QUEUES_BY_TYPE.items()
    for queue_id in queue_ids
}

QUEUE_WORKSTATION: Dict[EntityId, EntityId] = {
    queue_id: station_id
    for station_id, queue_ids in WORKSTATION_QUEUES.items()
    for queue_id in queue_ids
}

QUEUE_INSPECTOR: Dict[EntityId, EntityId] = {
    queue_id: inspector_id
    for inspector_id, types in INSPECTOR_TYPES.items()
    for component_type in types
    for queue_id in QUEUES_BY_TYPE[component_type]
}


def feeding_inspectors(station_id: EntityId) -> Tuple[EntityId, ...]:
    """Inspectors whose output feeds any queue of a workstation, in inspector order."""
    fed_by = {QUEUE_INSPECTOR[q] for q in WORKSTATION_QUEUES[station_id]}
    return tuple(i for i in INSPECTORS if i in fed_by)
