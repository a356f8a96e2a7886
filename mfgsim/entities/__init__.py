"""Line entities: component queues, inspectors and workstations."""

from .component_queue import ComponentQueue
from .inspector import Inspector, InspectorState
from .workstation import Workstation

__all__ = ["ComponentQueue", "Inspector", "InspectorState", "Workstation"]
