"""Queue selection policies for components with several candidate queues.

Inspector 1 can place a C1 component in c11, c12 or c13. Every policy sends
it to a shortest queue that still has space; the policies differ only in
how they break ties between equally short queues.
"""

from abc import ABC, abstractmethod
from typing import Collection, List, Optional, Sequence

from ..core.identifiers import EntityId, QUEUE_WORKSTATION
from ..entities.component_queue import ComponentQueue
from ..streams.random_stream import RandomStream
from ..utils.logger import setup_logger

DEFAULT_POLICY = "lowest_index"


class RoutingPolicy(ABC):
    """Abstract base class for queue selection policies."""

    name = "abstract"

    def __init__(self):
        self.logger = setup_logger(self.__class__.__name__)

    def select(self, candidates: Sequence[ComponentQueue],
               blocked_queues: Collection[EntityId] = ()) -> Optional[ComponentQueue]:
        """Pick the queue that receives the component.

        Args:
            candidates: Candidate queues in index order
            blocked_queues: Queues some other inspector is blocked on

        Returns:
            Selected queue, or None if no candidate has space
        """
        shortest = self._shortest_available(candidates)
        if not shortest:
            return None
        if len(shortest) == 1:
            return shortest[0]
        return self.break_tie(shortest, blocked_queues)

    @abstractmethod
    def break_tie(self, tied: List[ComponentQueue],
                  blocked_queues: Collection[EntityId]) -> ComponentQueue:
        """Choose among equally short queues (given in index order).

        Args:
            tied: At least two queues with space and equal length
            blocked_queues: Queues some other inspector is blocked on

        Returns:
            One element of ``tied``
        """
        pass

    @staticmethod
    def _shortest_available(candidates: Sequence[ComponentQueue]) -> List[ComponentQueue]:
        available = [q for q in candidates if q.has_space()]
        if not available:
            return []
        shortest = min(q.length() for q in available)
        return [q for q in available if q.length() == shortest]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class LowestIndexFirst(RoutingPolicy):
    """Ties go to the lowest-indexed queue (c11 before c12 before c13)."""

    name = "lowest_index"

    def break_tie(self, tied, blocked_queues):
        return tied[0]


class HighestIndexFirst(RoutingPolicy):
    """Ties go to the highest-indexed queue (c13 before c12 before c11)."""

    name = "highest_index"

    def break_tie(self, tied, blocked_queues):
        return tied[-1]


class RandomAmongTies(RoutingPolicy):
    """Ties are broken uniformly at random using a dedicated stream."""

    name = "random"

    def __init__(self, stream: RandomStream):
        super().__init__()
        self.stream = stream

    def break_tie(self, tied, blocked_queues):
        return tied[self.stream.next_int(len(tied))]

    def __repr__(self) -> str:
        return f"RandomAmongTies(stream={self.stream!r})"


class PreferBlockedStation(RoutingPolicy):
    """Ties go to the queue whose workstation another inspector is blocked on.

    Feeding that workstation lets it consume from the full queue and release
    the blocked inspector. Without such a queue among the ties, falls back
    to lowest index first.
    """

    name = "prefer_blocked"

    def break_tie(self, tied, blocked_queues):
        blocked_stations = {QUEUE_WORKSTATION[q] for q in blocked_queues}
        for queue in tied:
            if QUEUE_WORKSTATION[queue.queue_id] in blocked_stations:
                return queue
        return tied[0]


POLICIES = {
    LowestIndexFirst.name: LowestIndexFirst,
    HighestIndexFirst.name: HighestIndexFirst,
    RandomAmongTies.name: RandomAmongTies,
    PreferBlockedStation.name: PreferBlockedStation,
}


def create_policy(name: str, stream: Optional[RandomStream] = None) -> RoutingPolicy:
    """Create a routing policy by name.

    Args:
        name: One of ``POLICIES``
        stream: Uniform stream, required by the random policy

    Returns:
        Routing policy instance

    Raises:
        ValueError: If the name is unknown or a required stream is missing
    """
    if name == RandomAmongTies.name:
        if stream is None:
            raise ValueError("The random tie-break policy needs a random stream")
        return RandomAmongTies(stream)
    elif name in POLICIES:
        return POLICIES[name]()
    else:
        raise ValueError(
            f"Unknown tie-break policy: {name} (choose from {sorted(POLICIES)})"
        )
