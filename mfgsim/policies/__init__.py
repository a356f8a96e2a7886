"""Queue selection policies."""

from .routing_policy import (
    RoutingPolicy, LowestIndexFirst, HighestIndexFirst, RandomAmongTies,
    PreferBlockedStation, create_policy, POLICIES, DEFAULT_POLICY,
)

__all__ = [
    "RoutingPolicy",
    "LowestIndexFirst",
    "HighestIndexFirst",
    "RandomAmongTies",
    "PreferBlockedStation",
    "create_policy",
    "POLICIES",
    "DEFAULT_POLICY",
]
