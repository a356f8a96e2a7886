"""Independent replications and cross-replication statistics."""

from .replication import ReplicationRunner, summarize

__all__ = ["ReplicationRunner", "summarize"]
