"""Application services - Shared mutable state and collaborator adapters."""
from poolpulse.application.services.subscriber_registry import (
    SubscriberRegistry,
    Subscription,
)
from poolpulse.application.services.snapshot_holder import SnapshotHolder
from poolpulse.application.services.network_probe import NetworkProbe

__all__ = [
    "SubscriberRegistry",
    "Subscription",
    "SnapshotHolder",
    "NetworkProbe",
]
