"""Assignment of partitions to hubs for one epoch."""

from __future__ import annotations

from dataclasses import dataclass, field

from .hash_ring import HashRing
from .params import Epoch, HubEndpoint, PartitionId

__all__ = ["AssignedPartition", "PartitionMap", "build_starting_partition_map"]

AssignedPartition = tuple[PartitionId, HubEndpoint]


@dataclass
class PartitionMap:
    """Partitions, sorted by id, with the hub each is assigned to."""

    partitions: list[AssignedPartition] = field(default_factory=list)
    epoch: Epoch = Epoch(0)


def build_starting_partition_map(partitions_amount: int) -> PartitionMap:
    """Evenly spaced partitions at epoch 0, none assigned to a hub yet."""
    ring = HashRing.with_partition_count(partitions_amount)
    return PartitionMap(partitions=[(partition, HubEndpoint()) for partition in ring.partitions])