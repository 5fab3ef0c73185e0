"""Plain records describing hubs, partitions and coordination settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .params import (
    Epoch,
    HubDC,
    HubEndpoint,
    HubStatus,
    LoadFactor,
    PartitionId,
    PartitionWeight,
)

__all__ = [
    "CoordinationContext",
    "StateBuildingSettings",
    "HubReport",
    "HubState",
    "PartitionState",
]


@dataclass
class CoordinationContext:
    """Persisted memory between coordination rounds."""

    partition_cooldowns: dict[PartitionId, Epoch] = field(default_factory=dict)
    partition_weights: dict[PartitionId, PartitionWeight] = field(default_factory=dict)


@dataclass
class StateBuildingSettings:
    """Knobs used when classifying hubs."""

    blocked_dcs: set[HubDC] = field(default_factory=set)
    blocked_hubs: set[HubEndpoint] = field(default_factory=set)
    overload_threshold: LoadFactor = LoadFactor(0)


@dataclass
class HubReport:
    """What a hub reports about itself."""

    epoch: Epoch = Epoch(0)
    endpoint: HubEndpoint = HubEndpoint()
    dc: HubDC = HubDC()
    load_factor: LoadFactor = LoadFactor(0)
    partition_weights: dict[PartitionId, PartitionWeight] = field(default_factory=dict)


@dataclass
class HubState:
    """Coordinator's view of one hub."""

    endpoint: HubEndpoint = HubEndpoint()
    dc: HubDC = HubDC()
    status: HubStatus = HubStatus.HEALTHY
    load_factor: LoadFactor = LoadFactor(0)
    expected_weight_growth: PartitionWeight = PartitionWeight(0)
    partitions_weight: PartitionWeight = PartitionWeight(0)
    total_partitions: int = 0


@dataclass
class PartitionState:
    """Coordinator's view of one partition."""

    id: PartitionId = PartitionId(0)
    assigned_hub: HubEndpoint = HubEndpoint()
    expected_weight_growth: PartitionWeight = PartitionWeight(0)
    observed_weight: Optional[PartitionWeight] = None
    migration_cooldown: Optional[Epoch] = None