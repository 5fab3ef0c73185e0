"""Snapshot of the cluster combining the partition map, hub reports and stored context."""

from __future__ import annotations

from collections import defaultdict
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .model import (
    CoordinationContext,
    HubReport,
    HubState,
    PartitionState,
    StateBuildingSettings,
)
from .params import Epoch, HubEndpoint, HubStatus, PartitionId, PartitionWeight
from .partition_map import PartitionMap

__all__ = ["CoordinationState"]


class CoordinationState:
    """Per-partition and per-hub state for one coordination round."""

    def __init__(
        self,
        partition_map: Optional[PartitionMap] = None,
        snapshot: Optional[Iterable[HubReport]] = None,
        context: Optional[CoordinationContext] = None,
        settings: Optional[StateBuildingSettings] = None,
    ):
        if partition_map is None:
            partition_map = PartitionMap()
        if context is None:
            context = CoordinationContext()
        if settings is None:
            settings = StateBuildingSettings()

        self._epoch = Epoch(partition_map.epoch)
        self._average_partition_weight = PartitionWeight(0)
        self._partition_states: dict[PartitionId, PartitionState] = {}
        self._hub_states: dict[HubEndpoint, HubState] = {}

        self._initialize_partition_states(partition_map, context)
        self._apply_cluster_snapshot(snapshot or (), settings)

    @property
    def epoch(self) -> Epoch:
        return self._epoch

    @property
    def average_partition_weight(self) -> PartitionWeight:
        return self._average_partition_weight

    def partition_state(self, partition: PartitionId) -> PartitionState:
        """State of a partition; KeyError if it is not in the map."""
        return self._partition_states[partition]

    def hub_state(self, hub: HubEndpoint) -> HubState:
        """State of a hub; KeyError if it did not report."""
        return self._hub_states[hub]

    @property
    def partition_states(self) -> Mapping[PartitionId, PartitionState]:
        return MappingProxyType(self._partition_states)

    @property
    def hub_states(self) -> Mapping[HubEndpoint, HubState]:
        return MappingProxyType(self._hub_states)

    def _initialize_partition_states(self, partition_map: PartitionMap, context: CoordinationContext) -> None:
        observed_count = 0
        weight_sum = PartitionWeight(0)

        for partition, hub in partition_map.partitions:
            state = self._partition_states.setdefault(partition, PartitionState())
            state.id = partition
            state.assigned_hub = hub
            state.observed_weight = context.partition_weights.get(partition)
            state.migration_cooldown = context.partition_cooldowns.get(partition)

            if state.observed_weight is not None:
                weight_sum += state.observed_weight
                observed_count += 1

        if observed_count:
            self._average_partition_weight = PartitionWeight(int(weight_sum) // observed_count)

    def _apply_cluster_snapshot(self, snapshot: Iterable[HubReport], settings: StateBuildingSettings) -> None:
        expected_growths: defaultdict[HubEndpoint, PartitionWeight] = defaultdict(PartitionWeight)

        for report in snapshot:
            state = self._hub_states.setdefault(report.endpoint, HubState())
            state.endpoint = report.endpoint
            state.dc = report.dc
            state.status = self._determine_hub_status(report, settings)
            state.load_factor = report.load_factor

            reported_sum = PartitionWeight(0)
            for partition, weight in report.partition_weights.items():
                weight = PartitionWeight(weight)
                reported_sum += weight

                partition_state = self._partition_states.get(partition)
                if partition_state is None:
                    continue
                cached = partition_state.observed_weight
                if cached is not None and cached > weight:
                    growth = cached - weight
                    expected_growths[partition_state.assigned_hub] += growth
                    partition_state.expected_weight_growth = growth
                partition_state.observed_weight = weight

            state.partitions_weight = reported_sum
            state.total_partitions = len(report.partition_weights)

        total_weight = PartitionWeight(0)
        total_partitions = 0
        for hub, state in self._hub_states.items():
            if hub in expected_growths:
                state.expected_weight_growth += expected_growths[hub]
            total_weight += state.partitions_weight
            total_partitions += state.total_partitions

        if total_partitions:
            average = PartitionWeight(int(total_weight) // total_partitions)
            self._average_partition_weight = max(average, self._average_partition_weight)

    def _determine_hub_status(self, report: HubReport, settings: StateBuildingSettings) -> HubStatus:
        if report.dc in settings.blocked_dcs or report.endpoint in settings.blocked_hubs:
            return HubStatus.DRAINING
        if report.epoch != self._epoch:
            return HubStatus.LAGGED
        if report.load_factor >= settings.overload_threshold:
            return HubStatus.OVERLOADED
        return HubStatus.HEALTHY