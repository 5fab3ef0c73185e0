"""Steps of the partition balancing algorithm."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from sortedcontainers import SortedSet

from .coordination_state import CoordinationState
from .model import CoordinationContext, HubState
from .params import Epoch, HubEndpoint, HubStatus, LoadFactor, PartitionId, PartitionWeight
from .partition_map import AssignedPartition

__all__ = [
    "PredictionParams",
    "LoadFactorPredictor",
    "BalancingSettings",
    "MigrationContext",
    "WeightedHub",
    "WeightedPartition",
    "collect_active_hubs",
    "separate_partitions",
    "assign_orphaned_partitions",
    "accumulate_migrating_weight",
    "execute_rebalancing_phase",
    "build_prediction_params",
    "build_coordination_context",
]

WeightedHub = tuple[LoadFactor, HubEndpoint]
WeightedPartition = tuple[PartitionWeight, PartitionId]
MigratingWeight = dict[HubEndpoint, tuple[int, PartitionWeight]]
MigratingPartitions = dict[PartitionId, Optional[HubEndpoint]]


@dataclass(frozen=True)
class PredictionParams:
    """Input of a load factor prediction for adding or removing one partition."""

    load_factor: LoadFactor = LoadFactor(0)
    partition_weight: PartitionWeight = PartitionWeight(0)
    increasing: bool = False
    total_partitions: int = 0
    partitions_weight: PartitionWeight = PartitionWeight(0)
    original_load_factor: LoadFactor = LoadFactor(0)


class LoadFactorPredictor(ABC):
    """Estimates a hub's load factor after a partition moves in or out."""

    @abstractmethod
    def predict_load_factor(self, params: PredictionParams) -> LoadFactor:
        """Predicted load factor."""


@dataclass
class BalancingSettings:
    """Limits and thresholds of a balancing round."""

    max_rebalance_phases: int = 0
    migrating_weight_limit: PartitionWeight = PartitionWeight(0)
    min_load_factor_delta: LoadFactor = LoadFactor(0)
    migration_budget_threshold: PartitionWeight = PartitionWeight(0)
    balancing_threshold_cv: int = 0
    balancing_target_cv: int = 0
    min_migration_cooldown: Epoch = Epoch(0)
    migration_weight_penalty_coeff: float = 0.0


@dataclass
class MigrationContext:
    """Partitions moving this round, each with the hub it came from, and their total weight."""

    migrating_partitions: MigratingPartitions = field(default_factory=dict)
    total_migrating_weight: PartitionWeight = PartitionWeight(0)


def _effective_weight(state: CoordinationState, partition: PartitionId) -> PartitionWeight:
    partition_state = state.partition_state(partition)
    observed = partition_state.observed_weight
    base = state.average_partition_weight if observed is None else observed
    return PartitionWeight(base) + partition_state.expected_weight_growth


def collect_active_hubs(
    state: CoordinationState, predictor: LoadFactorPredictor
) -> tuple[set[HubEndpoint], SortedSet]:
    """Hubs that may receive partitions, and the same hubs ordered by forecasted load."""
    active_hubs: set[HubEndpoint] = set()
    sorted_hubs = SortedSet()

    for endpoint, hub_state in state.hub_states.items():
        if hub_state.status in (HubStatus.DRAINING, HubStatus.LAGGED):
            continue
        active_hubs.add(endpoint)
        params = PredictionParams(
            load_factor=hub_state.load_factor,
            partition_weight=hub_state.expected_weight_growth,
            increasing=True,
            total_partitions=hub_state.total_partitions,
            partitions_weight=hub_state.partitions_weight,
            original_load_factor=hub_state.load_factor,
        )
        forecast = LoadFactor(predictor.predict_load_factor(params))
        sorted_hubs.add((forecast, endpoint))

    return active_hubs, sorted_hubs


def separate_partitions(
    state: CoordinationState, active_hubs: Iterable[HubEndpoint]
) -> tuple[list[AssignedPartition], list[WeightedPartition]]:
    """Split partitions into those on active hubs and orphans, orphans heaviest first."""
    active = set(active_hubs)
    assigned: list[AssignedPartition] = []
    orphaned: list[WeightedPartition] = []

    for partition, partition_state in state.partition_states.items():
        hub = partition_state.assigned_hub
        if hub in active:
            assigned.append((partition, hub))
        else:
            orphaned.append((_effective_weight(state, partition), partition))

    orphaned.sort(reverse=True)
    return assigned, orphaned


def assign_orphaned_partitions(
    state: CoordinationState,
    orphaned_partitions: Iterable[WeightedPartition],
    predictor: LoadFactorPredictor,
    sorted_hubs: SortedSet,
    assigned_partitions: list[AssignedPartition],
) -> MigratingWeight:
    """Give each orphan to the least loaded hub; returns count and weight moved to each hub."""
    migrating_weight: MigratingWeight = {}

    for partition_weight, partition in orphaned_partitions:
        if not sorted_hubs:
            break

        load_factor, hub = sorted_hubs.pop(0)
        hub_state = state.hub_state(hub)
        assigned_partitions.append((partition, hub))

        count, moved = migrating_weight.get(hub, (0, PartitionWeight(0)))
        params = PredictionParams(
            load_factor=load_factor,
            partition_weight=partition_weight,
            increasing=True,
            total_partitions=hub_state.total_partitions + count,
            partitions_weight=hub_state.partitions_weight + moved,
            original_load_factor=hub_state.load_factor,
        )
        load_factor = LoadFactor(predictor.predict_load_factor(params))
        migrating_weight[hub] = (count + 1, moved + partition_weight)

        sorted_hubs.add((load_factor, hub))

    return migrating_weight


def accumulate_migrating_weight(migrating_weight: Mapping[HubEndpoint, tuple[int, PartitionWeight]]) -> PartitionWeight:
    """Total weight moved to all hubs."""
    total = PartitionWeight(0)
    for _, weight in migrating_weight.values():
        total += weight
    return total


def execute_rebalancing_phase(
    sorted_hubs: SortedSet,
    hub_partitions: dict[HubEndpoint, SortedSet],
    migration_context: MigrationContext,
    predictor: LoadFactorPredictor,
    state: CoordinationState,
    settings: BalancingSettings,
) -> None:
    """Pair the most and least loaded hubs and move partitions while that narrows the gap."""
    processed = SortedSet()

    while len(sorted_hubs) >= 2:
        max_load, max_hub = sorted_hubs.pop(-1)
        min_load, min_hub = sorted_hubs.pop(0)

        if max_load - min_load < settings.min_load_factor_delta:
            processed.add((max_load, max_hub))
            processed.add((min_load, min_hub))
            break

        candidates = hub_partitions.setdefault(max_hub, SortedSet())

        for candidate in list(candidates):
            partition_weight, partition = candidate

            cooldown = state.partition_state(partition).migration_cooldown
            if cooldown is not None and cooldown > state.epoch:
                continue

            if partition not in migration_context.migrating_partitions:
                if migration_context.total_migrating_weight + partition_weight > settings.migrating_weight_limit:
                    continue

            max_params = build_prediction_params(
                max_load, partition_weight, False, candidates, state.hub_state(max_hub)
            )
            next_max = LoadFactor(predictor.predict_load_factor(max_params))

            min_partitions = hub_partitions.setdefault(min_hub, SortedSet())
            min_params = build_prediction_params(
                min_load, partition_weight, True, min_partitions, state.hub_state(min_hub)
            )
            next_min = LoadFactor(predictor.predict_load_factor(min_params))

            current_delta = max_load - min_load
            next_delta = next_max - next_min

            if next_delta < current_delta and next_max >= next_min:
                max_load, min_load = next_max, next_min
                min_partitions.add((partition_weight, partition))

                migrating = migration_context.migrating_partitions
                if partition not in migrating:
                    migration_context.total_migrating_weight += partition_weight
                    migrating[partition] = max_hub
                else:
                    origin = migrating[partition]
                    if origin is not None and origin == min_hub:
                        migration_context.total_migrating_weight -= partition_weight
                        del migrating[partition]

                candidates.remove(candidate)

        processed.add((max_load, max_hub))
        processed.add((min_load, min_hub))

    sorted_hubs.update(processed)


def build_prediction_params(
    load_factor: LoadFactor,
    partition_weight: PartitionWeight,
    increasing: bool,
    partitions: Iterable[WeightedPartition],
    hub_state: HubState,
) -> PredictionParams:
    """Prediction input for a hub currently holding the given partitions."""
    total = 0
    weight_sum = PartitionWeight(0)
    for weight, _ in partitions:
        total += 1
        weight_sum += weight
    return PredictionParams(
        load_factor=LoadFactor(load_factor),
        partition_weight=PartitionWeight(partition_weight),
        increasing=increasing,
        total_partitions=total,
        partitions_weight=weight_sum,
        original_load_factor=hub_state.load_factor,
    )


def build_coordination_context(
    migrating_partitions: Mapping[PartitionId, Optional[HubEndpoint]],
    state: CoordinationState,
    settings: BalancingSettings,
) -> CoordinationContext:
    """Context for the next round: observed weights, live cooldowns and new cooldowns for moved partitions."""
    context = CoordinationContext()

    for partition, partition_state in state.partition_states.items():
        if partition_state.observed_weight is not None:
            context.partition_weights[partition] = partition_state.observed_weight
        cooldown = partition_state.migration_cooldown
        if cooldown is not None and cooldown > state.epoch:
            context.partition_cooldowns[partition] = cooldown

    for partition in migrating_partitions:
        weight = _effective_weight(state, partition)
        penalty = int(int(weight) * settings.migration_weight_penalty_coeff)
        context.partition_cooldowns[partition] = (
            state.epoch + settings.min_migration_cooldown + Epoch(penalty + 1)
        )

    return context