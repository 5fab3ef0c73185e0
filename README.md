# hubcoord

`hubcoord` holds the decision-making building blocks of a coordinator for a
cluster of hubs. It places keys on partitions, builds a view of the cluster
from hub reports, and provides the individual steps for spreading partitions
across hubs by load.

## What is in the package

- **`hubcoord.params`**: typed scalar values. `Epoch`, `PartitionWeight` and
  `PartitionId` are unsigned 64-bit integers, and `LoadFactor` is an unsigned
  32-bit integer. Addition and subtraction on `Epoch`, `PartitionWeight` and
  `LoadFactor` wrap around and keep the type. `HubEndpoint` and `HubDC` are
  string types. `HubStatus` is one of `HEALTHY`, `DRAINING`, `OVERLOADED` or
  `LAGGED`.
- **`hubcoord.model`**: dataclasses. They are `CoordinationContext`,
  `StateBuildingSettings`, `HubReport`, `HubState` and `PartitionState`.
  `CoordinationContext` holds the stored partition weights and the migration
  cooldowns.
- **`hubcoord.hash_ring`**: `HashRing` maps a string key to a partition.
  - A partition id is the upper boundary of its range on the 64-bit ring.
  - A key goes to the first boundary that is not below its hash. Past the last
    boundary it wraps to the first.
  - Partitions are sorted and de-duplicated. An empty list raises `ValueError`.
  - `HashRing.with_partition_count(n)` spaces `n` boundaries evenly, and the
    last one sits at `2**64 - 1`.
  - The default hasher is `default_hash`, a stable 64-bit BLAKE2b hash. You can
    pass any `str -> int` function instead.
- **`hubcoord.partition_map`**: `PartitionMap` holds a list of
  `(PartitionId, HubEndpoint)` pairs and an epoch.
  `build_starting_partition_map(n)` returns `n` evenly spaced partitions at
  epoch 0. Each of them has an empty hub endpoint.
- **`hubcoord.coordination_state`**: `CoordinationState(partition_map,
  snapshot, context, settings)` combines the partition map, a list of
  `HubReport`s and the stored context.
  - **Hub status.** A hub is `DRAINING` if its DC or endpoint is blocked. If
    not, it is `LAGGED` when its epoch differs from the map's epoch. If not,
    it is `OVERLOADED` when its load factor is at or above the threshold.
    Otherwise it is `HEALTHY`.
  - **Weights.** Partition weights reported by hubs replace the stored ones.
  - **Expected weight growth.** When a reported weight is lower than the
    stored one, the difference is recorded as expected growth. It is counted
    for the partition and for the hub it is assigned to.
  - **Average partition weight.** This is the larger of two averages: the
    average of the stored weights and the average of the reported weights.
  - **Lookups.** `partition_state()` and `hub_state()` raise `KeyError` for
    unknown keys.
- **`hubcoord.balancing`**: the steps of a balancing round, driven by a
  `LoadFactorPredictor` that you implement.
  - `collect_active_hubs` returns the hubs that are neither draining nor
    lagged, plus a `SortedSet` of `(forecasted load, hub)` pairs.
  - `separate_partitions` splits the partitions into two lists. One holds the
    partitions on active hubs. The other holds the orphans, heaviest first.
  - `assign_orphaned_partitions` gives each orphan to the least loaded hub.
    It returns the count and the weight moved to each hub.
  - `accumulate_migrating_weight` adds up that weight.
  - `execute_rebalancing_phase` pairs the most loaded hub with the least
    loaded one. It moves partitions between them while the predicted gap
    shrinks.
    - It skips partitions whose migration cooldown is still active.
    - It respects `BalancingSettings.migrating_weight_limit`.
    - It records each move in a `MigrationContext`.
  - `build_prediction_params` builds a `PredictionParams` for a hub and its
    current partitions.
  - `build_coordination_context` produces the context for the next round.
    - It keeps the observed weights.
    - It keeps the cooldowns that are still in the future.
    - It gives every migrating partition a new cooldown:
      `epoch + min_migration_cooldown + int(weight * penalty_coeff) + 1`.
- **`hubcoord.gateways`**: abstract interfaces that you implement:
  - `CoordinationGateway` reads and broadcasts the partition map and lists
    the hubs.
  - `CoordinationRepository` stores the context.
  - `HubGateway` collects hub reports.

  The module also defines `InvalidPartitionMapError`.
- **`hubcoord.use_cases`** and **`hubcoord.admin_service`**: `AdminService`
  serves four read-only queries on top of your gateways:
  - `get_coordination_context()`;
  - `get_partition_map()`;
  - `get_partition(GetPartitionRequest(channel_id=...))`;
  - `get_hub_reports()`.

  A failure in a gateway is re-raised as the matching error. The errors are
  `GetContextTemporaryUnavailable`, `GetPartitionMapTemporaryUnavailable`,
  `GetPartitionTemporaryUnavailable` and `GetHubReportsTemporaryUnavailable`,
  and all of them subclass `ApplicationError`. The requests and responses are
  dataclasses in `hubcoord.dto`.
- **`hubcoord.api_errors`**: builders for JSON-ready error bodies.
  - `make_error(field, message)` returns `{"errors": {field: [message]}}`.
  - `make_server_error(message=None)` returns `{"errors": [message]}`, with
    `"Internal Server Error"` as the default message.
  - `ServerError` has `status_code` 500 and keeps that body in `.body`.

## Installation

```
pip install hubcoord
```

## Examples

```python
from hubcoord.hash_ring import HashRing
from hubcoord.partition_map import build_starting_partition_map

partition_map = build_starting_partition_map(16)
ring = HashRing([pid for pid, _hub in partition_map.partitions])
partition = ring.get_partition("channel-42")
```

Building a state from reports:

```python
from hubcoord.coordination_state import CoordinationState
from hubcoord.model import CoordinationContext, HubReport, StateBuildingSettings
from hubcoord.params import Epoch, HubDC, HubEndpoint, LoadFactor, PartitionId, PartitionWeight

report = HubReport(
    epoch=Epoch(0),
    endpoint=HubEndpoint("hub-a"),
    dc=HubDC("dc1"),
    load_factor=LoadFactor(40),
    partition_weights={PartitionId(1): PartitionWeight(100)},
)
state = CoordinationState(
    partition_map,
    [report],
    CoordinationContext(),
    StateBuildingSettings(overload_threshold=LoadFactor(90)),
)
print(state.hub_state(HubEndpoint("hub-a")).status)  # HubStatus.HEALTHY
```

## What the package does not do

- **No single balancing call.** It has no function that runs a whole
  balancing round or a whole coordination round. You run the steps in
  `hubcoord.balancing` yourself.
- **No connectors.** It has no gateway or repository implementations, so
  there is no storage, discovery or network access. You supply these.
- **No load prediction.** You supply the `LoadFactorPredictor`.
- **No server or command line.** It has no HTTP server, no request handlers
  and no command-line program. `hubcoord.api_errors` only builds error bodies.

## Running the tests

```
pip install -e ".[test]"
pytest
```