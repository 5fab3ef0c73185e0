import pytest

from hubcoord.coordination_state import CoordinationState
from hubcoord.model import CoordinationContext, HubReport, StateBuildingSettings
from hubcoord.params import (
    Epoch,
    HubDC,
    HubEndpoint,
    HubStatus,
    LoadFactor,
    PartitionId,
    PartitionWeight,
)
from hubcoord.partition_map import PartitionMap


def make_partition_map():
    return PartitionMap(
        partitions=[
            (PartitionId(1), HubEndpoint("hub-a")),
            (PartitionId(2), HubEndpoint("hub-b")),
            (PartitionId(3), HubEndpoint("hub-c")),
            (PartitionId(4), HubEndpoint("hub-a")),
        ],
        epoch=Epoch(42),
    )


def make_context():
    return CoordinationContext(
        partition_cooldowns={PartitionId(2): Epoch(10)},
        partition_weights={
            PartitionId(1): PartitionWeight(100),
            PartitionId(2): PartitionWeight(200),
            PartitionId(3): PartitionWeight(400),
            PartitionId(4): PartitionWeight(20),
        },
    )


def make_settings():
    return StateBuildingSettings(overload_threshold=LoadFactor(90))


def make_hub_report(hub, dc, epoch, load, weights):
    return HubReport(
        epoch=Epoch(epoch),
        endpoint=HubEndpoint(hub),
        dc=HubDC(dc),
        load_factor=LoadFactor(load),
        partition_weights={PartitionId(k): PartitionWeight(v) for k, v in weights.items()},
    )


def build(snapshot=(), settings=None):
    return CoordinationState(make_partition_map(), list(snapshot), make_context(), settings or make_settings())


def test_epoch_is_taken_from_partition_map():
    assert build().epoch == Epoch(42)


def test_initializes_partition_states():
    state = build()

    p1 = state.partition_state(PartitionId(1))
    assert p1.id == PartitionId(1)
    assert p1.assigned_hub == HubEndpoint("hub-a")
    assert p1.observed_weight == PartitionWeight(100)
    assert p1.expected_weight_growth == PartitionWeight(0)
    assert p1.migration_cooldown is None

    p2 = state.partition_state(PartitionId(2))
    assert p2.migration_cooldown == Epoch(10)

    with pytest.raises(KeyError):
        state.partition_state(PartitionId(5))


def test_initializes_average_partition_weight():
    state = CoordinationState()
    assert state.average_partition_weight == PartitionWeight(0)
    assert state.epoch == Epoch(0)


def test_calculates_average_partition_weight_from_context():
    assert build().average_partition_weight == PartitionWeight(180)


def test_calculates_average_partition_weight_from_snapshot():
    state = build([make_hub_report("hub-a", "myt", 42, 50, {1: 300, 4: 500})])
    assert state.average_partition_weight == PartitionWeight(400)


def test_handles_empty_snapshot():
    assert len(build().hub_states) == 0


def test_builds_hub_states_from_snapshot():
    state = build([make_hub_report("hub-a", "myt", 42, 50, {1: 90, 4: 30})])

    assert len(state.hub_states) == 1
    hub = state.hub_state(HubEndpoint("hub-a"))
    assert hub.endpoint == HubEndpoint("hub-a")
    assert hub.dc == HubDC("myt")
    assert hub.status is HubStatus.HEALTHY
    assert hub.total_partitions == 2
    assert hub.partitions_weight == PartitionWeight(120)
    assert hub.expected_weight_growth == PartitionWeight(10)


def test_computes_expected_weight_growth():
    state = build([make_hub_report("hub-a", "myt", 42, 30, {1: 60})])

    assert state.partition_state(PartitionId(1)).expected_weight_growth == PartitionWeight(40)
    assert state.hub_state(HubEndpoint("hub-a")).expected_weight_growth == PartitionWeight(40)


def test_reported_weight_replaces_cached_weight():
    state = build([make_hub_report("hub-a", "myt", 42, 30, {1: 60})])
    assert state.partition_state(PartitionId(1)).observed_weight == PartitionWeight(60)


def test_hub_status_draining_by_settings():
    settings = make_settings()
    settings.blocked_hubs.add(HubEndpoint("hub-a"))
    state = build([make_hub_report("hub-a", "myt", 42, 10, {})], settings)
    assert state.hub_state(HubEndpoint("hub-a")).status is HubStatus.DRAINING


def test_hub_status_lagged():
    state = build([make_hub_report("hub-a", "myt", 41, 10, {})])
    assert state.hub_state(HubEndpoint("hub-a")).status is HubStatus.LAGGED


def test_hub_status_overloaded():
    state = build([make_hub_report("hub-a", "myt", 42, 95, {})])
    assert state.hub_state(HubEndpoint("hub-a")).status is HubStatus.OVERLOADED


def test_hub_status_draining_priority():
    settings = make_settings()
    settings.blocked_hubs.add(HubEndpoint("hub-a"))
    state = build([make_hub_report("hub-a", "myt", 42, 95, {})], settings)
    assert state.hub_state(HubEndpoint("hub-a")).status is HubStatus.DRAINING


def test_draining_hubs_by_blocked_dc():
    settings = make_settings()
    settings.blocked_dcs.add(HubDC("myt"))
    state = build(
        [
            make_hub_report("hub-a", "myt", 42, 10, {}),
            make_hub_report("hub-b", "myt", 42, 35, {}),
            make_hub_report("hub-c", "sas", 42, 24, {}),
        ],
        settings,
    )
    assert state.hub_state(HubEndpoint("hub-a")).status is HubStatus.DRAINING
    assert state.hub_state(HubEndpoint("hub-b")).status is HubStatus.DRAINING
    assert state.hub_state(HubEndpoint("hub-c")).status is HubStatus.HEALTHY


def test_unknown_hub_raises_key_error():
    with pytest.raises(KeyError):
        build().hub_state(HubEndpoint("hub-z"))


def test_state_views_are_read_only():
    state = build()
    with pytest.raises(TypeError):
        state.partition_states[PartitionId(9)] = None
    assert set(state.partition_states) == {1, 2, 3, 4}