from hubcoord.dto import (
    GetContextResponse,
    GetHubReportsResponse,
    GetPartitionMapResponse,
    GetPartitionRequest,
    GetPartitionResponse,
)
from hubcoord.model import CoordinationContext, HubReport
from hubcoord.params import Epoch, HubEndpoint, PartitionId, PartitionWeight
from hubcoord.partition_map import PartitionMap


def test_context_response_defaults_to_empty_context():
    response = GetContextResponse()
    assert response.context == CoordinationContext()
    assert response.context.partition_weights == {}
    assert response.context.partition_cooldowns == {}


def test_context_response_keeps_given_context():
    context = CoordinationContext(partition_weights={PartitionId(1): PartitionWeight(10)})
    assert GetContextResponse(context=context).context is context


def test_hub_reports_response_default_lists_are_independent():
    first = GetHubReportsResponse()
    second = GetHubReportsResponse()
    first.hub_reports.append(HubReport(endpoint=HubEndpoint("hub-a")))
    assert second.hub_reports == []
    assert len(first.hub_reports) == 1


def test_partition_request_equality_by_channel():
    assert GetPartitionRequest("chan") == GetPartitionRequest(channel_id="chan")
    assert GetPartitionRequest().channel_id == ""


def test_partition_response_holds_partition():
    response = GetPartitionResponse(partition=PartitionId(7))
    assert response.partition == PartitionId(7)
    assert GetPartitionResponse().partition == PartitionId(0)


def test_partition_map_response_holds_map():
    partition_map = PartitionMap(partitions=[(PartitionId(5), HubEndpoint("hub-a"))], epoch=Epoch(3))
    response = GetPartitionMapResponse(partition_map=partition_map)
    assert response.partition_map.epoch == Epoch(3)
    assert response.partition_map.partitions == [(PartitionId(5), HubEndpoint("hub-a"))]
    assert GetPartitionMapResponse().partition_map == PartitionMap()