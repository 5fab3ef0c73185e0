"""Read-only admin operations over the coordinator's gateways."""

from __future__ import annotations

from .dto import (
    GetContextResponse,
    GetHubReportsResponse,
    GetPartitionMapResponse,
    GetPartitionRequest,
    GetPartitionResponse,
)
from .gateways import CoordinationGateway, CoordinationRepository, HubGateway
from .hash_ring import HashRing

__all__ = [
    "ApplicationError",
    "GetContextTemporaryUnavailable",
    "GetHubReportsTemporaryUnavailable",
    "GetPartitionTemporaryUnavailable",
    "GetPartitionMapTemporaryUnavailable",
    "GetContextUseCase",
    "GetHubReportsUseCase",
    "GetPartitionUseCase",
    "GetPartitionMapUseCase",
]


class ApplicationError(RuntimeError):
    """Base error of the application layer."""


class GetContextTemporaryUnavailable(ApplicationError):
    """The coordination context could not be read."""


class GetHubReportsTemporaryUnavailable(ApplicationError):
    """Hub reports could not be collected."""


class GetPartitionTemporaryUnavailable(ApplicationError):
    """The partition map needed for a lookup could not be read."""


class GetPartitionMapTemporaryUnavailable(ApplicationError):
    """The partition map could not be read."""


class GetContextUseCase:
    """Reads the stored coordination context."""

    def __init__(self, coordination_repository: CoordinationRepository):
        self._repository = coordination_repository

    def execute(self) -> GetContextResponse:
        try:
            context = self._repository.get_coordination_context()
        except Exception as exc:
            raise GetContextTemporaryUnavailable(
                f"Failed to get coordination context: {exc}"
            ) from exc
        return GetContextResponse(context=context)


class GetHubReportsUseCase:
    """Discovers hubs and collects their reports."""

    def __init__(self, coordination_gateway: CoordinationGateway, hub_gateway: HubGateway):
        self._coordination_gateway = coordination_gateway
        self._hub_gateway = hub_gateway

    def execute(self) -> GetHubReportsResponse:
        try:
            hubs = self._coordination_gateway.get_hub_discovery()
            reports = self._hub_gateway.get_hub_reports(hubs)
        except Exception as exc:
            raise GetHubReportsTemporaryUnavailable(f"Failed to get hub reports: {exc}") from exc
        return GetHubReportsResponse(hub_reports=list(reports))


class GetPartitionUseCase:
    """Finds the partition a channel hashes to under the current partition map."""

    def __init__(self, coordination_gateway: CoordinationGateway):
        self._coordination_gateway = coordination_gateway

    def execute(self, request: GetPartitionRequest) -> GetPartitionResponse:
        try:
            partition_map = self._coordination_gateway.get_partition_map()
        except Exception as exc:
            raise GetPartitionTemporaryUnavailable(f"Failed to get partition map: {exc}") from exc

        ring = HashRing(partition for partition, _ in partition_map.partitions)
        return GetPartitionResponse(partition=ring.get_partition(request.channel_id))


class GetPartitionMapUseCase:
    """Reads the current partition map."""

    def __init__(self, coordination_gateway: CoordinationGateway):
        self._coordination_gateway = coordination_gateway

    def execute(self) -> GetPartitionMapResponse:
        try:
            partition_map = self._coordination_gateway.get_partition_map()
        except Exception as exc:
            raise GetPartitionMapTemporaryUnavailable(f"Failed to get partition map: {exc}") from exc
        return GetPartitionMapResponse(partition_map=partition_map)