"""Facade over the admin use cases."""

from __future__ import annotations

from .dto import (
    GetContextResponse,
    GetHubReportsResponse,
    GetPartitionMapResponse,
    GetPartitionRequest,
    GetPartitionResponse,
)
from .gateways import CoordinationGateway, CoordinationRepository, HubGateway
from .use_cases import (
    GetContextUseCase,
    GetHubReportsUseCase,
    GetPartitionMapUseCase,
    GetPartitionUseCase,
)

__all__ = ["AdminService"]


class AdminService:
    """Entry point for the admin read operations."""

    def __init__(
        self,
        coordination_repository: CoordinationRepository,
        coordination_gateway: CoordinationGateway,
        hub_gateway: HubGateway,
    ):
        self._get_context = GetContextUseCase(coordination_repository)
        self._get_partition_map = GetPartitionMapUseCase(coordination_gateway)
        self._get_partition = GetPartitionUseCase(coordination_gateway)
        self._get_hub_reports = GetHubReportsUseCase(coordination_gateway, hub_gateway)

    def get_coordination_context(self) -> GetContextResponse:
        return self._get_context.execute()

    def get_partition_map(self) -> GetPartitionMapResponse:
        return self._get_partition_map.execute()

    def get_partition(self, request: GetPartitionRequest) -> GetPartitionResponse:
        return self._get_partition.execute(request)

    def get_hub_reports(self) -> GetHubReportsResponse:
        return self._get_hub_reports.execute()