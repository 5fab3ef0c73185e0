"""Interfaces to the outside world the coordinator depends on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from .model import CoordinationContext, HubReport
from .params import HubEndpoint
from .partition_map import PartitionMap

__all__ = [
    "InvalidPartitionMapError",
    "CoordinationGateway",
    "CoordinationRepository",
    "HubGateway",
]


class InvalidPartitionMapError(RuntimeError):
    """The stored partition map cannot be used."""


class CoordinationGateway(ABC):
    """Access to the shared partition map and hub discovery."""

    @abstractmethod
    def get_partition_map(self) -> PartitionMap:
        """Current partition map."""

    @abstractmethod
    def broadcast_partition_map(self, partition_map: PartitionMap) -> None:
        """Publish a new partition map."""

    @abstractmethod
    def get_hub_discovery(self) -> list[HubEndpoint]:
        """Endpoints of all known hubs."""


class CoordinationRepository(ABC):
    """Storage of the coordination context."""

    @abstractmethod
    def get_coordination_context(self) -> CoordinationContext:
        """Stored context."""

    @abstractmethod
    def set_coordination_context(self, context: CoordinationContext) -> None:
        """Replace the stored context."""


class HubGateway(ABC):
    """Collects reports from hubs."""

    @abstractmethod
    def get_hub_reports(self, hubs: Sequence[HubEndpoint]) -> list[HubReport]:
        """Reports of the given hubs."""