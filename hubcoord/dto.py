"""Request and response records of the admin operations."""

from __future__ import annotations

from dataclasses import dataclass, field

from .model import CoordinationContext, HubReport
from .params import PartitionId
from .partition_map import PartitionMap

__all__ = [
    "GetContextResponse",
    "GetHubReportsResponse",
    "GetPartitionRequest",
    "GetPartitionResponse",
    "GetPartitionMapResponse",
]


@dataclass
class GetContextResponse:
    """Stored coordination context."""

    context: CoordinationContext = field(default_factory=CoordinationContext)


@dataclass
class GetHubReportsResponse:
    """Reports collected from every discovered hub."""

    hub_reports: list[HubReport] = field(default_factory=list)


@dataclass
class GetPartitionRequest:
    """Channel whose partition is looked up."""

    channel_id: str = ""


@dataclass
class GetPartitionResponse:
    """Partition a channel belongs to."""

    partition: PartitionId = PartitionId(0)


@dataclass
class GetPartitionMapResponse:
    """Current partition map."""

    partition_map: PartitionMap = field(default_factory=PartitionMap)