"""Consistent hash ring mapping keys to partitions."""

from __future__ import annotations

import hashlib
from bisect import bisect_left
from typing import Callable, Iterable

from .params import PartitionId

__all__ = ["default_hash", "HashRing", "MAX_HASH"]

MAX_HASH = (1 << 64) - 1

HashFunction = Callable[[str], int]


def default_hash(key: str) -> int:
    """Stable 64-bit hash of a string key."""
    digest = hashlib.blake2b(key.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


class HashRing:
    """Sorted partition boundaries; a key belongs to the first boundary not below its hash."""

    def __init__(self, partitions: Iterable[int], hasher: HashFunction = default_hash):
        self._hasher = hasher
        self._partitions: list[PartitionId] = []
        self.load_partitions(partitions)

    @classmethod
    def with_partition_count(cls, partition_count: int, hasher: HashFunction = default_hash) -> "HashRing":
        """Build a ring with evenly spaced boundaries, the last one at the top of the hash space."""
        if partition_count < 1:
            raise ValueError("Partition count must be at least 1")
        step = MAX_HASH // partition_count
        boundaries = [PartitionId(step * i) for i in range(1, partition_count)]
        boundaries.append(PartitionId(MAX_HASH))
        return cls(boundaries, hasher)

    def load_partitions(self, partitions: Iterable[int]) -> None:
        """Replace the ring's partitions, sorted and without duplicates."""
        unique = sorted({PartitionId(p) for p in partitions})
        if not unique:
            raise ValueError("Partitions list cannot be empty")
        self._partitions = unique

    def get_partition(self, key: str) -> PartitionId:
        """Partition owning the key, wrapping around past the last boundary."""
        key_hash = self._hasher(key) & MAX_HASH
        index = bisect_left(self._partitions, key_hash)
        if index == len(self._partitions):
            return self._partitions[0]
        return self._partitions[index]

    @property
    def partitions(self) -> tuple[PartitionId, ...]:
        """All partition boundaries in ascending order."""
        return tuple(self._partitions)