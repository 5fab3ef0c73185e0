"""Strongly typed scalar values shared across the coordination domain."""

from __future__ import annotations

import enum

__all__ = [
    "Epoch",
    "PartitionId",
    "PartitionWeight",
    "LoadFactor",
    "HubEndpoint",
    "HubDC",
    "HubStatus",
]


class _Unsigned(int):
    """Fixed-width unsigned integer with a distinct type name."""

    __slots__ = ()
    BITS = 64

    def __new__(cls, value: int = 0):
        number = int.__new__(cls, value)
        if not 0 <= int(number) < (1 << cls.BITS):
            raise ValueError(
                f"{cls.__name__} must fit in {cls.BITS} unsigned bits, got {int(number)}"
            )
        return number

    @classmethod
    def _wrap(cls, value: int):
        return cls(value % (1 << cls.BITS))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int.__repr__(self)})"

    def __str__(self) -> str:
        return int.__repr__(self)


class _Additive(_Unsigned):
    """Unsigned value closed under addition and subtraction (modular, like the wire type)."""

    __slots__ = ()

    def _plus(self, other):
        if not isinstance(other, int):
            return NotImplemented
        return self._wrap(int(self) + int(other))

    def _minus(self, other):
        if not isinstance(other, int):
            return NotImplemented
        return self._wrap(int(self) - int(other))

    def __radd__(self, other):
        if not isinstance(other, int):
            return NotImplemented
        return self._wrap(int(other) + int(self))

    def __rsub__(self, other):
        if not isinstance(other, int):
            return NotImplemented
        return self._wrap(int(other) - int(self))


class Epoch(_Additive):
    """Monotonic coordination epoch."""

    __slots__ = ()
    BITS = 64

    def __add__(self, other):
        return self._plus(other)

    def __sub__(self, other):
        return self._minus(other)


class PartitionId(_Unsigned):
    """Partition identifier; also the upper boundary of the partition on the hash ring."""

    __slots__ = ()
    BITS = 64


class PartitionWeight(_Additive):
    """Weight of a partition or of a set of partitions."""

    __slots__ = ()
    BITS = 64

    def __add__(self, other):
        return self._plus(other)

    def __sub__(self, other):
        return self._minus(other)


class LoadFactor(_Additive):
    """Load factor reported by or predicted for a hub."""

    __slots__ = ()
    BITS = 32

    def __add__(self, other):
        return self._plus(other)

    def __sub__(self, other):
        return self._minus(other)


class HubEndpoint(str):
    """Address of a hub."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str.__repr__(self)})"


class HubDC(str):
    """Data center a hub lives in."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str.__repr__(self)})"


class HubStatus(enum.Enum):
    """Health of a hub as seen by the coordinator."""

    HEALTHY = enum.auto()
    DRAINING = enum.auto()
    OVERLOADED = enum.auto()
    LAGGED = enum.auto()