# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Fixed-width numeric type descriptors.

Python integers and floats are unbounded/double precision, while fuzz targets
usually want C-shaped values. These descriptors carry the width and signedness
needed to reproduce C casts and single-precision arithmetic bit for bit.

Key pieces:
  - IntegralType: width + signedness, with domain checks and wrap-around casts.
  - FloatingType: IEEE binary32/binary64 with per-operation rounding.
  - HasMaxOrdinal / OrdinalEnum: contract for enums decoded by ordinal.
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class IntegralType:
    """Two's complement integer of a fixed bit width."""

    name: str
    bits: int
    signed: bool

    @property
    def min(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max

    def cast(self, value: int) -> int:
        """Wrap `value` into this type the way a C static_cast would."""
        value &= (1 << self.bits) - 1
        if self.signed and value > self.max:
            value -= 1 << self.bits
        return value


INT8 = IntegralType("int8", 8, True)
UINT8 = IntegralType("uint8", 8, False)
INT16 = IntegralType("int16", 16, True)
UINT16 = IntegralType("uint16", 16, False)
INT32 = IntegralType("int32", 32, True)
UINT32 = IntegralType("uint32", 32, False)
INT64 = IntegralType("int64", 64, True)
UINT64 = IntegralType("uint64", 64, False)

INTEGRAL_TYPES: dict[str, IntegralType] = {
    t.name: t for t in (INT8, UINT8, INT16, UINT16, INT32, UINT32, INT64, UINT64)
}
INTEGRAL_TYPES["char"] = INT8
INTEGRAL_TYPES["size_t"] = UINT64


@dataclass(frozen=True)
class FloatingType:
    """IEEE 754 binary floating-point format."""

    name: str
    bits: int
    struct_code: str

    @property
    def max(self) -> float:
        """Largest finite value."""
        return struct.unpack(f"<{self.struct_code}", self._max_pattern())[0]

    @property
    def lowest(self) -> float:
        """Most negative finite value."""
        return -self.max

    @property
    def counterpart(self) -> IntegralType:
        """Unsigned integral type of the same width."""
        return UINT32 if self.bits == 32 else UINT64

    def round(self, value: float) -> float:
        """Round a Python float to this format; overflow gives a signed infinity."""
        if self.bits == 64:
            return float(value)
        try:
            return struct.unpack("<f", struct.pack("<f", value))[0]
        except OverflowError:
            return math.copysign(math.inf, value)

    def _max_pattern(self) -> bytes:
        if self.bits == 32:
            return (0x7F7FFFFF).to_bytes(4, "little")
        return (0x7FEFFFFFFFFFFFFF).to_bytes(8, "little")


FLOAT32 = FloatingType("float32", 32, "f")
FLOAT64 = FloatingType("float64", 64, "d")

FLOATING_TYPES: dict[str, FloatingType] = {
    "float32": FLOAT32,
    "float64": FLOAT64,
    "float": FLOAT32,
    "double": FLOAT64,
}


@runtime_checkable
class HasMaxOrdinal(Protocol):
    """Enumeration whose members are the contiguous ordinals 0..max_ordinal()."""

    def max_ordinal(self) -> int:  # pragma: no cover - protocol
        ...


class OrdinalEnum(IntEnum):
    """IntEnum base that exposes its largest member value as `max_ordinal()`.

    Subclasses must number their members 0, 1, 2, ... without gaps.
    """

    @classmethod
    def max_ordinal(cls) -> int:
        return max(member.value for member in cls)
