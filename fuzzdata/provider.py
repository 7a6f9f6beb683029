# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Typed values decoded from a single fuzzer-supplied byte buffer.

The mapping from bytes to values matches libFuzzer's FuzzedDataProvider so
corpora and crash inputs stay meaningful across both implementations:

  - Blob operations (bytes, strings) take bytes from the front.
  - Scalar operations (integers, floats, bools, picks, enums) take bytes from
    the back, most significant byte first.
  - Running out of bytes is never an error: blobs come back short and scalars
    are built from whatever bytes were left (possibly none).
"""

from __future__ import annotations

import functools
import math
from array import array
from collections.abc import Sequence
from typing import Any, Callable, TypeVar

from .buffer import Buffer
from .numeric import FLOAT64, INT64, FloatingType, HasMaxOrdinal, IntegralType
from .trace import ConsumptionTrace

T = TypeVar("T")
E = TypeVar("E", bound=HasMaxOrdinal)

_BACKSLASH = 0x5C
_U64_MAX = (1 << 64) - 1


def _traced(method: Callable[..., T]) -> Callable[..., T]:
    """Record the outermost public call of a provider in its trace."""

    @functools.wraps(method)
    def wrapper(self: FuzzedDataProvider, *args: Any, **kwargs: Any) -> T:
        if self.trace is None or self._depth:
            return method(self, *args, **kwargs)
        front, back = self._buffer.front, self._buffer.back
        self._depth += 1
        try:
            value = method(self, *args, **kwargs)
        finally:
            self._depth -= 1
        self.trace.record(
            method.__name__, front, self._buffer.front, back, self._buffer.back, value
        )
        return value

    return wrapper


def _check_size(size: int) -> None:
    if size < 0:
        raise ValueError(f"size must be non-negative, got {size}")


def _blob(chunk: bytes | memoryview, signed: bool) -> bytes | array:
    return array("b", bytes(chunk)) if signed else bytes(chunk)


class FuzzedDataProvider:
    """Consume a fuzz input as a sequence of typed values.

    Every operation is total: once the input is exhausted, blob operations
    return empty results and scalar operations return the value encoded by
    zero bytes (the lower bound of the requested range).

    Raises:
        ValueError / TypeError: only for caller mistakes such as `min > max`,
            an empty pick sequence or an enum without `max_ordinal()`.
    """

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        trace: ConsumptionTrace | None = None,
    ):
        self._buffer = Buffer(data)
        self.trace = trace
        self._depth = 0

    @property
    def remaining_bytes(self) -> int:
        """Bytes not yet consumed by either end."""
        return self._buffer.remaining

    # Front (blob) operations.

    @_traced
    def consume_bytes(self, size: int, signed: bool = False) -> bytes | array:
        """Return up to `size` bytes from the front of the input.

        With `signed=True` the bytes come back as an `array("b")` of values
        in -128..127, the same bits read as signed chars.
        """
        _check_size(size)
        return _blob(self._buffer.read_front(size), signed)

    @_traced
    def consume_bytes_with_terminator(
        self, size: int, terminator: int = 0, signed: bool = False
    ) -> bytes | array:
        """Like consume_bytes, with `terminator` appended (not read from the input)."""
        if not -128 <= terminator <= 255:
            raise ValueError(f"terminator must fit in one byte, got {terminator}")
        _check_size(size)
        chunk = bytes(self._buffer.read_front(size)) + bytes((terminator & 0xFF,))
        return _blob(chunk, signed)

    @_traced
    def consume_bytes_as_string(self, size: int) -> str:
        """Return up to `size` front bytes as a latin-1 string (one char per byte)."""
        _check_size(size)
        return bytes(self._buffer.read_front(size)).decode("latin-1")

    @_traced
    def consume_data(self, destination: bytearray | memoryview, size: int) -> int:
        """Copy up to `size` front bytes into `destination`; return the count copied."""
        _check_size(size)
        target = memoryview(destination)
        if size > target.nbytes:
            raise ValueError(
                f"destination holds {target.nbytes} bytes, cannot copy {size}"
            )
        chunk = self._buffer.read_front(size)
        target.cast("B")[: len(chunk)] = chunk
        return len(chunk)

    @_traced
    def consume_remaining_bytes(self) -> bytes:
        """Return every byte between the cursors, exhausting the input."""
        return bytes(self._buffer.read_front(self._buffer.remaining))

    @_traced
    def consume_remaining_bytes_as_string(self) -> str:
        return bytes(self._buffer.read_front(self._buffer.remaining)).decode("latin-1")

    @_traced
    def consume_random_length_string(self, max_length: int | None = None) -> str:
        """Read a backslash-terminated string of at most `max_length` characters.

        A doubled backslash yields one literal backslash. A backslash followed
        by any other byte, or by the end of the input, ends the string; both
        bytes are consumed and neither is part of the result.
        """
        if max_length is None:
            max_length = self._buffer.remaining
        _check_size(max_length)

        result = bytearray()
        while len(result) < max_length:
            byte = self._buffer.pop_front()
            if byte is None:
                break
            if byte == _BACKSLASH and self._buffer.pop_front() != _BACKSLASH:
                break
            result.append(byte)
        return result.decode("latin-1")

    # Back (scalar) operations.

    @_traced
    def consume_integral_in_range(
        self, min_value: int, max_value: int, int_type: IntegralType | None = None
    ) -> int:
        """Return an integer in [min_value, max_value].

        Only as many bytes as the span needs are read (none when the bounds
        are equal). The reduction is a plain modulo, so wide spans that are not
        a power of two are slightly biased towards their low end.
        """
        if min_value > max_value:
            raise ValueError(f"min_value {min_value} is greater than max_value {max_value}")
        if int_type is not None:
            for bound in (min_value, max_value):
                if not int_type.contains(bound):
                    raise ValueError(f"{bound} is outside the {int_type.name} domain")

        span = max_value - min_value
        result = 0
        offset = 0
        while span >> offset:
            byte = self._buffer.pop_back()
            if byte is None:
                break
            result = (result << 8) | byte
            offset += 8

        if span != _U64_MAX:
            result %= span + 1

        value = min_value + result
        return int_type.cast(value) if int_type is not None else value

    @_traced
    def consume_integral(self, int_type: IntegralType = INT64) -> int:
        """Return a value spanning the whole domain of `int_type`."""
        return self.consume_integral_in_range(int_type.min, int_type.max, int_type)

    @_traced
    def consume_bool(self) -> bool:
        return bool(self.consume_integral_in_range(0, 255) & 1)

    @_traced
    def consume_probability(self, float_type: FloatingType = FLOAT64) -> float:
        """Return a value in [0, 1] computed in `float_type` arithmetic."""
        counterpart = float_type.counterpart
        raw = self.consume_integral(counterpart)
        r = float_type.round
        return r(r(float(raw)) / r(float(counterpart.max)))

    @_traced
    def consume_floating_point_in_range(
        self,
        min_value: float,
        max_value: float,
        float_type: FloatingType = FLOAT64,
    ) -> float:
        """Return a value in [min_value, max_value] in `float_type` precision.

        Equal bounds are returned as-is without touching the input. Ranges
        wider than the largest finite value are walked in two halves: one bool
        picks the half and a probability places the value inside it. Rounding
        in the final step can overshoot a bound by one ulp; the result is
        clamped back into the range.
        """
        r = float_type.round
        low, high = r(min_value), r(max_value)
        if not (math.isfinite(low) and math.isfinite(high)):
            raise ValueError(
                f"floating point bounds must be finite {float_type.name} values,"
                f" got {min_value} and {max_value}"
            )
        if low > high:
            raise ValueError(f"min_value {low} is greater than max_value {high}")
        if low == high:
            return low

        result = low
        if high > 0 and low < 0 and high > r(low + float_type.max):
            span = r(r(high / 2.0) - r(low / 2.0))
            if self.consume_bool():
                result = r(result + span)
        else:
            span = r(high - low)

        value = r(result + r(span * self.consume_probability(float_type)))
        return min(max(value, low), high)

    @_traced
    def consume_floating_point(self, float_type: FloatingType = FLOAT64) -> float:
        """Return a finite value anywhere in the range of `float_type`."""
        return self.consume_floating_point_in_range(
            float_type.lowest, float_type.max, float_type
        )

    @_traced
    def pick_value_in_array(self, values: Sequence[T]) -> T:
        """Return one element of `values`, chosen by a back-consumed index."""
        if not values:
            raise ValueError("cannot pick a value from an empty sequence")
        return values[self.consume_integral_in_range(0, len(values) - 1)]

    @_traced
    def consume_enum(self, enum_type: type[E]) -> E:
        """Return a member of an enum numbered 0..enum_type.max_ordinal()."""
        if not isinstance(enum_type, HasMaxOrdinal):
            raise TypeError(f"{enum_type!r} does not define max_ordinal()")
        return enum_type(self.consume_integral_in_range(0, enum_type.max_ordinal()))
