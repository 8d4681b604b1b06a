"""Sample formats and conversion between them."""

from __future__ import annotations

import enum
import math
import operator
import struct
from typing import Iterable, Iterator, Optional, Tuple

_I16_MIN = -32768
_I16_MAX = 32767
_U16_MAX = 65535

_EXACT_ITERATORS = frozenset(
    {
        type(iter([])),
        type(iter(())),
        type(iter(range(0))),
        type(iter("")),
        type(iter(b"")),
        type(reversed([])),
    }
)


def _size_hint(iterator) -> Tuple[int, Optional[int]]:
    """Lower and optional upper bound of the items left in ``iterator``."""
    hint = getattr(iterator, "size_hint", None)
    if callable(hint):
        return hint()
    if type(iterator) in _EXACT_ITERATORS:
        remaining = operator.length_hint(iterator)
        return remaining, remaining
    return operator.length_hint(iterator, 0), None


def _f32(value: float) -> float:
    """Round a float to single precision."""
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _f32_div(numerator: float, denominator: float) -> float:
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return _f32(numerator / denominator)


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def _wrap_i16(value: int) -> int:
    return (value + 0x8000) % 0x10000 - 0x8000


def _wrap_u16(value: int) -> int:
    return value % 0x10000


def _saturating_int(value: float, low: int, high: int) -> int:
    """Truncate a float toward zero and clamp it, mapping NaN to zero."""
    if math.isnan(value):
        return 0
    if value == math.inf:
        return high
    if value == -math.inf:
        return low
    return max(low, min(high, int(value)))


def _round_half_away(value: float) -> float:
    if not math.isfinite(value):
        return value
    return math.copysign(math.floor(abs(value) + 0.5), value)


class SampleFormat(enum.Enum):
    """Representation of a single PCM sample.

    I16 is silent at 0 and spans the signed 16-bit range, U16 is silent at
    32768 and spans 0..65535, F32 is silent at 0.0 and spans -1.0..1.0.
    """

    I16 = "i16"
    U16 = "u16"
    F32 = "f32"

    def lerp(self, first, second, numerator: int, denominator: int):
        """Linear interpolation from ``first`` towards ``second`` by numerator/denominator."""
        if self is SampleFormat.F32:
            delta = _f32(second - first)
            scaled = _f32(delta * _f32(float(numerator)))
            return _f32(first + _f32_div(scaled, _f32(float(denominator))))
        value = first + _trunc_div((second - first) * numerator, denominator)
        if self is SampleFormat.I16:
            return _wrap_i16(value)
        return _wrap_u16(value)

    def amplify(self, value, factor: float):
        """Multiply a sample by ``factor``."""
        factor = _f32(factor)
        if self is SampleFormat.F32:
            return _f32(value * factor)
        if self is SampleFormat.I16:
            return _saturating_int(_f32(float(value) * factor), _I16_MIN, _I16_MAX)
        as_i16 = SampleFormat.U16.convert(value, SampleFormat.I16)
        amplified = SampleFormat.I16.amplify(as_i16, factor)
        return SampleFormat.I16.convert(amplified, SampleFormat.U16)

    def saturating_add(self, first, second):
        """Add two samples, clamping integer formats to their range."""
        if self is SampleFormat.F32:
            return _f32(first + second)
        if self is SampleFormat.I16:
            return max(_I16_MIN, min(_I16_MAX, first + second))
        return max(0, min(_U16_MAX, first + second))

    def zero_value(self):
        """The value of silence."""
        if self is SampleFormat.F32:
            return 0.0
        if self is SampleFormat.I16:
            return 0
        return 32768

    def convert(self, value, target: "SampleFormat"):
        """Convert a sample of this format into ``target``."""
        if target is self:
            return value
        if self is SampleFormat.I16:
            if target is SampleFormat.U16:
                return value + 32768
            if value < 0:
                return _f32(value / 32768.0)
            return _f32(value / 32767.0)
        if self is SampleFormat.U16:
            as_i16 = value - 32768
            return SampleFormat.I16.convert(as_i16, target)
        if target is SampleFormat.I16:
            if value >= 0:
                return _saturating_int(_f32(value * 32767.0), _I16_MIN, _I16_MAX)
            return _saturating_int(_f32(-value * -32768.0), _I16_MIN, _I16_MAX)
        shifted = _f32(_f32(_f32(value + 1.0) * 0.5) * 65535.0)
        return _saturating_int(_round_half_away(shifted), 0, _U16_MAX)


class DataConverter:
    """Iterator converting each sample of ``input`` to another format."""

    def __init__(
        self,
        input: Iterable,
        source_format: SampleFormat,
        target_format: SampleFormat,
    ) -> None:
        self._input = iter(input)
        self.source_format = source_format
        self.target_format = target_format

    def __iter__(self) -> "DataConverter":
        return self

    def __next__(self):
        sample = next(self._input)
        return self.source_format.convert(sample, self.target_format)

    def size_hint(self) -> Tuple[int, Optional[int]]:
        """Bounds of the number of samples left."""
        return _size_hint(self._input)

    def into_inner(self) -> Iterator:
        """Return the wrapped iterator."""
        return self._input