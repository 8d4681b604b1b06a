"""Conversion between channel counts of interleaved samples."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Tuple

from .sample import _size_hint


class ChannelCountConverter:
    """Iterator that converts interleaved samples to another channel count.

    Extra output channels repeat the last input channel; surplus input
    channels are dropped.
    """

    def __init__(self, input: Iterable, from_channels: int, to_channels: int) -> None:
        if from_channels < 1:
            raise ValueError("from_channels must be at least 1")
        if to_channels < 1:
            raise ValueError("to_channels must be at least 1")
        self._input = iter(input)
        self._from = from_channels
        self._to = to_channels
        self._sample_repeat = None
        self._next_output_pos = 0

    def __iter__(self) -> "ChannelCountConverter":
        return self

    def __next__(self):
        if self._next_output_pos == self._from - 1:
            value = next(self._input, None)
            self._sample_repeat = value
        elif self._next_output_pos < self._from:
            value = next(self._input, None)
        else:
            value = self._sample_repeat

        self._next_output_pos += 1
        if self._next_output_pos == self._to:
            self._next_output_pos = 0
            for _ in range(self._to, self._from):
                next(self._input, None)

        if value is None:
            raise StopIteration
        return value

    def size_hint(self) -> Tuple[int, Optional[int]]:
        """Bounds of the number of samples left."""
        low, high = _size_hint(self._input)

        def scale(count: int) -> int:
            return (count // self._from) * self._to + self._next_output_pos

        return scale(low), None if high is None else scale(high)

    def into_inner(self) -> Iterator:
        """Return the wrapped iterator."""
        return self._input