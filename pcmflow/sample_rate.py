"""Linear-interpolation conversion between sample rates."""

from __future__ import annotations

import math
from collections import deque
from itertools import islice
from typing import Iterable, Iterator, List, Optional, Tuple

from .sample import SampleFormat, _size_hint


class SampleRateConverter:
    """Iterator that resamples interleaved samples from one rate to another.

    Each output frame is a linear interpolation between two consecutive
    input frames.
    """

    def __init__(
        self,
        input: Iterable,
        from_rate: int,
        to_rate: int,
        channels: int,
        sample_format: SampleFormat = SampleFormat.I16,
    ) -> None:
        if from_rate < 1:
            raise ValueError("from_rate must be at least 1")
        if to_rate < 1:
            raise ValueError("to_rate must be at least 1")
        if channels < 1:
            raise ValueError("channels must be at least 1")

        self._input = iter(input)
        self._channels = channels
        self._format = sample_format

        divisor = math.gcd(from_rate, to_rate)
        if from_rate == to_rate:
            current: List = []
            following: List = []
        else:
            current = list(islice(self._input, channels))
            following = list(islice(self._input, channels))

        self._from = from_rate // divisor
        self._to = to_rate // divisor
        self._current_frame = current
        self._next_frame = following
        self._current_frame_pos = 0
        self._next_output_pos = 0
        self._output_buffer: deque = deque()

    def __iter__(self) -> "SampleRateConverter":
        return self

    def _next_input_frame(self) -> None:
        self._current_frame_pos += 1
        self._current_frame = self._next_frame
        self._next_frame = list(islice(self._input, self._channels))

    def __next__(self):
        if self._from == self._to:
            return next(self._input)

        if self._output_buffer:
            return self._output_buffer.popleft()

        if self._next_output_pos == self._to:
            self._next_output_pos = 0
            self._next_input_frame()
            while self._current_frame_pos != self._from:
                self._next_input_frame()
            self._current_frame_pos = 0
        else:
            left = (self._from * self._next_output_pos // self._to) % self._from
            while self._current_frame_pos != left:
                self._next_input_frame()

        numerator = (self._from * self._next_output_pos) % self._to
        result = None
        for offset, (cur, following) in enumerate(
            zip(self._current_frame, self._next_frame)
        ):
            sample = self._format.lerp(cur, following, numerator, self._to)
            if offset == 0:
                result = sample
            else:
                self._output_buffer.append(sample)

        self._next_output_pos += 1

        if result is not None:
            return result

        # No following frame is left: flush the current one unchanged.
        if self._current_frame:
            first, *rest = self._current_frame
            self._output_buffer = deque(rest)
            self._current_frame = []
            return first
        raise StopIteration

    def size_hint(self) -> Tuple[int, Optional[int]]:
        """Bounds of the number of samples left."""
        low, high = _size_hint(self._input)
        if self._from == self._to:
            return low, high

        def apply(samples: int) -> int:
            after_chunk = samples
            if self._current_frame_pos == self._from - 1:
                after_chunk += len(self._next_frame)
            unread = max(0, self._from - (self._current_frame_pos + 2)) * self._channels
            after_chunk = max(0, after_chunk - unread)
            after_chunk = after_chunk * self._to // self._from
            current_chunk = (self._to - self._next_output_pos) * self._channels
            return current_chunk + after_chunk + len(self._output_buffer)

        return apply(low), None if high is None else apply(high)

    def into_inner(self) -> Iterator:
        """Return the wrapped iterator."""
        return self._input