"""The Source interface and a source backed by an in-memory buffer."""

from __future__ import annotations

import abc
import operator
from datetime import timedelta
from typing import Iterable, Optional, Tuple

from .sample import SampleFormat

_U64_MAX = 2**64 - 1


class Source(abc.ABC):
    """An iterator of interleaved samples that knows its stream properties."""

    def __iter__(self) -> "Source":
        return self

    @abc.abstractmethod
    def __next__(self):
        """Return the next sample, or raise StopIteration at the end."""

    @abc.abstractmethod
    def current_frame_len(self) -> Optional[int]:
        """Samples left before channels or sample rate may change, or None if they never do."""

    @abc.abstractmethod
    def channels(self) -> int:
        """Number of interleaved channels."""

    @abc.abstractmethod
    def sample_rate(self) -> int:
        """Frames per second."""

    @abc.abstractmethod
    def total_duration(self) -> Optional[timedelta]:
        """Total length of the sound, or None if unknown."""

    def size_hint(self) -> Tuple[int, Optional[int]]:
        """Bounds of the number of samples left."""
        return 0, None


class SamplesBuffer(Source):
    """A list of samples played as a source."""

    def __init__(
        self,
        channels: int,
        sample_rate: int,
        data: Iterable,
        sample_format: SampleFormat = SampleFormat.I16,
    ) -> None:
        if channels == 0:
            raise ValueError("channels must not be zero")
        if sample_rate == 0:
            raise ValueError("sample_rate must not be zero")

        samples = list(data)
        total_ns = 1_000_000_000 * len(samples)
        if total_ns > _U64_MAX:
            raise OverflowError("buffer too long to compute its duration")
        duration_ns = total_ns // sample_rate // channels

        self._data = iter(samples)
        self._channels = channels
        self._sample_rate = sample_rate
        self._duration = timedelta(
            seconds=duration_ns // 1_000_000_000,
            microseconds=(duration_ns % 1_000_000_000) // 1000,
        )
        self.sample_format = sample_format

    def __next__(self):
        return next(self._data)

    def current_frame_len(self) -> Optional[int]:
        return None

    def channels(self) -> int:
        return self._channels

    def sample_rate(self) -> int:
        return self._sample_rate

    def total_duration(self) -> Optional[timedelta]:
        return self._duration

    def size_hint(self) -> Tuple[int, Optional[int]]:
        remaining = operator.length_hint(self._data)
        return remaining, remaining