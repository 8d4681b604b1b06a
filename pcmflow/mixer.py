"""Mixer that plays several sources at the same time."""

from __future__ import annotations

import threading
from datetime import timedelta
from itertools import islice
from typing import List, Optional, Tuple

from .buffer import Source
from .channels import ChannelCountConverter
from .sample import DataConverter, SampleFormat
from .sample_rate import SampleRateConverter


class _UniformSource(Source):
    """Converts a source to fixed channels, sample rate and sample format."""

    def __init__(
        self,
        source: Source,
        channels: int,
        sample_rate: int,
        sample_format: SampleFormat,
    ) -> None:
        self._source = source
        self._target_channels = channels
        self._target_rate = sample_rate
        self._target_format = sample_format
        self._total_duration = source.total_duration()
        self._inner = self._bootstrap()

    def _bootstrap(self):
        source = self._source
        frame_len = source.current_frame_len()
        from_channels = source.channels()
        from_rate = source.sample_rate()
        source_format = getattr(source, "sample_format", self._target_format)

        samples = source if frame_len is None else islice(source, frame_len)
        resampled = SampleRateConverter(
            samples, from_rate, self._target_rate, from_channels, source_format
        )
        rechanneled = ChannelCountConverter(
            resampled, from_channels, self._target_channels
        )
        return DataConverter(rechanneled, source_format, self._target_format)

    def __next__(self):
        try:
            return next(self._inner)
        except StopIteration:
            pass
        self._inner = self._bootstrap()
        return next(self._inner)

    def current_frame_len(self) -> Optional[int]:
        return None

    def channels(self) -> int:
        return self._target_channels

    def sample_rate(self) -> int:
        return self._target_rate

    def total_duration(self) -> Optional[timedelta]:
        return self._total_duration


class DynamicMixerController:
    """The input side of a mixer: sources added here get mixed into the output."""

    def __init__(
        self,
        channels: int,
        sample_rate: int,
        sample_format: SampleFormat = SampleFormat.I16,
    ) -> None:
        self.channels = channels
        self.sample_rate = sample_rate
        self.sample_format = sample_format
        self._lock = threading.Lock()
        self._pending: List[Source] = []
        self._has_pending = False

    def add(self, source: Source) -> None:
        """Add a source to mix with the ones already playing."""
        uniform = _UniformSource(
            source, self.channels, self.sample_rate, self.sample_format
        )
        with self._lock:
            self._pending.append(uniform)
            self._has_pending = True


class DynamicMixer(Source):
    """The output side of a mixer: the sum of all playing sources."""

    def __init__(self, controller: DynamicMixerController) -> None:
        self._controller = controller
        self._current: List[Source] = []
        self._sample_count = 0
        self.sample_format = controller.sample_format

    def _start_pending_sources(self) -> None:
        # Sources start only on a frame boundary so channels stay aligned.
        controller = self._controller
        with controller._lock:
            still_pending = []
            for source in controller._pending:
                if self._sample_count % source.channels() == 0:
                    self._current.append(source)
                else:
                    still_pending.append(source)
            controller._pending = still_pending
            controller._has_pending = bool(still_pending)

    def _sum_current_sources(self):
        fmt = self._controller.sample_format
        total = fmt.zero_value()
        still_current = []
        for source in self._current:
            value = next(source, None)
            if value is not None:
                total = fmt.saturating_add(total, value)
                still_current.append(source)
        self._current = still_current
        return total

    def __next__(self):
        if self._controller._has_pending:
            self._start_pending_sources()
        self._sample_count += 1
        total = self._sum_current_sources()
        if not self._current:
            raise StopIteration
        return total

    def current_frame_len(self) -> Optional[int]:
        return None

    def channels(self) -> int:
        return self._controller.channels

    def sample_rate(self) -> int:
        return self._controller.sample_rate

    def total_duration(self) -> Optional[timedelta]:
        return None

    def size_hint(self) -> Tuple[int, Optional[int]]:
        return 0, None


def mixer(
    channels: int,
    sample_rate: int,
    sample_format: SampleFormat = SampleFormat.I16,
) -> Tuple[DynamicMixerController, DynamicMixer]:
    """Build a mixer producing the given channel count, rate and format."""
    controller = DynamicMixerController(channels, sample_rate, sample_format)
    return controller, DynamicMixer(controller)