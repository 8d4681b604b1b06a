"""Queue that plays sources one after the other."""

from __future__ import annotations

import threading
from collections import deque
from datetime import timedelta
from typing import Deque, Optional, Tuple

from .buffer import SamplesBuffer, Source
from .sample import SampleFormat

# When the queue is kept alive and has nothing to play, it emits short
# stretches of silence instead of spinning.
_SILENCE_CHANNELS = 1
_SILENCE_RATE = 44100
_SILENCE_SAMPLES = _SILENCE_RATE * 10 // 1000

# Upper bound on a frame when the current source gives no better estimate.
_FRAME_THRESHOLD = 512

_END = object()

_Entry = Tuple[Source, Optional[threading.Event]]


class SourcesQueueInput:
    """The input side of a queue: sources appended here are played in order."""

    def __init__(
        self,
        keep_alive_if_empty: bool,
        sample_format: SampleFormat = SampleFormat.I16,
    ) -> None:
        self._lock = threading.Lock()
        self._next_sounds: Deque[_Entry] = deque()
        self._keep_alive_if_empty = keep_alive_if_empty
        self.sample_format = sample_format

    def append(self, source: Source) -> None:
        """Add a source to the end of the queue."""
        with self._lock:
            self._next_sounds.append((source, None))

    def append_with_signal(self, source: Source) -> threading.Event:
        """Add a source to the end of the queue.

        The returned event is set once the source has finished playing.
        """
        finished = threading.Event()
        with self._lock:
            self._next_sounds.append((source, finished))
        return finished

    def set_keep_alive_if_empty(self, keep_alive_if_empty: bool) -> None:
        """Set whether the queue plays silence instead of ending when empty."""
        with self._lock:
            self._keep_alive_if_empty = keep_alive_if_empty

    def _take_next(self) -> Optional[_Entry]:
        with self._lock:
            if self._next_sounds:
                return self._next_sounds.popleft()
            if not self._keep_alive_if_empty:
                return None
        fmt = self.sample_format
        silence = SamplesBuffer(
            _SILENCE_CHANNELS,
            _SILENCE_RATE,
            [fmt.zero_value()] * _SILENCE_SAMPLES,
            fmt,
        )
        return silence, None


class SourcesQueueOutput(Source):
    """The output side of a queue: plays the queued sources in turn."""

    def __init__(self, input: SourcesQueueInput) -> None:
        self._input = input
        self.sample_format = input.sample_format
        self._current: Source = SamplesBuffer(1, 48000, [], input.sample_format)
        self._signal_after_end: Optional[threading.Event] = None

    def _go_next(self) -> bool:
        """Switch to the next queued source; False when playback should stop."""
        if self._signal_after_end is not None:
            self._signal_after_end.set()
            self._signal_after_end = None

        entry = self._input._take_next()
        if entry is None:
            return False
        self._current, self._signal_after_end = entry
        return True

    def __next__(self):
        while True:
            sample = next(self._current, _END)
            if sample is not _END:
                return sample
            if not self._go_next():
                raise StopIteration

    def current_frame_len(self) -> Optional[int]:
        # The boundary between two queued sources must also be a frame boundary.
        frame_len = self._current.current_frame_len()
        if frame_len:
            return frame_len
        lower, _ = self._current.size_hint()
        if lower > 0:
            return lower
        return _FRAME_THRESHOLD

    def channels(self) -> int:
        return self._current.channels()

    def sample_rate(self) -> int:
        return self._current.sample_rate()

    def total_duration(self) -> Optional[timedelta]:
        return None

    def size_hint(self) -> Tuple[int, Optional[int]]:
        return self._current.size_hint()[0], None


def queue(
    keep_alive_if_empty: bool,
    sample_format: SampleFormat = SampleFormat.I16,
) -> Tuple[SourcesQueueInput, SourcesQueueOutput]:
    """Build a queue made of an input to append to and an output to play.

    With ``keep_alive_if_empty`` the output plays silence while nothing is
    queued; otherwise it ends as soon as the queue runs dry.
    """
    queue_input = SourcesQueueInput(keep_alive_if_empty, sample_format)
    return queue_input, SourcesQueueOutput(queue_input)