from datetime import timedelta

import pytest

from pcmflow.buffer import SamplesBuffer, Source
from pcmflow.sample import SampleFormat


def test_basic():
    buf = SamplesBuffer(1, 44100, [0, 0, 0, 0, 0, 0])
    assert buf.channels() == 1
    assert buf.sample_rate() == 44100
    assert buf.current_frame_len() is None
    assert buf.sample_format is SampleFormat.I16


def test_panic_if_zero_channels():
    with pytest.raises(ValueError):
        SamplesBuffer(0, 44100, [0, 0, 0, 0, 0, 0])


def test_panic_if_zero_sample_rate():
    with pytest.raises(ValueError):
        SamplesBuffer(1, 0, [0, 0, 0, 0, 0, 0])


def test_duration_basic():
    buf = SamplesBuffer(2, 2, [0, 0, 0, 0, 0, 0])
    dur = buf.total_duration()
    assert int(dur.total_seconds()) == 1
    assert dur.microseconds * 1000 == 500_000_000
    assert dur == timedelta(seconds=1, milliseconds=500)


def test_iteration():
    buf = SamplesBuffer(1, 44100, [1, 2, 3, 4, 5, 6])
    assert next(buf) == 1
    assert next(buf) == 2
    assert next(buf) == 3
    assert next(buf) == 4
    assert next(buf) == 5
    assert next(buf) == 6
    with pytest.raises(StopIteration):
        next(buf)


def test_size_hint_tracks_remaining():
    buf = SamplesBuffer(1, 44100, [1, 2, 3])
    assert buf.size_hint() == (3, 3)
    next(buf)
    assert buf.size_hint() == (2, 2)
    assert list(buf) == [2, 3]
    assert buf.size_hint() == (0, 0)


def test_accepts_any_iterable_and_format():
    buf = SamplesBuffer(1, 10, (x / 10 for x in range(3)), SampleFormat.F32)
    assert buf.sample_format is SampleFormat.F32
    assert list(buf) == [0.0, 0.1, 0.2]


def test_source_is_abstract():
    with pytest.raises(TypeError):
        Source()


class _Silence(Source):
    def __init__(self):
        self.left = 2

    def __next__(self):
        if not self.left:
            raise StopIteration
        self.left -= 1
        return 0

    def current_frame_len(self):
        return None

    def channels(self):
        return 1

    def sample_rate(self):
        return 8000

    def total_duration(self):
        return None


def test_source_defaults():
    src = _Silence()
    assert Source.__iter__(src) is src
    assert Source.size_hint(src) == (0, None)
    assert list(Source.__iter__(src)) == [0, 0]