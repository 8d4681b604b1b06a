import io
import struct
import wave
from datetime import timedelta
from itertools import islice

import pytest

from pcmflow.decoder import (
    Decoder,
    DecoderError,
    LoopedDecoder,
    Mp4Type,
    UnrecognizedFormatError,
)


def make_wav(samples, channels=1, rate=8000):
    buf = io.BytesIO()
    with wave.open(buf, "wb") as writer:
        writer.setnchannels(channels)
        writer.setsampwidth(2)
        writer.setframerate(rate)
        writer.writeframes(struct.pack(f"<{len(samples)}h", *samples))
    buf.seek(0)
    return buf


def test_decodes_wav_samples():
    samples = [10, -10, 20, -20, 30, -30]
    decoder = Decoder(make_wav(samples, channels=2, rate=44100))
    assert decoder.channels() == 2
    assert decoder.sample_rate() == 44100
    assert list(decoder) == samples


def test_new_wav_matches_autodetect():
    samples = [1, 2, 3, 4]
    assert list(Decoder.new_wav(make_wav(samples))) == list(Decoder(make_wav(samples)))


def test_total_duration_of_wav():
    samples = [0] * 8000
    decoder = Decoder(make_wav(samples, rate=8000))
    assert decoder.total_duration() == timedelta(seconds=1)


def test_size_hint_counts_down():
    decoder = Decoder(make_wav([5, 6, 7]))
    assert decoder.size_hint() == (3, 3)
    next(decoder)
    assert decoder.size_hint() == (2, 2)


def test_unrecognized_format():
    with pytest.raises(UnrecognizedFormatError) as info:
        Decoder(io.BytesIO(b"definitely not audio data at all"))
    assert str(info.value) == "Unrecognized format"
    assert isinstance(info.value, DecoderError)


def test_new_wav_rejects_other_data():
    with pytest.raises(DecoderError):
        Decoder.new_wav(io.BytesIO(b"OggS" + b"\x00" * 40))


def test_looped_decoder_repeats():
    samples = [1, -2, 3]
    looped = Decoder.new_looped(make_wav(samples))
    assert list(islice(looped, 9)) == samples * 3


def test_looped_decoder_properties():
    looped = LoopedDecoder(Decoder(make_wav([1, 2], channels=2, rate=22050)))
    assert looped.channels() == 2
    assert looped.sample_rate() == 22050
    assert looped.total_duration() is None
    assert looped.size_hint() == (2, None)


def test_looped_empty_stream_ends():
    looped = Decoder.new_looped(make_wav([]))
    assert list(looped) == []


@pytest.mark.parametrize(
    "text, expected",
    [
        ("mp4", Mp4Type.MP4),
        ("M4A", Mp4Type.M4A),
        ("m4p", Mp4Type.M4P),
        ("M4b", Mp4Type.M4B),
        ("m4r", Mp4Type.M4R),
        ("m4v", Mp4Type.M4V),
        ("MOV", Mp4Type.MOV),
    ],
)
def test_mp4_type_parse(text, expected):
    assert Mp4Type.parse(text) is expected


@pytest.mark.parametrize("kind", list(Mp4Type))
def test_mp4_type_round_trip(kind):
    assert Mp4Type.parse(str(kind)) is kind


def test_mp4_type_invalid():
    with pytest.raises(ValueError) as info:
        Mp4Type.parse("avi")
    assert str(info.value) == "avi is not a valid mp4 extension"