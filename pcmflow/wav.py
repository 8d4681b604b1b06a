"""Decoder for RIFF/WAVE files."""

from __future__ import annotations

import io
import math
import struct
from dataclasses import dataclass
from datetime import timedelta
from typing import BinaryIO, Optional, Tuple

from .buffer import Source
from .sample import SampleFormat, _f32

_FORMAT_PCM = 0x0001
_FORMAT_FLOAT = 0x0003
_FORMAT_EXTENSIBLE = 0xFFFE

_I16_MIN = -32768
_I16_MAX = 32767


@dataclass(frozen=True)
class _WavSpec:
    channels: int
    sample_rate: int
    bits_per_sample: int
    is_float: bool
    data_len: int

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    @property
    def sample_count(self) -> int:
        return self.data_len // self.bytes_per_sample


def _read_exact(data: BinaryIO, size: int) -> bytes:
    chunk = data.read(size)
    if chunk is None or len(chunk) != size:
        raise ValueError("unexpected end of WAV data")
    return chunk


def _parse_fmt(body: bytes) -> Tuple[int, int, int, int, bool]:
    if len(body) < 16:
        raise ValueError("fmt chunk too short")
    tag, channels, sample_rate, _byte_rate, block_align, bits = struct.unpack_from(
        "<HHIIHH", body
    )
    if tag == _FORMAT_EXTENSIBLE:
        if len(body) < 40:
            raise ValueError("extensible fmt chunk too short")
        valid_bits = struct.unpack_from("<H", body, 18)[0]
        if valid_bits != bits:
            raise ValueError("unsupported WAV container size")
        tag = struct.unpack_from("<H", body, 24)[0]

    if tag == _FORMAT_PCM:
        if bits not in (8, 16, 24, 32):
            raise ValueError(f"unsupported integer bit depth {bits}")
        is_float = False
    elif tag == _FORMAT_FLOAT:
        if bits != 32:
            raise ValueError(f"unsupported float bit depth {bits}")
        is_float = True
    else:
        raise ValueError(f"unsupported WAV format tag {tag:#06x}")

    if channels == 0:
        raise ValueError("WAV file has no channels")
    if sample_rate == 0:
        raise ValueError("WAV file has a zero sample rate")
    if block_align != channels * (bits // 8):
        raise ValueError("inconsistent WAV block alignment")
    return channels, sample_rate, bits, block_align, is_float


def _read_header(data: BinaryIO) -> _WavSpec:
    """Parse the header and leave ``data`` at the first sample."""
    riff = _read_exact(data, 12)
    if riff[:4] != b"RIFF" or riff[8:12] != b"WAVE":
        raise ValueError("not a RIFF/WAVE stream")

    fmt = None
    while True:
        chunk_id, chunk_len = struct.unpack("<4sI", _read_exact(data, 8))
        if chunk_id == b"fmt ":
            fmt = _parse_fmt(_read_exact(data, chunk_len))
            if chunk_len % 2:
                _read_exact(data, 1)
        elif chunk_id == b"data":
            if fmt is None:
                raise ValueError("data chunk before fmt chunk")
            channels, sample_rate, bits, _align, is_float = fmt
            return _WavSpec(channels, sample_rate, bits, is_float, chunk_len)
        else:
            _read_exact(data, chunk_len + chunk_len % 2)


def is_wave(data: BinaryIO) -> bool:
    """Tell whether ``data`` holds WAV data, leaving its position unchanged."""
    position = data.tell()
    try:
        _read_header(data)
    except (ValueError, struct.error, OSError):
        return False
    finally:
        data.seek(position, io.SEEK_SET)
    return True


def _f32_to_i16(value: float) -> int:
    if math.isnan(value):
        value = -1.0
    clipped = min(1.0, max(-1.0, value))
    return max(_I16_MIN, min(_I16_MAX, int(_f32(clipped * _I16_MAX))))


def _to_i16(raw: bytes, spec: _WavSpec) -> int:
    if spec.is_float:
        return _f32_to_i16(struct.unpack("<f", raw)[0])
    if spec.bits_per_sample == 8:
        # 8-bit WAV samples are unsigned.
        return (raw[0] - 128) * 256
    value = int.from_bytes(raw, "little", signed=True)
    if spec.bits_per_sample == 16:
        return value
    if spec.bits_per_sample == 24:
        return value >> 8
    return value >> 16


class WavDecoder(Source):
    """Source of 16-bit samples decoded from a WAV stream."""

    def __init__(self, data: BinaryIO) -> None:
        if not is_wave(data):
            raise ValueError("data is not in a supported WAV format")
        self._data = data
        self._spec = _read_header(data)
        self._samples_read = 0
        self.sample_format = SampleFormat.I16
        spec = self._spec
        self._total_duration = timedelta(
            microseconds=(1_000_000 * spec.sample_count)
            // (spec.sample_rate * spec.channels)
        )

    def __next__(self) -> int:
        spec = self._spec
        if self._samples_read >= spec.sample_count:
            raise StopIteration
        self._samples_read += 1
        raw = self._data.read(spec.bytes_per_sample)
        if raw is None or len(raw) != spec.bytes_per_sample:
            return 0
        return _to_i16(raw, spec)

    def current_frame_len(self) -> Optional[int]:
        return None

    def channels(self) -> int:
        return self._spec.channels

    def sample_rate(self) -> int:
        return self._spec.sample_rate

    def total_duration(self) -> Optional[timedelta]:
        return self._total_duration

    def size_hint(self) -> Tuple[int, Optional[int]]:
        remaining = self._spec.sample_count - self._samples_read
        return remaining, remaining

    def into_inner(self) -> BinaryIO:
        """Return the underlying stream."""
        return self._data