"""Decoding of audio files into sources of 16-bit samples."""

from __future__ import annotations

import enum
import io
from datetime import timedelta
from typing import BinaryIO, Optional, Tuple

from .buffer import Source
from .sample import SampleFormat
from .wav import WavDecoder


class DecoderError(Exception):
    """Error raised when a decoder cannot be created."""


class UnrecognizedFormatError(DecoderError):
    """The format of the data has not been recognized."""

    def __init__(self, message: str = "Unrecognized format") -> None:
        super().__init__(message)


class Mp4Type(enum.Enum):
    """Extensions of files in the MP4 container family."""

    MP4 = "mp4"
    M4A = "m4a"
    M4P = "m4p"
    M4B = "m4b"
    M4R = "m4r"
    M4V = "m4v"
    MOV = "mov"

    @classmethod
    def parse(cls, text: str) -> "Mp4Type":
        """Parse an extension, ignoring case."""
        try:
            return cls(text.lower())
        except ValueError:
            raise ValueError(f"{text} is not a valid mp4 extension") from None

    def __str__(self) -> str:
        return self.value


class Decoder(Source):
    """Source of samples decoded from a seekable binary stream.

    The format is detected automatically; WAV is supported.
    """

    def __init__(self, data: BinaryIO) -> None:
        try:
            self._inner = WavDecoder(data)
        except ValueError:
            raise UnrecognizedFormatError() from None
        self.sample_format = SampleFormat.I16

    @classmethod
    def new_wav(cls, data: BinaryIO) -> "Decoder":
        """Build a decoder for WAV data."""
        return cls(data)

    @classmethod
    def new_looped(cls, data: BinaryIO) -> "LoopedDecoder":
        """Build a decoder that starts over whenever the data ends."""
        return LoopedDecoder(cls(data))

    def __next__(self) -> int:
        return next(self._inner)

    def current_frame_len(self) -> Optional[int]:
        return self._inner.current_frame_len()

    def channels(self) -> int:
        return self._inner.channels()

    def sample_rate(self) -> int:
        return self._inner.sample_rate()

    def total_duration(self) -> Optional[timedelta]:
        return self._inner.total_duration()

    def size_hint(self) -> Tuple[int, Optional[int]]:
        return self._inner.size_hint()


class LoopedDecoder(Source):
    """Source that replays a decoded stream from its start forever."""

    def __init__(self, decoder: Decoder) -> None:
        self._inner: Optional[WavDecoder] = decoder._inner
        self.sample_format = SampleFormat.I16

    def __next__(self) -> int:
        if self._inner is None:
            raise StopIteration
        sample = next(self._inner, None)
        if sample is not None:
            return sample

        reader = self._inner.into_inner()
        self._inner = None
        try:
            reader.seek(0, io.SEEK_SET)
            restarted = WavDecoder(reader)
        except (ValueError, OSError):
            raise StopIteration from None
        self._inner = restarted
        return next(restarted)

    def current_frame_len(self) -> Optional[int]:
        if self._inner is None:
            return 0
        return self._inner.current_frame_len()

    def channels(self) -> int:
        if self._inner is None:
            return 0
        return self._inner.channels()

    def sample_rate(self) -> int:
        if self._inner is None:
            return 1
        return self._inner.sample_rate()

    def total_duration(self) -> Optional[timedelta]:
        return None

    def size_hint(self) -> Tuple[int, Optional[int]]:
        if self._inner is None:
            return 0, None
        return self._inner.size_hint()[0], None