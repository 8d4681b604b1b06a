"""Composable PCM audio sources: buffers, sample and channel conversion, resampling, mixing, queues and WAV decoding."""

__version__ = "0.1.0"

__all__ = ["buffer", "channels", "decoder", "mixer", "queue", "sample", "sample_rate", "wav"]