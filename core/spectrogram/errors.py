"""
core/spectrogram/errors.py — Exception hierarchy for the spectrogram pipeline.

Every configuration or input problem is detected before any frame is
computed, so callers either get a complete WaveformData or one of these.

All validation errors subclass ValueError so existing `except ValueError`
handlers at the I/O boundary keep working.
"""

from __future__ import annotations


class SpectrogramError(ValueError):
    """Base class for invalid signal or analysis configuration."""


class InvalidChannelCountError(SpectrogramError):
    """Raised when a signal declares fewer than one channel."""

    def __init__(self, channel_count: int) -> None:
        self.channel_count = channel_count
        super().__init__(f"channel_count must be >= 1, got {channel_count}")


class MalformedBufferError(SpectrogramError):
    """Raised when a sample or spectrum buffer does not match its declared shape."""


class InvalidFftSizeError(SpectrogramError):
    """Raised when fft_size is not a supported power of two."""

    def __init__(self, fft_size: int, min_size: int, max_size: int) -> None:
        self.fft_size = fft_size
        super().__init__(
            f"fft_size must be a power of two in [{min_size}, {max_size}], got {fft_size}"
        )


class InvalidHopSizeError(SpectrogramError):
    """Raised when hop_size is not a positive integer."""

    def __init__(self, hop_size: int) -> None:
        self.hop_size = hop_size
        super().__init__(f"hop_size must be positive, got {hop_size}")


class CalibrationRangeError(SpectrogramError):
    """Raised when a dB calibration is inverted or does not cover every channel."""


class AnalysisCancelledError(RuntimeError):
    """Raised when a run is aborted through its cancel event.

    Args:
        frames_done: Frames completed (per channel) before cancellation.
        frame_count: Total frames the run would have produced.
    """

    def __init__(self, frames_done: int, frame_count: int) -> None:
        self.frames_done = frames_done
        self.frame_count = frame_count
        super().__init__(f"Spectrogram analysis cancelled after {frames_done}/{frame_count} frames")
