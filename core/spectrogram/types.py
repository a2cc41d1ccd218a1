"""
core/spectrogram/types.py — Frozen data types for spectrogram analysis.

All types are frozen dataclasses — immutable value objects that can be
safely passed between the analysis pipeline and rendering collaborators.

Design principles:
    - No I/O, no side effects.
    - Sample and spectrum buffers are numpy arrays; WaveformData marks its
      channel buffers read-only at construction so the handoff to
      rendering cannot be mutated in place.
    - Shape invariants are checked at the creation sites (demux.py,
      scheduler.py, remap.py), not here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from core.spectrogram.config import DbRange


@dataclass(frozen=True)
class AudioSignal:
    """Decoded PCM audio handed to the pipeline by an external decoder.

    Invariants:
        sample_rate > 0
        channel_count >= 1
        interleaved: samples.shape == (length * channel_count,)
        planar:      samples.shape == (channel_count, length)
        samples are floats in [-1.0, 1.0]
    """

    sample_rate: int
    """Samples per second per channel, in Hz."""

    channel_count: int
    """Number of channels (N)."""

    samples: np.ndarray
    """Interleaved 1-D buffer or planar (N, L) buffer."""

    interleaved: bool = False
    """True when `samples` holds frames of N consecutive channel samples."""

    @classmethod
    def from_interleaved(cls, samples: np.ndarray, sample_rate: int, channel_count: int) -> AudioSignal:
        """Wrap an interleaved buffer (L0 R0 L1 R1 ...)."""
        return cls(
            sample_rate=sample_rate,
            channel_count=channel_count,
            samples=np.asarray(samples),
            interleaved=True,
        )

    @classmethod
    def from_planar(cls, samples: np.ndarray, sample_rate: int) -> AudioSignal:
        """Wrap a planar buffer. A 1-D array is treated as a single channel."""
        arr = np.asarray(samples)
        if arr.ndim == 1:
            arr = arr.reshape(1, -1)
        return cls(sample_rate=sample_rate, channel_count=arr.shape[0], samples=arr)

    @property
    def length(self) -> int:
        """Samples per channel (L)."""
        if self.interleaved:
            return self.samples.size // max(self.channel_count, 1)
        return self.samples.shape[-1] if self.samples.ndim else 0

    @property
    def duration_sec(self) -> float:
        """Signal duration in seconds."""
        return self.length / self.sample_rate


@dataclass(frozen=True)
class WaveformData:
    """Complete spectrogram of a signal: the handoff to rendering.

    `channels[i]` is a flat frame-major uint8 buffer: all `bin_count` bins
    of frame 0, then all bins of frame 1, and so on.

    Invariants:
        len(channels[i]) == frame_count * bin_count
        len(db_ranges) == len(channels)
        max_frequency_hz == sample_rate / 2
    """

    channels: tuple[np.ndarray, ...]
    """One quantized spectrum per channel (read-only)."""

    bin_count: int
    """Frequency bins per frame (fft_size / 2)."""

    frame_count: int
    """Frames per channel (ceil(length / hop_size))."""

    max_frequency_hz: float
    """Nyquist frequency of the source signal."""

    duration_sec: float
    """Duration of the source signal in seconds."""

    db_ranges: tuple[DbRange, ...]
    """Calibration used to quantize each channel."""

    sample_rate: int
    """Sample rate of the source signal in Hz."""

    hop_size: int
    """Samples between consecutive frames."""

    def __post_init__(self) -> None:
        for channel in self.channels:
            channel.flags.writeable = False

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    @property
    def frame_duration_sec(self) -> float:
        """Time covered by one frame (one hop)."""
        return self.hop_size / self.sample_rate

    def bin_frequency_hz(self, bin_index: int) -> float:
        """Centre frequency of a bin; bins are spaced Nyquist / bin_count apart."""
        return bin_index * self.max_frequency_hz / self.bin_count

    def frame_time_sec(self, frame_index: int) -> float:
        """Start time of a frame's hop within the signal."""
        return frame_index * self.frame_duration_sec

    def frame(self, channel_index: int, frame_index: int) -> np.ndarray:
        """View of the `bin_count` bytes of one frame."""
        start = frame_index * self.bin_count
        return self.channels[channel_index][start : start + self.bin_count]


@dataclass(frozen=True)
class ChannelMatrix:
    """A channel's spectrogram prepared for a heatmap widget.

    `values` has frequency bins as rows (row 0 = 0 Hz) and time frames as
    columns. It is freshly allocated per request and never aliases the
    WaveformData buffers.
    """

    channel_index: int
    values: np.ndarray
    db_range: DbRange
    duration_sec: float
    max_display_frequency_hz: float

    @property
    def rows(self) -> int:
        return int(self.values.shape[0])

    @property
    def columns(self) -> int:
        return int(self.values.shape[1])

    @property
    def extent(self) -> tuple[tuple[float, float], tuple[float, float]]:
        """Heatmap ((x_start, y_start), (x_end, y_end)) in (seconds, Hz)."""
        return (0.0, 0.0), (self.duration_sec, float(math.ceil(self.max_display_frequency_hz)))
