"""
Configuration dataclasses for the spectrogram pipeline.

These immutable config objects are supplied once per run and reused across
compute_spectrogram() calls. Validation happens at construction so a bad
config never reaches the analyzer.
"""

from __future__ import annotations

import operator
from collections.abc import Sequence
from dataclasses import dataclass

from core.spectrogram.errors import (
    CalibrationRangeError,
    InvalidFftSizeError,
    InvalidHopSizeError,
)

# Smallest analysis window the analyzer supports; fft_size must be at least twice this.
MIN_WINDOW_SIZE: int = 2
MIN_FFT_SIZE: int = 2 * MIN_WINDOW_SIZE
MAX_FFT_SIZE: int = 32768

# Calibration reported by an analyzer when the caller supplies none.
DEFAULT_MIN_DB: float = -100.0
DEFAULT_MAX_DB: float = -30.0


def is_power_of_two(value: int) -> bool:
    """True for 1, 2, 4, 8, ..."""
    return value > 0 and (value & (value - 1)) == 0


def _as_int(value: object) -> int | None:
    """Plain int for any integral value (numpy integers included), else None."""
    if isinstance(value, bool):
        return None
    try:
        return operator.index(value)  # type: ignore[arg-type]
    except TypeError:
        return None


@dataclass(frozen=True)
class DbRange:
    """Decibel calibration for one channel.

    Byte 0 of a quantized frame corresponds to `min_db`, byte 255 to `max_db`.

    Invariants:
        min_db < max_db
    """

    min_db: float = DEFAULT_MIN_DB
    max_db: float = DEFAULT_MAX_DB

    def __post_init__(self) -> None:
        if not self.min_db < self.max_db:
            raise CalibrationRangeError(
                f"min_db ({self.min_db}) must be less than max_db ({self.max_db})"
            )

    @property
    def span(self) -> float:
        """Width of the range in dB."""
        return self.max_db - self.min_db


DEFAULT_DB_RANGE = DbRange()


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Parameters for one spectrogram run.

    Attributes:
        fft_size: Analysis window length in samples. Power of two in
            [MIN_FFT_SIZE, MAX_FFT_SIZE]. Determines frequency resolution.
        hop_size: Samples consumed per produced frame. Independent of
            fft_size, so consecutive windows may overlap or leave gaps.
        smoothing: Weight of the previous frame when blending, in [0, 1).
            0 disables temporal smoothing.
        db_ranges: Per-channel calibration. None uses DEFAULT_DB_RANGE for
            every channel, a single DbRange applies to all channels, and a
            sequence must hold exactly one range per channel.

    Example:
        >>> config = AnalysisConfig(fft_size=2048, hop_size=512, smoothing=0.0)
        >>> data = compute_spectrogram(signal, config)
    """

    fft_size: int = 4096
    hop_size: int = 2048
    smoothing: float = 0.1
    db_ranges: DbRange | tuple[DbRange, ...] | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        fft_size = _as_int(self.fft_size)
        if (
            fft_size is None
            or not is_power_of_two(fft_size)
            or not MIN_FFT_SIZE <= fft_size <= MAX_FFT_SIZE
        ):
            raise InvalidFftSizeError(self.fft_size, MIN_FFT_SIZE, MAX_FFT_SIZE)
        hop_size = _as_int(self.hop_size)
        if hop_size is None or hop_size <= 0:
            raise InvalidHopSizeError(self.hop_size)
        # Store plain ints so numpy integer inputs behave like the defaults
        object.__setattr__(self, "fft_size", fft_size)
        object.__setattr__(self, "hop_size", hop_size)
        if not 0.0 <= self.smoothing < 1.0:
            raise ValueError(f"smoothing must be in [0, 1), got {self.smoothing}")
        if self.db_ranges is None or isinstance(self.db_ranges, DbRange):
            return
        if isinstance(self.db_ranges, str) or not isinstance(self.db_ranges, Sequence):
            raise TypeError(
                "db_ranges must be None, a DbRange or a sequence of DbRange, "
                f"got {type(self.db_ranges).__name__}"
            )
        # Normalise lists to a tuple so the config stays hashable
        object.__setattr__(self, "db_ranges", tuple(self.db_ranges))
        for db_range in self.db_ranges:
            if not isinstance(db_range, DbRange):
                raise TypeError(f"db_ranges entries must be DbRange, got {type(db_range).__name__}")

    @property
    def bin_count(self) -> int:
        """Frequency bins per frame (bins above Nyquist are not produced)."""
        return self.fft_size // 2

    def ranges_for(self, channel_count: int) -> tuple[DbRange, ...]:
        """Resolve the calibration of every channel.

        Raises:
            CalibrationRangeError: A per-channel sequence has the wrong length.
        """
        if self.db_ranges is None:
            return (DEFAULT_DB_RANGE,) * channel_count
        if isinstance(self.db_ranges, DbRange):
            return (self.db_ranges,) * channel_count
        if len(self.db_ranges) != channel_count:
            raise CalibrationRangeError(
                f"expected {channel_count} db_ranges (one per channel), got {len(self.db_ranges)}"
            )
        return self.db_ranges


# Pre-defined configurations

DEFAULT_CONFIG = AnalysisConfig()
"""4096-point FFT every 2048 samples with light smoothing (0.1)."""

FAST_CONFIG = AnalysisConfig(fft_size=1024, hop_size=1024, smoothing=0.0)
"""Coarse preview: small window, no overlap, no smoothing."""

HIGH_RESOLUTION_CONFIG = AnalysisConfig(fft_size=8192, hop_size=1024, smoothing=0.1)
"""Fine frequency resolution with 8x window overlap."""
