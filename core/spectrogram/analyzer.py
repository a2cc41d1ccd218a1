"""
core/spectrogram/analyzer.py — Windowed FFT magnitude frames for one channel.

Each channel owns an AnalyzerState record: a circular buffer holding the
most recent `fft_size` samples plus the previous smoothed magnitudes. The
scheduler threads the state through push_samples() / compute_frame(); no
state is shared between channels.

Frame computation:
    1. Unroll the circular buffer into time order.
    2. Apply a Blackman window (scipy.signal.get_window, periodic form).
    3. Real FFT (numpy.fft.rfft) — O(n log n), Nyquist bin dropped.
    4. Magnitude |X[k]| / fft_size.
    5. Temporal smoothing: prev * s + cur * (1 - s), skipped on the first frame.
    6. 20*log10 → linear map of [min_db, max_db] onto [0, 255], clamped,
       truncated to uint8.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

import numpy as np
from scipy import signal as scipy_signal

from core.spectrogram.config import DEFAULT_DB_RANGE, AnalysisConfig, DbRange

BYTE_MAX: int = 255


@lru_cache(maxsize=16)
def blackman_window(fft_size: int) -> np.ndarray:
    """Periodic Blackman window of length fft_size (read-only, cached)."""
    window = scipy_signal.get_window("blackman", fft_size, fftbins=True).astype(np.float64)
    window.flags.writeable = False
    return window


@dataclass
class AnalyzerState:
    """Private analysis state of one channel.

    Attributes:
        fft_size: Window length in samples.
        db_range: Calibration used for quantization.
        window: Circular buffer of the most recent fft_size samples.
        write_pos: Index where the next sample is written (oldest sample).
        previous: Smoothed magnitudes of the last frame, None before the first.
        frames_computed: Number of frames produced so far.
    """

    fft_size: int
    db_range: DbRange = DEFAULT_DB_RANGE
    window: np.ndarray = field(init=False)
    write_pos: int = 0
    previous: np.ndarray | None = None
    frames_computed: int = 0

    def __post_init__(self) -> None:
        self.window = np.zeros(self.fft_size, dtype=np.float64)

    @property
    def bin_count(self) -> int:
        return self.fft_size // 2

    def ordered_window(self) -> np.ndarray:
        """Buffer contents from oldest to newest sample."""
        return np.concatenate((self.window[self.write_pos :], self.window[: self.write_pos]))


def new_analyzer_state(config: AnalysisConfig, db_range: DbRange = DEFAULT_DB_RANGE) -> AnalyzerState:
    """Fresh state for one channel: silent window, no smoothing history."""
    return AnalyzerState(fft_size=config.fft_size, db_range=db_range)


def push_samples(state: AnalyzerState, chunk: np.ndarray) -> None:
    """Append a chunk of samples to the circular window.

    Chunks longer than the window only keep their last fft_size samples.
    """
    size = state.fft_size
    n = chunk.size
    if n == 0:
        return
    if n >= size:
        state.window[:] = chunk[-size:]
        state.write_pos = 0
        return

    end = state.write_pos + n
    if end <= size:
        state.window[state.write_pos : end] = chunk
    else:
        first = size - state.write_pos
        state.window[state.write_pos :] = chunk[:first]
        state.window[: n - first] = chunk[first:]
    state.write_pos = end % size


def magnitude_spectrum(samples: np.ndarray) -> np.ndarray:
    """Normalised magnitudes of the lower fft_size / 2 bins of a windowed frame."""
    fft_size = samples.size
    spectrum = np.fft.rfft(samples * blackman_window(fft_size))
    return np.abs(spectrum[: fft_size // 2]) / fft_size


def quantize(magnitudes: np.ndarray, db_range: DbRange) -> np.ndarray:
    """Map linear magnitudes to bytes through the dB calibration.

    Zero magnitude (-inf dB) and anything below min_db map to 0; anything at
    or above max_db maps to 255.
    """
    # log10(0) → -inf is expected for silent bins; clip handles it
    with np.errstate(divide="ignore"):
        db = 20.0 * np.log10(magnitudes)
    scaled = BYTE_MAX * (db - db_range.min_db) / db_range.span
    scaled = np.nan_to_num(scaled, nan=0.0, posinf=float(BYTE_MAX), neginf=0.0)
    return np.clip(scaled, 0.0, float(BYTE_MAX)).astype(np.uint8)


def compute_frame(state: AnalyzerState, smoothing: float) -> np.ndarray:
    """Produce one quantized frame from the current window.

    Args:
        state: The channel's analyzer state; its smoothing history is updated.
        smoothing: Weight of the previous frame, in [0, 1).

    Returns:
        uint8 array of length state.bin_count.
    """
    current = magnitude_spectrum(state.ordered_window())
    if state.previous is not None and smoothing > 0.0:
        current = state.previous * smoothing + current * (1.0 - smoothing)
    state.previous = current
    state.frames_computed += 1
    return quantize(current, state.db_range)
