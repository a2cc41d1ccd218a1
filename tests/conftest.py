"""
Shared fixtures for the test suite.

Centralizes synthetic signals so individual test files don't need to
repeat generator boilerplate.

Signal conventions:
    - Planar: shape (channels, N), dtype float64
    - Interleaved: shape (N * channels,), frames of consecutive channel samples
    - Amplitudes stay within [-1.0, 1.0]
"""

from __future__ import annotations

import numpy as np
import pytest

from core.spectrogram.config import AnalysisConfig
from core.spectrogram.types import AudioSignal

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SR = 8000
"""Low sample rate keeps FFTs in tests fast."""


# ---------------------------------------------------------------------------
# Signal generators
# ---------------------------------------------------------------------------


def make_sine(freq_hz: float, n: int, amplitude: float = 0.5, sr: int = SR) -> np.ndarray:
    """Mono sine wave of n samples."""
    t = np.arange(n) / sr
    return (amplitude * np.sin(2.0 * np.pi * freq_hz * t)).astype(np.float64)


def make_noise(n: int, amplitude: float = 0.3, seed: int = 42) -> np.ndarray:
    """Uniform white noise of n samples, within [-amplitude, amplitude]."""
    rng = np.random.default_rng(seed)
    return rng.uniform(-amplitude, amplitude, n).astype(np.float64)


def interleave(*channels: np.ndarray) -> np.ndarray:
    """Interleave equal-length channels: c0[0], c1[0], c0[1], c1[1], ..."""
    return np.stack(channels, axis=1).reshape(-1)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def small_config() -> AnalysisConfig:
    """Fast config: 256-point FFT, 128-sample hop, no smoothing."""
    return AnalysisConfig(fft_size=256, hop_size=128, smoothing=0.0)


@pytest.fixture()
def stereo_signal() -> AudioSignal:
    """1 s stereo signal: 440 Hz on the left, 1500 Hz on the right."""
    n = SR
    left = make_sine(440.0, n)
    right = make_sine(1500.0, n)
    return AudioSignal.from_planar(np.stack([left, right]), SR)


@pytest.fixture()
def silent_signal() -> AudioSignal:
    """1000 samples of mono silence."""
    return AudioSignal.from_planar(np.zeros(1000), SR)
