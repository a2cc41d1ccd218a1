"""
core/spectrogram/scheduler.py — Drive the analyzers across a whole signal.

Pipeline:
    validate config + signal     (fail fast, nothing allocated yet)
        ↓
    demultiplex()                [demux.py]
        ↓
    allocate frame_count * bin_count bytes per channel (never resized)
        ↓
    for k in range(frame_count):               strictly ordered per channel
        chunk k = samples[k*hop : (k+1)*hop]   zero-padded when short
        push_samples() + compute_frame()       [analyzer.py]
        write at offset k * bin_count
        ↓
    WaveformData

Channels are independent: `workers=1` runs them in lock-step inside the
chunk loop, `workers>1` gives every channel its own thread and joins them
before WaveformData is built. Cancellation is checked at chunk boundaries.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from core.spectrogram.analyzer import AnalyzerState, compute_frame, new_analyzer_state, push_samples
from core.spectrogram.config import AnalysisConfig
from core.spectrogram.demux import demultiplex, validate_signal
from core.spectrogram.errors import AnalysisCancelledError
from core.spectrogram.types import AudioSignal, WaveformData

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def frame_count_for(length: int, hop_size: int) -> int:
    """Frames produced for `length` samples: ceil(length / hop_size)."""
    return math.ceil(length / hop_size) if length > 0 else 0


def _chunk(samples: np.ndarray, index: int, hop_size: int) -> np.ndarray:
    """Samples of chunk `index`, zero-padded to hop_size at the end of the signal."""
    start = index * hop_size
    chunk = samples[start : start + hop_size]
    if chunk.size < hop_size:
        chunk = np.concatenate((chunk, np.zeros(hop_size - chunk.size, dtype=np.float64)))
    return chunk


def _analyze_chunk(
    samples: np.ndarray,
    state: AnalyzerState,
    output: np.ndarray,
    index: int,
    config: AnalysisConfig,
) -> None:
    push_samples(state, _chunk(samples, index, config.hop_size))
    offset = index * config.bin_count
    output[offset : offset + config.bin_count] = compute_frame(state, config.smoothing)


def _run_channel(
    samples: np.ndarray,
    state: AnalyzerState,
    output: np.ndarray,
    frame_count: int,
    config: AnalysisConfig,
    cancel_event: threading.Event | None,
) -> None:
    """Process every chunk of one channel in order (worker-thread body)."""
    for index in range(frame_count):
        if cancel_event is not None and cancel_event.is_set():
            raise AnalysisCancelledError(index, frame_count)
        _analyze_chunk(samples, state, output, index, config)


def compute_spectrogram(
    signal: AudioSignal,
    config: AnalysisConfig,
    *,
    cancel_event: threading.Event | None = None,
    workers: int = 1,
    on_progress: ProgressCallback | None = None,
) -> WaveformData:
    """Compute the quantized spectrogram of every channel of a signal.

    Args:
        signal: Decoded audio (interleaved or planar).
        config: FFT size, hop size, smoothing and calibration.
        cancel_event: Set it from another thread to abort at the next chunk
            boundary.
        workers: 1 processes channels in lock-step; more runs up to that many
            channels concurrently, one thread per channel.
        on_progress: Called as on_progress(frames_done, frame_count). In
            lock-step mode after every chunk; with workers > 1 once, after
            all channels have finished.

    Returns:
        WaveformData with one frame_count * bin_count buffer per channel.

    Raises:
        InvalidChannelCountError, MalformedBufferError: Bad signal layout.
        CalibrationRangeError: db_ranges does not match the channel count.
        AnalysisCancelledError: cancel_event was set during the run.
        ValueError: workers < 1.
    """
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    # Everything is validated before any buffer is allocated
    validate_signal(signal)
    db_ranges = config.ranges_for(signal.channel_count)

    channels = demultiplex(signal)
    frame_count = frame_count_for(signal.length, config.hop_size)
    bin_count = config.bin_count

    outputs = [np.zeros(frame_count * bin_count, dtype=np.uint8) for _ in channels]
    states = [new_analyzer_state(config, db_range) for db_range in db_ranges]

    logger.debug(
        "Spectrogram run: %d channel(s), %d samples @ %d Hz, fft=%d hop=%d → %d frames",
        signal.channel_count,
        signal.length,
        signal.sample_rate,
        config.fft_size,
        config.hop_size,
        frame_count,
    )
    started = time.perf_counter()

    if workers == 1 or len(channels) == 1:
        for index in range(frame_count):
            if cancel_event is not None and cancel_event.is_set():
                raise AnalysisCancelledError(index, frame_count)
            for samples, state, output in zip(channels, states, outputs):
                _analyze_chunk(samples, state, output, index, config)
            if on_progress is not None:
                on_progress(index + 1, frame_count)
    else:
        with ThreadPoolExecutor(max_workers=min(workers, len(channels))) as pool:
            futures = [
                pool.submit(_run_channel, samples, state, output, frame_count, config, cancel_event)
                for samples, state, output in zip(channels, states, outputs)
            ]
            # result() re-raises worker exceptions, including cancellation
            for future in futures:
                future.result()
        if on_progress is not None:
            on_progress(frame_count, frame_count)

    logger.info(
        "Computed %d frame(s) x %d bin(s) for %d channel(s) in %.3fs",
        frame_count,
        bin_count,
        len(channels),
        time.perf_counter() - started,
    )

    return WaveformData(
        channels=tuple(outputs),
        bin_count=bin_count,
        frame_count=frame_count,
        max_frequency_hz=signal.sample_rate / 2,
        duration_sec=signal.duration_sec,
        db_ranges=db_ranges,
        sample_rate=signal.sample_rate,
        hop_size=config.hop_size,
    )
