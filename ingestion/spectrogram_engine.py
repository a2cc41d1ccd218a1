"""
ingestion/spectrogram_engine.py — Spectrogram orchestrator.

SpectrogramEngine wires the I/O boundary to the pure analysis core:

    audio file
        │
        ├─ load_audio_signal()            [ingestion/audio_loader.py — I/O boundary]
        │       ↓
        ├─ compute_spectrogram()          [core/spectrogram/scheduler.py]
        │       ↓
        ├─ WaveformData                   (read-only handoff)
        │       ↓ (on render request)
        └─ channel_matrices()             [core/spectrogram/remap.py]
             + legend_steps()             [core/spectrogram/decibels.py]

This module lives in `ingestion/` because it performs file I/O and records
metrics. The core DSP logic is pure.

Design:
    - The loader is injected (`loader` field) so the engine is testable
      without an audio backend; it defaults to load_audio_signal.
    - Every run is timed and reported through infrastructure/metrics.py
      with a status of success / cancelled / invalid / error.
    - A cancel event can be shared with another thread to abort a long run
      at the next chunk boundary.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from core.spectrogram.config import DEFAULT_CONFIG, AnalysisConfig
from core.spectrogram.decibels import legend_steps
from core.spectrogram.errors import AnalysisCancelledError, SpectrogramError
from core.spectrogram.remap import DEFAULT_DISPLAY_FRACTION, channel_matrices
from core.spectrogram.scheduler import compute_spectrogram
from core.spectrogram.types import AudioSignal, ChannelMatrix, WaveformData
from infrastructure.metrics import LatencyTimer, record_spectrogram_run
from ingestion.audio_loader import load_audio_signal

logger = logging.getLogger(__name__)

AudioLoader = Callable[..., AudioSignal]


@dataclass
class SpectrogramEngine:
    """High-level orchestrator for spectrogram extraction.

    Attributes:
        config: Analysis parameters shared by every run of this engine.
        workers: Channel-level parallelism passed to compute_spectrogram().
        loader: Callable (path, *, duration) → AudioSignal.
        cancel_event: Set from another thread to abort the current run.

    cancel() is sticky: once the event is set every later analyze_* call
    raises AnalysisCancelledError at its first chunk until reset() clears it.
    """

    config: AnalysisConfig = DEFAULT_CONFIG
    workers: int = 1
    loader: AudioLoader = load_audio_signal
    cancel_event: threading.Event = field(default_factory=threading.Event)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def analyze_file(self, path: str | Path, *, duration: float | None = None) -> WaveformData:
        """Load an audio file and compute its spectrogram.

        Args:
            path:     Path to an audio file.
            duration: Max seconds to load (None = whole file).

        Returns:
            WaveformData for every channel of the file.

        Raises:
            FileNotFoundError: Audio file not found.
            ValueError:        Unsupported file extension or invalid signal.
            RuntimeError:      Audio decode failure or cancellation.
        """
        signal = self.loader(path, duration=duration)
        logger.info(
            "Loaded %s: %d channel(s), %.2fs @ %d Hz",
            Path(path).name,
            signal.channel_count,
            signal.duration_sec,
            signal.sample_rate,
        )
        return self.analyze_signal(signal)

    def analyze_signal(self, signal: AudioSignal) -> WaveformData:
        """Compute the spectrogram of an already-decoded signal and record metrics."""
        status = "error"
        data: WaveformData | None = None
        timer = LatencyTimer()
        try:
            with timer:
                data = compute_spectrogram(
                    signal,
                    self.config,
                    cancel_event=self.cancel_event,
                    workers=self.workers,
                )
            status = "success"
            return data
        except AnalysisCancelledError as exc:
            status = "cancelled"
            logger.warning("Spectrogram run cancelled: %s", exc)
            raise
        except SpectrogramError as exc:
            status = "invalid"
            logger.warning("Rejected spectrogram input: %s", exc)
            raise
        finally:
            record_spectrogram_run(
                status=status,
                latency_seconds=timer.elapsed,
                frames=data.frame_count * data.channel_count if data is not None else 0,
                audio_seconds=data.duration_sec if data is not None else 0.0,
            )

    def cancel(self) -> None:
        """Ask the running analysis to stop at its next chunk boundary."""
        self.cancel_event.set()

    def reset(self) -> None:
        """Clear a previous cancel() so the engine can run again."""
        self.cancel_event.clear()

    def render(
        self,
        data: WaveformData,
        *,
        rows: int | None = None,
        fraction: float = DEFAULT_DISPLAY_FRACTION,
    ) -> list[ChannelMatrix]:
        """Heatmap matrices (bins x frames) for every channel of a result."""
        matrices = channel_matrices(data, rows, fraction=fraction)
        logger.debug(
            "Rendered %d matrix/matrices of %d x %d",
            len(matrices),
            matrices[0].rows if matrices else 0,
            data.frame_count,
        )
        return matrices

    @staticmethod
    def legend(matrix: ChannelMatrix, steps: int = 5) -> list[tuple[int, str]]:
        """(byte, dB label) pairs for a channel's colour scale."""
        return legend_steps(matrix.db_range, steps)
