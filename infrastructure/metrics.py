"""Prometheus metrics for the spectrogram pipeline.

Exposes analysis throughput so long batch jobs can be monitored, not just
their exit status.

Metrics:
    spectrogram_runs_total           Counter by status (success/cancelled/invalid/error)
    spectrogram_latency_seconds      Histogram of end-to-end analysis time
    spectrogram_frames_total         Counter of frames produced (all channels)
    spectrogram_audio_seconds_total  Counter of audio seconds analysed

Usage::

    from infrastructure.metrics import LatencyTimer, record_spectrogram_run

    with LatencyTimer() as t:
        data = compute_spectrogram(signal, config)
    record_spectrogram_run(
        status="success",
        latency_seconds=t.elapsed,
        frames=data.frame_count * data.channel_count,
        audio_seconds=data.duration_sec,
    )
"""

from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)

# Lazy import — prometheus_client is optional. If not installed, all calls
# are no-ops and get_metrics_response() returns an empty body.
_registry_available = False
try:
    from prometheus_client import (
        CONTENT_TYPE_LATEST,
        CollectorRegistry,
        Counter,
        Histogram,
        generate_latest,
    )

    _REGISTRY = CollectorRegistry()

    spectrogram_runs_total = Counter(
        "asg_spectrogram_runs_total",
        "Total spectrogram runs by status",
        ["status"],
        registry=_REGISTRY,
    )

    spectrogram_latency_seconds = Histogram(
        "asg_spectrogram_latency_seconds",
        "End-to-end spectrogram analysis latency in seconds",
        buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
        registry=_REGISTRY,
    )

    spectrogram_frames_total = Counter(
        "asg_spectrogram_frames_total",
        "Spectral frames produced, summed over channels",
        registry=_REGISTRY,
    )

    spectrogram_audio_seconds_total = Counter(
        "asg_spectrogram_audio_seconds_total",
        "Seconds of audio analysed",
        registry=_REGISTRY,
    )

    _registry_available = True
    logger.info("Prometheus metrics registry initialized")

except ImportError:
    logger.info("prometheus_client not installed — metrics disabled")
    _REGISTRY = None  # type: ignore[assignment]


# ---------------------------------------------------------------------------
# Public helpers — all are no-ops when prometheus_client is not installed
# ---------------------------------------------------------------------------


def record_spectrogram_run(
    *,
    status: str,
    latency_seconds: float,
    frames: int = 0,
    audio_seconds: float = 0.0,
) -> None:
    """Record a finished (or failed) spectrogram run.

    Args:
        status: One of "success", "cancelled", "invalid", "error".
        latency_seconds: Wall-clock time of the run in seconds.
        frames: Frames produced across all channels (0 on failure).
        audio_seconds: Duration of the analysed signal.
    """
    if not _registry_available:
        return
    spectrogram_runs_total.labels(status=status).inc()
    spectrogram_latency_seconds.observe(latency_seconds)
    if frames:
        spectrogram_frames_total.inc(frames)
    if audio_seconds:
        spectrogram_audio_seconds_total.inc(audio_seconds)


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
        Returns empty bytes if prometheus_client is not available.
    """
    if not _registry_available:
        return b"", "text/plain"
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            data = compute_spectrogram(signal, config)
        record_spectrogram_run(status="success", latency_seconds=t.elapsed)
    """

    def __init__(self) -> None:
        """Initialize timer."""
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        """Start timing."""
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        """Stop timing and record elapsed."""
        self.elapsed = time.perf_counter() - self._start
