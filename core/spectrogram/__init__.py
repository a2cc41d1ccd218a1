"""
core/spectrogram — Offline spectrogram extraction for heatmap rendering.

Turns decoded multi-channel PCM into per-channel quantized magnitude
spectra, and remaps those into frequency-by-time matrices on demand.

All functions are pure computations over numpy arrays; no file I/O in this
package (audio loading lives in ingestion/audio_loader.py).

Architecture note:
    numpy and scipy are pure computation libraries (no I/O, no side effects).
    librosa is only imported by the I/O boundary, never here.

Public API:
    Types:      AudioSignal, WaveformData, ChannelMatrix
    Config:     AnalysisConfig, DbRange, DEFAULT_CONFIG
    Pipeline:   demultiplex, compute_spectrogram, frame_count_for
    Remapping:  remap_to_matrix, channel_matrices, display_rows
    Labels:     byte_to_db, format_db_label, legend_steps
    Errors:     SpectrogramError and subclasses, AnalysisCancelledError
"""

from core.spectrogram.config import (
    DEFAULT_CONFIG,
    DEFAULT_DB_RANGE,
    FAST_CONFIG,
    HIGH_RESOLUTION_CONFIG,
    AnalysisConfig,
    DbRange,
)
from core.spectrogram.decibels import byte_to_db, db_to_byte, format_db_label, legend_steps
from core.spectrogram.demux import demultiplex
from core.spectrogram.errors import (
    AnalysisCancelledError,
    CalibrationRangeError,
    InvalidChannelCountError,
    InvalidFftSizeError,
    InvalidHopSizeError,
    MalformedBufferError,
    SpectrogramError,
)
from core.spectrogram.remap import channel_matrices, display_rows, remap_to_matrix
from core.spectrogram.scheduler import compute_spectrogram, frame_count_for
from core.spectrogram.types import AudioSignal, ChannelMatrix, WaveformData

__all__ = [
    # Types
    "AudioSignal",
    "WaveformData",
    "ChannelMatrix",
    # Config
    "AnalysisConfig",
    "DbRange",
    "DEFAULT_CONFIG",
    "DEFAULT_DB_RANGE",
    "FAST_CONFIG",
    "HIGH_RESOLUTION_CONFIG",
    # Pipeline
    "demultiplex",
    "compute_spectrogram",
    "frame_count_for",
    # Remapping
    "remap_to_matrix",
    "channel_matrices",
    "display_rows",
    # Labels
    "byte_to_db",
    "db_to_byte",
    "format_db_label",
    "legend_steps",
    # Errors
    "SpectrogramError",
    "InvalidChannelCountError",
    "MalformedBufferError",
    "InvalidFftSizeError",
    "InvalidHopSizeError",
    "CalibrationRangeError",
    "AnalysisCancelledError",
]
