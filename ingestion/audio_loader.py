"""
ingestion/audio_loader.py — File I/O boundary for audio loading.

This is the ONLY module in the spectrogram pipeline that reads files from
disk. Everything downstream (core/spectrogram/) takes a pre-decoded
AudioSignal — never file paths.

Usage:
    from ingestion.audio_loader import load_audio_signal
    signal = load_audio_signal("/path/to/recording.wav")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from core.spectrogram.types import AudioSignal

# Supported audio file extensions (must be loadable by librosa / soundfile)
AUDIO_EXTENSIONS: frozenset[str] = frozenset(
    {".mp3", ".wav", ".flac", ".aiff", ".aif", ".ogg", ".m4a", ".opus"}
)

# Default: the whole file; spectrograms cover the complete signal
DEFAULT_DURATION: float | None = None


def load_audio_signal(
    path: str | Path,
    *,
    duration: float | None = DEFAULT_DURATION,
    sr: int | None = None,
) -> AudioSignal:
    """Decode an audio file into a planar multi-channel AudioSignal.

    Channels are preserved (no mono mix-down) and the native sample rate is
    kept unless `sr` is given.

    Args:
        path: Absolute or relative path to an audio file.
              Supported formats: mp3, wav, flac, aiff, ogg, m4a, opus.
        duration: Maximum seconds to load. None loads the entire file.
        sr: Target sample rate in Hz. None preserves the native rate.

    Returns:
        AudioSignal with samples of shape (channels, length), float32.

    Raises:
        FileNotFoundError: File does not exist at the given path.
        ValueError: File extension is not a supported audio format.
        RuntimeError: librosa/soundfile could not decode the file
                      (corrupted, truncated, DRM-protected, etc.).
    """
    import librosa  # deferred to allow testing without audio backend

    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"Audio file not found: {file_path}")

    if file_path.suffix.lower() not in AUDIO_EXTENSIONS:
        raise ValueError(
            f"Unsupported audio format {file_path.suffix!r}. "
            f"Supported: {sorted(AUDIO_EXTENSIONS)}"
        )

    try:
        y, loaded_sr = librosa.load(
            file_path,
            sr=sr,
            mono=False,
            duration=duration,
            offset=0.0,
        )
    except Exception as exc:
        raise RuntimeError(
            f"Failed to decode audio file {file_path.name!r}: {exc}"
        ) from exc

    # librosa returns (N,) for single-channel files and (C, N) otherwise
    return AudioSignal.from_planar(np.asarray(y, dtype=np.float32), int(loaded_sr))
