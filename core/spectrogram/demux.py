"""
core/spectrogram/demux.py — Split a multi-channel buffer into per-channel streams.

Interleaved input is de-strided with numpy slicing (`samples[i::N]`), so
each channel is a view of the caller's buffer; nothing is copied or scaled.
"""

from __future__ import annotations

import numpy as np

from core.spectrogram.errors import InvalidChannelCountError, MalformedBufferError
from core.spectrogram.types import AudioSignal


def validate_signal(signal: AudioSignal) -> None:
    """Check a signal's declared layout against its buffer.

    Raises:
        InvalidChannelCountError: channel_count < 1.
        MalformedBufferError: Non-positive sample rate, non-numeric samples,
            or a buffer whose shape does not match the declared layout.
    """
    if signal.channel_count < 1:
        raise InvalidChannelCountError(signal.channel_count)
    if signal.sample_rate <= 0:
        raise MalformedBufferError(f"sample_rate must be positive, got {signal.sample_rate}")

    samples = signal.samples
    if not np.issubdtype(samples.dtype, np.number):
        raise MalformedBufferError(f"samples must be numeric, got dtype {samples.dtype}")

    if signal.interleaved:
        if samples.ndim != 1:
            raise MalformedBufferError(
                f"interleaved samples must be 1-D, got shape {samples.shape}"
            )
        if samples.size % signal.channel_count != 0:
            raise MalformedBufferError(
                f"interleaved buffer of {samples.size} samples is not a multiple "
                f"of channel_count={signal.channel_count}"
            )
    else:
        if samples.ndim != 2:
            raise MalformedBufferError(f"planar samples must be 2-D, got shape {samples.shape}")
        if samples.shape[0] != signal.channel_count:
            raise MalformedBufferError(
                f"planar buffer has {samples.shape[0]} rows, "
                f"expected channel_count={signal.channel_count}"
            )


def demultiplex(signal: AudioSignal) -> tuple[np.ndarray, ...]:
    """Return one read-only sample sequence per channel.

    Interleaved: channel i at position t is `samples[t * N + i]`.
    Planar: channel i is row i.

    Args:
        signal: Decoded audio with a declared channel layout.

    Returns:
        Tuple of N 1-D arrays, each of length signal.length.

    Raises:
        InvalidChannelCountError, MalformedBufferError: see validate_signal().
    """
    validate_signal(signal)

    n = signal.channel_count
    if signal.interleaved:
        channels = [signal.samples[i::n] for i in range(n)]
    else:
        channels = [signal.samples[i] for i in range(n)]

    for channel in channels:
        channel.flags.writeable = False
    return tuple(channels)
