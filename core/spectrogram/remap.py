"""
core/spectrogram/remap.py — Flat frame-major spectra → 2-D heatmap matrices.

The flat buffer stores frames one after another:

    [f0b0, f0b1, f1b0, f1b1, f2b0, f2b1]     bin_count=2, frame_count=3

The heatmap wants frequency bins as rows and time as columns:

    [[f0b0, f1b0, f2b0],
     [f0b1, f1b1, f2b1]]

i.e. out[row][col] = flat[col * bin_count + row]. This is a transpose, not
a reshape — reshaping straight to (bin_count, frame_count) yields a skewed
image. Only the first `rows` bins are kept; by default the lower half.
"""

from __future__ import annotations

import math

import numpy as np

from core.spectrogram.errors import MalformedBufferError
from core.spectrogram.types import ChannelMatrix, WaveformData

# Share of the bins shown by default (the lower half of the spectrum)
DEFAULT_DISPLAY_FRACTION: float = 0.5


def display_rows(bin_count: int, fraction: float = DEFAULT_DISPLAY_FRACTION) -> int:
    """Number of lowest bins to display: ceil(bin_count * fraction).

    Raises:
        ValueError: fraction outside (0, 1].
    """
    if not 0.0 < fraction <= 1.0:
        raise ValueError(f"fraction must be in (0, 1], got {fraction}")
    return max(1, math.ceil(bin_count * fraction))


def remap_to_matrix(
    spectrum: np.ndarray,
    bin_count: int,
    frame_count: int,
    rows: int | None = None,
) -> np.ndarray:
    """Transpose a frame-major spectrum into a (rows, frame_count) matrix.

    Args:
        spectrum: Flat buffer of frame_count * bin_count values.
        bin_count: Values per frame (stride).
        frame_count: Number of frames (output columns).
        rows: Lowest bins to keep. None keeps all bin_count rows.

    Returns:
        Newly allocated C-contiguous array; `spectrum` is left untouched.

    Raises:
        MalformedBufferError: Buffer length != bin_count * frame_count.
        ValueError: rows outside [1, bin_count].
    """
    flat = np.asarray(spectrum)
    if flat.ndim != 1 or flat.size != bin_count * frame_count:
        raise MalformedBufferError(
            f"spectrum of shape {flat.shape} does not hold "
            f"{frame_count} frame(s) x {bin_count} bin(s)"
        )
    if rows is None:
        rows = bin_count
    if not 1 <= rows <= bin_count:
        raise ValueError(f"rows must be in [1, {bin_count}], got {rows}")

    frames = flat.reshape(frame_count, bin_count)
    # Copy even when the transposed view is already C-contiguous
    return np.array(frames[:, :rows].T, order="C", copy=True)


def channel_matrices(
    data: WaveformData,
    rows: int | None = None,
    *,
    fraction: float = DEFAULT_DISPLAY_FRACTION,
) -> list[ChannelMatrix]:
    """Build one heatmap-ready matrix per channel.

    Args:
        data: Result of compute_spectrogram().
        rows: Explicit number of bins to keep; overrides `fraction`.
        fraction: Share of the lowest bins to keep when rows is None.

    Returns:
        ChannelMatrix per channel, in channel order.
    """
    if rows is None:
        rows = display_rows(data.bin_count, fraction)
    max_display_hz = data.max_frequency_hz * rows / data.bin_count

    return [
        ChannelMatrix(
            channel_index=index,
            values=remap_to_matrix(spectrum, data.bin_count, data.frame_count, rows),
            db_range=data.db_ranges[index],
            duration_sec=data.duration_sec,
            max_display_frequency_hz=max_display_hz,
        )
        for index, spectrum in enumerate(data.channels)
    ]
