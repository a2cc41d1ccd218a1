#!/usr/bin/env python
"""Offline spectrogram extraction — one-command runner.

Usage
-----
    # Analyse a file with the default settings (fft 4096, hop 2048)
    python scripts/render_spectrogram.py recording.wav

    # Finer time resolution, no smoothing, all four cores
    python scripts/render_spectrogram.py recording.wav --hop-size 512 --smoothing 0 --workers 4

    # Save heatmap matrices + colour legend for a rendering front-end
    python scripts/render_spectrogram.py recording.wav --output spectrogram.npz

Environment (.env supported)
----------------------------
    SPECTROGRAM_FFT_SIZE, SPECTROGRAM_HOP_SIZE, SPECTROGRAM_SMOOTHING,
    SPECTROGRAM_WORKERS provide defaults for the matching flags.

Exit codes
----------
    0  — success
    1  — input errors (missing file, unsupported format, bad configuration)
    2  — analysis errors (decode failure, cancelled run)
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np  # noqa: E402
from dotenv import load_dotenv  # noqa: E402

load_dotenv()

from core.spectrogram.config import DEFAULT_CONFIG, AnalysisConfig, DbRange  # noqa: E402
from core.spectrogram.remap import DEFAULT_DISPLAY_FRACTION  # noqa: E402
from core.spectrogram.types import ChannelMatrix, WaveformData  # noqa: E402
from ingestion.spectrogram_engine import SpectrogramEngine  # noqa: E402

logger = logging.getLogger("render_spectrogram")


def _env_number(name: str, default: int | float, cast: type) -> int | float:
    """Numeric default from the environment; ValueError names the variable."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be {cast.__name__}, got {raw!r}") from None


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Offline audio spectrogram extraction")
    p.add_argument("path", help="Audio file to analyse")
    p.add_argument(
        "--fft-size",
        type=int,
        default=_env_number("SPECTROGRAM_FFT_SIZE", DEFAULT_CONFIG.fft_size, int),
        help="Analysis window length in samples (power of two)",
    )
    p.add_argument(
        "--hop-size",
        type=int,
        default=_env_number("SPECTROGRAM_HOP_SIZE", DEFAULT_CONFIG.hop_size, int),
        help="Samples between consecutive frames",
    )
    p.add_argument(
        "--smoothing",
        type=float,
        default=_env_number("SPECTROGRAM_SMOOTHING", DEFAULT_CONFIG.smoothing, float),
        help="Weight of the previous frame when blending, in [0, 1)",
    )
    p.add_argument("--min-db", type=float, default=None, help="dB mapped to byte 0")
    p.add_argument("--max-db", type=float, default=None, help="dB mapped to byte 255")
    p.add_argument(
        "--workers",
        type=int,
        default=_env_number("SPECTROGRAM_WORKERS", 1, int),
        help="Channels processed concurrently",
    )
    p.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Only analyse the first N seconds",
    )
    p.add_argument(
        "--display-fraction",
        type=float,
        default=DEFAULT_DISPLAY_FRACTION,
        help="Share of the lowest frequency bins kept in the heatmap",
    )
    p.add_argument(
        "--output",
        metavar="NPZ_PATH",
        default=None,
        help="Write per-channel matrices and legends to a .npz file",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> AnalysisConfig:
    """AnalysisConfig from CLI flags; raises on invalid values."""
    db_range = None
    if args.min_db is not None or args.max_db is not None:
        db_range = DbRange(
            min_db=args.min_db if args.min_db is not None else DbRange().min_db,
            max_db=args.max_db if args.max_db is not None else DbRange().max_db,
        )
    return AnalysisConfig(
        fft_size=args.fft_size,
        hop_size=args.hop_size,
        smoothing=args.smoothing,
        db_ranges=db_range,
    )


def print_summary(data: WaveformData, matrices: list[ChannelMatrix]) -> None:
    print(f"\nSpectrogram — {data.channel_count} channel(s)")
    print(f"  duration      {data.duration_sec:.2f} s @ {data.sample_rate} Hz")
    print(f"  frames        {data.frame_count} ({data.frame_duration_sec * 1000:.1f} ms each)")
    print(f"  bins          {data.bin_count} (max {data.max_frequency_hz:.0f} Hz)")
    for matrix in matrices:
        (_, _), (end_x, end_y) = matrix.extent
        print(
            f"  channel {matrix.channel_index + 1}     {matrix.rows} x {matrix.columns} "
            f"→ 0–{end_y:.0f} Hz, 0–{end_x:.2f} s, "
            f"[{matrix.db_range.min_db:.0f}, {matrix.db_range.max_db:.0f}] dB, "
            f"peak byte {int(matrix.values.max()) if matrix.values.size else 0}"
        )


def save_npz(path: str, data: WaveformData, matrices: list[ChannelMatrix]) -> None:
    arrays: dict[str, np.ndarray] = {
        "max_frequency_hz": np.array(data.max_frequency_hz),
        "duration_sec": np.array(data.duration_sec),
    }
    for matrix in matrices:
        prefix = f"channel_{matrix.channel_index}"
        arrays[f"{prefix}_matrix"] = matrix.values
        arrays[f"{prefix}_db_range"] = np.array([matrix.db_range.min_db, matrix.db_range.max_db])
        arrays[f"{prefix}_max_display_hz"] = np.array(matrix.max_display_frequency_hz)
        arrays[f"{prefix}_legend"] = np.array(
            [label for _, label in SpectrogramEngine.legend(matrix)]
        )
    np.savez_compressed(path, **arrays)
    logger.info("Saved %d channel matrix/matrices → %s", len(matrices), path)


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(argv)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = build_config(args)
        engine = SpectrogramEngine(config=config, workers=args.workers)
        data = engine.analyze_file(args.path, duration=args.duration)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    except RuntimeError as exc:
        logger.error("Analysis failed: %s", exc)
        return 2

    try:
        matrices = engine.render(data, fraction=args.display_fraction)
    except ValueError as exc:
        logger.error("%s", exc)
        return 1
    print_summary(data, matrices)

    if args.output:
        save_npz(args.output, data, matrices)
    return 0


if __name__ == "__main__":
    sys.exit(main())
