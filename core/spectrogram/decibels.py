"""
core/spectrogram/decibels.py — Byte ↔ decibel conversion for labels.

Presentation helpers only. Stored spectra are never rescaled here.
"""

from __future__ import annotations

import math

from core.spectrogram.analyzer import BYTE_MAX
from core.spectrogram.config import DbRange


def byte_to_db(value: float, min_db: float, max_db: float) -> float:
    """Decibel value represented by a quantized byte.

    byte_to_db(0, lo, hi) == lo and byte_to_db(255, lo, hi) == hi.
    """
    return min_db + (value / BYTE_MAX) * (max_db - min_db)


def db_to_byte(db: float, db_range: DbRange) -> int:
    """Nearest byte for a decibel value, clamped to [0, 255]."""
    scaled = round(BYTE_MAX * (db - db_range.min_db) / db_range.span)
    return int(min(BYTE_MAX, max(0, scaled)))


def format_db_label(value: float, db_range: DbRange) -> str:
    """Colour-scale label for a byte value, e.g. '-65' (halves round up)."""
    db = byte_to_db(value, db_range.min_db, db_range.max_db)
    return f"{math.floor(db + 0.5)}"


def legend_steps(db_range: DbRange, count: int = 5) -> list[tuple[int, str]]:
    """Evenly spaced (byte, label) pairs spanning [0, 255] for a colour legend.

    Raises:
        ValueError: count < 2.
    """
    if count < 2:
        raise ValueError(f"count must be >= 2, got {count}")
    steps = []
    for i in range(count):
        value = round(i * BYTE_MAX / (count - 1))
        steps.append((value, format_db_label(value, db_range)))
    return steps
