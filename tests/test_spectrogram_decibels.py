"""
Tests for core/spectrogram/decibels.py — label formatting helpers.
"""

import pytest

from core.spectrogram.config import DbRange
from core.spectrogram.decibels import byte_to_db, db_to_byte, format_db_label, legend_steps


class TestByteToDb:
    def test_endpoints(self):
        assert byte_to_db(0, -100.0, -30.0) == -100.0
        assert byte_to_db(255, -100.0, -30.0) == -30.0

    def test_midpoint(self):
        assert byte_to_db(127.5, -100.0, -30.0) == pytest.approx(-65.0)

    def test_monotonic_non_decreasing(self):
        values = [byte_to_db(v, -120.0, 0.0) for v in range(256)]
        assert all(b >= a for a, b in zip(values, values[1:]))

    @pytest.mark.parametrize(("lo", "hi"), [(-100.0, -30.0), (-60.0, 0.0), (-140.5, 12.25)])
    def test_endpoints_any_range(self, lo, hi):
        assert byte_to_db(0, lo, hi) == lo
        assert byte_to_db(255, lo, hi) == pytest.approx(hi)


class TestDbToByte:
    def test_inverse_of_byte_to_db(self):
        db_range = DbRange()
        for value in (0, 1, 64, 128, 254, 255):
            assert db_to_byte(byte_to_db(value, db_range.min_db, db_range.max_db), db_range) == value

    def test_clamped(self):
        assert db_to_byte(-200.0, DbRange()) == 0
        assert db_to_byte(10.0, DbRange()) == 255


class TestLabels:
    def test_format_rounds_to_integer(self):
        assert format_db_label(0, DbRange()) == "-100"
        assert format_db_label(255, DbRange()) == "-30"
        assert format_db_label(100, DbRange()) == "-73"  # -72.549...

    def test_half_rounds_up(self):
        """-64.5 dB is labelled -64, not -65."""
        db_range = DbRange(-100.0, -29.0)  # span 71 → byte 127.5 is -64.5
        assert format_db_label(127.5, db_range) == "-64"

    def test_legend_steps(self):
        steps = legend_steps(DbRange(), count=5)
        assert [value for value, _ in steps] == [0, 64, 128, 191, 255]
        assert steps[0][1] == "-100"
        assert steps[-1][1] == "-30"

    def test_legend_needs_two_steps(self):
        with pytest.raises(ValueError, match="count"):
            legend_steps(DbRange(), count=1)
