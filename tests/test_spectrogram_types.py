"""
Tests for core/spectrogram/types.py — frozen result types and derived helpers.
"""

import dataclasses

import numpy as np
import pytest

from core.spectrogram.config import DbRange
from core.spectrogram.types import ChannelMatrix, WaveformData


def _waveform(frame_count: int = 3, bin_count: int = 4) -> WaveformData:
    return WaveformData(
        channels=(np.arange(frame_count * bin_count, dtype=np.uint8),),
        bin_count=bin_count,
        frame_count=frame_count,
        max_frequency_hz=4000.0,
        duration_sec=0.15,
        db_ranges=(DbRange(),),
        sample_rate=8000,
        hop_size=400,
    )


class TestWaveformData:
    def test_is_frozen(self):
        data = _waveform()
        with pytest.raises((TypeError, AttributeError)):
            data.frame_count = 10  # type: ignore[misc]

    def test_channels_become_read_only(self):
        data = _waveform()
        assert not data.channels[0].flags.writeable

    def test_frame_view(self):
        data = _waveform()
        assert data.frame(0, 1).tolist() == [4, 5, 6, 7]

    def test_bin_frequency(self):
        data = _waveform()
        assert data.bin_frequency_hz(0) == 0.0
        assert data.bin_frequency_hz(2) == pytest.approx(2000.0)

    def test_frame_timing(self):
        data = _waveform()
        assert data.frame_duration_sec == pytest.approx(0.05)
        assert data.frame_time_sec(2) == pytest.approx(0.1)

    def test_channel_count(self):
        assert _waveform().channel_count == 1


class TestChannelMatrix:
    def _matrix(self) -> ChannelMatrix:
        return ChannelMatrix(
            channel_index=0,
            values=np.zeros((64, 20), dtype=np.uint8),
            db_range=DbRange(),
            duration_sec=2.5,
            max_display_frequency_hz=11025.4,
        )

    def test_dimensions(self):
        matrix = self._matrix()
        assert (matrix.rows, matrix.columns) == (64, 20)

    def test_extent_rounds_frequency_up(self):
        assert self._matrix().extent == ((0.0, 0.0), (2.5, 11026.0))

    def test_values_is_a_field_not_derived(self):
        names = {f.name for f in dataclasses.fields(ChannelMatrix)}
        assert {"values", "db_range"} <= names
        assert "rows" not in names
