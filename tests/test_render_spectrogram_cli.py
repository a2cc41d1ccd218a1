"""
Tests for scripts/render_spectrogram.py — argument parsing, exit codes, .npz export.

librosa is mocked via patch.dict("sys.modules", ...) so the CLI runs end to
end without an audio backend.
"""

from __future__ import annotations

import importlib.util
from pathlib import Path
from unittest.mock import MagicMock, patch

import numpy as np
import pytest
from conftest import SR, make_sine

from core.spectrogram.config import DbRange

_SCRIPT = Path(__file__).parent.parent / "scripts" / "render_spectrogram.py"


def _load_cli():
    spec = importlib.util.spec_from_file_location("render_spectrogram", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)  # type: ignore[union-attr]
    return module


cli = _load_cli()


def _mock_librosa(y: np.ndarray, sr: int = SR) -> MagicMock:
    mock = MagicMock()
    mock.load.return_value = (y.astype(np.float32), sr)
    return mock


@pytest.fixture()
def wav_file(tmp_path) -> Path:
    path = tmp_path / "take.wav"
    path.write_bytes(b"fake wav")
    return path


class TestBuildConfig:
    def test_flags_map_to_config(self):
        args = cli.parse_args(["x.wav", "--fft-size", "512", "--hop-size", "100", "--smoothing", "0"])
        config = cli.build_config(args)
        assert (config.fft_size, config.hop_size, config.smoothing) == (512, 100, 0.0)
        assert config.db_ranges is None

    def test_partial_db_range_keeps_other_default(self):
        args = cli.parse_args(["x.wav", "--max-db", "0"])
        assert cli.build_config(args).db_ranges == DbRange(min_db=-100.0, max_db=0.0)

    def test_env_defaults(self, monkeypatch):
        monkeypatch.setenv("SPECTROGRAM_FFT_SIZE", "1024")
        monkeypatch.setenv("SPECTROGRAM_WORKERS", "3")
        args = cli.parse_args(["x.wav"])
        assert args.fft_size == 1024
        assert args.workers == 3

    def test_blank_env_falls_back_to_default(self, monkeypatch):
        monkeypatch.setenv("SPECTROGRAM_HOP_SIZE", "")
        assert cli.parse_args(["x.wav"]).hop_size == 2048

    def test_malformed_env_names_variable(self, monkeypatch):
        monkeypatch.setenv("SPECTROGRAM_SMOOTHING", "lots")
        with pytest.raises(ValueError, match="SPECTROGRAM_SMOOTHING"):
            cli.parse_args(["x.wav"])


class TestMain:
    def test_missing_file_exit_1(self, tmp_path):
        with patch.dict("sys.modules", {"librosa": _mock_librosa(np.zeros(10))}):
            assert cli.main([str(tmp_path / "nope.wav")]) == 1

    def test_invalid_fft_size_exit_1(self, wav_file):
        assert cli.main([str(wav_file), "--fft-size", "1000"]) == 1

    @pytest.mark.parametrize("name", ["SPECTROGRAM_FFT_SIZE", "SPECTROGRAM_WORKERS"])
    def test_malformed_env_exit_1(self, wav_file, monkeypatch, capsys, name):
        monkeypatch.setenv(name, "abc")
        assert cli.main([str(wav_file)]) == 1
        assert name in capsys.readouterr().err

    def test_decode_failure_exit_2(self, wav_file):
        mock = _mock_librosa(np.zeros(10))
        mock.load.side_effect = Exception("bad header")
        with patch.dict("sys.modules", {"librosa": mock}):
            assert cli.main([str(wav_file)]) == 2

    def test_success_prints_summary(self, wav_file, capsys):
        y = np.stack([make_sine(440.0, SR), make_sine(1000.0, SR)])
        with patch.dict("sys.modules", {"librosa": _mock_librosa(y)}):
            code = cli.main([str(wav_file), "--fft-size", "256", "--hop-size", "200"])
        out = capsys.readouterr().out
        assert code == 0
        assert "2 channel(s)" in out
        assert "frames        40" in out

    def test_npz_export(self, wav_file, tmp_path):
        out_path = tmp_path / "spectrogram.npz"
        y = make_sine(1000.0, SR)
        with patch.dict("sys.modules", {"librosa": _mock_librosa(y)}):
            code = cli.main(
                [str(wav_file), "--fft-size", "256", "--hop-size", "256", "--output", str(out_path)]
            )
        assert code == 0
        with np.load(out_path) as saved:
            assert saved["channel_0_matrix"].shape == (64, 32)
            assert saved["channel_0_db_range"].tolist() == [-100.0, -30.0]
            assert float(saved["channel_0_max_display_hz"]) == pytest.approx(2000.0)
            assert saved["channel_0_legend"].tolist()[0] == "-100"
            assert float(saved["max_frequency_hz"]) == SR / 2
