"""Unit tests for the whisper-mel command line."""

from __future__ import annotations

import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import numpy as np
import scipy.io.wavfile as wavfile

from whisper_frontend import cli


class TestLoadWav(unittest.TestCase):
    """Tests for WAV decoding."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp = Path(self._tmp.name)

    def test_int16_scaled(self) -> None:
        path = self.tmp / "a.wav"
        wavfile.write(str(path), 8000, np.array([0, 16384, -32768], dtype=np.int16))
        wav = cli.load_wav(path)
        self.assertEqual(wav.sample_rate, 8000)
        np.testing.assert_allclose(wav.samples, [0.0, 0.5, -1.0])

    def test_float_passthrough(self) -> None:
        path = self.tmp / "f.wav"
        wavfile.write(str(path), 16000, np.array([0.25, -0.75], dtype=np.float32))
        wav = cli.load_wav(path)
        np.testing.assert_allclose(wav.samples, [0.25, -0.75])

    def test_stereo_rejected(self) -> None:
        path = self.tmp / "s.wav"
        wavfile.write(str(path), 16000, np.zeros((10, 2), dtype=np.int16))
        with self.assertRaises(ValueError):
            cli.load_wav(path)


class TestMain(unittest.TestCase):
    """End-to-end CLI runs on a temporary WAV."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp = Path(self._tmp.name)

    def test_writes_features(self) -> None:
        wav_path = self.tmp / "tone.wav"
        out_path = self.tmp / "mel.npy"
        t = np.arange(22050) / 22050
        wavfile.write(str(wav_path), 22050, (np.sin(2 * np.pi * 440 * t) * 10000).astype(np.int16))
        argv = ["whisper-mel", "--input", str(wav_path), "--output", str(out_path)]
        with mock.patch.object(sys, "argv", argv):
            cli.main()
        mel = np.load(out_path)
        self.assertEqual(mel.shape, (80, 2996))
        self.assertLessEqual(float(mel.max()), 1.0)
        self.assertGreaterEqual(float(mel.min()), -1.0)

    def test_missing_file_exits_nonzero(self) -> None:
        wav_path = self.tmp / "missing.wav"
        with mock.patch.object(sys, "argv", ["whisper-mel", "--input", str(wav_path)]):
            with self.assertRaises(SystemExit) as ctx:
                cli.main()
        self.assertEqual(ctx.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
