"""Microphone capture session producing mono float32 waveforms."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

try:
    import sounddevice as sd
except (ImportError, OSError):  # OSError: PortAudio library missing
    sd = None  # type: ignore

from whisper_frontend.audio.config import AudioConfig
from whisper_frontend.audio.waveform import Waveform

logger = logging.getLogger(__name__)


class AudioCapture:
    """Owns an open input stream; release is guaranteed via ``close()`` / ``with``.

    Usage:
        with AudioCapture() as capture:
            waveform = capture.read(capture.sample_rate * 5)
        features = audio_to_mel(waveform.samples, waveform.sample_rate)
    """

    def __init__(
        self,
        config: Optional[AudioConfig] = None,
        device: Optional[int] = None,
        sample_rate: Optional[int] = None,
    ):
        self.config = config or AudioConfig()
        self.device = device
        self._requested_rate = sample_rate
        self._stream = None
        self._sample_rate = 0

    @property
    def sample_rate(self) -> int:
        """Rate of the open stream in Hz (0 when closed)."""
        return self._sample_rate

    @property
    def is_active(self) -> bool:
        return self._stream is not None

    def open(self) -> "AudioCapture":
        """Acquire the input device. Opening an active capture is a no-op."""
        if self._stream is not None:
            return self
        if sd is None:
            raise ImportError("sounddevice is required for recording. pip install sounddevice")

        rate = self._requested_rate
        if rate is None:
            info = sd.query_devices(self.device, "input")
            rate = int(info["default_samplerate"])

        stream = sd.InputStream(
            samplerate=rate,
            channels=self.config.channels,
            dtype="float32",
            device=self.device,
        )
        try:
            stream.start()
        except Exception:
            stream.close()
            raise
        self._stream = stream
        self._sample_rate = rate
        logger.info("Audio capture started (device=%s, %d Hz)", self.device, rate)
        return self

    def close(self) -> None:
        """Release the input device. Safe to call more than once."""
        stream = self._stream
        if stream is None:
            return
        self._stream = None
        self._sample_rate = 0
        try:
            stream.stop()
        finally:
            stream.close()
        logger.info("Audio capture stopped")

    def read(self, n_samples: int) -> Waveform:
        """Block until ``n_samples`` mono samples are captured."""
        if self._stream is None:
            raise RuntimeError("Audio capture is not active; call open() first")
        data, overflowed = self._stream.read(n_samples)
        if overflowed:
            logger.warning("Input overflow while reading %d samples", n_samples)
        samples = np.asarray(data, dtype=np.float32).reshape(-1, self.config.channels)[:, 0]
        return Waveform(samples, self._sample_rate)

    def record(self, duration_sec: float) -> Waveform:
        """Capture ``duration_sec`` seconds from the open stream."""
        return self.read(int(duration_sec * self._sample_rate))

    def __enter__(self) -> "AudioCapture":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
