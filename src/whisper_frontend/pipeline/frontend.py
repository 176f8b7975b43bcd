"""Whisper front end: raw waveform -> normalized log-Mel feature vector.

Steps run strictly in order: resample to 16 kHz, pad/trim to the 30 s
chunk, STFT magnitude, Mel projection + log + dynamic-range normalization.
The filterbank is built once per config and shared read-only, so one
``WhisperFrontend`` may be called from several threads at once.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from whisper_frontend.audio.config import AudioConfig
from whisper_frontend.audio.features import MelFeatureExtractor
from whisper_frontend.audio.waveform import ArrayLike, as_mono, pad_or_trim, resample
from whisper_frontend.errors import EmptyInputError

logger = logging.getLogger(__name__)


class WhisperFrontend:
    """Converts mono audio at any rate into the encoder's log-Mel input.

    Interface:
      frontend = WhisperFrontend()
      features = frontend(samples, 48_000)     # flat, len == config.feature_size
      mel = frontend.features(samples, 48_000)  # (n_mels, n_frames)
    """

    def __init__(
        self,
        config: Optional[AudioConfig] = None,
        mel_extractor: Optional[MelFeatureExtractor] = None,
    ):
        self.config = config or AudioConfig()
        self.mel_extractor = mel_extractor or MelFeatureExtractor(self.config)

    def prepare(self, audio: ArrayLike, sample_rate: int) -> np.ndarray:
        """Resample to the target rate and pad/trim to the chunk length."""
        samples = as_mono(audio)
        if samples.size == 0:
            raise EmptyInputError("Empty audio input")
        if sample_rate != self.config.sample_rate:
            samples = resample(
                samples, sample_rate, self.config.sample_rate, max_length=self.config.chunk_length
            )
        return pad_or_trim(samples, self.config.chunk_length)

    def frames(self, audio: ArrayLike, sample_rate: int) -> np.ndarray:
        """Log-Mel features as (n_frames, n_mels), frames in time order."""
        buffer = self.prepare(audio, sample_rate)
        return self.mel_extractor.extract(buffer)

    def features(self, audio: ArrayLike, sample_rate: int) -> np.ndarray:
        """Log-Mel features as (n_mels, n_frames), the encoder's layout."""
        return np.ascontiguousarray(self.frames(audio, sample_rate).T)

    def __call__(self, audio: ArrayLike, sample_rate: int) -> np.ndarray:
        """Flat feature vector (frame-major, band fastest), values in [-1, 1]."""
        return self.frames(audio, sample_rate).ravel()


_default_frontend: Optional[WhisperFrontend] = None


def _get_default_frontend() -> WhisperFrontend:
    global _default_frontend
    if _default_frontend is None:
        _default_frontend = WhisperFrontend()
    return _default_frontend


def audio_to_mel(audio: ArrayLike, sample_rate: int) -> np.ndarray:
    """Convert a mono waveform to the flat Whisper log-Mel feature vector.

    Args:
        audio: Mono float samples (any length, any range).
        sample_rate: Rate of ``audio`` in Hz.

    Returns:
        float32 vector of length ``N_MELS * n_frames`` (80 * 2996), frame-major.

    Raises:
        EmptyInputError: ``audio`` is empty.
        InvalidRateError: ``sample_rate`` is zero or negative.
        StftError: Chunk shorter than the FFT size (misconfiguration).
    """
    return _get_default_frontend()(audio, sample_rate)
