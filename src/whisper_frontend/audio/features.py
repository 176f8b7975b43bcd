"""Feature extraction: Hann window, STFT magnitude, Mel filterbank, log-Mel.

The direct DFT sum (``dft_magnitude``) is the reference definition of the
per-bin magnitude; ``stft_magnitude`` computes the same values with a real
FFT. Output features are frame-major: for each frame, ``n_mels`` values
(band varies fastest), frames in time order.
"""

import logging
from functools import lru_cache
from typing import Optional

import numpy as np
from scipy import fft as sp_fft

from whisper_frontend.audio.config import AudioConfig
from whisper_frontend.audio.waveform import ArrayLike, as_mono
from whisper_frontend.errors import EmptySpectrogramError, InvalidRateError, StftError

logger = logging.getLogger(__name__)


def _hz_to_mel(hz):
    return 2595 * np.log10(1 + hz / 700)


def _mel_to_hz(mel):
    return 700 * (10 ** (mel / 2595) - 1)


def _check_fft_params(fft_size: int, hop_length: int = 1) -> None:
    if fft_size <= 0:
        raise ValueError(f"fft_size must be positive, got {fft_size}")
    if hop_length <= 0:
        raise ValueError(f"hop_length must be positive, got {hop_length}")


@lru_cache(maxsize=8)
def hann_window(fft_size: int) -> np.ndarray:
    """Periodic Hann window ``0.5 * (1 - cos(2*pi*i / fft_size))`` (cached, read-only)."""
    _check_fft_params(fft_size)
    i = np.arange(fft_size, dtype=np.float64)
    window = (0.5 * (1.0 - np.cos(2.0 * np.pi * i / fft_size))).astype(np.float32)
    window.flags.writeable = False
    return window


def dft_magnitude(frame: ArrayLike, fft_size: int) -> np.ndarray:
    """Magnitude of bins ``0..fft_size/2`` via the direct O(N^2) DFT sum.

    ``frame`` is used as given (no window); indices past its end are zero.
    """
    _check_fft_params(fft_size)
    samples = np.zeros(fft_size, dtype=np.float64)
    x = as_mono(frame)[:fft_size]
    samples[: x.size] = x

    n = np.arange(fft_size, dtype=np.float64)
    k = np.arange(fft_size // 2 + 1, dtype=np.float64)
    angle = -2.0 * np.pi * np.outer(k, n) / fft_size
    real = np.cos(angle) @ samples
    imag = np.sin(angle) @ samples
    return np.sqrt(real * real + imag * imag).astype(np.float32)


def stft_magnitude(buffer: ArrayLike, fft_size: int, hop_length: int) -> np.ndarray:
    """Hann-windowed STFT magnitude spectrum.

    Returns:
        (n_frames, fft_size // 2 + 1) float64 array, where
        ``n_frames = (len(buffer) - fft_size) // hop_length + 1``. A buffer
        shorter than ``fft_size`` yields zero frames; callers treat that as
        a failure.
    """
    _check_fft_params(fft_size, hop_length)
    samples = as_mono(buffer)
    n_freqs = fft_size // 2 + 1
    if samples.size < fft_size:
        return np.zeros((0, n_freqs), dtype=np.float64)

    n_frames = (samples.size - fft_size) // hop_length + 1
    frames = np.lib.stride_tricks.sliding_window_view(samples, fft_size)[::hop_length][:n_frames]
    windowed = frames * hann_window(fft_size)
    spectrum = sp_fft.rfft(windowed.astype(np.float64), n=fft_size, axis=-1)
    return np.abs(spectrum)


@lru_cache(maxsize=8)
def mel_filterbank(n_mels: int, fft_size: int, sample_rate: int) -> np.ndarray:
    """Build the triangular Mel filterbank matrix (cached, read-only).

    ``n_mels + 2`` points equally spaced on the Mel scale between 0 Hz and
    Nyquist are mapped to FFT bins with ``floor((fft_size + 1) * hz / sr)``.
    A band whose edge collapses (``center == left`` or ``right == center``)
    gets no weight on that edge.

    Returns:
        (n_mels, fft_size // 2 + 1) float32 array.
    """
    if sample_rate <= 0:
        raise InvalidRateError(f"Sample rate must be positive, got {sample_rate}")
    _check_fft_params(fft_size)
    n_freqs = fft_size // 2 + 1
    mel_points = np.linspace(
        _hz_to_mel(0.0),
        _hz_to_mel(sample_rate / 2),
        n_mels + 2,
    )
    hz_points = _mel_to_hz(mel_points)
    bin_points = np.floor((fft_size + 1) * hz_points / sample_rate).astype(int)

    filters = np.zeros((n_mels, n_freqs), dtype=np.float64)
    for i in range(n_mels):
        left, center, right = bin_points[i], bin_points[i + 1], bin_points[i + 2]
        if center > left:
            j = np.arange(left, min(center, n_freqs))
            filters[i, j] = (j - left) / (center - left)
        if right > center:
            j = np.arange(center, min(right, n_freqs))
            filters[i, j] = (right - j) / (right - center)

    logger.debug("Built %dx%d Mel filterbank (sr=%d)", n_mels, n_freqs, sample_rate)
    filters = filters.astype(np.float32)
    filters.flags.writeable = False
    return filters


def normalize_dynamic_range(log_spec: np.ndarray, dynamic_range: float = 8.0) -> np.ndarray:
    """Map log values into [-1, 1], flooring at ``max - dynamic_range``."""
    if dynamic_range <= 0:
        raise ValueError(f"dynamic_range must be positive, got {dynamic_range}")
    log_spec = np.asarray(log_spec, dtype=np.float64)
    if log_spec.size == 0:
        raise EmptySpectrogramError("Cannot normalize an empty spectrogram")
    max_val = log_spec.max()
    min_val = max_val - dynamic_range
    scaled = np.clip((log_spec - min_val) / (max_val - min_val), 0.0, 1.0)
    return (scaled * 2.0 - 1.0).astype(np.float32)


def log_mel(
    magnitudes: ArrayLike,
    filterbank: np.ndarray,
    log_floor: float = 1e-10,
    dynamic_range: float = 8.0,
) -> np.ndarray:
    """Project power spectra through the filterbank, log-compress, normalize.

    Args:
        magnitudes: (n_frames, n_freqs) STFT magnitudes.
        filterbank: (n_mels, n_freqs) Mel weights.

    Returns:
        Flat float32 vector of length ``n_frames * n_mels`` (frame-major),
        every value in [-1, 1].

    Raises:
        EmptySpectrogramError: ``magnitudes`` has no frames.
    """
    # Power stays float64: squaring large float32 magnitudes overflows
    mags = np.asarray(magnitudes, dtype=np.float64)
    if mags.ndim != 2 or mags.shape[0] == 0:
        raise EmptySpectrogramError("STFT produced no frames")
    if mags.shape[1] != filterbank.shape[1]:
        raise ValueError(
            f"Frequency bins mismatch: spectrum has {mags.shape[1]}, filterbank has {filterbank.shape[1]}"
        )
    mel = (mags * mags) @ filterbank.T
    log_spec = np.log(np.maximum(mel, log_floor))
    return normalize_dynamic_range(log_spec.ravel(), dynamic_range)


class MelFeatureExtractor:
    """Extract 80-bin log-Mel features from a fixed-length buffer."""

    def __init__(self, config: Optional[AudioConfig] = None):
        self.config = config or AudioConfig()
        self._mel_filters = mel_filterbank(
            self.config.n_mels,
            self.config.fft_size,
            self.config.sample_rate,
        )

    @property
    def mel_filters(self) -> np.ndarray:
        return self._mel_filters

    def stft(self, buffer: ArrayLike) -> np.ndarray:
        """Compute STFT magnitude spectrum, shape (n_frames, n_freqs)."""
        return stft_magnitude(buffer, self.config.fft_size, self.config.hop_length)

    def power_to_mel(self, magnitudes: np.ndarray) -> np.ndarray:
        """Convert magnitudes to normalized log-Mel, shape (n_frames, n_mels)."""
        flat = log_mel(
            magnitudes,
            self._mel_filters,
            log_floor=self.config.log_floor,
            dynamic_range=self.config.dynamic_range,
        )
        return flat.reshape(-1, self.config.n_mels)

    def extract(self, buffer: ArrayLike) -> np.ndarray:
        """Extract normalized log-Mel features from a buffer.

        Raises:
            StftError: Buffer shorter than ``fft_size``.
        """
        magnitudes = self.stft(buffer)
        if magnitudes.shape[0] == 0:
            raise StftError(
                f"Failed to compute STFT: buffer of {len(as_mono(buffer))} samples "
                f"is shorter than fft_size={self.config.fft_size}"
            )
        logger.debug("STFT produced %d frames", magnitudes.shape[0])
        return self.power_to_mel(magnitudes)
