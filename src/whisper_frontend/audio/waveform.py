"""Mono waveform utilities: linear resampling, pad/trim, peak normalization."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

import numpy as np

from whisper_frontend.errors import InvalidRateError

logger = logging.getLogger(__name__)

ArrayLike = Union[np.ndarray, Sequence[float]]


def as_mono(audio: ArrayLike) -> np.ndarray:
    """Coerce samples to a 1-D float32 array (mono only)."""
    samples = np.asarray(audio, dtype=np.float32)
    if samples.ndim == 0:
        samples = samples.reshape(1)
    if samples.ndim != 1:
        raise ValueError(f"Expected mono samples (1-D), got shape {samples.shape}")
    return samples


def resample(
    audio: ArrayLike,
    source_rate: int,
    target_rate: int,
    max_length: Optional[int] = None,
) -> np.ndarray:
    """Resample by linear interpolation between neighbouring samples.

    No anti-aliasing filter is applied; up- and downsampling share the same
    formula. Output length is ``ceil(len(audio) / (source_rate / target_rate))``.

    Args:
        audio: Mono samples.
        source_rate: Sample rate of ``audio`` in Hz.
        target_rate: Desired sample rate in Hz.
        max_length: If given, stop after this many output samples. The kept
            samples are identical to the uncapped result.

    Returns:
        float32 array at ``target_rate``. Empty input gives an empty array
        regardless of the rates; equal rates return the samples unchanged.

    Raises:
        InvalidRateError: Non-empty input and either rate is <= 0.
    """
    samples = as_mono(audio)
    if samples.size == 0:
        return np.zeros(0, dtype=np.float32)

    if source_rate <= 0 or target_rate <= 0:
        raise InvalidRateError(
            f"Sample rate cannot be zero (source={source_rate}, target={target_rate})"
        )

    if source_rate == target_rate:
        return samples[:max_length].copy()

    ratio = float(source_rate) / float(target_rate)
    n_in = samples.size
    n_out = int(math.ceil(n_in / ratio))
    if max_length is not None:
        n_out = min(n_out, max_length)

    src_pos = np.arange(n_out, dtype=np.float64) * ratio
    src_idx = np.floor(src_pos).astype(np.int64)
    frac = src_pos - src_idx
    src = samples.astype(np.float64)

    out = np.zeros(n_out, dtype=np.float64)
    interp = src_idx + 1 < n_in
    i = src_idx[interp]
    out[interp] = src[i] * (1.0 - frac[interp]) + src[i + 1] * frac[interp]
    # Last source sample: no right neighbour to interpolate with
    edge = ~interp & (src_idx < n_in)
    out[edge] = src[src_idx[edge]]

    logger.debug("Resampled %d samples %d Hz -> %d samples %d Hz", n_in, source_rate, n_out, target_rate)
    return out.astype(np.float32)


def pad_or_trim(audio: ArrayLike, length: int) -> np.ndarray:
    """Zero-pad at the end or truncate to exactly ``length`` samples."""
    samples = as_mono(audio)
    if samples.size > length:
        logger.debug("Trimming %d samples to %d", samples.size, length)
        return samples[:length].copy()
    if samples.size < length:
        logger.debug("Padding %d samples to %d", samples.size, length)
        return np.pad(samples, (0, length - samples.size), mode="constant")
    return samples.copy()


def normalize_peak(audio: ArrayLike) -> np.ndarray:
    """Scale samples so the largest magnitude becomes 1.0.

    Silent (all-zero) or empty input is returned unchanged.
    """
    samples = as_mono(audio).copy()
    if samples.size == 0:
        return samples
    max_abs = float(np.max(np.abs(samples)))
    if max_abs > 0.0:
        samples /= max_abs
    return samples


@dataclass(frozen=True, eq=False)
class Waveform:
    """Single-channel float32 samples tagged with their sample rate (Hz)."""

    samples: np.ndarray = field(repr=False)
    sample_rate: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples", as_mono(self.samples))
        if self.samples.size > 0 and self.sample_rate <= 0:
            raise InvalidRateError(f"Invalid sample rate for non-empty waveform: {self.sample_rate}")

    def __len__(self) -> int:
        return int(self.samples.size)

    @property
    def duration(self) -> float:
        """Length in seconds (0.0 when empty)."""
        if self.samples.size == 0:
            return 0.0
        return self.samples.size / self.sample_rate

    def resample(self, target_rate: int) -> "Waveform":
        return Waveform(resample(self.samples, self.sample_rate, target_rate), target_rate)
