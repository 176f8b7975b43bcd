"""Whisper-style audio front end - resampling, STFT, Mel filterbank, log-Mel features."""

from whisper_frontend.errors import (
    EmptyInputError,
    EmptySpectrogramError,
    FrontendError,
    InvalidRateError,
    StftError,
)
from whisper_frontend.pipeline import WhisperFrontend, audio_to_mel

__all__ = [
    "EmptyInputError",
    "EmptySpectrogramError",
    "FrontendError",
    "InvalidRateError",
    "StftError",
    "WhisperFrontend",
    "audio_to_mel",
]
