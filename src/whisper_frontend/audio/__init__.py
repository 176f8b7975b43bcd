"""Audio capture, resampling and feature extraction modules."""

from whisper_frontend.audio.config import AudioConfig
from whisper_frontend.audio.capture import AudioCapture
from whisper_frontend.audio.features import MelFeatureExtractor, mel_filterbank, stft_magnitude
from whisper_frontend.audio.waveform import Waveform, normalize_peak, pad_or_trim, resample

__all__ = [
    "AudioConfig",
    "AudioCapture",
    "MelFeatureExtractor",
    "Waveform",
    "mel_filterbank",
    "normalize_peak",
    "pad_or_trim",
    "resample",
    "stft_magnitude",
]
