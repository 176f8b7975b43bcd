"""Centralized audio and feature extraction configuration.

Encoding standards (Whisper front end):
- Audio: mono 16 kHz, padded or trimmed to 30 s chunks
- STFT: 400-sample Hann window / 160-sample hop, FFT 400
- Features: 80-bin log-Mel filterbanks, 8.0 log-unit dynamic range
"""

from dataclasses import dataclass

SAMPLE_RATE = 16_000
N_MELS = 80
N_FFT = 400
HOP_LENGTH = 160
CHUNK_SEC = 30
CHUNK_LENGTH = SAMPLE_RATE * CHUNK_SEC  # 480000 samples
DYNAMIC_RANGE = 8.0
LOG_FLOOR = 1e-10


@dataclass(frozen=True)
class AudioConfig:
    """Audio encoding and feature extraction configuration."""

    # Recording
    sample_rate: int = SAMPLE_RATE
    channels: int = 1  # mono
    dtype: str = "float32"

    # Chunking
    chunk_sec: float = CHUNK_SEC

    # STFT
    fft_size: int = N_FFT
    hop_length: int = HOP_LENGTH

    # Mel filterbanks
    n_mels: int = N_MELS

    # Log compression / normalization
    log_floor: float = LOG_FLOOR
    dynamic_range: float = DYNAMIC_RANGE

    @property
    def chunk_length(self) -> int:
        """Fixed buffer length in samples every utterance is padded/trimmed to."""
        return int(self.chunk_sec * self.sample_rate)

    @property
    def n_freqs(self) -> int:
        """Number of one-sided FFT bins."""
        return self.fft_size // 2 + 1

    @property
    def n_frames(self) -> int:
        """STFT frames produced from one chunk (0 if the chunk is shorter than the FFT)."""
        if self.chunk_length < self.fft_size:
            return 0
        return (self.chunk_length - self.fft_size) // self.hop_length + 1

    @property
    def feature_size(self) -> int:
        """Length of the flat feature vector handed to the encoder."""
        return self.n_mels * self.n_frames
