"""Waveform-to-log-Mel pipeline."""

from whisper_frontend.pipeline.frontend import WhisperFrontend, audio_to_mel

__all__ = ["WhisperFrontend", "audio_to_mel"]
