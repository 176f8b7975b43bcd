"""Errors raised by the log-Mel front end.

Every failure is terminal for the call that raised it; nothing is retried
and no partial features are returned.
"""


class FrontendError(Exception):
    """Base class for feature-extraction errors."""


class EmptyInputError(FrontendError):
    """Zero-length waveform supplied."""


class InvalidRateError(FrontendError, ValueError):
    """Sample rate is zero (or negative) on either side of resampling."""


class StftError(FrontendError):
    """Buffer too short to produce a single STFT frame."""


class EmptySpectrogramError(FrontendError):
    """Log-Mel post-processing received zero frames."""
