"""CLI for computing Whisper log-Mel features from a WAV file or the microphone."""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from whisper_frontend.audio import AudioCapture, AudioConfig, Waveform
from whisper_frontend.errors import FrontendError
from whisper_frontend.pipeline import WhisperFrontend

logger = logging.getLogger(__name__)


def load_wav(path: Path) -> Waveform:
    """Read a mono WAV file as float32 samples."""
    import scipy.io.wavfile as wavfile

    sr, audio = wavfile.read(str(path))
    if audio.ndim > 1:
        raise ValueError(f"{path}: expected mono audio, got {audio.shape[1]} channels")
    if audio.dtype == np.int16:
        audio = audio.astype(np.float32) / 32768
    elif audio.dtype == np.int32:
        audio = audio.astype(np.float32) / 2147483648
    elif audio.dtype == np.uint8:
        audio = (audio.astype(np.float32) - 128) / 128
    return Waveform(audio.astype(np.float32), int(sr))


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute 80-bin Whisper log-Mel features (30 s chunk)")
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--input",
        "-i",
        type=Path,
        default=None,
        help="Mono WAV file to analyse",
    )
    source.add_argument(
        "--record",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Record from the microphone for SECONDS instead of reading a file",
    )
    parser.add_argument(
        "--device",
        type=int,
        default=None,
        help="Input device index (list with --list-devices)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Save (n_mels, n_frames) features as .npy",
    )
    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="List available audio input devices and exit",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    args = parser.parse_args()
    _setup_logging(args.log_level)

    if args.list_devices:
        try:
            import sounddevice as sd
            print(sd.query_devices())
        except (ImportError, OSError):
            print("sounddevice not installed: pip install sounddevice", file=sys.stderr)
            sys.exit(1)
        return

    if args.input is None and args.record is None:
        parser.error("one of --input or --record is required")

    config = AudioConfig()
    frontend = WhisperFrontend(config)

    try:
        if args.record is not None:
            print(f"Recording {args.record}s from device {args.device}...")
            with AudioCapture(config, device=args.device) as capture:
                waveform = capture.record(args.record)
        else:
            waveform = load_wav(args.input)
        mel = frontend.features(waveform.samples, waveform.sample_rate)
    except (FrontendError, ImportError, ValueError, OSError) as e:
        logger.error("Feature extraction failed: %s", e)
        sys.exit(1)

    print(
        f"Input: {len(waveform)} samples @ {waveform.sample_rate} Hz ({waveform.duration:.2f}s)"
    )
    print(f"Extracted {mel.shape[0]} Mel bins x {mel.shape[1]} frames")
    print(f"Value range: [{mel.min():.3f}, {mel.max():.3f}]")

    if args.output is not None:
        np.save(args.output, mel)
        print(f"Saved: {args.output}")


if __name__ == "__main__":
    main()
