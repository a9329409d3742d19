"""
End-to-end waveform dump for audio files and in-memory signals.

Decodes audio, converts it to interleaved 16-bit frames, and drives a
:class:`WaveDumpStream` over them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Optional, Union

import librosa
import numpy as np

from wavedump.config import DEFAULT_SIZE, WaveDumpConfig, parse_size
from wavedump.core.extractor import Frame
from wavedump.core.normalizer import INT16_MAX
from wavedump.core.stream import WaveDumpStream
from wavedump.errors import AudioLoadError, InvalidConfiguration

DEFAULT_FRAME_SIZE = 1024


def to_int16(y: np.ndarray) -> np.ndarray:
    """
    Convert float audio in [-1, 1] to interleaved int16.

    Args:
        y: Mono ``(n,)`` or multi-channel ``(channels, n)`` signal.

    Returns:
        1-D int16 array, channel-interleaved.
    """
    y = np.atleast_2d(np.asarray(y, dtype=np.float64))
    scaled = np.round(np.clip(y, -1.0, 1.0) * INT16_MAX).astype(np.int16)
    return np.ascontiguousarray(scaled.T).reshape(-1)


def iter_frames(
    data: np.ndarray,
    channels: int,
    frame_size: int = DEFAULT_FRAME_SIZE,
) -> Iterator[Frame]:
    """Split interleaved int16 data into frames of ``frame_size`` samples."""
    if frame_size < 1:
        raise InvalidConfiguration(f"frame_size must be positive, got {frame_size}")
    n_samples = len(data) // channels
    for start in range(0, n_samples, frame_size):
        stop = min(start + frame_size, n_samples)
        yield Frame(data=data[start * channels:stop * channels], channels=channels)


def auto_bucket_size(n_samples: int, width: int) -> int:
    """Largest bucket size that still fills all ``width`` columns."""
    return max(1, n_samples // width)


class WaveDumpPipeline:
    """
    Produces waveform summaries from audio files.

    Args:
        size: Output size as ``"WxH"``.
        bucket_size: Samples per column. None derives it from the decoded
            length so that the whole signal spans all columns.
        frame_size: Samples per channel in each frame fed to the stream.
        on_silence: Zero-peak policy, see :class:`WaveDumpConfig`.
    """

    def __init__(
        self,
        size: str = DEFAULT_SIZE,
        bucket_size: Optional[int] = None,
        frame_size: int = DEFAULT_FRAME_SIZE,
        on_silence: str = "zeros",
    ):
        if isinstance(frame_size, bool) or not isinstance(frame_size, int) or frame_size < 1:
            raise InvalidConfiguration(
                f"frame_size must be a positive integer, got {frame_size!r}"
            )
        self.width, self.height = parse_size(size)
        self.bucket_size = bucket_size
        self.frame_size = frame_size
        self.on_silence = on_silence

    def load_audio(self, audio_path: Union[str, Path]) -> tuple[np.ndarray, int]:
        """Decode a file at its native rate, keeping all channels."""
        try:
            y, sr = librosa.load(audio_path, sr=None, mono=False)
        except Exception as exc:
            raise AudioLoadError(f"Cannot decode {audio_path}: {exc}") from exc
        return y, sr

    def build_config(
        self,
        n_samples: int,
        sidecar_path: Union[str, Path, None] = None,
    ) -> WaveDumpConfig:
        bucket_size = self.bucket_size
        if bucket_size is None:
            bucket_size = auto_bucket_size(n_samples, self.width)
        return WaveDumpConfig(
            width=self.width,
            height=self.height,
            bucket_size=bucket_size,
            sidecar_path=sidecar_path,
            on_silence=self.on_silence,
        )

    def process_signal(
        self,
        y: np.ndarray,
        sr: int,
        sidecar_path: Union[str, Path, None] = None,
    ) -> dict[str, Any]:
        """
        Run the dump over an in-memory float signal.

        Args:
            y: Mono ``(n,)`` or ``(channels, n)`` float audio.
            sr: Sample rate.
            sidecar_path: Optional JSON output path.

        Returns:
            Dictionary with the rendered ``samples``, ``sequence`` and stream
            statistics.
        """
        y = np.atleast_2d(y)
        channels, n_samples = y.shape
        config = self.build_config(n_samples, sidecar_path)

        stream = WaveDumpStream(config)
        summary = stream.run_frames(iter_frames(to_int16(y), channels, self.frame_size))

        return {
            "samples": summary.record.samples,
            "sequence": summary.sequence,
            "width": config.width,
            "height": config.height,
            "bucket_size": config.bucket_size,
            "columns_written": summary.columns_written,
            "peak": summary.peak,
            "silent": summary.silent,
            "duration": n_samples / sr if sr else 0.0,
            "sample_rate": sr,
            "channels": channels,
            "sidecar": summary.sidecar,
        }

    def process(
        self,
        audio_path: Union[str, Path],
        sidecar_path: Union[str, Path, None] = None,
    ) -> dict[str, Any]:
        """Load and dump an audio file in one step."""
        y, sr = self.load_audio(audio_path)
        return self.process_signal(y, sr, sidecar_path)
