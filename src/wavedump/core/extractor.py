"""
Sample extraction from interleaved 16-bit frames.

Only channel 0 of a frame is ever read. Extraction returns a strided
numpy view into the frame's buffer, so nothing is copied or buffered
beyond the frame itself.
"""

from dataclasses import dataclass

import numpy as np

from wavedump.errors import InvalidFrame

SAMPLE_DTYPE = np.dtype(np.int16)


@dataclass
class Frame:
    """One block of interleaved multi-channel audio."""

    data: np.ndarray  # Shape: (n_samples * channels,) int16, interleaved
    channels: int

    @property
    def n_samples(self) -> int:
        """Samples per channel in this frame."""
        if self.channels < 1:
            return 0
        return len(self.data) // self.channels

    @classmethod
    def from_planar(cls, planar: np.ndarray) -> "Frame":
        """Build a frame from a (channels, n_samples) array."""
        planar = np.atleast_2d(planar)
        return cls(data=np.ascontiguousarray(planar.T).reshape(-1), channels=planar.shape[0])


def extract_channel(data: np.ndarray, channels: int, n_samples: int) -> np.ndarray:
    """
    Take channel 0 out of an interleaved buffer.

    Args:
        data: Interleaved int16 samples.
        channels: Number of interleaved channels (the stride).
        n_samples: Samples per channel to read.

    Returns:
        A view of length ``n_samples`` over ``data`` with stride ``channels``.

    Raises:
        InvalidFrame: If ``channels < 1``, the data is not int16, or the
            buffer is shorter than ``n_samples * channels``.
    """
    if not isinstance(data, np.ndarray):
        raise InvalidFrame(f"Expected a numpy array, got {type(data).__name__}")
    if channels < 1:
        raise InvalidFrame(f"Frame must have at least one channel, got {channels}")
    if data.dtype != SAMPLE_DTYPE:
        raise InvalidFrame(f"Expected 16-bit signed samples, got {data.dtype}")
    if data.ndim != 1:
        raise InvalidFrame(f"Expected interleaved 1-D data, got shape {data.shape}")
    if n_samples < 0 or n_samples * channels > len(data):
        raise InvalidFrame(
            f"Frame holds {len(data)} values, cannot read {n_samples} samples "
            f"x {channels} channels"
        )

    return data[0:n_samples * channels:channels]


def extract_frame(frame: Frame) -> np.ndarray:
    """Channel-0 view of a :class:`Frame`."""
    return extract_channel(frame.data, frame.channels, frame.n_samples)
